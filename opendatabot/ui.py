# Run from project root: streamlit run opendatabot/ui.py
# UI talks to backend API (POST /ask, POST /publish/result, GET /tables).

import os

import pandas as pd
import requests
import streamlit as st

# Backend config
API_BASE = os.environ.get("API_BASE", "http://localhost:8000")

st.title("Open Data Bot")
st.caption("Ask a question about the city's open data. The bot writes the SQL, runs it and picks a chart.")

# Show available tables (on every render)
try:
    r = requests.get(f"{API_BASE}/tables", timeout=10)
    if r.ok:
        tables = r.json().get("tables") or []
        if tables:
            with st.expander("Available tables"):
                st.code(r.json().get("schema", ""), language="sql")
        else:
            st.caption("The open data database is empty. Run scripts/seed_open_data.py.")
    else:
        st.caption(f"Could not load tables: {r.status_code} — {r.text[:200]}")
except requests.RequestException:
    st.caption("Backend not reachable — start the API first.")


def draw_chart(chart: dict) -> None:
    """Draw the model's chart selection with Streamlit's native charts."""
    entries = chart.get("Data") or []
    if not entries:
        st.caption("No chart data.")
        return
    df = pd.DataFrame({"Label": [e.get("Label", "") for e in entries], "Value": [e.get("Value", 0) for e in entries]})
    kind = (chart.get("Chart") or "").strip().lower()
    if chart.get("Title"):
        st.markdown(f"**{chart['Title']}**")
    if kind == "line":
        st.line_chart(df, x="Label", y="Value")
    elif kind == "scatter":
        st.scatter_chart(df, x="Label", y="Value")
    elif kind == "pie":
        st.vega_lite_chart(
            df,
            {
                "mark": {"type": "arc"},
                "encoding": {
                    "theta": {"field": "Value", "type": "quantitative"},
                    "color": {"field": "Label", "type": "nominal"},
                },
            },
            use_container_width=True,
        )
    else:
        st.bar_chart(df, x="Label", y="Value")
    if chart.get("ValueIsCurrency"):
        st.caption("Values are amounts in dollars.")


question = st.text_input("Question", placeholder="How has the police budget changed since 2015?")

if st.button("Ask", type="primary") and question.strip():
    with st.spinner("Thinking..."):
        try:
            r = requests.post(f"{API_BASE}/ask", json={"question": question.strip()}, timeout=120)
            if r.ok:
                st.session_state.result = r.json()
            else:
                st.session_state.pop("result", None)
                st.error(f"Request failed: {r.status_code} — {r.text[:300]}")
        except requests.RequestException as e:
            st.session_state.pop("result", None)
            st.error(f"Connection failed: {e}")

result = st.session_state.get("result")
if result:
    sql = result.get("sql") or {}
    if sql.get("Applicability"):
        st.info(sql["Applicability"])
    if sql.get("MissingData"):
        st.warning(f"Missing data: {sql['MissingData']}")
    if sql.get("SQL"):
        st.code(sql["SQL"], language="sql")
    else:
        st.caption("The open data cannot answer this question.")

    if result.get("table"):
        with st.expander("Data table", expanded=False):
            st.text(result["table"])
    elif sql.get("SQL"):
        st.caption("The query returned no rows.")

    chart = result.get("chart")
    if chart:
        draw_chart(chart)

        st.divider()
        st.subheader("Publish")
        user = st.text_input("Your name", key="publish_user")
        if st.button("Publish", disabled=not user.strip(), key="publish_btn"):
            try:
                r = requests.post(
                    f"{API_BASE}/publish/result",
                    json={
                        "question": result["question"],
                        "sql": sql,
                        "table": result.get("table", ""),
                        "chart": chart,
                        "user": user.strip(),
                    },
                    timeout=60,
                )
                if r.ok:
                    st.success(f"Published: {r.json().get('url', '')}")
                else:
                    st.error(f"Publish failed: {r.status_code} — {r.text[:300]}")
            except requests.RequestException as e:
                st.error(f"Publish failed: {e}")
