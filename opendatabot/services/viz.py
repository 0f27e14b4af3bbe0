"""
Page content for published modules: body HTML and the chart script.

The chart script targets Chart.js, which the module page loads. Data is embedded
as JSON so the published page needs nothing from this service at view time.
"""

import html
import json

from opendatabot.schemas.analysis import ChartSelectResponse, ChartType, SQLResponse

CURRENCY_LOCALE = "en-CA"
CURRENCY_CODE = "CAD"

_CHARTJS_TYPES = {
    ChartType.BAR: "bar",
    ChartType.LINE: "line",
    ChartType.PIE: "pie",
    ChartType.SCATTER: "scatter",
}


def _json_for_script(value) -> str:
    # "</" would close an inline <script> element
    return json.dumps(value, ensure_ascii=False).replace("</", "<\\/")


def render_chart_js(chart: ChartSelectResponse, element_id: str = "chart") -> str:
    """JavaScript that draws `chart` into the element with id `element_id`. UNKNOWN charts draw as bars."""
    kind = _CHARTJS_TYPES.get(chart.chart_type, "bar")
    labels = [d.label for d in chart.data]
    values = [d.value for d in chart.data]
    if kind == "scatter":
        points = [{"x": d.label, "y": d.value} for d in chart.data]
        dataset = {"label": chart.title, "data": points}
    else:
        dataset = {"label": chart.title, "data": values}
    config = {
        "type": kind,
        "data": {"labels": labels, "datasets": [dataset]},
        "options": {
            "responsive": True,
            "plugins": {
                "title": {"display": bool(chart.title), "text": chart.title},
                "legend": {"display": kind == "pie"},
            },
        },
    }
    if kind == "scatter":
        config["options"]["scales"] = {"x": {"type": "category", "labels": labels}}

    lines = [
        "(function () {",
        f"  const container = document.getElementById({_json_for_script(element_id)});",
        "  if (!container) { return; }",
        "  const canvas = document.createElement(\"canvas\");",
        "  container.appendChild(canvas);",
        f"  const config = {_json_for_script(config)};",
    ]
    if chart.value_is_currency:
        lines += [
            f"  const fmt = new Intl.NumberFormat({_json_for_script(CURRENCY_LOCALE)}, "
            f"{{ style: \"currency\", currency: {_json_for_script(CURRENCY_CODE)}, maximumFractionDigits: 0 }});",
            "  config.options.plugins.tooltip = { callbacks: { label: (ctx) => fmt.format(ctx.parsed.y ?? ctx.parsed) } };",
        ]
        if kind != "pie":
            lines += [
                "  config.options.scales = config.options.scales || {};",
                "  config.options.scales.y = { ticks: { callback: (v) => fmt.format(v) } };",
            ]
    lines += [
        "  new Chart(canvas, config);",
        "})();",
    ]
    return "\n".join(lines)


def render_module_body(
    question: str,
    sql_response: SQLResponse,
    table: str,
    element_id: str = "chart",
) -> str:
    """HTML body for a published module: question, chart container, table, SQL and notes."""
    parts = [
        f"<p class=\"question\">{html.escape(question)}</p>",
        f"<div id=\"{html.escape(element_id, quote=True)}\" class=\"chart\"></div>",
    ]
    if table:
        parts.append(f"<pre class=\"data-table\">{html.escape(table)}</pre>")
    if sql_response.sql:
        parts.append("<h2>Query</h2>")
        parts.append(f"<pre><code class=\"language-sql\">{html.escape(sql_response.sql)}</code></pre>")
    if sql_response.applicability:
        parts.append(f"<p class=\"applicability\">{html.escape(sql_response.applicability)}</p>")
    if sql_response.missing_data:
        parts.append(f"<p class=\"missing-data\">Missing data: {html.escape(sql_response.missing_data)}</p>")
    return "\n".join(parts)
