"""
LangGraph pipeline: analyze_sql → load_results → select_chart.

Orchestration only; each node is one bot step. The run stops early when the model
finds the question unanswerable (no SQL) or the query returns no rows.
"""

import logging
from typing import Any, Literal, TypedDict

from langgraph.graph import END, StateGraph

from opendatabot.schemas.analysis import ChartSelectResponse, SQLResponse
from opendatabot.services.bot import OpenDataBot

logger = logging.getLogger(__name__)


class PipelineState(TypedDict):
    question: str
    sql_response: SQLResponse | None
    table: str
    chart: ChartSelectResponse | None


def _route_after_sql(state: PipelineState) -> Literal["load_results", "__end__"]:
    """Stop when the model produced no SQL."""
    resp = state.get("sql_response")
    has_sql = bool(resp is not None and resp.sql.strip())
    logger.info("[graph:route_after_sql] has_sql=%s", has_sql)
    return "load_results" if has_sql else END


def _route_after_results(state: PipelineState) -> Literal["select_chart", "__end__"]:
    """Stop when the query returned no rows."""
    has_rows = bool((state.get("table") or "").strip())
    logger.info("[graph:route_after_results] has_rows=%s", has_rows)
    return "select_chart" if has_rows else END


def build_graph(bot: OpenDataBot):
    """
    Build and compile the pipeline graph for `bot`.
    analyze_sql → (load_results | END) → (select_chart | END) → END.
    """

    def _analyze_sql(state: PipelineState) -> dict:
        question = state["question"]
        logger.info("[graph:analyze_sql] IN  question=%r", question)
        resp = bot.sql_analysis(question)
        logger.info("[graph:analyze_sql] OUT sql=%r", resp.sql)
        return {"sql_response": resp}

    def _load_results(state: PipelineState) -> dict:
        sql = state["sql_response"].sql
        table = bot.load_results(sql)
        logger.info("[graph:load_results] OUT table_len=%d", len(table))
        return {"table": table}

    def _select_chart(state: PipelineState) -> dict:
        chart = bot.select_chart(state["question"], state["table"])
        logger.info("[graph:select_chart] OUT chart=%s entries=%d", chart.chart_type.name, len(chart.data))
        return {"chart": chart}

    graph = StateGraph(PipelineState)

    graph.add_node("analyze_sql", _analyze_sql)
    graph.add_node("load_results", _load_results)
    graph.add_node("select_chart", _select_chart)

    graph.set_entry_point("analyze_sql")
    graph.add_conditional_edges("analyze_sql", _route_after_sql)
    graph.add_conditional_edges("load_results", _route_after_results)
    graph.add_edge("select_chart", END)

    return graph.compile()


def _initial_state(question: str) -> PipelineState:
    return {
        "question": question,
        "sql_response": None,
        "table": "",
        "chart": None,
    }


def run_pipeline(bot: OpenDataBot, question: str) -> dict[str, Any]:
    """
    Run the pipeline synchronously. Returns question, sql_response, table, chart.
    The first error raised by a step propagates unchanged.
    """
    if not question or not str(question).strip():
        raise ValueError("question is required")
    q = str(question).strip()
    logger.info("[run_pipeline] START question=%r", q)
    final = build_graph(bot).invoke(_initial_state(q))
    logger.info(
        "[run_pipeline] END has_sql=%s table_len=%d has_chart=%s",
        bool(final.get("sql_response") and final["sql_response"].sql),
        len(final.get("table") or ""),
        final.get("chart") is not None,
    )
    return {
        "question": q,
        "sql_response": final.get("sql_response"),
        "table": final.get("table") or "",
        "chart": final.get("chart"),
    }


def run_pipeline_stream(bot: OpenDataBot, question: str):
    """
    Run the pipeline and yield one event per finished step.
    Each yield is {"event": "sql"|"table"|"chart"|"done"|"error", "data": ...}.
    """
    if not question or not str(question).strip():
        yield {"event": "error", "data": "question is required"}
        return
    q = str(question).strip()
    logger.info("[run_pipeline_stream] START question=%r", q)
    result: dict[str, Any] = {"question": q, "sql_response": None, "table": "", "chart": None}
    try:
        for event in build_graph(bot).stream(_initial_state(q)):
            # event: node name -> state update, e.g. {"analyze_sql": {"sql_response": SQLResponse(...)}}
            for node_name, update in event.items():
                if node_name == "analyze_sql":
                    result["sql_response"] = update["sql_response"]
                    yield {"event": "sql", "data": update["sql_response"].model_dump(by_alias=True)}
                elif node_name == "load_results":
                    result["table"] = update["table"]
                    yield {"event": "table", "data": update["table"]}
                elif node_name == "select_chart":
                    result["chart"] = update["chart"]
                    yield {"event": "chart", "data": update["chart"].model_dump(by_alias=True)}
    except Exception as e:
        logger.exception("[run_pipeline_stream] Pipeline stream failed")
        yield {"event": "error", "data": str(e)}
        return
    yield {"event": "done", "data": result}
    logger.info("[run_pipeline_stream] END")
