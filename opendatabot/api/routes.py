"""
API route aggregator: register endpoints; no logic — only delegate to the bot and handlers.
"""

import json
import logging

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from opendatabot.agent.graph import run_pipeline_stream
from opendatabot.api.handlers import call_bot, handle_ask, publish_module, publish_result
from opendatabot.schemas.analysis import ChartSelectResponse, SQLResponse
from opendatabot.schemas.query import (
    AskRequest,
    AskResponse,
    ChartRequest,
    PublishRequest,
    PublishResponse,
    PublishResultRequest,
    QuestionRequest,
    ResultsRequest,
    ResultsResponse,
)
from opendatabot.services.bot import OpenDataBot, get_bot

logger = logging.getLogger(__name__)
router = APIRouter()


# --- System ---

@router.get("/", tags=["system"])
def root():
    return {"status": "Open data bot running"}


@router.get("/health", tags=["system"])
def health():
    bot = call_bot(get_bot)
    return {"ok": True, "graph_store": bot.has_graph_store()}


@router.get("/tables", tags=["data"], summary="List open data tables and their schema")
def get_tables() -> dict:
    bot = call_bot(get_bot)
    tables = call_bot(bot.db.list_tables)
    schema = call_bot(bot.db.describe_schema)
    return {"tables": tables, "schema": schema}


# --- Bot steps ---

@router.post(
    "/sql",
    response_model=SQLResponse,
    tags=["bot"],
    summary="Generate SQL for a question",
    description="Ask the model for a SQL query answering the question. 502 when the model call fails or its reply is not valid JSON.",
)
def post_sql(body: QuestionRequest) -> SQLResponse:
    logger.info("[api:post_sql] IN  question=%r", body.question)
    bot = call_bot(get_bot)
    return call_bot(lambda: bot.sql_analysis(body.question))


@router.post(
    "/results",
    response_model=ResultsResponse,
    tags=["bot"],
    summary="Run SQL and render the data table",
    description="Run a read-only query against the open data database. 400 on SQL errors.",
)
def post_results(body: ResultsRequest) -> ResultsResponse:
    logger.info("[api:post_results] IN  sql=%r", body.sql)
    bot = call_bot(get_bot)
    return ResultsResponse(table=call_bot(lambda: bot.load_results(body.sql)))


@router.post(
    "/chart",
    response_model=ChartSelectResponse,
    tags=["bot"],
    summary="Choose a chart for a data table",
)
def post_chart(body: ChartRequest) -> ChartSelectResponse:
    logger.info("[api:post_chart] IN  question=%r table_len=%d", body.question, len(body.table))
    bot = call_bot(get_bot)
    return call_bot(lambda: bot.select_chart(body.question, body.table))


@router.post(
    "/ask",
    response_model=AskResponse,
    tags=["bot"],
    summary="Question to SQL, table and chart (optionally publish)",
    description="Run the whole pipeline. With publish=true the result is saved as a module page in the graph store.",
)
def post_ask(body: AskRequest) -> AskResponse:
    logger.info("[api:post_ask] IN  question=%r publish=%s", body.question, body.publish)
    bot = call_bot(get_bot)
    response = handle_ask(bot, body)
    logger.info("[api:post_ask] OUT table_len=%d chart=%s module_path=%s", len(response.table), response.chart is not None, response.module_path)
    return response


def _to_jsonable(data):
    if isinstance(data, dict):
        return {k: _to_jsonable(v) for k, v in data.items()}
    if hasattr(data, "model_dump"):
        return data.model_dump(by_alias=True)
    return data


def _sse_generator(bot: OpenDataBot, question: str):
    """Yield Server-Sent Events for each finished pipeline step."""
    try:
        for evt in run_pipeline_stream(bot, question):
            event_type = evt.get("event", "")
            yield f"event: {event_type}\ndata: {json.dumps({'data': _to_jsonable(evt.get('data'))})}\n\n"
    except Exception as e:
        logger.exception("SSE stream failed")
        yield f"event: error\ndata: {json.dumps({'data': str(e)})}\n\n"


@router.post(
    "/ask/stream",
    tags=["bot"],
    summary="Run the pipeline (SSE stream)",
    description="Stream each step as Server-Sent Events. Events: sql, table, chart, done, error.",
)
def post_ask_stream(body: QuestionRequest) -> StreamingResponse:
    logger.info("[api:post_ask_stream] IN  question=%r", body.question)
    bot = call_bot(get_bot)
    return StreamingResponse(
        _sse_generator(bot, body.question),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


# --- Publishing ---

@router.post(
    "/publish",
    response_model=PublishResponse,
    tags=["publish"],
    summary="Publish a module page to the graph store",
    description="Write module, body HTML and script. 503 when no graph store is configured, 502 when a write fails.",
)
def post_publish(body: PublishRequest) -> PublishResponse:
    logger.info("[api:post_publish] IN  title=%r user=%r", body.title, body.user)
    bot = call_bot(get_bot)
    return publish_module(bot, body)


@router.post(
    "/publish/result",
    response_model=PublishResponse,
    tags=["publish"],
    summary="Publish an /ask result as a module page",
    description="Render body HTML and chart script for a question, SQL, table and chart, then publish them.",
)
def post_publish_result(body: PublishResultRequest) -> PublishResponse:
    logger.info("[api:post_publish_result] IN  question=%r user=%r", body.question, body.user)
    bot = call_bot(get_bot)
    return publish_result(bot, body.question, body.sql, body.table, body.chart, body.user, body.feature_image)
