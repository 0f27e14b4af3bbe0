"""
Minimal MCP-style tool server: exposes the bot's steps as a standardized tool
interface so external agents can generate SQL, load results and pick charts.
"""

import logging
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from opendatabot.api.handlers import call_bot
from opendatabot.services.bot import get_bot

logger = logging.getLogger(__name__)

# MCP tool schema for discovery / documentation
tools = [
    {
        "name": "sql_analysis",
        "description": "Generate a SQL query over the city's open data for a natural-language question",
        "input_schema": {"question": "string"},
    },
    {
        "name": "load_results",
        "description": "Run a read-only SQL query and return the rendered data table",
        "input_schema": {"sql": "string"},
    },
    {
        "name": "select_chart",
        "description": "Choose a chart type, title and values for a data table",
        "input_schema": {"question": "string", "table": "string"},
    },
    {
        "name": "list_tables",
        "description": "List open data tables and their columns",
        "input_schema": {},
    },
]

mcp_router = APIRouter(tags=["mcp"])


@mcp_router.get("/tools", summary="MCP tool discovery")
def mcp_list_tools() -> dict[str, list[dict[str, Any]]]:
    return {"tools": tools}


class SQLAnalysisRequest(BaseModel):
    """Request body for MCP tool sql_analysis."""
    question: str = ""


@mcp_router.post(
    "/tools/sql_analysis",
    summary="MCP tool: sql_analysis",
    description="This endpoint acts as an MCP tool server, allowing external agents to generate SQL through a standardized interface.",
)
def mcp_sql_analysis(body: SQLAnalysisRequest) -> dict[str, Any]:
    """Generate SQL for a question. Empty question returns {result: null} without calling the model."""
    logger.info("MCP tool called: sql_analysis")
    question = (body.question or "").strip()
    if not question:
        return {"result": None}
    bot = call_bot(get_bot)
    resp = call_bot(lambda: bot.sql_analysis(question))
    return {"result": resp.model_dump(by_alias=True)}


# --- load_results ---

class LoadResultsRequest(BaseModel):
    """Request body for MCP tool load_results."""
    sql: str = ""


@mcp_router.post(
    "/tools/load_results",
    summary="MCP tool: load_results",
    description="Run a read-only SQL query against the open data database.",
)
def mcp_load_results(body: LoadResultsRequest) -> dict[str, str]:
    logger.info("MCP tool called: load_results")
    sql = (body.sql or "").strip()
    if not sql:
        return {"table": ""}
    bot = call_bot(get_bot)
    return {"table": call_bot(lambda: bot.load_results(sql))}


# --- select_chart ---

class SelectChartRequest(BaseModel):
    """Request body for MCP tool select_chart."""
    question: str = ""
    table: str = ""


@mcp_router.post(
    "/tools/select_chart",
    summary="MCP tool: select_chart",
    description="Choose a chart for a rendered data table.",
)
def mcp_select_chart(body: SelectChartRequest) -> dict[str, Any]:
    logger.info("MCP tool called: select_chart")
    table = (body.table or "").strip()
    if not table:
        return {"result": None}
    bot = call_bot(get_bot)
    resp = call_bot(lambda: bot.select_chart(body.question or "", table))
    return {"result": resp.model_dump(by_alias=True)}


# --- list_tables ---

@mcp_router.post(
    "/tools/list_tables",
    summary="MCP tool: list_tables",
    description="Open data tables and their columns (schema introspection).",
)
def mcp_list_tables() -> dict[str, Any]:
    logger.info("MCP tool called: list_tables")
    bot = call_bot(get_bot)
    return {"tables": call_bot(bot.db.list_tables), "schema": call_bot(bot.db.describe_schema)}
