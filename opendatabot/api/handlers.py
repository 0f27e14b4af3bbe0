"""
API handlers: call the bot, map results/errors to HTTP.

Responsibility: Bridge HTTP types and the bot. Marshalling and exception-to-HTTP mapping.
Lives in the API layer so the bot stays free of FastAPI/HTTP types.
"""

import logging
import sqlite3
import uuid
from collections.abc import Callable
from typing import TypeVar

from fastapi import HTTPException

from opendatabot.agent.graph import run_pipeline
from opendatabot.core.errors import (
    GraphStoreError,
    LLMRequestError,
    PromptTemplateError,
    ResponseDecodeError,
    ServiceUnavailableError,
)
from opendatabot.schemas.analysis import ChartSelectResponse, SQLResponse
from opendatabot.schemas.query import AskRequest, AskResponse, PublishRequest, PublishResponse
from opendatabot.services.bot import OpenDataBot
from opendatabot.services.viz import render_chart_js, render_module_body

logger = logging.getLogger(__name__)

T = TypeVar("T")


def call_bot(step: Callable[[], T]) -> T:
    """Run one bot step, translating its errors to HTTPException."""
    try:
        return step()
    except ServiceUnavailableError as e:
        raise HTTPException(status_code=503, detail=e.message) from e
    except (LLMRequestError, ResponseDecodeError, GraphStoreError) as e:
        raise HTTPException(status_code=502, detail=e.message) from e
    except PromptTemplateError as e:
        logger.exception("Prompt template failed")
        raise HTTPException(status_code=500, detail=e.message) from e
    except sqlite3.Error as e:
        raise HTTPException(status_code=400, detail=f"SQL error: {e}") from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def publish_module(bot: OpenDataBot, body: PublishRequest) -> PublishResponse:
    module_id = (body.id or "").strip() or str(uuid.uuid4())
    path = call_bot(
        lambda: bot.save_to_graph(module_id, body.title, body.body, body.js, body.feature_image, body.user)
    )
    return PublishResponse(path=path, url=bot.module_url(path))


def publish_result(
    bot: OpenDataBot,
    question: str,
    sql_response: SQLResponse,
    table: str,
    chart: ChartSelectResponse,
    user: str,
    feature_image: str = "",
) -> PublishResponse:
    """Render the module page (body HTML and chart script) for a pipeline result and publish it."""
    return publish_module(
        bot,
        PublishRequest(
            title=chart.title or question,
            body=render_module_body(question, sql_response, table),
            js=render_chart_js(chart),
            feature_image=feature_image,
            user=user,
        ),
    )


def handle_ask(bot: OpenDataBot, body: AskRequest) -> AskResponse:
    """
    Run the full pipeline; when publish is requested, render the module page and save it.
    Publishing needs a chart, so an unanswerable question or an empty result is a 400.
    """
    if body.publish and not body.user.strip():
        raise HTTPException(status_code=400, detail="user is required to publish.")
    result = call_bot(lambda: run_pipeline(bot, body.question))
    response = AskResponse(
        question=result["question"],
        sql=result["sql_response"],
        table=result["table"],
        chart=result["chart"],
    )
    if not body.publish:
        return response

    if result["chart"] is None:
        raise HTTPException(status_code=400, detail="Nothing to publish: no chart was produced for this question.")
    published = publish_result(
        bot,
        result["question"],
        result["sql_response"],
        result["table"],
        result["chart"],
        body.user,
        body.feature_image,
    )
    response.module_path = published.path
    response.module_url = published.url
    return response
