"""
OpenDataBot: the steps shared by every host (HTTP API, tool server, CLI, UI).

question -> SQL (LLM) -> data table (SQLite) -> chart selection (LLM) -> optional
module page in the content graph store. Each step is one blocking call and the
first error is raised to the caller with the step as context.
"""

import logging
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx

from opendatabot.agent.llm import chat_completion, get_openai_client
from opendatabot.agent.prompts import PromptTemplate, format_prompt_date, load_template
from opendatabot.core.config import (
    BOT_HOSTNAME,
    CAMERA_BEARING,
    CAMERA_CENTER,
    CAMERA_PITCH,
    CAMERA_ZOOM,
    CHART_SELECT_PROMPT,
    MODULE_CATEGORIES,
    MODULE_CODE_CREDIT,
    MODULE_DESCRIPTION,
    MODULE_HEADLINE_PREFIX,
    MODULE_JS_FOOTER,
    PROMPTS_DIR,
    SQL_GEN_PROMPT,
)
from opendatabot.core.errors import GraphStoreError, ServiceUnavailableError
from opendatabot.core.open_data_db import OpenDataDB
from opendatabot.schemas.analysis import ChartSelectResponse, SQLResponse, decode_reply
from opendatabot.services.graph_store import GraphStoreClient, Module, get_graph_store

logger = logging.getLogger(__name__)


def default_camera() -> dict[str, Any]:
    """Map camera for published modules, keyed by viewport name ("" is the default viewport)."""
    return {
        "": {
            "center": dict(CAMERA_CENTER),
            "zoom": CAMERA_ZOOM,
            "pitch": CAMERA_PITCH,
            "bearing": CAMERA_BEARING,
        }
    }


class OpenDataBot:
    def __init__(
        self,
        db: OpenDataDB,
        ai: Any,
        graph_store: GraphStoreClient | None,
        hostname: str,
        sql_gen_prompt: PromptTemplate,
        chart_select_prompt: PromptTemplate,
    ) -> None:
        self.hostname = hostname
        self.db = db
        self.ai = ai
        self.graph_store = graph_store
        self._sql_gen_prompt = sql_gen_prompt
        self._chart_select_prompt = chart_select_prompt

    @classmethod
    def create(
        cls,
        db: OpenDataDB,
        ai: Any,
        graph_store: GraphStoreClient | None = None,
        hostname: str = BOT_HOSTNAME,
        prompts_dir: Path | str = PROMPTS_DIR,
    ) -> "OpenDataBot":
        """Parse both prompt templates and build the bot. Raises PromptTemplateError."""
        sql_gen_prompt = load_template(SQL_GEN_PROMPT, prompts_dir)
        chart_select_prompt = load_template(CHART_SELECT_PROMPT, prompts_dir)
        return cls(db, ai, graph_store, hostname, sql_gen_prompt, chart_select_prompt)

    def sql_analysis(self, question: str) -> SQLResponse:
        """Ask the model for a SQL query answering `question`."""
        prompt = self._sql_gen_prompt.render(
            date=format_prompt_date(date.today()),
            command=question,
            schema=self.db.describe_schema(),
        )
        content = chat_completion(self.ai, prompt)
        return decode_reply(SQLResponse, content)

    def load_results(self, sql: str) -> str:
        logger.info("[bot:load_results] running sqlQuery: %s", sql)
        return self.db.read_data_table(sql)

    def select_chart(self, question: str, data_table: str) -> ChartSelectResponse:
        """Ask the model which chart fits `data_table` and for the values to plot."""
        prompt = self._chart_select_prompt.render(title=question, data=data_table)
        content = chat_completion(self.ai, prompt)
        resp = decode_reply(ChartSelectResponse, content)
        logger.info("[bot:select_chart] OUT %r", resp)
        return resp

    def has_graph_store(self) -> bool:
        return self.graph_store is not None

    def save_to_graph(
        self,
        id: str,
        title: str,
        body: str,
        js: str,
        feature_image: str,
        user: str,
    ) -> str:
        """
        Publish a module page and return its path, /mod/<slug id>/<slug title>.
        Steps run in order (module, body text, JS, slug) and stop at the first failure.
        """
        if self.graph_store is None:
            raise ServiceUnavailableError("No graph store configured; set GRAPH_STORE_URL to publish.")
        mod = Module(
            id=id,
            name=title,
            headline=f"<h1>{MODULE_HEADLINE_PREFIX}: {title}</h1>",
            categories=list(MODULE_CATEGORIES),
            creators=[user],
            camera=default_camera(),
            feature_image=feature_image,
            description=MODULE_DESCRIPTION,
            pub_date=date.today().isoformat(),
            code_credit=MODULE_CODE_CREDIT,
        )
        try:
            self.graph_store.write_module(mod)
        except (httpx.HTTPError, ValueError) as e:
            raise GraphStoreError(f"writing module: {e}") from e

        try:
            q = mod.vertex_query()
        except ValueError as e:
            raise GraphStoreError(f"generating vertex query: {e}") from e
        try:
            self.graph_store.write_body_text(q, body)
        except httpx.HTTPError as e:
            raise GraphStoreError(f"writing body text: {e}") from e

        js += MODULE_JS_FOOTER
        try:
            self.graph_store.write_js(q, js)
        except httpx.HTTPError as e:
            raise GraphStoreError(f"writing JS: {e}") from e

        try:
            slug_id = mod.slug_id()
        except ValueError as e:
            raise GraphStoreError(f"generating slug ID: {e}") from e
        path = f"/mod/{slug_id}/{mod.slug_title()}"
        logger.info("[bot:save_to_graph] OUT path=%s", path)
        return path

    def module_url(self, path: str) -> str:
        return f"https://{self.hostname}{path}"


@lru_cache(maxsize=1)
def get_bot() -> OpenDataBot:
    """Process-wide bot built from config. Raises ServiceUnavailableError without an OpenAI key."""
    return OpenDataBot.create(
        db=OpenDataDB(),
        ai=get_openai_client(),
        graph_store=get_graph_store(),
    )
