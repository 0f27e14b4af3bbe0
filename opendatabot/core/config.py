"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keeps the rest of the app decoupled from how config is sourced.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_PACKAGE_DIR = Path(__file__).resolve().parent.parent

# OpenAI (SQL generation and chart selection)
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_LLM_MODEL: str = (
    os.getenv("OPENAI_LLM_MODEL", "gpt-3.5-turbo").strip() or "gpt-3.5-turbo"
)
# Sampling temperature for both prompts
RESP_TEMPERATURE: float = float(os.getenv("RESP_TEMPERATURE", "0.1") or 0.1)

# Prompt templates (sql_gen.txt, chart_select.txt)
PROMPTS_DIR: Path = Path(os.getenv("PROMPTS_DIR", "").strip() or _PACKAGE_DIR / "prompts")
SQL_GEN_PROMPT: str = "sql_gen.txt"
CHART_SELECT_PROMPT: str = "chart_select.txt"

# Open data (SQLite)
OPEN_DATA_DB_PATH: str = (
    os.getenv("OPEN_DATA_DB_PATH", "data/open_data.db").strip() or "data/open_data.db"
)
MAX_TABLE_ROWS: int = int(os.getenv("MAX_TABLE_ROWS", "200") or 200)

# Content graph store. Publishing is disabled when the URL is empty.
GRAPH_STORE_URL: str = os.getenv("GRAPH_STORE_URL", "").strip()
GRAPH_STORE_TOKEN: str = os.getenv("GRAPH_STORE_TOKEN", "").strip()

# Public host the published module paths are served from
BOT_HOSTNAME: str = os.getenv("BOT_HOSTNAME", "localhost:8000").strip() or "localhost:8000"

# API timeouts (seconds)
LLM_API_TIMEOUT: float = 60.0
GRAPH_STORE_TIMEOUT: float = 30.0

# Published module defaults
MODULE_HEADLINE_PREFIX: str = "City Budget"
MODULE_CATEGORIES: tuple[str, ...] = ("Open Data",)
MODULE_DESCRIPTION: str = "User-generated open data visualization"
MODULE_CODE_CREDIT: str = "OpenDataBot, an open data bot"
MODULE_JS_FOOTER: str = "\n\nmodule.initAdUnits();"
CAMERA_CENTER: dict[str, float] = {"lng": -79.384, "lat": 43.645}
CAMERA_ZOOM: float = 13.8
CAMERA_PITCH: float = 0
CAMERA_BEARING: float = -30
