"""
Shared fixtures: a small open data DB on disk, a fake OpenAI client and a bot wired to both.

No network: the OpenAI client is a MagicMock and graph store calls are mocked per test.
"""

import json
import sqlite3
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from opendatabot.core.open_data_db import OpenDataDB
from opendatabot.services.bot import OpenDataBot

BUDGET_ROWS = [
    (2021, "Toronto Police Service", 1077000000.0),
    (2021, "Toronto Public Library", 208000000.0),
    (2022, "Toronto Police Service", 1111000000.0),
    (2022, "Toronto Public Library", 215000000.0),
    (2023, "Toronto Police Service", 1156000000.0),
    (2023, "Toronto Public Library", 223000000.0),
]

SQL_REPLY = {
    "Schema": "operating_budget(year, program, net_expenditure)",
    "Applicability": "The operating budget has net expenditure by program and year.",
    "SQL": "SELECT year, net_expenditure FROM operating_budget WHERE program = 'Toronto Police Service' ORDER BY year",
    "MissingData": "",
}

CHART_REPLY = {
    "Chart": "line",
    "Title": "Police net expenditure by year",
    "Data": [
        {"Label": "2021", "Value": 1077000000},
        {"Label": "2022", "Value": 1111000000},
        {"Label": "2023", "Value": 1156000000},
    ],
    "ValueIsCurrency": True,
}


def completion(content: str) -> SimpleNamespace:
    """Shape of an OpenAI chat completion with one choice."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def make_completion():
    return completion


@pytest.fixture
def fake_ai() -> MagicMock:
    """OpenAI client stand-in; set ai.chat.completions.create.side_effect / return_value per test."""
    ai = MagicMock()
    ai.chat.completions.create.side_effect = [
        completion(json.dumps(SQL_REPLY)),
        completion(json.dumps(CHART_REPLY)),
    ]
    return ai


@pytest.fixture
def budget_db(tmp_path) -> OpenDataDB:
    path = tmp_path / "open_data.db"
    conn = sqlite3.connect(path)
    try:
        conn.execute("CREATE TABLE operating_budget (year INTEGER, program TEXT, net_expenditure REAL)")
        conn.executemany("INSERT INTO operating_budget VALUES (?, ?, ?)", BUDGET_ROWS)
        conn.commit()
    finally:
        conn.close()
    return OpenDataDB(path)


@pytest.fixture
def graph_store() -> MagicMock:
    return MagicMock()


@pytest.fixture
def bot(budget_db: OpenDataDB, fake_ai: MagicMock) -> OpenDataBot:
    return OpenDataBot.create(db=budget_db, ai=fake_ai, graph_store=None, hostname="bot.example.com")


@pytest.fixture
def publishing_bot(budget_db: OpenDataDB, fake_ai: MagicMock, graph_store: MagicMock) -> OpenDataBot:
    return OpenDataBot.create(db=budget_db, ai=fake_ai, graph_store=graph_store, hostname="bot.example.com")
