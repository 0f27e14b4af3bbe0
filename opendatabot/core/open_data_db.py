"""
Civic open data in SQLite: read-only query execution and table rendering.

The bot only ever reads; query connections are opened with mode=ro so a
generated statement cannot modify data. load_csv is the one writer, used by
scripts/seed_open_data.py.
"""

import logging
import sqlite3
from pathlib import Path
from urllib.parse import quote

import pandas as pd

from opendatabot.core.config import MAX_TABLE_ROWS, OPEN_DATA_DB_PATH
from opendatabot.core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


class OpenDataDB:
    """Reader for the open data database at `path`. One connection per call."""

    def __init__(self, path: str | Path = OPEN_DATA_DB_PATH, max_rows: int = MAX_TABLE_ROWS) -> None:
        self.path = Path(path)
        self.max_rows = max_rows

    def _get_conn(self) -> sqlite3.Connection:
        if not self.path.is_file():
            raise ServiceUnavailableError(
                f"Open data database not found at {self.path}. Run scripts/seed_open_data.py first."
            )
        uri = f"file:{quote(self.path.resolve().as_posix())}?mode=ro"
        return sqlite3.connect(uri, uri=True)

    def _get_writable_conn(self) -> sqlite3.Connection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(str(self.path))

    def read_data_table(self, sql: str) -> str:
        """
        Run `sql` and render the rows as a plain-text table (header line, then one line per row).
        Returns "" when the query yields no rows. sqlite3 errors propagate to the caller.
        """
        conn = self._get_conn()
        try:
            cur = conn.execute(sql)
            if cur.description is None:
                return ""
            columns = [d[0] for d in cur.description]
            rows = cur.fetchmany(self.max_rows + 1)
        finally:
            conn.close()
        if not rows:
            logger.info("[open_data_db:read_data_table] OUT rows=0")
            return ""
        truncated = len(rows) > self.max_rows
        df = pd.DataFrame(rows[: self.max_rows], columns=columns)
        table = df.to_string(index=False, float_format=lambda v: f"{v:.2f}")
        if truncated:
            table += f"\n(truncated to {self.max_rows} rows)"
        logger.info("[open_data_db:read_data_table] OUT rows=%d truncated=%s", len(df), truncated)
        return table

    def list_tables(self) -> list[str]:
        """Return user table names, sorted."""
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
            )
            return [row[0] for row in cur.fetchall()]
        finally:
            conn.close()

    def describe_schema(self) -> str:
        """One line per table: name(column TYPE, ...). Used to fill the sql_gen prompt."""
        conn = self._get_conn()
        try:
            lines = []
            cur = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
            )
            for (table,) in cur.fetchall():
                cols = conn.execute(f'PRAGMA table_info("{table}")').fetchall()
                # table_info rows: (cid, name, type, notnull, dflt_value, pk)
                col_defs = ", ".join(f"{c[1]} {c[2] or 'TEXT'}".strip() for c in cols)
                lines.append(f"{table}({col_defs})")
            return "\n".join(lines)
        finally:
            conn.close()

    def load_csv(self, csv_path: str | Path, table: str, replace: bool = False) -> int:
        """Load a CSV file into `table`. Returns the number of rows written."""
        df = pd.read_csv(csv_path)
        conn = self._get_writable_conn()
        try:
            df.to_sql(table, conn, if_exists="replace" if replace else "append", index=False)
            conn.commit()
        finally:
            conn.close()
        logger.info("[open_data_db:load_csv] table=%s rows=%d replace=%s", table, len(df), replace)
        return len(df)
