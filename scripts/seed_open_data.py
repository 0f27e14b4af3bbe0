#!/usr/bin/env python3
"""
Seed the open data SQLite DB for demos or tests.

Creates data/open_data.db (if missing) and loads each seed CSV into a table
named after the file. Use --reset to replace existing tables instead of
appending to them.

Run from project root:

    python scripts/seed_open_data.py
    python scripts/seed_open_data.py --reset
    python scripts/seed_open_data.py --reset path/to/other_dataset.csv

Pass CSV paths to load your own open data exports instead of the samples in
data/seed/.
"""

import argparse
import logging
import sys
from pathlib import Path

# Project root on path so "opendatabot" resolves
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from opendatabot.core.config import OPEN_DATA_DB_PATH
from opendatabot.core.open_data_db import OpenDataDB

SEED_DIR = _ROOT / "data" / "seed"


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the open data DB for demos/tests.")
    parser.add_argument(
        "csv_files",
        nargs="*",
        type=Path,
        help="CSV files to load (default: every CSV under data/seed/). Table name is the file stem.",
    )
    parser.add_argument("--db", default=OPEN_DATA_DB_PATH, help="SQLite DB path (default: OPEN_DATA_DB_PATH).")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Replace existing tables instead of appending rows.",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    csv_files = args.csv_files or sorted(SEED_DIR.glob("*.csv"))
    if not csv_files:
        parser.error(f"No CSV files given and none found in {SEED_DIR}")

    db = OpenDataDB(args.db)
    for path in csv_files:
        rows = db.load_csv(path, path.stem, replace=args.reset)
        print(f"  loaded: {path.name} -> {path.stem} ({rows} rows)")

    print(f"Done. Seeded {len(csv_files)} tables into {args.db}.")


if __name__ == "__main__":
    main()
