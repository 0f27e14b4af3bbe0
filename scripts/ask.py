#!/usr/bin/env python3
"""
Ask the open data bot one question from the command line.

Prints the generated SQL, the data table and the chart selection. With
--publish, also saves the result as a module page in the graph store.

Run from project root:

    python scripts/ask.py "How much did the city spend on libraries in 2023?"
    python scripts/ask.py --publish --user jane "Police budget by year"
"""

import argparse
import json
import logging
import sys
import uuid
from pathlib import Path

# Project root on path so "opendatabot" resolves
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from opendatabot.agent.graph import run_pipeline
from opendatabot.services.bot import get_bot
from opendatabot.services.viz import render_chart_js, render_module_body


def main() -> int:
    parser = argparse.ArgumentParser(description="Ask the open data bot a question.")
    parser.add_argument("question", help="Natural-language question about the open data.")
    parser.add_argument("--publish", action="store_true", help="Publish the result to the graph store.")
    parser.add_argument("--user", default="", help="Creator credited on the published module.")
    parser.add_argument("--verbose", action="store_true", help="Log prompts and replies.")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    if args.publish and not args.user.strip():
        parser.error("--user is required with --publish")

    bot = get_bot()
    result = run_pipeline(bot, args.question)
    sql_response = result["sql_response"]

    print(f"Applicability: {sql_response.applicability}")
    if sql_response.missing_data:
        print(f"Missing data: {sql_response.missing_data}")
    if not sql_response.sql:
        print("The open data cannot answer this question.")
        return 1
    print(f"\nSQL:\n{sql_response.sql}\n")
    if not result["table"]:
        print("The query returned no rows.")
        return 1
    print(result["table"])

    chart = result["chart"]
    print("\nChart:")
    print(json.dumps(chart.model_dump(by_alias=True), indent=2))

    if args.publish:
        path = bot.save_to_graph(
            str(uuid.uuid4()),
            chart.title or result["question"],
            render_module_body(result["question"], sql_response, result["table"]),
            render_chart_js(chart),
            "",
            args.user.strip(),
        )
        print(f"\nPublished: {bot.module_url(path)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
