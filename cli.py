"""Command-line host: analyze one statement and print the report as JSON."""

from __future__ import annotations

import argparse
import asyncio
import sys

from logging_setup import LOG_LEVEL_ENV, configure_logging
from report import StatementNotFoundError, analyze_statement


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Categorize a CSV statement export and print a spending report as JSON."
    )
    parser.add_argument("file_path", help="Path to the statement file (Date, Description, Amount).")
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation; use 0 for a single line.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Logging level (defaults to ${LOG_LEVEL_ENV} or INFO).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    try:
        result = asyncio.run(analyze_statement(str(args.file_path)))
    except StatementNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    print(result.to_json(indent=int(args.indent) or None))
    return 0


if __name__ == "__main__":
    sys.exit(main())
