"""Command-line argument parsing for the ticket score report."""

from __future__ import annotations

import argparse
from datetime import date


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Args:
        value: Raw command-line argument value.

    Returns:
        The validated positive integer.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def _calendar_date(value: str) -> str:
    """Validate a ``YYYY-MM-DD`` CLI value and return it unchanged."""
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a date in YYYY-MM-DD format") from exc

    return value


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments for score reporting.

    Returns:
        Parsed CLI arguments containing the date range, optional agent or
        category filter, the data source and the schema initialization flag.
    """
    parser = argparse.ArgumentParser(
        prog="ticket-score-report",
        description=(
            "Report support-ticket rating scores over a date range, "
            "grouped by category or by agent."
        ),
    )

    parser.add_argument(
        "--start-date",
        type=_calendar_date,
        help="First day of the report range (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--end-date",
        type=_calendar_date,
        help="Last day of the report range (YYYY-MM-DD).",
    )

    scope = parser.add_mutually_exclusive_group()
    scope.add_argument(
        "--agent-id",
        type=_positive_int,
        default=None,
        help="Report per-category scores for a single agent.",
    )
    scope.add_argument(
        "--category-id",
        type=_positive_int,
        default=None,
        help="Report per-agent scores for a single category.",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL of the rating database (default: DATABASE_URL, DB_PATH or ./database.db).",
    )
    source.add_argument(
        "--api-url",
        default=None,
        help="Base URL of the scores gateway; when set, scores are fetched over HTTP (default: SCORES_API_URL).",
    )

    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create the rating database schema and exit.",
    )

    args = parser.parse_args()
    if not args.init_db and (args.start_date is None or args.end_date is None):
        parser.error("--start-date and --end-date are required unless --init-db is given")

    return args
