"""Application entry point for the ticket score report."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Tuple

from .cli import parse_args
from .config import Config, load_config
from .database import RatingStore
from .errors import (
    ApiError,
    ConfigurationError,
    DataValidationError,
    DateParseError,
    ServiceConnectionError,
    StorageError,
)
from .gateway_client import ScoresApiClient
from .models import AggregatedReport
from .report import render_report
from .service import ScoringService
from .wire import decode_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_INVALID_INPUT = 2
EXIT_CONNECTION = 3
EXIT_DATA_SOURCE = 4


def _report_from_gateway(
    client: ScoresApiClient,
    args: argparse.Namespace,
) -> Tuple[AggregatedReport, Optional[int]]:
    if args.agent_id is not None:
        return client.get_agent_scores(args.start_date, args.end_date, args.agent_id), None
    if args.category_id is not None:
        return client.get_category_scores(args.start_date, args.end_date, args.category_id), None
    return client.get_scores(args.start_date, args.end_date)


def _report_from_service(
    service: ScoringService,
    args: argparse.Namespace,
) -> Tuple[AggregatedReport, Optional[int]]:
    if args.agent_id is not None:
        payload = service.get_agent_scores(args.start_date, args.end_date, args.agent_id)
    elif args.category_id is not None:
        payload = service.get_category_details(args.start_date, args.end_date, args.category_id)
    else:
        payload = service.get_scores(args.start_date, args.end_date)
    return decode_report(payload), payload.get("overall_score")


def _configure_logging(config: Config) -> None:
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def orchestrate_score_report() -> int:
    """Run one score report and map failures to process exit codes.

    Returns:
        ``0`` on success, ``2`` for invalid configuration or dates, ``3`` when
        the rating store cannot be reached, ``4`` for storage or gateway
        failures and ``1`` for anything unexpected.
    """
    store: Optional[RatingStore] = None
    try:
        args = parse_args()
        config = load_config(database_url=args.database_url, api_url=args.api_url)
        _configure_logging(config)

        if args.init_db:
            if config.uses_gateway:
                raise ConfigurationError("--init-db requires a database, not a scores API URL.")
            store = RatingStore.connect(config.database_url)
            store.create_schema()
            print("Rating database schema initialized.")
            return EXIT_OK

        if config.uses_gateway:
            print(f"Fetching scores from {config.api_url} for {args.start_date} to {args.end_date}...")
            report, overall_score = _report_from_gateway(ScoresApiClient(config=config), args)
        else:
            store = RatingStore.connect(config.database_url)
            print(f"Computing scores for {args.start_date} to {args.end_date}...")
            report, overall_score = _report_from_service(ScoringService(store), args)

        print(render_report(report, overall_score=overall_score))
        return EXIT_OK
    except (ConfigurationError, DateParseError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except ServiceConnectionError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONNECTION
    except (StorageError, ApiError, DataValidationError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_DATA_SOURCE
    except Exception:
        logger.exception("Unexpected error while generating score report")
        print("ERROR: unexpected failure while generating score report.", file=sys.stderr)
        return EXIT_UNEXPECTED
    finally:
        if store is not None:
            store.dispose()


def main() -> int:
    return orchestrate_score_report()


if __name__ == "__main__":
    raise SystemExit(main())
