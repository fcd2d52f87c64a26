"""Scoring service: the RPC-facing boundary around the aggregation engine.

Each method fetches rating rows from the injected store, runs the engine and
returns the wire payload expected by gateway consumers. Failures are logged
and re-raised unchanged; nothing is retried and no partial result is returned.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .aggregation import aggregate_by_agent, aggregate_by_category
from .intervals import parse_calendar_date
from .models import Agent, Category, RatingRow
from .scoring import calculate_overall_score
from .wire import encode_combined_report, encode_report

logger = logging.getLogger(__name__)


class RatingSource(Protocol):
    """Storage collaborator supplying rating rows and lookup lists."""

    def fetch_ratings(
        self,
        start_date: str,
        end_date: str,
        agent_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> Sequence[RatingRow]:
        ...

    def list_agents(self) -> Sequence[Agent]:
        ...

    def list_categories(self) -> Sequence[Category]:
        ...


class ScoringService:
    """Compute scoring reports for date ranges from an injected rating source."""

    def __init__(self, store: RatingSource) -> None:
        self._store = store

    def _fetch(
        self,
        operation: str,
        start_date: str,
        end_date: str,
        agent_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> Sequence[RatingRow]:
        parse_calendar_date(start_date)
        parse_calendar_date(end_date)
        try:
            return self._store.fetch_ratings(
                start_date,
                end_date,
                agent_id=agent_id,
                category_id=category_id,
            )
        except Exception:
            logger.error(
                "Rating fetch failed",
                extra={"operation": operation, "start_date": start_date, "end_date": end_date},
                exc_info=True,
            )
            raise

    def get_category_scores(self, start_date: str, end_date: str) -> Dict[str, Any]:
        """Return the per-category report for all ratings in the range."""
        ratings = self._fetch("get_category_scores", start_date, end_date)
        return encode_report(aggregate_by_category(ratings, start_date, end_date))

    def get_overall_score(self, start_date: str, end_date: str) -> Dict[str, int]:
        """Return the weighted overall score for all ratings in the range."""
        ratings = self._fetch("get_overall_score", start_date, end_date)
        return {"score": calculate_overall_score(ratings)}

    def get_agent_scores(self, start_date: str, end_date: str, agent_id: int) -> Dict[str, Any]:
        """Return the per-category report restricted to one agent's ratings."""
        ratings = self._fetch("get_agent_scores", start_date, end_date, agent_id=agent_id)
        return encode_report(aggregate_by_category(ratings, start_date, end_date))

    def get_category_details(self, start_date: str, end_date: str, category_id: int) -> Dict[str, Any]:
        """Return the per-agent report restricted to one category's ratings."""
        ratings = self._fetch("get_category_details", start_date, end_date, category_id=category_id)
        return encode_report(aggregate_by_agent(ratings, start_date, end_date))

    def get_scores(self, start_date: str, end_date: str) -> Dict[str, Any]:
        """Return the category report plus the overall score.

        The two reports are computed from independent fetches issued
        concurrently. If either fails, the whole call fails.
        """
        parse_calendar_date(start_date)
        parse_calendar_date(end_date)

        with ThreadPoolExecutor(max_workers=2) as executor:
            category_future = executor.submit(
                self._fetch, "get_scores", start_date, end_date
            )
            overall_future = executor.submit(self.get_overall_score, start_date, end_date)
            category_ratings = category_future.result()
            overall = overall_future.result()

        report = aggregate_by_category(category_ratings, start_date, end_date)
        return encode_combined_report(report, overall["score"])

    def get_agents(self) -> List[Dict[str, Any]]:
        """List agents as ``{"id", "name"}`` records."""
        try:
            agents = self._store.list_agents()
        except Exception:
            logger.error("Agent listing failed", exc_info=True)
            raise
        return [{"id": agent.id, "name": agent.name} for agent in agents]

    def get_categories(self) -> List[Dict[str, Any]]:
        """List categories as ``{"id", "name"}`` records."""
        try:
            categories = self._store.list_categories()
        except Exception:
            logger.error("Category listing failed", exc_info=True)
            raise
        return [{"id": category.id, "name": category.name} for category in categories]
