"""Aggregation of rating rows into time-bucketed scoring reports.

For every group (category or agent) the aggregator computes:
- one period score per bucket, or ``None`` when the group has no ratings there
- a total score over all of the group's ratings
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .grouping import group_by_agent, group_by_category
from .intervals import bucket_contains, parse_calendar_date, plan_intervals
from .models import AggregatedReport, GroupScore, Interval, RatingRow, ReportKind
from .scoring import calculate_category_score

logger = logging.getLogger(__name__)

_GROUPERS: Dict[ReportKind, Callable[[Sequence[RatingRow]], Dict[str, List[RatingRow]]]] = {
    ReportKind.BY_CATEGORY: group_by_category,
    ReportKind.BY_AGENT: group_by_agent,
}


def calculate_period_scores(
    ratings: Sequence[RatingRow],
    interval: Interval,
) -> List[Optional[int]]:
    """Score ``ratings`` separately for each bucket of ``interval``.

    Buckets without ratings yield ``None``.

    Raises:
        DateParseError: If a row's ``created_at`` is malformed.
    """
    dated: List[Tuple[date, RatingRow]] = [
        (parse_calendar_date(row.created_at), row) for row in ratings
    ]

    period_scores: List[Optional[int]] = []
    for bucket_start in interval.buckets:
        in_bucket = [
            row
            for created_at, row in dated
            if bucket_contains(bucket_start, created_at, interval.is_weekly)
        ]
        period_scores.append(calculate_category_score(in_bucket) if in_bucket else None)

    return period_scores


def aggregate(
    kind: ReportKind,
    ratings: Sequence[RatingRow],
    start_date: str,
    end_date: str,
) -> AggregatedReport:
    """Build a report of ``kind`` for ``ratings`` over ``[start_date, end_date]``.

    Raises:
        DateParseError: If the range or any row timestamp is malformed.
    """
    interval = plan_intervals(start_date, end_date)
    grouped = _GROUPERS[kind](ratings)

    groups = [
        GroupScore(
            name=name,
            ratings_count=len(group_rows),
            period_scores=calculate_period_scores(group_rows, interval),
            total_score=calculate_category_score(group_rows),
        )
        for name, group_rows in grouped.items()
    ]

    logger.debug(
        "Aggregated rating scores",
        extra={
            "report_kind": kind.value,
            "start_date": start_date,
            "end_date": end_date,
            "is_weekly": interval.is_weekly,
            "buckets": len(interval.buckets),
            "groups": len(groups),
            "ratings_total": len(ratings),
        },
    )

    return AggregatedReport(kind=kind, periods=interval.labels(), groups=groups)


def aggregate_by_category(
    ratings: Sequence[RatingRow],
    start_date: str,
    end_date: str,
) -> AggregatedReport:
    """Aggregate ``ratings`` into one group per category name."""
    return aggregate(ReportKind.BY_CATEGORY, ratings, start_date, end_date)


def aggregate_by_agent(
    ratings: Sequence[RatingRow],
    start_date: str,
    end_date: str,
) -> AggregatedReport:
    """Aggregate ``ratings`` into one group per agent display name."""
    return aggregate(ReportKind.BY_AGENT, ratings, start_date, end_date)
