"""Bucket planning for scoring reports.

A date range is split into daily buckets, or into weekly buckets when it spans
more than ``WEEKLY_THRESHOLD_DAYS`` days. Weeks always start on Sunday, both
for bucket starts and for matching ratings to a weekly bucket.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List

from .errors import DateParseError
from .models import Interval

WEEKLY_THRESHOLD_DAYS = 31

_ONE_DAY = timedelta(days=1)
_ONE_WEEK = timedelta(weeks=1)


def parse_calendar_date(value: str) -> date:
    """Parse an ISO-8601 date or timestamp string into a calendar date.

    Any time-of-day or offset part is discarded without timezone conversion.

    Raises:
        DateParseError: If ``value`` is empty or not ISO-8601.
    """
    if not isinstance(value, str) or not value.strip():
        raise DateParseError(f"Invalid date value: {value!r}")

    text = value.strip()
    normalized = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return datetime.fromisoformat(normalized).date()
    except ValueError as exc:
        raise DateParseError(f"Invalid date value: {value!r}") from exc


def start_of_week(value: date) -> date:
    """Return the Sunday starting the week that contains ``value``."""
    return value - timedelta(days=(value.weekday() + 1) % 7)


def _each_step(first: date, last: date, step: timedelta) -> List[date]:
    buckets: List[date] = []
    current = first
    while current <= last:
        buckets.append(current)
        current += step
    return buckets


def plan_intervals(start_date: str, end_date: str) -> Interval:
    """Plan the buckets covering ``[start_date, end_date]``.

    Granularity is weekly when the absolute span exceeds 31 days, daily
    otherwise; both endpoints are included. When ``start_date`` is after
    ``end_date`` the span still uses the absolute difference and the buckets
    run backwards from ``start_date`` to ``end_date``.

    Raises:
        DateParseError: If either date is malformed.
    """
    start = parse_calendar_date(start_date)
    end = parse_calendar_date(end_date)

    span_days = abs((end - start).days)
    is_weekly = span_days > WEEKLY_THRESHOLD_DAYS
    reversed_range = start > end
    low, high = (end, start) if reversed_range else (start, end)

    if is_weekly:
        buckets = _each_step(start_of_week(low), start_of_week(high), _ONE_WEEK)
    else:
        buckets = _each_step(low, high, _ONE_DAY)

    if reversed_range:
        buckets.reverse()

    return Interval(buckets=buckets, is_weekly=is_weekly)


def bucket_contains(bucket_start: date, created_at: date, is_weekly: bool) -> bool:
    """Return whether ``created_at`` falls into the bucket starting at ``bucket_start``."""
    if is_weekly:
        return start_of_week(created_at) == start_of_week(bucket_start)
    return created_at == bucket_start
