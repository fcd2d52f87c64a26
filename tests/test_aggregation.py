"""Tests for time-bucketed report aggregation."""

import sys
from pathlib import Path
from typing import Optional

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ticketscore.aggregation import aggregate_by_agent, aggregate_by_category, calculate_period_scores
from ticketscore.errors import DateParseError
from ticketscore.intervals import plan_intervals
from ticketscore.models import RatingRow, ReportKind
from ticketscore.wire import encode_report


def _row(
    rating: int,
    created_at: str,
    category: str = "Support",
    reviewee_id: int = 1,
    reviewee_name: Optional[str] = "Alice",
    weight: int = 1,
) -> RatingRow:
    return RatingRow(
        rating=rating,
        created_at=created_at,
        category_name=category,
        weight=weight,
        reviewee_id=reviewee_id,
        reviewee_name=reviewee_name,
    )


def test_daily_category_report_with_empty_bucket():
    """Verify one row per day scores 80 per day and the day without rows is absent."""
    rows = [_row(4, f"2024-01-0{day}T09:30:00") for day in range(1, 6)]

    report = aggregate_by_category(rows, "2024-01-01", "2024-01-06")

    assert report.kind is ReportKind.BY_CATEGORY
    assert report.periods == [f"2024-01-0{day}" for day in range(1, 7)]
    assert len(report.groups) == 1
    support = report.groups[0]
    assert support.name == "Support"
    assert support.ratings_count == 5
    assert support.period_scores == [80, 80, 80, 80, 80, None]
    assert support.total_score == 80
    assert encode_report(report)["category_scores"][0]["period_scores"] == [80, 80, 80, 80, 80, -1]


def test_category_order_follows_first_seen_rows():
    """Verify categories are reported in first-seen order rather than sorted."""
    rows = [
        _row(5, "2024-01-01", category="CategoryB"),
        _row(3, "2024-01-01", category="CategoryA"),
        _row(1, "2024-01-02", category="CategoryB"),
    ]

    report = aggregate_by_category(rows, "2024-01-01", "2024-01-02")

    assert [group.name for group in report.groups] == ["CategoryB", "CategoryA"]
    assert report.groups[0].period_scores == [100, 20]
    assert report.groups[0].total_score == 60
    assert report.groups[1].period_scores == [60, None]


def test_ratings_counts_sum_to_input_rows():
    """Verify every input row is counted in exactly one category group."""
    rows = [
        _row(5, "2024-01-01", category="A"),
        _row(4, "2024-01-03", category="B"),
        _row(2, "2024-01-03", category="A"),
        _row(3, "2024-01-04", category="C"),
    ]

    report = aggregate_by_category(rows, "2024-01-01", "2024-01-05")

    assert sum(group.ratings_count for group in report.groups) == len(rows)


def test_weekly_buckets_group_ratings_by_sunday_week():
    """Verify ratings in long ranges are matched to Sunday-started weeks."""
    rows = [
        _row(5, "2024-01-07T08:00:00"),  # Sunday, week of 01-07
        _row(3, "2024-01-13T20:00:00"),  # Saturday, same week
        _row(1, "2024-02-12T10:00:00"),  # Monday, week of 02-11
    ]

    report = aggregate_by_category(rows, "2024-01-01", "2024-02-15")

    assert report.periods[0] == "2023-12-31"
    assert report.groups[0].period_scores == [None, 80, None, None, None, None, 20]
    assert report.groups[0].total_score == 60


def test_agent_report_groups_by_name_with_placeholder():
    """Verify agent reports use reviewee names and the unknown-agent placeholder."""
    rows = [
        _row(2, "2024-01-01", reviewee_id=9, reviewee_name=None),
        _row(5, "2024-01-01", reviewee_id=1, reviewee_name="Alice"),
        _row(4, "2024-01-02", reviewee_id=9, reviewee_name=None),
    ]

    report = aggregate_by_agent(rows, "2024-01-01", "2024-01-02")

    assert report.kind is ReportKind.BY_AGENT
    assert [group.name for group in report.groups] == ["Unknown Agent 9", "Alice"]
    assert report.groups[0].period_scores == [40, 80]
    assert report.groups[0].total_score == 60
    assert report.groups[1].period_scores == [100, None]


def test_empty_rows_produce_periods_without_groups():
    """Verify no rows is not an error: periods are planned and there are no groups."""
    report = aggregate_by_category([], "2024-01-01", "2024-01-03")

    assert report.periods == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert report.groups == []


def test_malformed_range_propagates_date_parse_error():
    """Verify the aggregator does not swallow date parsing failures."""
    with pytest.raises(DateParseError):
        aggregate_by_category([], "2024-01-01", "yesterday")


def test_malformed_row_timestamp_propagates_date_parse_error():
    """Verify rows with unparseable timestamps fail the aggregation."""
    with pytest.raises(DateParseError):
        aggregate_by_agent([_row(4, "garbage")], "2024-01-01", "2024-01-02")


def test_rows_outside_range_count_in_total_but_not_in_periods():
    """Verify rows outside every bucket still contribute to the total score."""
    rows = [_row(5, "2024-01-01"), _row(1, "2024-03-01")]
    interval = plan_intervals("2024-01-01", "2024-01-02")

    assert calculate_period_scores(rows, interval) == [100, None]
    report = aggregate_by_category(rows, "2024-01-01", "2024-01-02")
    assert report.groups[0].ratings_count == 2
    assert report.groups[0].total_score == 60
