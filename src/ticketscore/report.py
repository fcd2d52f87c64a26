"""Text rendering for scoring reports.

This module provides utilities for:
- Formatting single scores, with ``n/a`` for periods without ratings.
- Building a fixed-width table with one row per category or agent and one
  column per period.
"""

from __future__ import annotations

from typing import List, Optional

from .intervals import parse_calendar_date
from .models import AggregatedReport, ReportKind

_NAME_HEADERS = {
    ReportKind.BY_CATEGORY: "Category",
    ReportKind.BY_AGENT: "Agent",
}


def format_score(score: Optional[int]) -> str:
    """Format a score as a percentage.

    Returns:
        ``"n/a"`` when ``score`` is ``None``; otherwise e.g. ``"80%"``.
    """
    if score is None:
        return "n/a"
    return f"{score}%"


def render_report(report: AggregatedReport, overall_score: Optional[int] = None) -> str:
    """Render ``report`` as a plain-text table.

    Columns are the group name, the number of ratings, one column per period
    and the group's total score. An overall score line is appended when
    ``overall_score`` is given.

    Args:
        report: Aggregated report to render.
        overall_score: Optional weighted score across all ratings.

    Returns:
        Formatted multi-line text report.
    """
    header = [_NAME_HEADERS[report.kind], "Ratings", *report.periods, "Score"]
    rows: List[List[str]] = [
        [
            group.name,
            str(group.ratings_count),
            *(format_score(score) for score in group.period_scores),
            format_score(group.total_score),
        ]
        for group in report.groups
    ]

    widths = [len(cell) for cell in header]
    for row in rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

    def _line(cells: List[str]) -> str:
        first, *rest = cells
        return "  ".join([first.ljust(widths[0])] + [cell.rjust(width) for cell, width in zip(rest, widths[1:])])

    granularity = "weekly" if _looks_weekly(report.periods) else "daily"
    title = f"Scores by {_NAME_HEADERS[report.kind].lower()} ({granularity})"
    lines = [title, "", _line(header), "  ".join("-" * width for width in widths)]
    lines.extend(_line(row) for row in rows)

    if not rows:
        lines.append("No ratings found for this period.")

    if overall_score is not None:
        lines.extend(["", f"Overall score: {format_score(overall_score)}"])

    return "\n".join(lines)


def _looks_weekly(periods: List[str]) -> bool:
    # labels are the only granularity signal that survives the wire
    if len(periods) < 2:
        return False
    gap = abs((parse_calendar_date(periods[1]) - parse_calendar_date(periods[0])).days)
    return gap == 7
