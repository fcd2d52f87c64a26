"""Partitioning of rating rows into report groups."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from .models import RatingRow


def agent_display_name(row: RatingRow) -> str:
    """Return the reviewee name, or a placeholder built from the reviewee id."""
    return row.reviewee_name or f"Unknown Agent {row.reviewee_id}"


def group_ratings(
    ratings: Iterable[RatingRow],
    key_fn: Callable[[RatingRow], str],
) -> Dict[str, List[RatingRow]]:
    """Group ``ratings`` by ``key_fn``.

    Keys keep the order in which they are first seen; report display order
    depends on it.
    """
    grouped: Dict[str, List[RatingRow]] = {}
    for row in ratings:
        grouped.setdefault(key_fn(row), []).append(row)
    return grouped


def group_by_category(ratings: Iterable[RatingRow]) -> Dict[str, List[RatingRow]]:
    return group_ratings(ratings, lambda row: row.category_name)


def group_by_agent(ratings: Iterable[RatingRow]) -> Dict[str, List[RatingRow]]:
    return group_ratings(ratings, agent_display_name)
