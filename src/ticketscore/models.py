"""Domain models for rating aggregation.

Rating rows are produced by the rating store and never mutated afterwards.
Reports carry an explicit ``ReportKind`` so consumers never have to guess the
grouping dimension from the shape of the data.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class RatingRow:
    """One submitted rating joined with its category and reviewee."""

    rating: int
    created_at: str
    category_name: str
    weight: int
    reviewee_id: int
    reviewee_name: Optional[str] = None
    reviewer_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Agent:
    """Represents an agent (a user who can be rated)."""

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class Category:
    """Represents a rating category."""

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class Interval:
    """Ordered bucket-start dates covering a requested date range."""

    buckets: List[date]
    is_weekly: bool

    def labels(self) -> List[str]:
        """Return bucket starts formatted as ``YYYY-MM-DD``."""
        return [bucket.isoformat() for bucket in self.buckets]


class ReportKind(enum.Enum):
    """Grouping dimension of an aggregated report."""

    BY_CATEGORY = "category"
    BY_AGENT = "agent"


@dataclass(slots=True)
class GroupScore:
    """Scores for one category or one agent.

    ``period_scores`` holds one entry per bucket; ``None`` means the group had
    no ratings in that bucket, which is different from a real score of ``0``.
    """

    name: str
    ratings_count: int
    period_scores: List[Optional[int]]
    total_score: int


@dataclass(slots=True)
class AggregatedReport:
    """Time-bucketed scores for every group found in the input rows."""

    kind: ReportKind
    periods: List[str]
    groups: List[GroupScore] = field(default_factory=list)
