"""Score calculations over sets of rating rows.

Both scores are percentages of the maximum possible rating (5):
- Category score: plain average of ratings, used for every period and group.
- Overall score: ratings weighted by their category weight.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Sequence

from .models import RatingRow

MAX_RATING = 5


def round_half_up(value: Fraction) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return math.floor(value + Fraction(1, 2))


def calculate_category_score(ratings: Sequence[RatingRow]) -> int:
    """Compute the unweighted score of ``ratings`` in the range ``[0, 100]``.

    Returns ``0`` for an empty sequence. Ratings outside 1-5 are not
    validated and flow into the result unchanged.
    """
    if not ratings:
        return 0

    total = sum(row.rating for row in ratings)
    return round_half_up(Fraction(total * 100, len(ratings) * MAX_RATING))


def calculate_overall_score(ratings: Sequence[RatingRow]) -> int:
    """Compute the weight-adjusted score of ``ratings``.

    Each rating counts ``weight`` times. Returns ``0`` for an empty sequence
    and when every weight is zero.
    """
    if not ratings:
        return 0

    weighted_sum = sum(row.rating * row.weight for row in ratings)
    max_weighted_sum = sum(MAX_RATING * row.weight for row in ratings)
    if max_weighted_sum == 0:
        return 0

    return round_half_up(Fraction(weighted_sum * 100, max_weighted_sum))
