"""Tests for unweighted and weighted score calculations."""

import sys
from fractions import Fraction
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ticketscore.models import RatingRow
from ticketscore.scoring import calculate_category_score, calculate_overall_score, round_half_up


def _row(rating: int, weight: int = 1) -> RatingRow:
    return RatingRow(
        rating=rating,
        created_at="2024-01-01T10:00:00",
        category_name="Support",
        weight=weight,
        reviewee_id=1,
        reviewee_name="Agent One",
    )


def test_scores_of_empty_input_are_zero():
    """Verify both score variants default to 0 without ratings."""
    assert calculate_category_score([]) == 0
    assert calculate_overall_score([]) == 0


def test_category_score_all_fives_is_100():
    """Verify perfect ratings produce a perfect score."""
    assert calculate_category_score([_row(5)] * 7) == 100


def test_category_score_rounds_half_up():
    """Verify category scores round ties upward instead of to even."""
    # 100 * 25 / 40 = 62.5
    assert calculate_category_score([_row(3), _row(4)]) == 70
    assert calculate_category_score([_row(3)] * 7 + [_row(4)]) == 63


def test_category_score_ignores_weights():
    """Verify the category score is a plain average regardless of weights."""
    assert calculate_category_score([_row(5, weight=10), _row(1, weight=0)]) == 60


def test_overall_score_weighted_example():
    """Verify weighted example: (5*2 + 3*1) / (5*2 + 5*1) -> 86.67 -> 87."""
    assert calculate_overall_score([_row(5, weight=2), _row(3, weight=1)]) == 87


def test_overall_score_zero_weights_returns_zero():
    """Verify a zero weighted denominator yields 0 instead of an error."""
    assert calculate_overall_score([_row(5, weight=0), _row(4, weight=0)]) == 0


def test_overall_score_invariant_to_uniform_weight_scaling():
    """Verify scaling every weight by the same factor does not change the score."""
    rows = [_row(5, weight=2), _row(3, weight=1), _row(1, weight=4)]
    scaled = [_row(row.rating, weight=row.weight * 7) for row in rows]

    assert calculate_overall_score(rows) == calculate_overall_score(scaled)


def test_out_of_range_ratings_propagate_unchanged():
    """Verify ratings outside 1-5 are not clamped."""
    assert calculate_category_score([_row(10)]) == 200


def test_round_half_up_matches_math_round_semantics():
    """Verify ties round toward positive infinity for both signs."""
    assert round_half_up(Fraction(5, 2)) == 3
    assert round_half_up(Fraction(-5, 2)) == -2
    assert round_half_up(Fraction(8667, 100)) == 87
