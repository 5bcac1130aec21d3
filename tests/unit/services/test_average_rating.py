"""
Unit tests for rating arithmetic and review validation.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from stayledger.errors import ValidationError
from stayledger.services.ratings import average_rating, validate_review


@pytest.mark.unit
@pytest.mark.parametrize(
    "total,count,expected",
    [
        (0, 0, Decimal("0.00")),
        (5, 1, Decimal("5.00")),
        (9, 2, Decimal("4.50")),
        (12, 3, Decimal("4.00")),
        (14, 3, Decimal("4.67")),
        (13, 3, Decimal("4.33")),
        (1, 8, Decimal("0.13")),  # 0.125 rounds half-up
    ],
)
def test_average_rating(total: int, count: int, expected: Decimal) -> None:
    """Test that the mean is rounded half-up to two decimal places."""
    assert average_rating(total, count) == expected


@pytest.mark.unit
def test_average_rating_has_two_places() -> None:
    """Test that whole averages still carry two decimal places."""
    assert str(average_rating(8, 2)) == "4.00"


@pytest.mark.unit
@pytest.mark.parametrize("rating", [1, 3, 5])
def test_validate_review_accepts_valid_ratings(rating: int) -> None:
    """Test that ratings 1..5 pass validation."""
    validate_review("Asha", rating)


@pytest.mark.unit
@pytest.mark.parametrize("rating", [0, 6, -1, 4.5, "5", True])
def test_validate_review_rejects_invalid_ratings(rating: object) -> None:
    """Test that out-of-range and non-integer ratings are rejected."""
    with pytest.raises(ValidationError):
        validate_review("Asha", rating)


@pytest.mark.unit
@pytest.mark.parametrize("user_name", ["", "   ", None])
def test_validate_review_requires_user_name(user_name: object) -> None:
    """Test that a blank reviewer name is rejected."""
    with pytest.raises(ValidationError):
        validate_review(user_name, 4)  # type: ignore[arg-type]
