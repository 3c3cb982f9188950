"""Review satisfaction segments and rating validation.

Segments:
- low: overall 3 stars or less, or recommend score 6 or less
- high: overall 4+ stars and recommend score 9+
- middle: everything in between
"""

import math
from enum import Enum
from typing import Any

from app.core.exceptions import ValidationError

OVERALL_STARS_RANGE = (1, 5)
RECOMMEND_SCORE_RANGE = (0, 10)
SUB_RATING_RANGE = (1, 5)


class ReviewSegment(str, Enum):
    """Satisfaction bucket of a review."""

    LOW = "low"
    MIDDLE = "middle"
    HIGH = "high"


def compute_segment(overall_stars: int, recommend_score: int) -> ReviewSegment:
    """Classify a review by its two headline scores.

    The low check runs first and wins; high needs both scores.
    """
    if overall_stars <= 3 or recommend_score <= 6:
        return ReviewSegment.LOW
    if overall_stars >= 4 and recommend_score >= 9:
        return ReviewSegment.HIGH
    return ReviewSegment.MIDDLE


def coerce_int(value: Any) -> int | None:
    """Coerce a form value to an int the way the review form sends them.

    None and "" mean "not given". Numeric strings are accepted, fractions are
    truncated toward zero, anything non-numeric becomes None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return math.trunc(number)


def in_range(value: int | None, bounds: tuple[int, int]) -> bool:
    low, high = bounds
    return value is not None and low <= value <= high


def require_rating(name: str, value: Any, bounds: tuple[int, int]) -> int:
    """Coerce and validate a mandatory rating.

    Raises:
        ValidationError: If the rating is missing or out of bounds
    """
    number = coerce_int(value)
    if not in_range(number, bounds):
        raise ValidationError(f"{name} must be an integer {bounds[0]}-{bounds[1]}")
    return number


def optional_rating(name: str, value: Any, bounds: tuple[int, int] = SUB_RATING_RANGE) -> int | None:
    """Coerce and validate an optional rating (None when not given).

    Raises:
        ValidationError: If the rating is given but out of bounds
    """
    number = coerce_int(value)
    if number is None:
        return None
    if not in_range(number, bounds):
        raise ValidationError(f"{name} must be {bounds[0]}-{bounds[1]} or null")
    return number
