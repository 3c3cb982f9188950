import pytest

from app.core.exceptions import ValidationError
from app.domain.review_segment import (
    OVERALL_STARS_RANGE,
    RECOMMEND_SCORE_RANGE,
    ReviewSegment,
    coerce_int,
    compute_segment,
    optional_rating,
    require_rating,
)

# Rows: overall stars 0-5. Columns: recommend score 0-10.
SEGMENT_TABLE = {
    0: "LLLLLLLLLLL",
    1: "LLLLLLLLLLL",
    2: "LLLLLLLLLLL",
    3: "LLLLLLLLLLL",
    4: "LLLLLLLMMHH",
    5: "LLLLLLLMMHH",
}
CODES = {"L": ReviewSegment.LOW, "M": ReviewSegment.MIDDLE, "H": ReviewSegment.HIGH}

GRID = [
    (overall, recommend, CODES[row[recommend]])
    for overall, row in SEGMENT_TABLE.items()
    for recommend in range(11)
]


@pytest.mark.parametrize("overall,recommend,expected", GRID)
def test_segment_grid(overall, recommend, expected):
    assert compute_segment(overall, recommend) is expected


def test_low_recommend_beats_high_stars():
    assert compute_segment(5, 6) is ReviewSegment.LOW
    assert compute_segment(2, 10) is ReviewSegment.LOW


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, None),
        ("", None),
        ("4", 4),
        (" 7 ", 7),
        (4.9, 4),
        ("3.6", 3),
        (True, 1),
        ("abc", None),
        ("nan", None),
        ([4], None),
    ],
)
def test_coerce_int(raw, expected):
    assert coerce_int(raw) == expected


def test_require_rating_messages():
    with pytest.raises(ValidationError) as exc:
        require_rating("overall_stars", None, OVERALL_STARS_RANGE)
    assert exc.value.detail == "overall_stars must be an integer 1-5"

    with pytest.raises(ValidationError) as exc:
        require_rating("recommend_score", 11, RECOMMEND_SCORE_RANGE)
    assert exc.value.detail == "recommend_score must be an integer 0-10"

    assert require_rating("recommend_score", "0", RECOMMEND_SCORE_RANGE) == 0


def test_optional_rating():
    assert optional_rating("staff_service_stars", None) is None
    assert optional_rating("staff_service_stars", "not a number") is None
    assert optional_rating("staff_service_stars", "5") == 5
    with pytest.raises(ValidationError) as exc:
        optional_rating("staff_service_stars", 0)
    assert exc.value.detail == "staff_service_stars must be 1-5 or null"
