"""Value coercion and display tests."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from formatting import count_fallbacks, format_date, to_display, to_number


@pytest.mark.parametrize("raw, expected", [
    (None, 0),
    ({}, 0),
    ([], 0),
    ("abc", 0),
    ("", 0),
    (True, 0),
    (float("nan"), 0),
    (float("inf"), 0),
    ("3.14", 3.14),
    ("12abc", 12),
    (" -7 units", -7),
    ("9" * 5000, 0),
    (42, 42),
    (2.5, 2.5),
    (Decimal("1.5"), 1.5),
])
def test_to_number_is_total(raw, expected):
    assert to_number(raw) == expected


def test_to_number_never_returns_nan():
    for raw in [float("nan"), "nan", "NaN", "inf", "1e999"]:
        n = to_number(raw)
        assert n == n


def test_integer_strings_stay_integers():
    assert isinstance(to_number("100"), int)
    assert isinstance(to_number("1.0"), float)


def test_count_fallbacks_ignores_empty_cells():
    assert count_fallbacks([1, "2", None, "", "n/a", {}, "3x"]) == 2


@pytest.mark.parametrize("raw, expected", [
    (None, ""),
    ("East", "East"),
    (True, "true"),
    (False, "false"),
    (100, "100"),
    (2.0, "2"),
    (2.5, "2.5"),
    (float("nan"), "NaN"),
    (float("-inf"), "-Infinity"),
    ({"a": 1}, '{"a": 1}'),
    ([1, 2], "[1, 2]"),
])
def test_to_display(raw, expected):
    assert to_display(raw) == expected


def test_dates_render_as_short_us_dates():
    assert to_display(date(2024, 1, 15)) == "1/15/2024"
    assert to_display(datetime(2023, 12, 5, 14, 30)) == "12/5/2023"
    assert to_display("2024-03-09") == "3/9/2024"


def test_numeric_strings_are_not_dates():
    assert to_display("2020") == "2020"
    assert to_display("3.14") == "3.14"


def test_format_date():
    assert format_date(date(1999, 7, 4)) == "7/4/1999"


def test_huge_integer_strings_do_not_raise():
    assert to_number("1" * 5000 + "kg") == 0
    assert count_fallbacks(["9" * 5000]) == 1


@pytest.mark.parametrize("raw", ["12:30", "13:45:10", "1st", "Jan 5", "5-10", "March 2024"])
def test_partial_dates_are_not_completed_from_today(raw):
    assert to_display(raw) == raw


def test_full_dates_with_times_still_render():
    assert to_display("2024-03-09 12:30") == "3/9/2024"
    assert to_display("Jan 5, 2023") == "1/5/2023"
