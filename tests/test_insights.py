"""Insight text tests."""

from insights import FOLLOW_UP, column_stats, generate_insights

ROWS = [
    {"Region": "East", "Sales": 100},
    {"Region": "West", "Sales": "300"},
    {"Region": "North", "Sales": "n/a"},
    {"Region": "South", "Sales": 200},
]


def test_column_stats_skips_non_numeric_cells():
    stats = column_stats(ROWS, "Sales")

    assert stats["avg"] == 200.0
    assert stats["sum"] == 600.0
    assert stats["max"] == 300.0
    assert stats["min"] == 100.0
    assert stats["maxItem"]["Region"] == "West"
    assert stats["minItem"]["Region"] == "East"


def test_column_stats_without_numbers():
    assert column_stats(ROWS, "Region") is None


def test_bar_insights_quote_extremes():
    text = generate_insights(ROWS, {"x": "Region", "y": ["Sales"]}, "bar")

    assert "average value is 200.00" in text
    assert "maximum of 300 (West)" in text
    assert "minimum of 100 (East)" in text
    assert text.endswith(FOLLOW_UP)


def test_3d_scatter_mentions_all_axes():
    text = generate_insights(ROWS, {"x": "A", "y": ["B"], "z": "C"}, "3d-scatter")

    assert "three variables: A, B, and C" in text


def test_unknown_type_uses_generic_text():
    text = generate_insights(ROWS, {"x": "Region", "y": ["Sales"]}, "waterfall")

    assert text.startswith("This waterfall chart visualizes the relationship between Region and Sales")


def test_bar_without_numbers_falls_back_to_generic():
    text = generate_insights(ROWS, {"x": "Sales", "y": ["Region"]}, "bar")

    assert text.startswith("This bar chart visualizes the relationship")
