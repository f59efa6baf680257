"""
Template insight text for a chart, built from simple column statistics.
"""

import math

from cells import is_empty
from formatting import to_display
from validation import coerce_selection

FOLLOW_UP = """

To further analyze this data, you might consider:
- Filtering specific categories to focus on key areas
- Comparing this data with historical periods to identify changes
- Exporting the chart for inclusion in reports or presentations"""


def _float_or_none(val):
    if is_empty(val) or isinstance(val, bool):
        return None
    try:
        n = float(val)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def column_stats(rows, column):
    """avg/max/min/sum of a column's numeric cells plus the rows holding max and min."""
    pairs = [(n, row) for row in rows for n in [_float_or_none(row.get(column))] if n is not None]
    if not pairs:
        return None
    values = [n for n, _ in pairs]
    total = sum(values)
    hi = max(values)
    lo = min(values)
    return {
        'avg': round(total / len(values), 2),
        'max': hi,
        'min': lo,
        'sum': round(total, 2),
        'maxItem': next(row for n, row in pairs if n == hi),
        'minItem': next(row for n, row in pairs if n == lo),
    }


def generate_insights(rows, selection, chart_type):
    """Insight text for a chart type family, followed by general suggestions."""
    selection = coerce_selection(selection)
    x = selection['x']
    y = selection['y']
    y_list = ', '.join(y)
    text = ''

    if chart_type in ('bar', 'column'):
        stats = column_stats(rows, y[0]) if y else None
        if stats:
            text = (
                f"This {chart_type} chart displays {x} values against {y_list}.\n\n"
                f"The average value is {stats['avg']:.2f}, with a maximum of {to_display(stats['max'])} "
                f"({to_display(stats['maxItem'].get(x))}) and a minimum of {to_display(stats['min'])} "
                f"({to_display(stats['minItem'].get(x))}).\n\n"
                "This visualization helps identify the highest and lowest performing "
                "categories at a glance."
            )
    elif chart_type == 'line':
        text = (
            f"This line chart tracks changes in {y_list} over {x}.\n\n"
            "The visualization allows you to identify trends, seasonal patterns, and "
            "potential anomalies in your time-series data.\n\n"
            "To gain deeper insights, consider analyzing the slope between consecutive "
            "points to identify periods of growth or decline."
        )
    elif chart_type in ('pie', 'doughnut'):
        first = y[0] if y else ''
        text = (
            f"This {chart_type} chart shows the distribution of {first} across different "
            f"{x} categories.\n\n"
            "It's particularly effective for visualizing part-to-whole relationships and "
            "percentage distributions.\n\n"
            "For better readability, consider organizing segments from largest to smallest "
            "or grouping smaller segments into an \"Other\" category."
        )
    elif chart_type == 'scatter':
        text = (
            f"This scatter plot visualizes the relationship between {x} and {y_list}.\n\n"
            "Look for clusters, outliers, and correlation patterns in the data. Dense areas "
            "indicate common value combinations, while isolated points may represent "
            "anomalies.\n\n"
            "Consider adding a trend line to highlight the overall relationship direction "
            "between variables."
        )
    elif chart_type == 'radar':
        text = (
            f"This radar chart compares multiple variables ({y_list}) across {x} "
            "categories.\n\n"
            "The shape of the polygon reveals strengths and weaknesses across dimensions. "
            "Larger areas indicate better overall performance.\n\n"
            "This visualization is ideal for performance comparisons and identifying "
            "balanced or imbalanced profiles."
        )
    elif chart_type in ('3d-column', '3d-bar'):
        kind = 'column' if chart_type == '3d-column' else 'bar'
        text = (
            f"This 3D {kind} chart adds depth to your visualization, representing "
            f"{y_list} values across {x} categories.\n\n"
            "The third dimension enhances visual comparison but may slightly complicate "
            "precise value comparison.\n\n"
            "Rotate the chart to view from different angles for a comprehensive "
            "understanding of the data relationships."
        )
    elif chart_type == '3d-scatter':
        first = y[0] if y else ''
        text = (
            f"This 3D scatter plot visualizes the relationship between three variables: "
            f"{x}, {first}, and {selection['z'] or 'Z-axis'}.\n\n"
            "Look for patterns in the three-dimensional space that might not be apparent "
            "in 2D visualizations.\n\n"
            "Clusters in 3D space can reveal complex relationships between all three "
            "variables simultaneously."
        )

    if not text:
        text = (
            f"This {chart_type} chart visualizes the relationship between {x} and "
            f"{y_list}.\n\n"
            "Examine the patterns to identify trends, outliers, and potential correlations "
            "in your data.\n\n"
            "Consider exploring different chart types to highlight different aspects of "
            "your dataset."
        )

    return text + FOLLOW_UP
