"""
Chart-creation payload builder.

The payload layout is the contract with the chart store, field for field,
including the duplicated config/configuration entry and the '3d-' type
prefix that rendering dispatch keys off.
"""

import logging

from column_types import analyze_columns, column_type
from errors import MissingRequiredField
from formatting import count_fallbacks, to_display, to_number
from validation import coerce_selection

logger = logging.getLogger(__name__)

SERIES_PALETTE = [
    '#60A5FA', '#34D399', '#F97316', '#A78BFA', '#EC4899', '#06B6D4',
]

SOURCE_ROW_LIMIT = 100

CHART_TYPES_2D = [
    'bar', 'line', 'pie', 'doughnut', 'polarArea', 'radar', 'horizontalBar',
    'bubble', 'scatter', 'area', 'stackedBar', 'mixed',
]
CHART_TYPES_3D = [
    'column', 'scatter', 'bar', 'surface', 'line', 'bubble', 'heatmap', 'waterfall',
]


def is_supported_chart_type(chart_type, chart_dimension='2d'):
    if chart_dimension == '3d':
        return chart_type in CHART_TYPES_3D
    return chart_type in CHART_TYPES_2D


def series_color(index):
    return SERIES_PALETTE[index % len(SERIES_PALETTE)]


def payload_type(chart_type, chart_dimension):
    return f'3d-{chart_type}' if chart_dimension == '3d' else chart_type


def _numeric_series(rows, column):
    values = [row.get(column) for row in rows]
    fallbacks = count_fallbacks(values)
    if fallbacks:
        logger.warning(
            "Column %r: %d of %d cells are not numeric and were charted as 0",
            column, fallbacks, len(values),
        )
    return [to_number(v) for v in values]


def numeric_warnings(table, selection):
    """Data-quality notes for the numeric axes of a selection."""
    selection = coerce_selection(selection)
    rows = table['rows']
    columns = list(selection['y'])
    if selection['z']:
        columns.append(selection['z'])
    warnings = []
    for col in columns:
        n = count_fallbacks(row.get(col) for row in rows)
        if n:
            warnings.append(f"{n} non-numeric value(s) in '{col}' charted as 0")
    return warnings


def _axis(field, table, column_types, data):
    return {
        'field': field,
        'label': field,
        'type': column_type(field, table, column_types),
        'data': data,
    }


def build_config(title, chart_type, chart_dimension):
    return {
        'dimension': chart_dimension or '2d',
        'showGrid': True,
        'showLabels': True,
        'chartType': chart_type,
        'chartConfig': {
            'responsive': True,
            'maintainAspectRatio': False,
            'plugins': {
                'legend': {
                    'position': 'bottom',
                    'display': True,
                },
                'title': {
                    'display': True,
                    'text': title,
                },
            },
        },
    }


def build_chart_payload(title, file_id, chart_type, chart_dimension, selection, table,
                        sheet_name='Sheet1', column_types=None):
    """
    Build the chart-creation payload from a normalized table.

    Raises MissingRequiredField when title, file_id, chart_type, selection
    or table is missing. labels and every dataset's data always have one
    entry per table row.
    """
    missing = []
    if title is None or not str(title).strip():
        missing.append('title')
    if not file_id:
        missing.append('fileId')
    if not chart_type:
        missing.append('chartType')
    if not selection:
        missing.append('selection')
    if not isinstance(table, dict) or not isinstance(table.get('rows'), list):
        missing.append('table')
    if missing:
        raise MissingRequiredField(missing)

    selection = coerce_selection(selection)
    title = str(title).strip()
    rows = table['rows']
    if column_types is None:
        column_types = analyze_columns(table)
    x, y, z = selection['x'], selection['y'], selection['z']

    labels = [to_display(row.get(x)) for row in rows]

    datasets = []
    y_axes = []
    for i, column in enumerate(y):
        series = _numeric_series(rows, column)
        color = series_color(i)
        datasets.append({
            'label': column,
            'data': series,
            'borderColor': color,
            'backgroundColor': f'{color}80',
            'borderWidth': 2,
        })
        y_axes.append(_axis(column, table, column_types, list(series)))

    z_axis = _axis(z, table, column_types, _numeric_series(rows, z)) if z else None

    config = build_config(title, chart_type, chart_dimension)

    return {
        'title': title,
        'description': f"Chart showing {', '.join(y)} by {x}",
        'type': payload_type(chart_type, chart_dimension),
        'sourceFile': file_id,
        'excelFileId': file_id,
        'sheetName': sheet_name or 'Sheet1',
        'data': {
            'labels': labels,
            'datasets': datasets,
            'source': rows[:SOURCE_ROW_LIMIT],
            'selectedColumns': selection,
        },
        'config': config,
        'configuration': config,
        'xAxis': _axis(x, table, column_types, list(labels)),
        'yAxis': y_axes,
        'zAxis': z_axis,
        'columns': {
            'x': x,
            'y': list(y),
            'z': z,
        },
    }
