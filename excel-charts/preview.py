"""
Chart preview data for the axis-selection screen.
"""

import logging

from column_types import NUMERIC, analyze_columns
from formatting import to_display, to_number
from payload import SERIES_PALETTE, series_color
from validation import coerce_selection, is_3d_scatter

logger = logging.getLogger(__name__)

PIE_TYPES = ('pie', 'doughnut')
PIE_BORDER = '#1F2937'


def _missing_columns(selection, sample_row):
    missing = []
    if selection['x'] not in sample_row:
        missing.append(f"X-axis: {selection['x']}")
    for col in selection['y']:
        if col not in sample_row:
            missing.append(f'Y-axis: {col}')
    return missing


def _preview_error(message, missing_columns=None):
    err = {'error': True, 'message': message}
    if missing_columns:
        err['missingColumns'] = missing_columns
    return err


def _style_dataset(dataset, chart_type, index):
    color = dataset['borderColor']
    if chart_type == 'line':
        dataset.update({
            'pointBackgroundColor': color,
            'pointRadius': 4,
            'pointHoverRadius': 6,
            'tension': 0.3,
            'fill': index == 0,
        })
    elif chart_type in PIE_TYPES:
        dataset.update({
            'backgroundColor': list(SERIES_PALETTE),
            'borderWidth': 1,
            'borderColor': PIE_BORDER,
        })
    return dataset


def build_preview(table, selection, chart_type, chart_dimension='2d', column_types=None):
    """
    Labels and styled datasets for the live preview.

    Returns {'labels', 'datasets'} or {'error': True, 'message', 'missingColumns'?}.
    Numeric columns are charted as numbers; other columns keep their
    display text.
    """
    selection = coerce_selection(selection)
    rows = table['rows']
    if not rows or not selection['x'] or not selection['y']:
        return _preview_error('Please select both X and Y axis columns to preview your chart')

    missing = _missing_columns(selection, rows[0])
    if missing:
        return _preview_error('Selected columns not found in data', missing)

    if column_types is None:
        column_types = analyze_columns(table)

    if chart_dimension == '3d':
        if any(column_types.get(col) != NUMERIC for col in selection['y']):
            return _preview_error('3D charts require numeric Y-axis data')
        if is_3d_scatter(chart_type, chart_dimension) and (
                not selection['z'] or column_types.get(selection['z']) != NUMERIC):
            return _preview_error('3D scatter plots require a numeric Z-axis column')

    labels = [to_display(row.get(selection['x'])) for row in rows]

    datasets = []
    for i, column in enumerate(selection['y']):
        if column_types.get(column) == NUMERIC:
            data = [to_number(row.get(column)) for row in rows]
        else:
            data = [to_display(row.get(column)) for row in rows]
        color = series_color(i)
        dataset = {
            'label': column,
            'data': data,
            'borderColor': color,
            'backgroundColor': f'{color}80',
            'borderWidth': 2,
        }
        datasets.append(_style_dataset(dataset, chart_type, i))

    logger.debug("Preview built: %d labels, %d datasets", len(labels), len(datasets))
    return {'labels': labels, 'datasets': datasets}
