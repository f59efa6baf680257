"""
Axis selection checks run before a chart is previewed or submitted.
"""

import logging

from column_types import NUMERIC, column_type
from errors import InvalidAxisSelection

logger = logging.getLogger(__name__)


def _bad_selection(message):
    return InvalidAxisSelection([_error('invalid_selection', message)])


def _axis_name(value, axis):
    if value is None or value == '':
        return ''
    if not isinstance(value, str):
        raise _bad_selection(f'{axis} column must be a column name, got {value!r}')
    return value


def coerce_selection(obj):
    """
    Build an axis selection {'x', 'y', 'z'} from loose input.

    A bare string for y becomes a one-element list; a blank z becomes None.
    Raises InvalidAxisSelection when the input is not a mapping or an axis
    entry is not a column name.
    """
    obj = obj or {}
    if not isinstance(obj, dict):
        raise _bad_selection('Axis selection must be an object with x, y and z')
    y = obj.get('y')
    if y is None:
        y = []
    elif isinstance(y, str):
        y = [y]
    elif isinstance(y, (list, tuple)):
        y = [_axis_name(col, 'Y-axis') for col in y]
    else:
        raise _bad_selection(f'Y-axis must be a list of column names, got {y!r}')
    z = _axis_name(obj.get('z'), 'Z-axis') or None
    return {'x': _axis_name(obj.get('x'), 'X-axis'), 'y': y, 'z': z}


def is_3d_scatter(chart_type, chart_dimension):
    return chart_dimension == '3d' and chart_type == 'scatter'


def _error(code, message, columns=None):
    return {'code': code, 'message': message, 'columns': list(columns or [])}


def validate(selection, table, chart_type=None, chart_dimension='2d', column_types=None):
    """
    Check an axis selection against a normalized table.

    Returns {'valid': bool, 'errors': [...], 'missing_columns': [...]}.
    Axis gaps (no X, no Y, blank Y entry) are reported together and stop
    the check; otherwise every column missing from the data is listed in a
    single missing_columns error, followed by the 3D scatter Z-axis checks.
    """
    selection = coerce_selection(selection)
    rows = (table or {}).get('rows') or []
    errors = []

    if not rows:
        errors.append(_error('no_data', 'No data available to create chart'))
        return _result(errors)

    x = selection['x']
    y = selection['y']
    z = selection['z']

    if not x:
        errors.append(_error('missing_x_axis', 'Please select an X-axis column'))
    if not y:
        errors.append(_error('missing_y_axis', 'Please select at least one Y-axis column'))
    elif any(not col for col in y):
        errors.append(_error(
            'empty_column_selection', 'Please remove empty column selections',
        ))
    if errors:
        return _result(errors)

    sample_row = rows[0]
    missing = []
    if x not in sample_row:
        missing.append(f'X-axis: {x}')
    for col in y:
        if col not in sample_row:
            missing.append(f'Y-axis: {col}')
    if z and z not in sample_row:
        missing.append(f'Z-axis: {z}')
    if missing:
        errors.append(_error(
            'missing_columns', 'Selected columns not found in data', missing,
        ))

    if is_3d_scatter(chart_type, chart_dimension):
        if not z:
            errors.append(_error(
                'missing_z_axis', '3D scatter plots require a Z-axis column',
            ))
        elif z in sample_row and column_type(z, table, column_types) != NUMERIC:
            errors.append(_error(
                'non_numeric_z_axis', '3D scatter plots require a numeric Z-axis column', [z],
            ))

    return _result(errors)


def _result(errors):
    missing = [c for e in errors if e['code'] == 'missing_columns' for c in e['columns']]
    for e in errors:
        logger.info("Chart validation failed: %s %s", e['code'], e['columns'] or '')
    return {'valid': not errors, 'errors': errors, 'missing_columns': missing}


def is_valid(selection, table, chart_type=None, chart_dimension='2d', column_types=None):
    return validate(selection, table, chart_type, chart_dimension, column_types)['valid']


def require_valid(selection, table, chart_type=None, chart_dimension='2d', column_types=None):
    """Raise InvalidAxisSelection listing every violated check."""
    result = validate(selection, table, chart_type, chart_dimension, column_types)
    if not result['valid']:
        raise InvalidAxisSelection(result['errors'])
    return result
