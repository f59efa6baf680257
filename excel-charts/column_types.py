"""
Column type inference for normalized tables.

Each column is typed from a small sample of its non-empty values:

  date     every sample is a date/datetime or a date-looking string
  numeric  every sample is a number or a plain numeric string
  string   anything else
  unknown  no non-empty values in the sample

Dates are checked first. Plain numbers and numeric strings never count as
dates, so a column of years (2020, 2021) is numeric.

The type map for a table is computed once (analyze_columns) and handed to
the validator, the preview and the payload builder so they all agree.
"""

from cells import as_date, is_empty, is_number, is_numeric_string

SAMPLE_SIZE = 10

NUMERIC = 'numeric'
DATE = 'date'
STRING = 'string'
UNKNOWN = 'unknown'


def _sample(column_name, rows, sample_size):
    values = []
    for row in rows:
        if len(values) >= sample_size:
            break
        if not isinstance(row, dict):
            continue
        val = row.get(column_name)
        if not is_empty(val):
            values.append(val)
    return values


def classify(column_name, rows, sample_size=SAMPLE_SIZE):
    """Classify one column as numeric, date, string or unknown."""
    values = _sample(column_name, rows, sample_size)
    if not values:
        return UNKNOWN
    if all(as_date(v) is not None for v in values):
        return DATE
    if all(is_number(v) or is_numeric_string(v) for v in values):
        return NUMERIC
    return STRING


def analyze_columns(table, sample_size=SAMPLE_SIZE):
    """Type every column of a normalized table: {column: type}."""
    rows = table['rows']
    return {col: classify(col, rows, sample_size) for col in table['columns']}


def column_type(column_name, table, column_types=None):
    if column_types is not None and column_name in column_types:
        return column_types[column_name]
    return classify(column_name, table['rows'])


def summarize_columns(table, column_types=None):
    """
    Column list for the axis selector.

    The sample is the first non-empty value among the first 10 rows.
    """
    if column_types is None:
        column_types = analyze_columns(table)
    head = table['rows'][:SAMPLE_SIZE]
    summaries = []
    for col in table['columns']:
        sample = next(
            (row.get(col) for row in head if not is_empty(row.get(col))),
            None,
        )
        summaries.append({
            'name': col,
            'type': column_types.get(col, UNKNOWN),
            'sample': sample,
        })
    return summaries


def suggest_axes(table, column_types=None):
    """
    Default axis selection for a fresh table.

    X: first date or string column, else the first column.
    Y: first numeric column other than X, else the next column, else nothing.
    """
    if column_types is None:
        column_types = analyze_columns(table)
    columns = table['columns']
    if not columns:
        return {'x': '', 'y': [], 'z': None}

    categorical = [c for c in columns if column_types.get(c) in (DATE, STRING)]
    x = categorical[0] if categorical else columns[0]

    numeric = [c for c in columns if column_types.get(c) == NUMERIC and c != x]
    others = [c for c in columns if c != x]
    if numeric:
        y = [numeric[0]]
    elif others:
        y = [others[0]]
    else:
        y = []
    return {'x': x, 'y': y, 'z': None}
