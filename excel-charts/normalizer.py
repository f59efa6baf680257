"""
Structural normalizer for uploaded spreadsheet payloads.

The file store hands back whatever shape the upload was saved in. Known
shapes, in the order they are recognized:

  1. {"sheets": [{"name": ..., "data": [...]}, ...]}   first (or named) sheet
  2. {"data": [...]}
  3. {"sheet": {"data": [...]}}
  4. {"content": "<json>" | {...}}                     .data or .sheets[0].data
  5. [...]                                             the payload is the table
  6. {"excelData": [...] | {"data": ...} | {"sheets": ...}}
  7. anything else: first non-empty array property, then nested objects

Each recognizer only locates a candidate array. Turning that array into
columns and rows is shared (shape_rows): a leading list is a header row,
a leading dict supplies the column names. The first candidate that yields
columns wins; if none does, normalize() returns a NoTabularDataFound
result instead of raising.
"""

import json
import logging
import math

from errors import NoTabularDataFound

logger = logging.getLogger(__name__)

# Keys handled by a dedicated recognizer; the fallback scan skips them
WRAPPER_KEYS = ('sheets', 'data', 'sheet', 'content', 'excelData')

SHAPE_TAGS = {
    'sheets': 'sheets',
    'data': 'data',
    'sheet': 'sheet',
    'content': 'content',
    'excelData': 'excel_data',
}

MAX_SEARCH_DEPTH = 5


def classify_payload(raw):
    """Tag the top-level shape of a raw payload."""
    if isinstance(raw, list):
        if not raw:
            return 'unknown'
        first = raw[0]
        if isinstance(first, (list, tuple)):
            return 'array_of_arrays'
        if isinstance(first, dict):
            return 'array_of_objects'
        return 'unknown'
    if isinstance(raw, dict):
        for key in WRAPPER_KEYS:
            if raw.get(key) is not None:
                return SHAPE_TAGS[key]
    return 'unknown'


def _non_empty_list(val):
    return isinstance(val, (list, tuple)) and len(val) > 0


def _pick_sheet(sheets, sheet_name=None):
    if sheet_name:
        for sheet in sheets:
            if isinstance(sheet, dict) and sheet.get('name') == sheet_name:
                return sheet
        return None
    first = sheets[0]
    return first if isinstance(first, dict) else None


def _sheet_rows(obj, sheet_name=None):
    """obj.sheets[0].data (or the named sheet) when present."""
    if not isinstance(obj, dict):
        return None
    sheets = obj.get('sheets')
    if not _non_empty_list(sheets):
        return None
    sheet = _pick_sheet(sheets, sheet_name)
    if sheet is None:
        return None
    return sheet.get('data')


# ── Recognizers: each yields candidate arrays ──

def _recognize_sheets(obj, sheet_name):
    data = _sheet_rows(obj, sheet_name)
    if _non_empty_list(data):
        yield data


def _recognize_data(obj, sheet_name):
    if isinstance(obj, dict) and _non_empty_list(obj.get('data')):
        yield obj['data']


def _recognize_sheet(obj, sheet_name):
    if isinstance(obj, dict):
        sheet = obj.get('sheet')
        if isinstance(sheet, dict) and _non_empty_list(sheet.get('data')):
            yield sheet['data']


def _recognize_content(obj, sheet_name):
    if not isinstance(obj, dict) or obj.get('content') is None:
        return
    content = obj['content']
    if isinstance(content, (str, bytes)):
        try:
            content = json.loads(content)
        except ValueError as e:
            logger.warning("Could not parse content property as JSON: %s", e)
            return
    if isinstance(content, dict):
        if _non_empty_list(content.get('data')):
            yield content['data']
        data = _sheet_rows(content, sheet_name)
        if _non_empty_list(data):
            yield data
    elif _non_empty_list(content):
        yield content


def _recognize_array(obj, sheet_name):
    if _non_empty_list(obj):
        yield obj


def _recognize_excel_data(obj, sheet_name):
    if not isinstance(obj, dict):
        return
    excel = obj.get('excelData')
    if _non_empty_list(excel):
        yield excel
    elif isinstance(excel, dict):
        if _non_empty_list(excel.get('data')):
            yield excel['data']
        data = _sheet_rows(excel, sheet_name)
        if _non_empty_list(data):
            yield data


def _recognize_fallback(obj, sheet_name, depth=0):
    """
    Scan own properties for array values, then search nested objects
    depth-first with the full recognizer list. Arrays are never entered.
    """
    if not isinstance(obj, dict):
        return
    for key, val in obj.items():
        if key in WRAPPER_KEYS:
            continue
        if _non_empty_list(val):
            yield val
    if depth >= MAX_SEARCH_DEPTH:
        return
    for key, val in obj.items():
        if isinstance(val, dict):
            for _name, candidate in _candidates(val, sheet_name, depth + 1):
                yield candidate


RECOGNIZERS = [
    ('sheets', _recognize_sheets),
    ('data', _recognize_data),
    ('sheet', _recognize_sheet),
    ('content', _recognize_content),
    ('array', _recognize_array),
    ('excel_data', _recognize_excel_data),
    ('fallback', _recognize_fallback),
]


def _candidates(obj, sheet_name=None, depth=0):
    for name, recognizer in RECOGNIZERS:
        if name == 'fallback':
            found = recognizer(obj, sheet_name, depth)
        else:
            found = recognizer(obj, sheet_name)
        for candidate in found:
            yield name, candidate


# ── Row shaping ──

def _header_text(cell):
    if cell is None:
        return ''
    if isinstance(cell, bool):
        return 'true' if cell else 'false'
    if isinstance(cell, float) and math.isfinite(cell) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def header_names(header_row):
    """
    Column names from a header row: trimmed text, 'Column <n>' for blank
    cells, '_2', '_3' suffixes for repeats.
    """
    names = []
    seen = set()
    for i, cell in enumerate(header_row):
        name = _header_text(cell) or f'Column {i + 1}'
        if name in seen:
            k = 2
            while f'{name}_{k}' in seen:
                k += 1
            name = f'{name}_{k}'
        seen.add(name)
        names.append(name)
    return names


def _zip_row(columns, cells):
    if isinstance(cells, (list, tuple)):
        return {col: (cells[i] if i < len(cells) else None) for i, col in enumerate(columns)}
    if isinstance(cells, dict):
        return {col: cells.get(col) for col in columns}
    return {col: None for col in columns}


def _copy_row(columns, obj):
    row = dict(obj) if isinstance(obj, dict) else {}
    for col in columns:
        row.setdefault(col, None)
    return row


def shape_rows(array):
    """
    Turn a located array into (columns, rows), or None when no columns can
    be established.
    """
    if not _non_empty_list(array):
        return None
    first = array[0]
    if isinstance(first, (list, tuple)):
        columns = header_names(first)
        if not columns:
            return None
        rows = [_zip_row(columns, cells) for cells in array[1:]]
        return columns, rows
    if isinstance(first, dict):
        columns = list(first.keys())
        if not columns:
            return None
        rows = [_copy_row(columns, obj) for obj in array]
        return columns, rows
    return None


def normalize(raw, sheet_name=None):
    """
    Normalize a raw file payload into {'columns', 'rows'}.

    Returns a result dict:
      {'success': True, 'columns': [...], 'rows': [...], 'shape': tag, 'strategy': name}
      {'success': False, 'error': NoTabularDataFound, 'shape': tag}
    The raw payload is never modified.
    """
    shape = classify_payload(raw)
    logger.debug("Normalizing payload of shape %s", shape)

    for strategy, candidate in _candidates(raw, sheet_name):
        shaped = shape_rows(candidate)
        if shaped is None:
            logger.debug("Recognizer %s found an array without columns", strategy)
            continue
        columns, rows = shaped
        logger.info(
            "Normalized %d rows, %d columns (shape=%s, strategy=%s)",
            len(rows), len(columns), shape, strategy,
        )
        return {
            'success': True,
            'columns': columns,
            'rows': rows,
            'shape': shape,
            'strategy': strategy,
        }

    if sheet_name:
        message = f"No tabular data found in sheet '{sheet_name}'"
    else:
        message = None
    logger.warning("No tabular data found (shape=%s)", shape)
    return {
        'success': False,
        'error': NoTabularDataFound(message, shape=shape),
        'shape': shape,
    }


def normalize_table(raw, sheet_name=None):
    """Like normalize() but returns the bare table and raises on failure."""
    result = normalize(raw, sheet_name)
    if not result['success']:
        raise result['error']
    return {'columns': result['columns'], 'rows': result['rows']}
