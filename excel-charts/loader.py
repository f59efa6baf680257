"""
Spreadsheet loader.

Reads .xlsx or .csv uploads into the raw sheets payload the normalizer
consumes:

  {'filename': 'sales.xlsx',
   'sheets': [{'name': 'Sheet1', 'data': [[header...], [row...], ...]}, ...]}

Cells keep their native values (numbers, datetimes, strings, None).
Trailing blank rows and columns are trimmed; blank rows inside the data
are kept so row order matches the sheet.

Handles:
  - Every worksheet of a workbook, in workbook order
  - A single named sheet (sheet_name=...)
  - CSV with various encodings (UTF-8, UTF-8 BOM, CP1252, Latin-1)
  - CSV delimiters , ; tab and |
"""

import csv
import io
import logging
import os
import zipfile

from errors import EmptyWorkbook, SheetNotFound, UnsupportedFileType

logger = logging.getLogger(__name__)

XLSX_EXTENSIONS = ('.xlsx', '.xlsm')
CSV_EXTENSIONS = ('.csv',)
CSV_ENCODINGS = ['utf-8-sig', 'utf-8', 'cp1252', 'latin-1']


def _is_blank(val):
    return val is None or (isinstance(val, str) and val.strip() == '')


def _trim(rows):
    """Drop trailing blank rows, then trailing columns blank in every row."""
    rows = [list(r) for r in rows]
    while rows and all(_is_blank(c) for c in rows[-1]):
        rows.pop()
    width = 0
    for row in rows:
        for ci in range(len(row) - 1, -1, -1):
            if not _is_blank(row[ci]):
                width = max(width, ci + 1)
                break
    return [row[:width] + [None] * (width - len(row[:width])) for row in rows]


def _load_xlsx(source, sheet_name=None):
    """Load workbook sheets as lists of rows. source is a path or file object."""
    from openpyxl import load_workbook
    from openpyxl.utils.exceptions import InvalidFileException
    try:
        wb = load_workbook(source, data_only=True, read_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        raise UnsupportedFileType(f"Could not read workbook: {e}") from e
    try:
        if sheet_name:
            if sheet_name not in wb.sheetnames:
                raise SheetNotFound(
                    f"Sheet '{sheet_name}' not found. Available: {wb.sheetnames}"
                )
            names = [sheet_name]
        else:
            names = wb.sheetnames

        sheets = []
        for name in names:
            ws = wb[name]
            rows = _trim(ws.iter_rows(values_only=True))
            sheets.append({'name': name, 'data': rows})
            logger.debug("Loaded sheet %r: %d rows", name, len(rows))
    finally:
        wb.close()
    return sheets


def _decode(raw_bytes):
    for encoding in CSV_ENCODINGS:
        try:
            return raw_bytes.decode(encoding)
        except (UnicodeDecodeError, UnicodeError):
            continue
    raise UnsupportedFileType("Could not read CSV file with any supported encoding")


def _load_csv_text(text, name='CSV'):
    sample = text[:4096]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=',;\t|')
    except csv.Error:
        dialect = csv.excel
    rows = []
    for row in csv.reader(io.StringIO(text), dialect):
        rows.append([cell if cell != '' else None for cell in row])
    return [{'name': name, 'data': _trim(rows)}]


def _check_extension(filename):
    ext = os.path.splitext(filename)[1].lower()
    if ext not in XLSX_EXTENSIONS + CSV_EXTENSIONS:
        raise UnsupportedFileType(
            f"Unsupported file format: {ext or filename}. Use .xlsx or .csv"
        )
    return ext


def _payload(filename, sheets):
    if not any(s['data'] for s in sheets):
        raise EmptyWorkbook("File is empty or unreadable")
    return {'filename': os.path.basename(filename), 'sheets': sheets}


def load_file(filepath, sheet_name=None):
    """Load a spreadsheet from disk into a raw sheets payload."""
    ext = _check_extension(filepath)
    if ext in CSV_EXTENSIONS:
        with open(filepath, 'rb') as f:
            sheets = _load_csv_text(_decode(f.read()))
    else:
        sheets = _load_xlsx(filepath, sheet_name)
    logger.info("Loaded %s (%d sheet(s))", filepath, len(sheets))
    return _payload(filepath, sheets)


def load_bytes(file_bytes, filename, sheet_name=None):
    """Load an uploaded spreadsheet held in memory."""
    ext = _check_extension(filename)
    if ext in CSV_EXTENSIONS:
        sheets = _load_csv_text(_decode(file_bytes))
    else:
        sheets = _load_xlsx(io.BytesIO(file_bytes), sheet_name)
    logger.info("Loaded upload %s (%d sheet(s))", filename, len(sheets))
    return _payload(filename, sheets)


def sheet_names(payload):
    sheets = payload.get('sheets') if isinstance(payload, dict) else None
    if not isinstance(sheets, list):
        return []
    return [s.get('name') for s in sheets if isinstance(s, dict) and s.get('name')]
