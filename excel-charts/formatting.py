"""
Cell value formatting for chart series and labels.

Both coercions are total: a cell that cannot be read as a number becomes 0
and a missing cell becomes ''. Chart renderers choke on NaN and None inside
numeric series, so a malformed cell is flattened rather than reported as an
error. Every flattening is logged at DEBUG level; callers that want to warn
about data quality use count_fallbacks().
"""

import json
import logging
import math
from decimal import Decimal

from cells import as_date, is_number, parse_leading_number

logger = logging.getLogger(__name__)


def format_date(d):
    """Fixed en-US short date: 1/15/2024."""
    return f"{d.month}/{d.day}/{d.year}"


def _number_or_none(raw):
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        raw = float(raw)
    if is_number(raw):
        if isinstance(raw, float) and not math.isfinite(raw):
            return None
        return raw
    if isinstance(raw, str):
        return parse_leading_number(raw)
    return None


def to_number(raw):
    """Coerce a cell to a number. Never raises, never returns NaN."""
    n = _number_or_none(raw)
    if n is None:
        if raw is not None and raw != '':
            logger.debug("Coercion fallback: %r -> 0", raw)
        return 0
    return n


def count_fallbacks(values):
    """Count non-empty cells that to_number() would flatten to 0."""
    return sum(
        1 for v in values
        if v is not None and v != '' and _number_or_none(v) is None
    )


def to_display(raw):
    """Render a cell as a label string."""
    if raw is None:
        return ''
    if isinstance(raw, bool):
        return 'true' if raw else 'false'
    d = as_date(raw)
    if d is not None:
        return format_date(d)
    if isinstance(raw, float):
        if math.isnan(raw):
            return 'NaN'
        if math.isinf(raw):
            return 'Infinity' if raw > 0 else '-Infinity'
        if raw.is_integer():
            return str(int(raw))
        return str(raw)
    if isinstance(raw, (dict, list, tuple)):
        return json.dumps(raw, ensure_ascii=False, default=str)
    return str(raw)
