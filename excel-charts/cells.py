"""
Cell-level predicates shared by the type analyzer and the value formatter.
"""

import math
import numbers
import re
from datetime import date, datetime

from dateutil import parser as dateparser

# Plain decimal literal, the whole string: "42", "-3.5", ".5", "1e3"
NUMERIC_LITERAL = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$')

# Leading numeric prefix: "12abc" -> "12", "3.14 kg" -> "3.14"
LEADING_NUMBER = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)')

HAS_DIGIT = re.compile(r'\d')

# Two unrelated defaults: a part that differs between the parses came from
# the default, not the string
FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def is_empty(val):
    return val is None or val == ''


def is_number(val):
    """True for real numbers. Booleans are not numbers here."""
    return isinstance(val, numbers.Number) and not isinstance(val, (bool, complex))


def is_numeric_string(val):
    return isinstance(val, str) and NUMERIC_LITERAL.match(val.strip()) is not None


def parse_leading_number(text):
    """
    Parse the numeric prefix of a string.

    Returns an int when the prefix is an integer literal, a float otherwise,
    or None when the string has no usable prefix or overflows.
    """
    m = LEADING_NUMBER.match(text)
    if not m:
        return None
    literal = m.group(1)
    if not any(ch in literal for ch in '.eE'):
        try:
            return int(literal)
        except ValueError:
            # past the interpreter's int digit limit
            pass
    n = float(literal)
    if not math.isfinite(n):
        return None
    return n


def parse_date_string(text):
    """
    Parse a date-looking string with dateutil.

    Pure numeric strings are numbers, not dates, and a string without any
    digit ("Mon", "March") is a label. The string must name a year, month
    and day itself: dateutil fills missing parts from a default, so "12:30",
    "1st" and "Jan 5" are rejected rather than dated relative to today.
    Returns a datetime or None.
    """
    s = text.strip()
    if not s or NUMERIC_LITERAL.match(s) or not HAS_DIGIT.search(s):
        return None
    try:
        first, second = (dateparser.parse(s, default=d) for d in FILL_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first


def as_date(val):
    """Return val as a date/datetime when it is one or parses as one, else None."""
    if isinstance(val, date):
        return val
    if isinstance(val, str):
        return parse_date_string(val)
    return None
