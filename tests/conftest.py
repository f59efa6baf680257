"""Test setup: put the module directory on sys.path and share fixtures."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "excel-charts"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def sales_payload():
    return {
        "data": [
            {"Region": "East", "Sales": "100"},
            {"Region": "West", "Sales": "200"},
        ]
    }


@pytest.fixture
def sales_table():
    return {
        "columns": ["Region", "Sales"],
        "rows": [
            {"Region": "East", "Sales": "100"},
            {"Region": "West", "Sales": "200"},
        ],
    }


@pytest.fixture
def xyz_table():
    return {
        "columns": ["Label", "A", "B", "C"],
        "rows": [
            {"Label": "alpha", "A": 1, "B": 2.5, "C": 3},
            {"Label": "beta", "A": 4, "B": 5.5, "C": 6},
            {"Label": "gamma", "A": 7, "B": 8.5, "C": "n/a"},
        ],
    }
