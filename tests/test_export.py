"""Export tests."""

import csv
import json
from datetime import datetime
from decimal import Decimal

from export import export_csv, export_json, render_csv, to_json
from payload import build_chart_payload


def chart(table):
    return build_chart_payload(
        title="Sales", file_id="f1", chart_type="bar", chart_dimension="2d",
        selection={"x": "Region", "y": ["Sales"]}, table=table,
    )


def test_to_json_handles_spreadsheet_values():
    text = to_json({"when": datetime(2024, 1, 15, 9, 30), "amount": Decimal("1.5")})

    assert json.loads(text) == {"when": "2024-01-15T09:30:00", "amount": 1.5}


def test_render_csv(sales_table):
    assert render_csv(chart(sales_table)).splitlines() == [
        "Region,Sales",
        "East,100",
        "West,200",
    ]


def test_export_json(tmp_path, sales_table):
    path = tmp_path / "chart.json"

    export_json(chart(sales_table), str(path))

    loaded = json.loads(path.read_text(encoding="utf-8"))
    assert loaded["data"]["labels"] == ["East", "West"]
    assert loaded["config"] == loaded["configuration"]


def test_export_csv_opens_with_bom(tmp_path, sales_table):
    path = tmp_path / "chart.csv"

    export_csv(chart(sales_table), str(path))

    assert path.read_bytes().startswith(b"\xef\xbb\xbf")
    with open(path, newline="", encoding="utf-8-sig") as f:
        rows = list(csv.reader(f))
    assert rows == [["Region", "Sales"], ["East", "100"], ["West", "200"]]
