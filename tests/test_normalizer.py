"""Structural normalizer tests."""

import copy
import json

import pytest

from errors import NoTabularDataFound
from normalizer import classify_payload, header_names, normalize, normalize_table, shape_rows


def test_array_of_arrays_maps_header_row():
    result = normalize([["A", "B"], [1, 2], [3, 4]])

    assert result["success"] is True
    assert result["columns"] == ["A", "B"]
    assert result["rows"] == [{"A": 1, "B": 2}, {"A": 3, "B": 4}]
    assert result["strategy"] == "array"
    assert result["shape"] == "array_of_arrays"


def test_data_wrapper_of_objects(sales_payload):
    result = normalize(sales_payload)

    assert result["success"] is True
    assert result["columns"] == ["Region", "Sales"]
    assert [r["Region"] for r in result["rows"]] == ["East", "West"]
    assert result["strategy"] == "data"


def test_empty_object_is_a_result_not_an_exception():
    result = normalize({})

    assert result["success"] is False
    assert isinstance(result["error"], NoTabularDataFound)
    assert result["error"].code == "no_tabular_data"


@pytest.mark.parametrize("raw", [None, "", 42, [], [1, 2, 3], {"data": []}, {"a": {"b": "c"}}])
def test_unrecognizable_payloads_fail_cleanly(raw):
    result = normalize(raw)

    assert result["success"] is False
    assert isinstance(result["error"], NoTabularDataFound)


def test_normalize_table_raises_typed_error():
    with pytest.raises(NoTabularDataFound):
        normalize_table({})


def test_sheets_recognizer_wins_over_fallback_scan():
    raw = {
        "other": [{"Wrong": 1}],
        "sheets": [{"name": "Sheet1", "data": [["Right"], [1]]}],
    }

    result = normalize(raw)

    assert result["strategy"] == "sheets"
    assert result["columns"] == ["Right"]


def test_recognizer_order_sheets_before_data():
    raw = {
        "data": [{"FromData": 1}],
        "sheets": [{"name": "S", "data": [{"FromSheets": 1}]}],
    }

    assert normalize(raw)["columns"] == ["FromSheets"]


def test_named_sheet_is_selected():
    raw = {
        "sheets": [
            {"name": "First", "data": [["a"], [1]]},
            {"name": "Second", "data": [["b"], [2]]},
        ]
    }

    result = normalize(raw, sheet_name="Second")

    assert result["columns"] == ["b"]
    assert result["rows"] == [{"b": 2}]


def test_unknown_sheet_name_fails():
    raw = {"sheets": [{"name": "First", "data": [["a"], [1]]}]}

    result = normalize(raw, sheet_name="Missing")

    assert result["success"] is False
    assert "Missing" in str(result["error"])


def test_singular_sheet_property():
    result = normalize({"sheet": {"data": [["Q", "V"], ["q1", 5]]}})

    assert result["strategy"] == "sheet"
    assert result["rows"] == [{"Q": "q1", "V": 5}]


def test_content_json_string_with_data():
    raw = {"content": json.dumps({"data": [["x", "y"], [1, 2]]})}

    result = normalize(raw)

    assert result["strategy"] == "content"
    assert result["rows"] == [{"x": 1, "y": 2}]


def test_content_object_with_sheets():
    raw = {"content": {"sheets": [{"name": "S", "data": [{"k": "v"}]}]}}

    result = normalize(raw)

    assert result["strategy"] == "content"
    assert result["columns"] == ["k"]


def test_unparsable_content_string_falls_through():
    raw = {"content": "{not json", "rows": [["h"], ["v"]]}

    result = normalize(raw)

    assert result["success"] is True
    assert result["strategy"] == "fallback"
    assert result["rows"] == [{"h": "v"}]


@pytest.mark.parametrize("excel", [
    [["c"], [1]],
    {"data": [["c"], [1]]},
    {"sheets": [{"name": "S", "data": [["c"], [1]]}]},
])
def test_excel_data_sub_cases(excel):
    result = normalize({"excelData": excel})

    assert result["strategy"] == "excel_data"
    assert result["rows"] == [{"c": 1}]


def test_fallback_scans_top_level_arrays_in_order():
    raw = {"meta": {"author": "x"}, "values": [7, 8], "records": [{"n": 1}], "later": [{"m": 2}]}

    result = normalize(raw)

    assert result["strategy"] == "fallback"
    assert result["columns"] == ["n"]


def test_fallback_recurses_into_nested_objects():
    raw = {"file": {"meta": {"payload": {"rows": [["a", "b"], [1, 2]]}}}}

    result = normalize(raw)

    assert result["success"] is True
    assert result["rows"] == [{"a": 1, "b": 2}]


def test_nested_sheets_wrapper_is_recognized_inside_fallback():
    raw = {"file": {"sheets": [{"name": "S", "data": [["a"], [1]]}]}}

    result = normalize(raw)

    assert result["columns"] == ["a"]


def test_blank_and_duplicate_headers_get_placeholders():
    assert header_names(["Name", None, " ", "Name", 2020.0]) == [
        "Name", "Column 2", "Column 3", "Name_2", "2020",
    ]


def test_header_cells_are_trimmed_and_stringified():
    result = normalize([[" Region ", 0, True], ["East", 1, 2]])

    assert result["columns"] == ["Region", "0", "true"]


def test_short_rows_are_padded_and_long_rows_truncated():
    columns, rows = shape_rows([["a", "b"], [1], [1, 2, 3], None])

    assert columns == ["a", "b"]
    assert rows == [{"a": 1, "b": None}, {"a": 1, "b": 2}, {"a": None, "b": None}]


def test_header_only_table_has_no_rows():
    result = normalize([["a", "b"]])

    assert result["success"] is True
    assert result["rows"] == []


def test_object_rows_gain_missing_keys_without_mutating_source():
    raw = {"data": [{"a": 1, "b": 2}, {"a": 3}]}
    before = copy.deepcopy(raw)

    result = normalize(raw)

    assert result["rows"][1] == {"a": 3, "b": None}
    assert raw == before


def test_normalize_is_idempotent():
    raw = {"sheets": [{"name": "S", "data": [["a", "b"], [1, "x"], [2, "y"]]}]}

    assert normalize(raw) == normalize(raw)


def test_row_order_is_preserved():
    data = [["i"]] + [[n] for n in range(50)]

    result = normalize(data)

    assert [r["i"] for r in result["rows"]] == list(range(50))


def test_classify_payload_tags():
    assert classify_payload([[1]]) == "array_of_arrays"
    assert classify_payload([{"a": 1}]) == "array_of_objects"
    assert classify_payload({"sheets": []}) == "sheets"
    assert classify_payload({"excelData": {}}) == "excel_data"
    assert classify_payload({"whatever": 1}) == "unknown"
