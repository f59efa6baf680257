"""
Export modules: chart payload as JSON, chart series as a CSV table.
"""

import csv
import io
import json
from datetime import date, datetime, time
from decimal import Decimal


def _json_default(obj):
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return float(obj)
    return str(obj)


def to_json(data, indent=None):
    """Serialize pipeline output; spreadsheet dates become ISO strings."""
    return json.dumps(data, ensure_ascii=False, indent=indent, default=_json_default)


def export_json(payload, output_path):
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(to_json(payload, indent=2))


def _csv_rows(payload):
    data = payload['data']
    labels = data['labels']
    datasets = data['datasets']
    x_field = (payload.get('xAxis') or {}).get('field') or 'Label'
    header = [x_field] + [ds['label'] for ds in datasets]
    rows = [header]
    for i, label in enumerate(labels):
        rows.append([label] + [ds['data'][i] for ds in datasets])
    return rows


def render_csv(payload):
    """CSV text: one column for the labels, one per dataset."""
    buf = io.StringIO()
    w = csv.writer(buf)
    w.writerows(_csv_rows(payload))
    return buf.getvalue()


def export_csv(payload, output_path):
    """Write the chart series to a CSV that opens cleanly in Excel."""
    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        f.write(render_csv(payload))
