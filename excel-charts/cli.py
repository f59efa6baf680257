#!/usr/bin/env python3
"""
Excel Charts CLI: inspect a spreadsheet, build a chart payload, or launch the server.

Usage:
    python cli.py sales.xlsx                                  # Column report + suggested axes
    python cli.py sales.xlsx --x Region --y Sales --json chart.json
    python cli.py sales.xlsx --y Sales --y Profit --type line --csv series.csv
    python cli.py points.csv --dimension 3d --type scatter --x A --y B --z C
    python cli.py sales.xlsx --serve                          # Launch API with the file loaded
"""

import argparse
import logging
import os
import sys

from column_types import analyze_columns, summarize_columns, suggest_axes
from errors import ChartPipelineError
from export import export_csv, export_json
from formatting import to_display
from insights import generate_insights
from loader import load_file
from normalizer import normalize
from payload import (
    CHART_TYPES_2D, CHART_TYPES_3D, build_chart_payload, is_supported_chart_type,
    numeric_warnings,
)
from validation import validate


def build_parser():
    ap = argparse.ArgumentParser(
        description='Excel Charts: turn spreadsheet uploads into chart-ready payloads'
    )
    ap.add_argument('file', nargs='?', help='Path to .xlsx or .csv spreadsheet')
    ap.add_argument('--sheet', '-s', default=None, help='Sheet name (default: first sheet)')
    ap.add_argument('--x', default=None, help='X-axis column (default: suggested)')
    ap.add_argument('--y', action='append', default=None,
                    help='Y-axis column; repeat for several series (default: suggested)')
    ap.add_argument('--z', default=None, help='Z-axis column for 3D charts')
    ap.add_argument('--type', '-t', dest='chart_type', default='bar',
                    help=f"Chart type (2D: {', '.join(CHART_TYPES_2D)}; "
                         f"3D: {', '.join(CHART_TYPES_3D)})")
    ap.add_argument('--dimension', '-d', choices=['2d', '3d'], default='2d')
    ap.add_argument('--title', default=None, help='Chart title (default: file name)')
    ap.add_argument('--json', '-j', default=None, metavar='OUTPUT.json',
                    help='Write the chart payload as JSON')
    ap.add_argument('--csv', default=None, metavar='OUTPUT.csv',
                    help='Write the chart series as CSV')
    ap.add_argument('--insights', action='store_true', help='Print chart insights')
    ap.add_argument('--serve', action='store_true', help='Launch the API server with the file loaded')
    ap.add_argument('--port', '-p', type=int, default=int(os.environ.get('PORT', 8080)),
                    help='Server port (default: 8080)')
    ap.add_argument('--host', default=os.environ.get('HOST', '127.0.0.1'),
                    help='Server host (default: 127.0.0.1)')
    ap.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    return ap


def _print_report(payload, result, summaries, suggested):
    print(f"\n  File:     {payload.get('filename', '')}")
    sheets = [s.get('name') for s in payload.get('sheets', [])]
    if sheets:
        print(f"  Sheets:   {', '.join(sheets)}")
    print(f"  Rows:     {len(result['rows'])}")
    print(f"  Columns:  {len(result['columns'])}  (found via {result['strategy']})")

    print("\n  Column types:")
    for s in summaries:
        sample = to_display(s['sample'])
        print(f"    {s['name']!r:30s} → {s['type']:8s} e.g. {sample}")

    print(f"\n  Suggested axes: X = {suggested['x']!r}, Y = {suggested['y']}")


def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if not args.file:
        ap.print_help()
        return 0

    filepath = args.file
    if not os.path.exists(filepath):
        print(f"Error: File not found: {filepath}", file=sys.stderr)
        return 1

    print(f"Reading: {filepath}")
    try:
        payload = load_file(filepath, args.sheet)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    if args.serve:
        from server import run_server
        print(f"\n  Starting API at http://{args.host}:{args.port}")
        print("  Press Ctrl+C to stop\n")
        run_server([payload], host=args.host, port=args.port)
        return 0

    result = normalize(payload, sheet_name=args.sheet)
    if not result['success']:
        print(f"Error: {result['error']}", file=sys.stderr)
        return 1

    table = {'columns': result['columns'], 'rows': result['rows']}
    column_types = analyze_columns(table)
    summaries = summarize_columns(table, column_types)
    suggested = suggest_axes(table, column_types)
    _print_report(payload, result, summaries, suggested)

    selection = {
        'x': args.x or suggested['x'],
        'y': args.y or suggested['y'],
        'z': args.z,
    }

    if not is_supported_chart_type(args.chart_type, args.dimension):
        print(f"Error: Unsupported {args.dimension} chart type: {args.chart_type}",
              file=sys.stderr)
        return 1

    check = validate(selection, table, args.chart_type, args.dimension, column_types)
    if not check['valid']:
        print("\n  Selection rejected:", file=sys.stderr)
        for err in check['errors']:
            print(f"    - {err['message']}", file=sys.stderr)
            for col in err['columns']:
                print(f"        {col}", file=sys.stderr)
        return 2

    sheet_name = args.sheet or (payload['sheets'][0]['name'] if payload.get('sheets') else 'Sheet1')
    title = args.title or os.path.splitext(os.path.basename(filepath))[0]
    try:
        chart = build_chart_payload(
            title=title,
            file_id=os.path.basename(filepath),
            chart_type=args.chart_type,
            chart_dimension=args.dimension,
            selection=selection,
            table=table,
            sheet_name=sheet_name,
            column_types=column_types,
        )
    except ChartPipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\n  Chart:    {chart['type']} \"{chart['title']}\"")
    print(f"  Series:   {', '.join(ds['label'] for ds in chart['data']['datasets'])}")
    print(f"  Points:   {len(chart['data']['labels'])}")
    warnings = numeric_warnings(table, selection)
    if warnings:
        print("\n  Warning:")
        for w in warnings:
            print(f"    - {w}")

    if args.json:
        export_json(chart, args.json)
        print(f"\n  JSON exported to: {args.json}")
    if args.csv:
        export_csv(chart, args.csv)
        print(f"\n  CSV exported to: {args.csv}")
    if args.insights:
        print()
        print(generate_insights(chart['data']['source'], selection, chart['type']))
    return 0


if __name__ == '__main__':
    sys.exit(main())
