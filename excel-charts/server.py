"""
Flask server: file uploads, table inspection, chart previews and chart creation.

Everything is held in memory on the app object:
  app.files   file id -> {'id', 'filename', 'payload'}
  app.tables  (file id, sheet) -> normalized table + column types
  app.charts  chart id -> chart payload
"""

import io
import logging
import os
import uuid

from flask import Flask, Response, request, send_file

from column_types import analyze_columns, summarize_columns, suggest_axes
from errors import ChartPipelineError, UnsupportedChartType
from export import render_csv, to_json
from insights import generate_insights
from loader import load_bytes, sheet_names
from normalizer import normalize
from payload import SOURCE_ROW_LIMIT, build_chart_payload, is_supported_chart_type, numeric_warnings
from preview import build_preview
from validation import coerce_selection, require_valid

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_MB = 50


def _json(data, status=200):
    return Response(to_json(data), status=status, mimetype='application/json')


def _error(message, status, **extra):
    body = {'error': message}
    body.update(extra)
    return _json(body, status)


def _body_problem(body):
    """Why a JSON request body cannot be used, or None when it can."""
    if not isinstance(body, dict):
        return 'Request body must be a JSON object'
    for key in ('fileId', 'sheetName', 'chartType', 'chartDimension', 'title'):
        val = body.get(key)
        if val is not None and not isinstance(val, str):
            return f"'{key}' must be a string"
    return None


def create_app(initial_files=None):
    app = Flask(__name__)
    max_mb = int(os.environ.get('MAX_UPLOAD_MB', DEFAULT_MAX_UPLOAD_MB))
    app.config['MAX_CONTENT_LENGTH'] = max_mb * 1024 * 1024

    app.files = {}
    app.tables = {}
    app.charts = {}

    def store_file(payload, filename):
        file_id = uuid.uuid4().hex
        app.files[file_id] = {'id': file_id, 'filename': filename, 'payload': payload}
        logger.info("Stored file %s (%s)", file_id, filename)
        return app.files[file_id]

    def get_table(file_id, sheet=None):
        """Normalize a stored file once per sheet; later calls reuse the result."""
        key = (file_id, sheet or '')
        if key not in app.tables:
            result = normalize(app.files[file_id]['payload'], sheet_name=sheet)
            if not result['success']:
                raise result['error']
            table = {'columns': result['columns'], 'rows': result['rows']}
            app.tables[key] = {
                'table': table,
                'column_types': analyze_columns(table),
                'strategy': result['strategy'],
            }
        return app.tables[key]

    def file_summary(entry):
        return {
            'id': entry['id'],
            'filename': entry['filename'],
            'sheets': sheet_names(entry['payload']),
        }

    for payload in initial_files or []:
        store_file(payload, payload.get('filename', '') if isinstance(payload, dict) else '')

    @app.errorhandler(ChartPipelineError)
    def pipeline_error(e):
        body = e.to_dict()
        return _json(body, 422)

    @app.route('/api/files', methods=['GET'])
    def list_files():
        return _json([file_summary(entry) for entry in app.files.values()])

    @app.route('/api/files', methods=['POST'])
    def upload():
        if request.is_json:
            payload = request.get_json(silent=True)
            if payload is None:
                return _error('Request body is not valid JSON', 400)
            filename = request.args.get('filename', '')
            entry = store_file(payload, filename)
            return _json(file_summary(entry), 201)

        if 'file' not in request.files:
            return _error('No file provided', 400)
        f = request.files['file']
        if not f.filename:
            return _error('No file selected', 400)
        sheet = request.form.get('sheet') or None
        try:
            payload = load_bytes(f.read(), f.filename, sheet_name=sheet)
        except ChartPipelineError:
            raise
        except Exception as e:
            logger.exception("Failed to read upload %s", f.filename)
            return _error(f'Failed to parse file: {e}', 500)
        entry = store_file(payload, f.filename)
        return _json(file_summary(entry), 201)

    @app.route('/api/files/<file_id>', methods=['DELETE'])
    def delete_file(file_id):
        if file_id not in app.files:
            return _error('File not found', 404)
        del app.files[file_id]
        for key in [k for k in app.tables if k[0] == file_id]:
            del app.tables[key]
        return _json({'ok': True})

    @app.route('/api/files/<file_id>/table', methods=['GET'])
    def get_file_table(file_id):
        if file_id not in app.files:
            return _error('File not found', 404)
        sheet = request.args.get('sheet') or None
        cached = get_table(file_id, sheet)
        table = cached['table']
        types = cached['column_types']
        return _json({
            'columns': table['columns'],
            'columnTypes': types,
            'columnSummaries': summarize_columns(table, types),
            'suggestedAxes': suggest_axes(table, types),
            'rowCount': len(table['rows']),
            'rows': table['rows'][:SOURCE_ROW_LIMIT],
            'strategy': cached['strategy'],
        })

    @app.route('/api/files/<file_id>/preview', methods=['POST'])
    def preview(file_id):
        if file_id not in app.files:
            return _error('File not found', 404)
        body = request.get_json(silent=True)
        if body is None:
            body = {}
        problem = _body_problem(body)
        if problem:
            return _error(problem, 400)
        cached = get_table(file_id, body.get('sheetName'))
        result = build_preview(
            cached['table'],
            coerce_selection(body.get('selection')),
            body.get('chartType', 'bar'),
            body.get('chartDimension', '2d'),
            cached['column_types'],
        )
        return _json(result)

    @app.route('/api/charts', methods=['POST'])
    def create_chart():
        body = request.get_json(silent=True)
        if not body:
            return _error('No chart data provided', 400)
        problem = _body_problem(body)
        if problem:
            return _error(problem, 400)
        file_id = body.get('fileId')
        if file_id not in app.files:
            return _error('File not found', 404)

        chart_type = body.get('chartType')
        chart_dimension = body.get('chartDimension') or '2d'
        if chart_type and not is_supported_chart_type(chart_type, chart_dimension):
            raise UnsupportedChartType(
                f"Unsupported {chart_dimension} chart type: {chart_type}"
            )

        sheet = body.get('sheetName') or None
        cached = get_table(file_id, sheet)
        table = cached['table']
        types = cached['column_types']
        selection = coerce_selection(body.get('selection') or body.get('selectedColumns'))
        require_valid(selection, table, chart_type, chart_dimension, types)

        names = sheet_names(app.files[file_id]['payload'])
        chart = build_chart_payload(
            title=body.get('title'),
            file_id=file_id,
            chart_type=chart_type,
            chart_dimension=chart_dimension,
            selection=selection,
            table=table,
            sheet_name=sheet or (names[0] if names else 'Sheet1'),
            column_types=types,
        )
        chart_id = uuid.uuid4().hex
        app.charts[chart_id] = chart
        logger.info("Created chart %s (%s) from file %s", chart_id, chart['type'], file_id)
        return _json({
            'id': chart_id,
            'chart': chart,
            'warnings': numeric_warnings(table, selection),
        }, 201)

    @app.route('/api/charts/<chart_id>', methods=['GET'])
    def get_chart(chart_id):
        chart = app.charts.get(chart_id)
        if chart is None:
            return _error('Chart not found', 404)
        return _json({'id': chart_id, 'chart': chart})

    @app.route('/api/charts/<chart_id>/insights', methods=['POST'])
    def chart_insights(chart_id):
        chart = app.charts.get(chart_id)
        if chart is None:
            return _error('Chart not found', 404)
        text = generate_insights(
            chart['data']['source'], chart['data']['selectedColumns'], chart['type'],
        )
        return _json({'insights': text})

    @app.route('/api/charts/<chart_id>/export/csv', methods=['GET'])
    def export_chart_csv(chart_id):
        chart = app.charts.get(chart_id)
        if chart is None:
            return _error('Chart not found', 404)
        buf = io.BytesIO(render_csv(chart).encode('utf-8-sig'))
        filename = '_'.join(chart['title'].split()) or 'chart'
        return send_file(
            buf,
            mimetype='text/csv',
            as_attachment=True,
            download_name=f'{filename}.csv',
        )

    return app


def run_server(files=None, host='127.0.0.1', port=8080):
    app = create_app(initial_files=files)
    app.run(host=host, port=port, debug=False)
