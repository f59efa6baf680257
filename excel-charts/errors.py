"""
Error types raised (or returned) by the chart pipeline.

All of them subclass ValueError so the CLI and the HTTP service can treat
them the same way they treat any other bad-input condition.
"""


class ChartPipelineError(ValueError):
    code = 'chart_pipeline_error'

    def to_dict(self):
        return {'error': str(self), 'code': self.code}


class NoTabularDataFound(ChartPipelineError):
    """No recognizer could locate a table inside the uploaded payload."""
    code = 'no_tabular_data'

    def __init__(self, message=None, shape='unknown'):
        super().__init__(
            message or
            "No tabular data found in file. Re-upload the file or pick a different sheet."
        )
        self.shape = shape


class MissingRequiredField(ChartPipelineError):
    code = 'missing_required_field'

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(
            f"Missing required parameters for chart creation: {', '.join(self.fields)}"
        )

    def to_dict(self):
        d = super().to_dict()
        d['fields'] = self.fields
        return d


class InvalidAxisSelection(ChartPipelineError):
    code = 'invalid_axis_selection'

    def __init__(self, errors):
        self.errors = list(errors)
        message = '; '.join(e['message'] for e in self.errors) or 'Invalid axis selection'
        super().__init__(message)

    @property
    def missing_columns(self):
        return [c for e in self.errors if e['code'] == 'missing_columns' for c in e['columns']]

    def to_dict(self):
        d = super().to_dict()
        d['errors'] = self.errors
        d['missingColumns'] = self.missing_columns
        return d


class UnsupportedFileType(ChartPipelineError):
    code = 'unsupported_file_type'


class SheetNotFound(ChartPipelineError):
    code = 'sheet_not_found'


class EmptyWorkbook(ChartPipelineError):
    code = 'empty_workbook'


class UnsupportedChartType(ChartPipelineError):
    code = 'unsupported_chart_type'
