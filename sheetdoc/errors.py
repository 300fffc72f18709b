from __future__ import annotations

from http import HTTPStatus

"""Error kinds raised by the data-assembly pipeline.

Every validation failure aborts the whole operation. Each error carries a
machine-readable ``kind`` (used in the JSON error log as UPPER_SNAKE) and an
HTTP-like ``status`` that the orchestration layer reports back to its caller.
"""

__all__ = [
    "PipelineError",
    "InvalidRange",
    "InvalidRequest",
    "InvalidFieldValue",
    "InsufficientRows",
    "SheetNotFound",
    "EmptyData",
    "ColumnNotFound",
    "DuplicateColumn",
    "RowPointerInvalid",
    "MissingRequiredField",
    "ExternalCallError",
]


class PipelineError(Exception):
    """Base class for structured pipeline failures."""

    kind = "PIPELINE_ERROR"
    status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class InvalidRange(PipelineError):
    kind = "INVALID_RANGE"
    status = HTTPStatus.BAD_REQUEST


class InvalidRequest(PipelineError):
    kind = "INVALID_REQUEST"
    status = HTTPStatus.BAD_REQUEST


class InvalidFieldValue(PipelineError):
    kind = "INVALID_FIELD_VALUE"
    status = HTTPStatus.BAD_REQUEST


class InsufficientRows(PipelineError):
    kind = "INSUFFICIENT_ROWS"
    status = HTTPStatus.NOT_FOUND


class SheetNotFound(PipelineError):
    kind = "SHEET_NOT_FOUND"
    status = HTTPStatus.NOT_FOUND


class EmptyData(PipelineError):
    """Raised when a sheet holds nothing but its header row."""

    kind = "EMPTY_DATA"
    status = HTTPStatus.NOT_FOUND


class ColumnNotFound(PipelineError):
    kind = "COLUMN_NOT_FOUND"
    status = HTTPStatus.NOT_FOUND

    def __init__(self, name: str, sheet_id: str) -> None:
        super().__init__(f"Not found column name: {name} at sheetId: {sheet_id}")
        self.name = name
        self.sheet_id = sheet_id


class DuplicateColumn(PipelineError):
    kind = "DUPLICATE_COLUMN"
    status = HTTPStatus.NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate columns name value found: {name}")
        self.name = name


class RowPointerInvalid(PipelineError):
    kind = "ROW_POINTER_INVALID"
    status = HTTPStatus.NOT_FOUND


class MissingRequiredField(PipelineError):
    kind = "MISSING_REQUIRED_FIELD"
    status = HTTPStatus.NOT_FOUND

    def __init__(self, field: str) -> None:
        super().__init__(f"Not found {field}")
        self.field = field


class ExternalCallError(PipelineError):
    """A table/document store call failed; never retried."""

    kind = "EXTERNAL_CALL_ERROR"
    status = HTTPStatus.INTERNAL_SERVER_ERROR
