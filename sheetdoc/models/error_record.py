from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

This module defines the ErrorRecord dataclass used for structured error logging
of failed pipeline operations. It supports row=-1 as a sentinel value for
failures that are not tied to a specific sheet row.

The serialized form adheres to the JSON schema shipped in
sheetdoc/config/schemas/error_log_schema.json.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        operation: Pipeline operation name (export, contract, format-sheet, ...)
        document_id: Target document identifier ("" when not applicable)
        sheet: Sheet name involved, or "<OPERATION>" for operation-level errors
        row: Row number (sheet numbering). Use -1 when the row is unknown
        error_kind: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable failure message
    """
    timestamp: str  # ISO8601 UTC
    operation: str
    document_id: str
    sheet: str
    row: int
    error_kind: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(
        operation: str,
        document_id: str,
        sheet: str,
        row: int,
        error_kind: str,
        message: str,
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            operation=operation,
            document_id=document_id,
            sheet=sheet,
            row=row,
            error_kind=error_kind,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON Lines entry (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
