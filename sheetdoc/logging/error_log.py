from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..errors import PipelineError
from ..models.error_record import ErrorRecord

"""Error log buffering.

One buffer per operation run. The buffer carries the operation name and the
target document id, so callers only report the failure itself:

    log = ErrorLogBuffer(operation="export", document_id="doc-001")
    log.record_failure(error)            # operation-level, row -1
    log.record_failure(error, sheet="Persons", row=4)
    log.flush()

- JSON Lines with a fixed schema (no extra keys)
- One ``logs/errors-YYYYMMDD-HHMMSS.log`` (UTC) per buffer, created on the
  first flush that has something to write
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "OPERATION_SHEET",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

# sheet value of failures not tied to one sheet
OPERATION_SHEET = "<OPERATION>"


class ErrorLogBuffer:
    """Buffered error records of one operation run. Not thread safe."""

    def __init__(
        self,
        logs_dir: Path | None = None,
        *,
        operation: str = "",
        document_id: str = "",
    ) -> None:
        self.operation = operation
        self.document_id = document_id
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def record_failure(
        self, error: PipelineError, *, sheet: str = OPERATION_SHEET, row: int = -1
    ) -> ErrorRecord:
        """Buffer ``error`` under this run's operation and document id."""
        record = ErrorRecord.create(
            operation=self.operation,
            document_id=self.document_id,
            sheet=sheet,
            row=row,
            error_kind=error.kind,
            message=error.message,
        )
        self._records.append(record)
        return record

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records; None when there was nothing to write."""
        if not self._records:
            return None
        path = self.file_path
        lines = "".join(r.to_json_line() + "\n" for r in self._records)
        with path.open("a", encoding="utf-8") as f:
            f.write(lines)
        self._records.clear()
        return path
