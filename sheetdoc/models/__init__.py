"""Domain models for the sheet-to-document data-assembly pipeline."""

from .error_record import ErrorRecord
from .fill_mode import DirectFill, FillMode, LinkedFill, MaskResult
from .operation_result import ContractDraft, ExportOutcome, FormattedSheet, OperationResult
from .range_spec import AllRows, BoundedRange, ExactRow, RangeSpec, RowSlice
from .record import FlatRecord, ReplacementInstruction, UndeclaredFieldError
from .table import SheetMetadata, SheetSelector, Table

__all__ = [
    # Table data
    "Table",
    "SheetSelector",
    "SheetMetadata",
    # Ranges
    "AllRows",
    "BoundedRange",
    "ExactRow",
    "RangeSpec",
    "RowSlice",
    # Records
    "FlatRecord",
    "ReplacementInstruction",
    "UndeclaredFieldError",
    # Fill strategy
    "DirectFill",
    "LinkedFill",
    "FillMode",
    "MaskResult",
    # Results
    "OperationResult",
    "ExportOutcome",
    "ContractDraft",
    "FormattedSheet",
    "ErrorRecord",
]
