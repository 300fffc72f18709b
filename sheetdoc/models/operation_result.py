from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .record import FlatRecord
from .table import Table

"""Operation result models.

Every pipeline operation answers with an OperationResult: a machine-readable
status, a human-readable message and a result payload that is ``False`` on
failure. No partial output is ever attached to a failed result.
"""

__all__ = [
    "OperationResult",
    "ExportOutcome",
    "ContractDraft",
    "FormattedSheet",
]

SUCCESS_STATUS = 200


@dataclass(frozen=True)
class OperationResult:
    status: int
    message: str
    result: Any = False

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS_STATUS

    @staticmethod
    def success(result: Any) -> OperationResult:
        return OperationResult(status=SUCCESS_STATUS, message="Success", result=result)


@dataclass(frozen=True)
class ExportOutcome:
    """Payload of a successful document export."""
    document_id: str
    records: list[FlatRecord]
    instruction_count: int
    documents_applied: int


@dataclass(frozen=True)
class ContractDraft:
    """Payload of a successful contract draft (single linked record)."""
    file_name: str
    business_name: str
    investor_name: str
    contract_type: str
    record: FlatRecord = field(repr=False)


@dataclass(frozen=True)
class FormattedSheet:
    """Payload of a formatted sheet export."""
    title: str
    table: Table
    a1_range: str
