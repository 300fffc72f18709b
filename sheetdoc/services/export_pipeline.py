from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..errors import InsufficientRows, InvalidRequest, MissingRequiredField, PipelineError, SheetNotFound
from ..logging.error_log import ErrorLogBuffer
from ..models.fill_mode import DEFAULT_ROW_POINTER_FIELD, DirectFill, FillMode, LinkedFill
from ..models.operation_result import ContractDraft, ExportOutcome, FormattedSheet, OperationResult
from ..models.record import FlatRecord
from ..models.table import SheetSelector
from ..stores.base import DocumentStore, TableStore, call_store
from ..stores.json_store import RecordArchive
from .a1_range import a1_range
from .installment import InstallmentFields, apply_installment_schedule
from .progress import ProgressTracker
from .range_selector import build_range_spec, parse_row_bound, select_rows
from .record_merger import RecordMerger
from .row_masker import mask_column
from .template_request import PlaceholderStyle, build_replacement_instructions

"""Operation orchestration.

Each operation validates, assembles and serializes before it touches the
document store. Validation and building are all-or-nothing: a failure there
means no batch is applied. Applying is not: when the document store fails
partway, the batches applied before the failure stay applied.
``run_operation`` turns a raised PipelineError into an OperationResult and
records it in the error log.

Operations:
- export_documents: bulk placeholder replacement, one batch per record
- draft_contract / render_contract: single linked record, archived between steps
- export_formatted_sheet: masked copy of a sheet range
- check_sheet: existence and row-count check
"""

logger = logging.getLogger(__name__)

__all__ = [
    "CONTRACT_TYPES",
    "INSTALLMENT_CONTRACT_TYPE",
    "NameFields",
    "ExportRequest",
    "ContractRequest",
    "run_operation",
    "export_documents",
    "draft_contract",
    "contract_file_name",
    "render_contract",
    "export_formatted_sheet",
    "check_sheet",
]

CONTRACT_TYPES = ("C2", "C3", "C4")
INSTALLMENT_CONTRACT_TYPE = "C2"


@dataclass(frozen=True)
class NameFields:
    """Record fields holding the party names used in contract file names."""
    business: str = "ชื่อสกุล ผปก"
    investor: str = "ชื่อสกุล นลท"


@dataclass(frozen=True)
class ExportRequest:
    document_id: str
    selectors: tuple[SheetSelector, ...]
    from_row: object = 0
    to_row: object = 0
    exact: bool = False
    mode: FillMode = field(default_factory=DirectFill)


@dataclass(frozen=True)
class ContractRequest:
    selectors: tuple[SheetSelector, ...]
    row: object
    contract_type: str


def run_operation(
    operation: str,
    fn: Callable[[], Any],
    *,
    error_log: ErrorLogBuffer | None = None,
) -> OperationResult:
    """Run ``fn`` and wrap its outcome.

    Only PipelineError is converted; anything else is a bug and propagates.
    The failure is buffered in ``error_log``, which carries the document id.
    """
    try:
        payload = fn()
    except PipelineError as e:
        logger.error(f"{operation}: {e.kind} {e.message}")
        if error_log is not None:
            error_log.record_failure(e)
        return OperationResult(status=int(e.status), message=e.message)
    return OperationResult.success(payload)


def export_documents(
    request: ExportRequest,
    table_store: TableStore,
    document_store: DocumentStore,
    *,
    style: PlaceholderStyle = PlaceholderStyle.DOLLAR,
    fetch_workers: int = 1,
    installment: InstallmentFields | None = None,
) -> ExportOutcome:
    """Merge the selected rows into records and apply one batch per record."""
    if not request.document_id:
        raise InvalidRequest("Required documentId")

    range_spec = build_range_spec(request.from_row, request.to_row, exact=request.exact)
    merger = RecordMerger(table_store, fetch_workers=fetch_workers)
    records = merger.merge(request.selectors, range_spec, request.mode)
    if installment is not None:
        for record in records:
            apply_installment_schedule(record, installment)

    batches = [build_replacement_instructions(record, style) for record in records]
    instruction_count = sum(len(b) for b in batches)
    logger.info(
        f"export: document={request.document_id} records={len(records)} instructions={instruction_count}"
    )

    with ProgressTracker(len(batches)) as progress:
        for batch in batches:
            call_store(document_store.apply_replacements, request.document_id, batch)
            progress.advance()

    return ExportOutcome(
        document_id=request.document_id,
        records=records,
        instruction_count=instruction_count,
        documents_applied=len(batches),
    )


def contract_file_name(contract_type: str, business_name: str, investor_name: str) -> str:
    """``{type}_{business}_{investor}`` with every whitespace character removed."""
    return re.sub(r"\s+", "", f"{contract_type}_{business_name}_{investor_name}")


def draft_contract(
    request: ContractRequest,
    table_store: TableStore,
    *,
    name_fields: NameFields | None = None,
    installment: InstallmentFields | None = None,
    row_pointer_field: str = DEFAULT_ROW_POINTER_FIELD,
    archive: RecordArchive | None = None,
) -> ContractDraft:
    """Assemble the single record of one contract.

    Two selectors use a linked fill through ``row_pointer_field``; a single
    selector reads the exact row directly. C2 contracts also get the
    installment schedule.
    """
    if request.contract_type not in CONTRACT_TYPES:
        raise InvalidRequest(
            f"Invalid contract type: {request.contract_type!r}, expected one of {', '.join(CONTRACT_TYPES)}"
        )
    name_fields = name_fields or NameFields()

    range_spec = build_range_spec(request.row, request.row, exact=True)
    mode: FillMode = LinkedFill(row_pointer_field) if len(request.selectors) == 2 else DirectFill()
    record = RecordMerger(table_store).merge(request.selectors, range_spec, mode)[0]

    if request.contract_type == INSTALLMENT_CONTRACT_TYPE:
        apply_installment_schedule(record, installment)

    business_name = _name_value(record, name_fields.business)
    investor_name = _name_value(record, name_fields.investor)
    file_name = contract_file_name(request.contract_type, business_name, investor_name)
    logger.info(f"contract draft: {file_name}")

    if archive is not None:
        call_store(archive.save, file_name, record)

    return ContractDraft(
        file_name=file_name,
        business_name=business_name,
        investor_name=investor_name,
        contract_type=request.contract_type,
        record=record,
    )


def _name_value(record: FlatRecord, key: str) -> str:
    value = record.get(key)
    if not value or not isinstance(value, str) or not value.strip():
        raise MissingRequiredField(key)
    return value


def render_contract(
    document_id: str,
    file_name: str,
    archive: RecordArchive,
    document_store: DocumentStore,
) -> ExportOutcome:
    """Apply an archived contract record to its document (``<<[key]>>`` placeholders)."""
    if not document_id:
        raise InvalidRequest("Required documentId")
    if not file_name:
        raise InvalidRequest("Required fileName")

    record = call_store(archive.load, file_name)
    instructions = build_replacement_instructions(record, PlaceholderStyle.ANGLE)
    call_store(document_store.apply_replacements, document_id, instructions)
    return ExportOutcome(
        document_id=document_id,
        records=[record],
        instruction_count=len(instructions),
        documents_applied=1,
    )


def export_formatted_sheet(
    selector: SheetSelector,
    from_row: object,
    to_row: object,
    table_store: TableStore,
) -> FormattedSheet:
    """Copy a row range of one sheet with its ``column_format`` column masked."""
    if not selector.column_format:
        raise InvalidRequest("Required columnFormat")

    range_spec = build_range_spec(from_row, to_row)
    sheet = RecordMerger(table_store).fetch(selector)
    row_slice = select_rows(range_spec, sheet.table.available_rows)
    working = sheet.table.slice_rows(row_slice.start, row_slice.stop)
    masked = mask_column(selector.column_format, working, selector.sheet_id)

    metadata = call_store(table_store.get_metadata, selector.sheet_id)
    return FormattedSheet(
        title=f"{metadata.title}-Format",
        table=masked.table,
        a1_range=a1_range(masked.table),
    )


def check_sheet(table_store: TableStore, sheet_id: str, sheet_name: str, length_rows: object) -> bool:
    """True when the sheet exists and holds at least ``length_rows`` rows (header included)."""
    if not sheet_id:
        raise InvalidRequest("Required spreadSheetId")
    if not sheet_name:
        raise InvalidRequest("Required sheetName")
    if length_rows in (None, "", 0, "0"):
        raise InvalidRequest("Required lengthRows")
    try:
        wanted = parse_row_bound(length_rows, "lengthRows")
    except PipelineError:
        raise InvalidRequest("lengthRows must be a number") from None

    if not call_store(table_store.exists, sheet_id, sheet_name):
        raise SheetNotFound(f"Sheet name: {sheet_name} not found")
    total_rows = call_store(table_store.get_rows, sheet_id, sheet_name).available_rows + 1
    if total_rows < wanted:
        raise InsufficientRows(f"Rows length have {total_rows}, not enough")
    return True
