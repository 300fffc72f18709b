from __future__ import annotations

from ..models.operation_result import ContractDraft, ExportOutcome, FormattedSheet, OperationResult

"""SUMMARY line rendering.

Format:
SUMMARY operation={op} status={status} records={n} instructions={m}
documents={k} elapsed_sec={elapsed}
"""

__all__ = [
    "render_summary_line",
    "format_seconds",
]


def format_seconds(value: float) -> str:
    """Render seconds without scientific notation or a trailing ``.0``."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(operation: str, result: OperationResult, elapsed_seconds: float) -> str:
    """Render the SUMMARY line for one finished operation.

    Examples:
        >>> render_summary_line("export", OperationResult(404, "no sheet"), 2.0)
        'SUMMARY operation=export status=404 records=0 instructions=0 documents=0 elapsed_sec=2'
    """
    records = instructions = documents = 0
    payload = result.result if result.ok else None
    if isinstance(payload, ExportOutcome):
        records = len(payload.records)
        instructions = payload.instruction_count
        documents = payload.documents_applied
    elif isinstance(payload, ContractDraft):
        records = 1
    elif isinstance(payload, FormattedSheet):
        records = payload.table.available_rows

    return (
        f"SUMMARY operation={operation} "
        f"status={int(result.status)} "
        f"records={records} "
        f"instructions={instructions} "
        f"documents={documents} "
        f"elapsed_sec={format_seconds(elapsed_seconds)}"
    )
