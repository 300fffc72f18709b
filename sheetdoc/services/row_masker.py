from __future__ import annotations

import logging

from ..errors import ColumnNotFound
from ..models.fill_mode import MaskResult
from ..models.table import Table
from .column_mapper import get_column_index

"""Per-column formatting of data rows.

Masking is best-effort: when the target column is missing the table passes
through untouched and the returned MaskResult reports ``applied=False``.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "mask_national_id",
    "mask_column",
]

# Source positions always replaced by "x"; a dash follows the x at 0 and 4.
_HIDDEN_POSITIONS = range(0, 9)
_DASH_AFTER = {0, 4}


def mask_national_id(value: object) -> str:
    """Mask a 13-digit national ID as ``x-xxxx-xxxx?-??-x``.

    >>> mask_national_id("1234567890123")
    'x-xxxx-xxxx0-12-x'
    """
    text = "" if value is None else str(value)
    out: list[str] = []
    for i, ch in enumerate(text):
        if i in _HIDDEN_POSITIONS:
            out.append("x")
            if i in _DASH_AFTER:
                out.append("-")
        elif i == 10:
            out.append("-" + ch)
        elif i == 12:
            out.append("-x")
        else:
            out.append(ch)
    return "".join(out)


def mask_column(column: str, table: Table, sheet_id: str = "") -> MaskResult:
    """Mask ``column`` in every data row of ``table``.

    The header row is preserved and only the targeted column changes. Rows
    shorter than the header are padded up to the masked cell.
    """
    try:
        index = get_column_index(column, table.header, sheet_id)
    except ColumnNotFound:
        logger.warning(f"{column} not found in the header of sheetId: {sheet_id}, masking skipped")
        return MaskResult(table=table, column=column, applied=False)

    masked_rows = []
    for row in table.rows:
        cells = list(row)
        if len(cells) <= index:
            cells.extend([""] * (index + 1 - len(cells)))
        cells[index] = mask_national_id(cells[index])
        masked_rows.append(cells)
    logger.debug(f"masked column {column} (index={index}) rows={len(masked_rows)}")
    return MaskResult(table=table.with_rows(masked_rows), column=column, applied=True)
