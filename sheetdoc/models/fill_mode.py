from __future__ import annotations

from dataclasses import dataclass

from .table import Table

"""Fill mode and masking result models.

The merge strategy is chosen once, before any sheet is visited:
- DirectFill: every sheet contributes the same logical rows by position
- LinkedFill: a two-sheet chain where the first record names a row of the
  second sheet through ``row_pointer_field``
"""

__all__ = [
    "DirectFill",
    "LinkedFill",
    "FillMode",
    "MaskResult",
]

DEFAULT_ROW_POINTER_FIELD = "จับคู่กับนิติบุคคล (เลขแถว)"


@dataclass(frozen=True)
class DirectFill:
    pass


@dataclass(frozen=True)
class LinkedFill:
    row_pointer_field: str = DEFAULT_ROW_POINTER_FIELD


FillMode = DirectFill | LinkedFill


@dataclass(frozen=True)
class MaskResult:
    """Outcome of a best-effort column mask.

    ``applied`` is False when the column was not found; ``table`` is then the
    input table unchanged.
    """
    table: Table
    column: str
    applied: bool
