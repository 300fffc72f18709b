from __future__ import annotations

from ..models.table import Table

"""A1 notation helpers for writing a table back into a spreadsheet."""

__all__ = [
    "column_letter",
    "a1_range",
]


def column_letter(column: int) -> str:
    """1-based column number -> letters (1 -> A, 27 -> AA)."""
    if column < 1:
        raise ValueError(f"column must be >= 1, got {column}")
    letters = ""
    while column > 0:
        column, rem = divmod(column - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def a1_range(table: Table) -> str:
    """Range covering the header row and every data row, e.g. ``A1:C4``."""
    columns = max(len(table.header), 1)
    rows = table.available_rows + 1
    return f"A1:{column_letter(columns)}{rows}"
