from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

"""Table and SheetSelector models.

A Table is the read-only shape handed over by a table store: one header row
followed by data rows of string cells. Rows may be shorter than the header;
missing trailing cells read as an empty string.
"""

__all__ = [
    "Table",
    "SheetSelector",
    "SheetMetadata",
]


@dataclass(frozen=True)
class Table:
    """Header row plus data rows (header excluded from ``rows``)."""
    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()

    @staticmethod
    def from_values(values: Sequence[Sequence[object]]) -> Table:
        """Build a Table from raw values where ``values[0]`` is the header row.

        Cells are converted to ``str``; ``None`` becomes ``""``.
        """
        if not values:
            return Table(header=())
        header = tuple(_cell_text(c) for c in values[0])
        rows = tuple(tuple(_cell_text(c) for c in row) for row in values[1:])
        return Table(header=header, rows=rows)

    @property
    def available_rows(self) -> int:
        return len(self.rows)

    def cell(self, row_index: int, column_index: int) -> str:
        row = self.rows[row_index]
        if column_index < len(row):
            return row[column_index]
        return ""

    def slice_rows(self, start: int, stop: int) -> Table:
        return Table(header=self.header, rows=self.rows[start:stop])

    def with_rows(self, rows: Iterable[Sequence[str]]) -> Table:
        return Table(header=self.header, rows=tuple(tuple(r) for r in rows))

    def to_values(self) -> list[list[str]]:
        """Header + data rows as plain lists (inverse of ``from_values``)."""
        return [list(self.header), *[list(r) for r in self.rows]]


@dataclass(frozen=True)
class SheetSelector:
    """Identifies one source table and how to extract from it.

    ``column_format`` names a column to mask (empty = no masking).
    ``columns_name`` restricts extraction to an explicit subset; empty means
    every column of the sheet header.
    """
    sheet_id: str
    sheet_name: str
    column_format: str = ""
    columns_name: tuple[str, ...] = field(default_factory=tuple)

    @staticmethod
    def from_dict(data: dict[str, object]) -> SheetSelector:
        cols = data.get("columns_name") or data.get("columnsName") or ()
        return SheetSelector(
            sheet_id=str(data.get("sheet_id") or data.get("sheetId") or ""),
            sheet_name=str(data.get("sheet_name") or data.get("sheetName") or ""),
            column_format=str(data.get("column_format") or data.get("columnFormat") or ""),
            columns_name=tuple(str(c) for c in cols if c),  # type: ignore[union-attr]
        )


@dataclass(frozen=True)
class SheetMetadata:
    title: str


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
