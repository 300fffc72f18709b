from __future__ import annotations

from collections.abc import Iterable
from http import HTTPStatus
from pathlib import Path

import pandas as pd

from ..models.table import SheetMetadata, Table
from .base import StoreError, TableStore

"""Excel workbook table store.

Each ``sheet_id`` names one workbook ``<source_directory>/<sheet_id>.xlsx``;
``sheet_name`` is a worksheet inside it. The first worksheet row is the header
row and every later row is a data row. Blank rows between data rows are kept
as empty rows so positions match the sheet row numbers; trailing blank rows
are dropped. All cells are read as strings so IDs keep their leading zeros and
are never turned into floats.
"""

__all__ = [
    "ExcelTableStore",
    "read_excel_file",
    "write_excel_file",
]

WORKBOOK_SUFFIX = ".xlsx"


def read_excel_file(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, Table]:
    """Read a workbook returning one Table per worksheet.

    Parameters
    ----------
    path: Excel ファイルパス
    target_sheets: 対象シート制限 (None なら全シート)
    """
    wanted = set(target_sheets) if target_sheets is not None else None
    tables: dict[str, Table] = {}
    with pd.ExcelFile(path) as xls:
        for name in xls.sheet_names:
            if wanted is not None and str(name) not in wanted:
                continue
            df = xls.parse(name, header=None, dtype=str, keep_default_na=False)
            tables[str(name)] = _frame_to_table(df)
    return tables


def _frame_to_table(df: pd.DataFrame) -> Table:
    if df.shape[0] == 0:
        return Table(header=())
    values = df.fillna("").astype(str).values.tolist()
    header = _trim_trailing([str(c).strip() for c in values[0]])
    # 途中の空行は残す (行番号 = シート行番号)。末尾の空行のみ削除
    rows = [_trim_trailing(row) for row in values[1:]]
    while rows and _is_blank(rows[-1]):
        rows.pop()
    return Table.from_values([header, *rows])


def _is_blank(row: list[str]) -> bool:
    return not any(str(c).strip() for c in row)


def _trim_trailing(row: list[str]) -> list[str]:
    end = len(row)
    while end > 0 and row[end - 1] == "":
        end -= 1
    return row[:end]


def write_excel_file(path: Path, table: Table, sheet_name: str = "Sheet1") -> Path:
    """Write ``table`` (header + rows) as a single-worksheet workbook."""
    path.parent.mkdir(parents=True, exist_ok=True)
    width = len(table.header)
    rows = [list(r) + [""] * (width - len(r)) for r in table.rows]
    df = pd.DataFrame([list(table.header), *rows])
    with pd.ExcelWriter(path) as writer:
        df.to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


class ExcelTableStore(TableStore):
    """TableStore backed by a directory of .xlsx workbooks."""

    def __init__(self, source_directory: Path) -> None:
        self.source_directory = Path(source_directory)

    def workbook_path(self, sheet_id: str) -> Path:
        return self.source_directory / f"{sheet_id}{WORKBOOK_SUFFIX}"

    def exists(self, sheet_id: str, sheet_name: str) -> bool:
        path = self.workbook_path(sheet_id)
        if not path.is_file():
            return False
        with pd.ExcelFile(path) as xls:
            return sheet_name in {str(n) for n in xls.sheet_names}

    def get_rows(self, sheet_id: str, sheet_name: str) -> Table:
        path = self._require(sheet_id)
        tables = read_excel_file(path, target_sheets=[sheet_name])
        if sheet_name not in tables:
            raise StoreError(f"Sheet name: '{sheet_name}' not found in {path.name}", HTTPStatus.NOT_FOUND)
        return tables[sheet_name]

    def get_metadata(self, sheet_id: str) -> SheetMetadata:
        return SheetMetadata(title=self._require(sheet_id).stem)

    def _require(self, sheet_id: str) -> Path:
        path = self.workbook_path(sheet_id)
        if not path.is_file():
            raise StoreError(f"workbook not found: {path}", HTTPStatus.NOT_FOUND)
        return path
