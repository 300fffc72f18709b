from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import chain

from ..errors import (
    EmptyData,
    InvalidRange,
    InvalidRequest,
    RowPointerInvalid,
    SheetNotFound,
)
from ..models.fill_mode import DirectFill, FillMode, LinkedFill
from ..models.range_spec import ExactRow, RangeSpec, RowSlice
from ..models.record import FieldValue, FlatRecord
from ..models.table import SheetSelector, Table
from ..stores.base import TableStore, call_store
from .column_mapper import ensure_unique_columns, get_column_index, map_columns
from .range_selector import select_rows
from .row_masker import mask_column

"""Record assembly across one or more source sheets.

Two strategies, chosen once by the caller:

DirectFill
    Every selected sheet contributes the same logical rows (by position) to N
    output records, N being the longest selected row slice.
LinkedFill
    Two-sheet chain. The first sheet fills a single record at the exact row;
    that record's row pointer field names a row of the second sheet, whose
    values are written into the same record afterwards.

Validation happens before any value is copied: sheet existence, non-empty data,
duplicate column names across the accumulated name list, and explicit column
names. A failure aborts the merge and no partial record set is returned.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "FetchedSheet",
    "RecordMerger",
]


@dataclass(frozen=True)
class FetchedSheet:
    """A validated source sheet and the column names it contributes."""
    selector: SheetSelector
    table: Table
    names: tuple[str, ...]


class RecordMerger:
    """Builds FlatRecords from the sheets of a TableStore.

    Parameters
    ----------
    table_store: source of sheet rows
    fetch_workers: >1 fetches direct-mode sheets on a thread pool
    """

    def __init__(self, table_store: TableStore, *, fetch_workers: int = 1) -> None:
        self.table_store = table_store
        self.fetch_workers = fetch_workers

    def merge(
        self,
        selectors: Sequence[SheetSelector],
        range_spec: RangeSpec,
        mode: FillMode | None = None,
    ) -> list[FlatRecord]:
        if not selectors:
            raise InvalidRequest("Invalid or missing sheets array")
        mode = mode or DirectFill()
        if isinstance(mode, LinkedFill):
            return [self._merge_linked(selectors, range_spec, mode)]
        return self._merge_direct(selectors, range_spec)

    # ------------------------------------------------------------------ #
    # strategies
    # ------------------------------------------------------------------ #
    def _merge_direct(
        self, selectors: Sequence[SheetSelector], range_spec: RangeSpec
    ) -> list[FlatRecord]:
        fetched = self._fetch_all(selectors)
        ensure_unique_columns(chain.from_iterable(f.names for f in fetched))
        for sheet in fetched:
            self._check_explicit_columns(sheet)

        slices = [select_rows(range_spec, f.table.available_rows) for f in fetched]
        count = max(len(s) for s in slices)
        all_names = [name for f in fetched for name in f.names]
        records = [FlatRecord(all_names) for _ in range(count)]
        logger.debug(f"direct fill: sheets={len(fetched)} records={count}")

        for sheet, row_slice in zip(fetched, slices, strict=True):
            working = self._working_table(sheet, row_slice)
            self._copy_rows(sheet, working, records)
        return records

    def _merge_linked(
        self, selectors: Sequence[SheetSelector], range_spec: RangeSpec, mode: LinkedFill
    ) -> FlatRecord:
        if len(selectors) != 2:
            raise InvalidRequest(f"linked fill needs exactly two sheets, got {len(selectors)}")
        if not isinstance(range_spec, ExactRow):
            raise InvalidRange("linked fill requires a single exact row (fromRow == toRow >= 2)")

        # Sheet 1 must be fully written before sheet 2; no fan-out here.
        first = self.fetch(selectors[0])
        second = self.fetch(selectors[1])
        ensure_unique_columns(chain(first.names, second.names))
        self._check_explicit_columns(first)
        self._check_explicit_columns(second)

        record = FlatRecord([*first.names, *second.names])
        first_slice = select_rows(range_spec, first.table.available_rows)
        self._copy_rows(first, self._working_table(first, first_slice), [record])

        pointer = self._resolve_row_pointer(
            record.get(mode.row_pointer_field), mode.row_pointer_field, second.table
        )
        logger.info(f"{mode.row_pointer_field} -> row {pointer} of '{second.selector.sheet_name}'")
        second_slice = select_rows(ExactRow(row=pointer), second.table.available_rows)
        self._copy_rows(second, self._working_table(second, second_slice), [record])
        return record

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #
    def _fetch_all(self, selectors: Sequence[SheetSelector]) -> list[FetchedSheet]:
        if self.fetch_workers <= 1 or len(selectors) < 2:
            return [self.fetch(s) for s in selectors]
        with ThreadPoolExecutor(max_workers=self.fetch_workers) as pool:
            return list(pool.map(self.fetch, selectors))

    def fetch(self, selector: SheetSelector) -> FetchedSheet:
        if not selector.sheet_id or not selector.sheet_name:
            raise InvalidRequest("Invalid sheet object in the array, Required sheetId and sheetName")

        exists = call_store(self.table_store.exists, selector.sheet_id, selector.sheet_name)
        if not exists:
            raise SheetNotFound(f"Sheet name: '{selector.sheet_name}' not found")

        table = call_store(self.table_store.get_rows, selector.sheet_id, selector.sheet_name)
        if table.available_rows == 0:
            raise EmptyData(f"Sheet name: '{selector.sheet_name}' has only a header row")

        names = tuple(selector.columns_name) if selector.columns_name else tuple(table.header)
        logger.info(
            f"fetched sheet '{selector.sheet_name}' rows={table.available_rows} columns={len(names)}"
        )
        return FetchedSheet(selector=selector, table=table, names=names)

    @staticmethod
    def _check_explicit_columns(sheet: FetchedSheet) -> None:
        if sheet.selector.columns_name:
            map_columns(sheet.names, sheet.table.header, sheet.selector.sheet_id)

    @staticmethod
    def _working_table(sheet: FetchedSheet, row_slice: RowSlice) -> Table:
        """Header + selected rows, masked when the selector asks for it."""
        working = sheet.table.slice_rows(row_slice.start, row_slice.stop)
        if sheet.selector.column_format:
            working = mask_column(sheet.selector.column_format, working, sheet.selector.sheet_id).table
        return working

    @staticmethod
    def _copy_rows(sheet: FetchedSheet, working: Table, records: Sequence[FlatRecord]) -> None:
        # Indices come from the working table header, not the source header.
        for name in sheet.names:
            index = get_column_index(name, working.header, sheet.selector.sheet_id)
            for i in range(working.available_rows):
                records[i][name] = working.cell(i, index)

    @staticmethod
    def _resolve_row_pointer(value: FieldValue | None, field: str, table: Table) -> int:
        """Validate a row pointer (sheet numbering, header = row 1)."""
        text = "" if value is None else str(value).strip()
        if not text:
            raise RowPointerInvalid(f"{field} is {value!r} that mismatch or invalid data")
        try:
            pointer = int(text)
        except ValueError:
            raise RowPointerInvalid(f"{field} is {text} that mismatch or invalid data") from None
        total_rows = table.available_rows + 1
        if pointer > total_rows:
            raise RowPointerInvalid(f"{field} is {pointer} more than length of rowsData ({total_rows})")
        if pointer < 2:
            raise RowPointerInvalid(f"{field} is {pointer}, the first data row is 2")
        return pointer

