from __future__ import annotations

from ..errors import InsufficientRows, InvalidRange
from ..models.range_spec import AllRows, BoundedRange, ExactRow, RangeSpec, RowSlice

"""Row range selection.

Turns a requested (fromRow, toRow) pair into a RangeSpec variant, then resolves
it against the number of data rows a sheet actually holds.

Row numbers follow the sheet numbering (row 1 = header, row 2 = first data
row). Both bounds zero selects every data row. A from bound of 0 or 1 is
clamped onto the first data row so the header row is never returned as data.
"""

__all__ = [
    "parse_row_bound",
    "build_range_spec",
    "select_rows",
]

# The header occupies the first sheet row.
HEADER_OFFSET = 1


def parse_row_bound(value: object, name: str = "fromRow") -> int:
    """Parse a row bound given as an int or a numeric string.

    Raises:
        InvalidRange: value is not an integer (bools, floats, empty strings and
            None included)
    """
    if isinstance(value, bool):
        raise InvalidRange(f"{name} is not a number")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            raise InvalidRange(f"{name} is not a number") from None
    raise InvalidRange(f"{name} is not a number")


def build_range_spec(from_row: object, to_row: object, *, exact: bool = False) -> RangeSpec:
    """Validate raw bounds and pick the matching RangeSpec variant.

    Parameters
    ----------
    from_row, to_row: raw bounds (int or numeric string)
    exact: single-row mode; requires from_row == to_row and both >= 2
    """
    start = parse_row_bound(from_row, "fromRow")
    end = parse_row_bound(to_row, "toRow")

    if start > end:
        raise InvalidRange("fromRow can't is more than toRow")
    if start < 0 or end < 0:
        raise InvalidRange(f"fromRow is {start} or toRow is {end}, negative rows are not allowed")

    if exact:
        if start < 2 or end < 2:
            raise InvalidRange(f"fromRow is {start} or toRow is {end} both have to more than 2")
        if start != end:
            raise InvalidRange("fromRow not equal toRow")
        return ExactRow(row=start)

    if start == 0 and end == 0:
        return AllRows()
    return BoundedRange(from_row=start, to_row=end)


def select_rows(spec: RangeSpec, available_rows: int) -> RowSlice:
    """Resolve a RangeSpec into a data-row slice.

    Raises:
        InsufficientRows: the sheet does not hold enough data rows
    """
    if isinstance(spec, AllRows):
        return RowSlice(start=0, stop=available_rows)

    if isinstance(spec, ExactRow):
        index = spec.row - HEADER_OFFSET - 1
        if index >= available_rows:
            raise InsufficientRows(
                f"Rows length have {available_rows}, not enough for row {spec.row}"
            )
        return RowSlice(start=index, stop=index + 1)

    if isinstance(spec, BoundedRange):
        if spec.from_row > 0 and spec.to_row > 0:
            # span is in sheet rows, so compare against the row count with header
            span = spec.to_row - spec.from_row + 1
            total_rows = available_rows + HEADER_OFFSET
            if total_rows < span:
                raise InsufficientRows(f"Rows length have {total_rows}, not enough")

        first = spec.from_row
        if first > 1:
            first -= 1
        if first == 0:
            first = 1
        # first/stop index the rows-with-header sequence; drop the header offset
        start = first - HEADER_OFFSET
        stop = spec.to_row - HEADER_OFFSET
        if stop > available_rows:
            raise InsufficientRows(
                f"Rows length have {available_rows}, not enough for toRow {spec.to_row}"
            )
        return RowSlice(start=start, stop=stop)

    raise InvalidRange(f"unsupported range spec: {spec!r}")
