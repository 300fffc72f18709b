from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..errors import ColumnNotFound, DuplicateColumn

"""Header name -> column position resolution."""

__all__ = [
    "get_column_index",
    "map_columns",
    "ensure_unique_columns",
]


def get_column_index(name: str, header: Sequence[str], sheet_id: str = "") -> int:
    """Get the index of the first exact (case-sensitive) header match.

    Raises
    ------
    ColumnNotFound: if no header cell equals ``name``
    """
    try:
        return list(header).index(name)
    except ValueError:
        raise ColumnNotFound(name, sheet_id) from None


def ensure_unique_columns(names: Iterable[str]) -> None:
    """Fail on the first name seen twice in the accumulated name list."""
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise DuplicateColumn(name)
        seen.add(name)


def map_columns(names: Iterable[str], header: Sequence[str], sheet_id: str = "") -> dict[str, int]:
    """Map each name to its header index, preserving the order of ``names``."""
    return {name: get_column_index(name, header, sheet_id) for name in names}
