from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableMapping
from dataclasses import dataclass

"""FlatRecord and ReplacementInstruction models.

A FlatRecord is built once per logical output row. Its key set is declared up
front from header names; every key starts as an empty string. Writing a key
that was never declared raises immediately, so a typo in a field name fails at
construction time instead of surfacing as a silently empty placeholder.
"""

__all__ = [
    "FieldValue",
    "FlatRecord",
    "ReplacementInstruction",
    "UndeclaredFieldError",
]

FieldValue = str | list[str]


class UndeclaredFieldError(KeyError):
    """Raised on a write to a key outside the record's declared key set."""


class FlatRecord(MutableMapping[str, FieldValue]):
    """Mapping with a fixed, insertion-ordered key set."""

    def __init__(self, keys: Iterable[str]) -> None:
        self._values: dict[str, FieldValue] = {k: "" for k in keys}

    def __getitem__(self, key: str) -> FieldValue:
        return self._values[key]

    def __setitem__(self, key: str, value: FieldValue) -> None:
        if key not in self._values:
            raise UndeclaredFieldError(key)
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        raise TypeError("FlatRecord keys cannot be removed")

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FlatRecord({self._values!r})"

    def add_field(self, key: str, value: FieldValue) -> None:
        """Declare a derived key and set its value in one step."""
        self._values[key] = value

    def to_dict(self) -> dict[str, FieldValue]:
        return {k: (list(v) if isinstance(v, list) else v) for k, v in self._values.items()}

    @staticmethod
    def from_dict(data: dict[str, FieldValue]) -> FlatRecord:
        record = FlatRecord(data.keys())
        for k, v in data.items():
            record[k] = v
        return record


@dataclass(frozen=True)
class ReplacementInstruction:
    """Replace every verbatim occurrence of ``placeholder`` with ``value``."""
    placeholder: str
    value: str
