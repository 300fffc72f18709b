from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from ..models.record import FieldValue, ReplacementInstruction

"""FlatRecord -> placeholder replacement instructions."""

__all__ = [
    "PlaceholderStyle",
    "build_replacement_instructions",
    "to_batch_update_requests",
]


class PlaceholderStyle(Enum):
    """Placeholder delimiters used in document templates.

    - DOLLAR: ``${{key}}`` (bulk document export)
    - ANGLE: ``<<[key]>>`` (contract documents)
    """
    DOLLAR = "dollar"
    ANGLE = "angle"

    def placeholder(self, key: str) -> str:
        if self is PlaceholderStyle.DOLLAR:
            return "${{" + key + "}}"
        return "<<[" + key + "]>>"


def _value_text(value: FieldValue | None) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return "\n".join(str(v) for v in value)
    return str(value)


def build_replacement_instructions(
    record: Mapping[str, FieldValue], style: PlaceholderStyle = PlaceholderStyle.DOLLAR
) -> list[ReplacementInstruction]:
    """One instruction per record key, in the record's key order.

    Placeholders are emitted verbatim; no escaping is applied.
    """
    return [
        ReplacementInstruction(placeholder=style.placeholder(key), value=_value_text(value))
        for key, value in record.items()
    ]


def to_batch_update_requests(
    instructions: Iterable[ReplacementInstruction],
) -> list[dict[str, Any]]:
    """Render instructions as document batch-update ``replaceAllText`` requests."""
    return [
        {
            "replaceAllText": {
                "containsText": {"text": ins.placeholder, "matchCase": True},
                "replaceText": ins.value,
            }
        }
        for ins in instructions
    ]

