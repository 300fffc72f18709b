from __future__ import annotations

from collections.abc import Sequence
from http import HTTPStatus

from ..models.record import ReplacementInstruction
from ..models.table import SheetMetadata, Table
from .base import DocumentStore, StoreError, TableStore

"""In-memory stores for embedding and tests."""

__all__ = [
    "InMemoryTableStore",
    "RecordingDocumentStore",
]


class InMemoryTableStore(TableStore):
    """Spreadsheets held as ``{sheet_id: {sheet_name: Table}}``."""

    def __init__(
        self,
        sheets: dict[str, dict[str, Table]] | None = None,
        titles: dict[str, str] | None = None,
    ) -> None:
        self.sheets: dict[str, dict[str, Table]] = sheets or {}
        self.titles: dict[str, str] = titles or {}

    def add_sheet(self, sheet_id: str, sheet_name: str, values: Sequence[Sequence[object]]) -> Table:
        table = Table.from_values(values)
        self.sheets.setdefault(sheet_id, {})[sheet_name] = table
        return table

    def exists(self, sheet_id: str, sheet_name: str) -> bool:
        return sheet_name in self.sheets.get(sheet_id, {})

    def get_rows(self, sheet_id: str, sheet_name: str) -> Table:
        try:
            return self.sheets[sheet_id][sheet_name]
        except KeyError:
            raise StoreError(f"{sheet_id}/{sheet_name} not found", HTTPStatus.NOT_FOUND) from None

    def get_metadata(self, sheet_id: str) -> SheetMetadata:
        if sheet_id not in self.sheets:
            raise StoreError(f"spreadsheet {sheet_id} not found", HTTPStatus.NOT_FOUND)
        return SheetMetadata(title=self.titles.get(sheet_id, sheet_id))


class RecordingDocumentStore(DocumentStore):
    """Keeps every applied instruction batch, in call order."""

    def __init__(self) -> None:
        self.applied: list[tuple[str, list[ReplacementInstruction]]] = []

    def apply_replacements(
        self, document_id: str, instructions: Sequence[ReplacementInstruction]
    ) -> None:
        self.applied.append((document_id, list(instructions)))

    def render(self, template: str, batch_index: int = -1) -> str:
        """Apply one recorded batch to ``template`` by verbatim substitution."""
        _, instructions = self.applied[batch_index]
        text = template
        for ins in instructions:
            text = text.replace(ins.placeholder, ins.value)
        return text
