from __future__ import annotations

import json
from collections.abc import Sequence
from http import HTTPStatus
from pathlib import Path

from ..models.record import FieldValue, FlatRecord, ReplacementInstruction
from ..services.template_request import to_batch_update_requests
from .base import DocumentStore, StoreError

"""File-backed stores.

JsonDocumentStore
    Writes each applied instruction batch as the backend batch-update request
    body ``<output_directory>/<document_id>-<n>.json`` (n counts from 1).
RecordArchive
    Persists a drafted FlatRecord as ``<directory>/<name>.json`` so a later
    render step can load it back.
"""

__all__ = [
    "JsonDocumentStore",
    "RecordArchive",
]


class JsonDocumentStore(DocumentStore):
    def __init__(self, output_directory: Path) -> None:
        self.output_directory = Path(output_directory)
        self.written: list[Path] = []

    def apply_replacements(
        self, document_id: str, instructions: Sequence[ReplacementInstruction]
    ) -> None:
        self.output_directory.mkdir(parents=True, exist_ok=True)
        path = self.output_directory / f"{document_id}-{len(self.written) + 1}.json"
        body = {"documentId": document_id, "requests": to_batch_update_requests(instructions)}
        path.write_text(json.dumps(body, ensure_ascii=False, indent=2), encoding="utf-8")
        self.written.append(path)


class RecordArchive:
    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def save(self, name: str, record: FlatRecord) -> Path:
        if not name:
            raise StoreError("Required fileName!", HTTPStatus.BAD_REQUEST)
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        path.write_text(json.dumps(record.to_dict(), ensure_ascii=False), encoding="utf-8")
        return path

    def load(self, name: str) -> FlatRecord:
        path = self.path_for(name)
        if not path.exists():
            raise StoreError(f"record not found: {path}", HTTPStatus.NOT_FOUND)
        try:
            data: dict[str, FieldValue] = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StoreError(f"invalid record file {path}: {e}") from e
        return FlatRecord.from_dict(data)
