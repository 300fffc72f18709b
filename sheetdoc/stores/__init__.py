"""Table and document store implementations."""

from .base import DocumentStore, StoreError, TableStore
from .excel import ExcelTableStore
from .json_store import JsonDocumentStore, RecordArchive
from .memory import InMemoryTableStore, RecordingDocumentStore

__all__ = [
    "StoreError",
    "TableStore",
    "DocumentStore",
    "ExcelTableStore",
    "InMemoryTableStore",
    "RecordingDocumentStore",
    "JsonDocumentStore",
    "RecordArchive",
]
