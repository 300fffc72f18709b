from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from http import HTTPStatus
from typing import Any, TypeVar

from ..errors import ExternalCallError, PipelineError
from ..models.record import ReplacementInstruction
from ..models.table import SheetMetadata, Table

"""Abstract collaborators consumed by the pipeline.

The pipeline never talks to a spreadsheet or document backend directly. It
calls a TableStore to read rows and a DocumentStore to apply placeholder
replacements. Failures raised by these collaborators are not retried.

A collaborator may attach an HTTP-like ``status`` attribute to the exceptions
it raises (see StoreError); the pipeline reports that status back to its
caller and falls back to 500 otherwise.
"""

__all__ = [
    "StoreError",
    "TableStore",
    "DocumentStore",
    "call_store",
]

T = TypeVar("T")


class StoreError(Exception):
    """Failure reported by a store, optionally tagged with a status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class TableStore(ABC):
    @abstractmethod
    def exists(self, sheet_id: str, sheet_name: str) -> bool:
        """Return True when ``sheet_name`` exists inside ``sheet_id``."""

    @abstractmethod
    def get_rows(self, sheet_id: str, sheet_name: str) -> Table:
        """Return the whole sheet; the first row is the header row."""

    @abstractmethod
    def get_metadata(self, sheet_id: str) -> SheetMetadata:
        """Return spreadsheet-level metadata (title)."""


class DocumentStore(ABC):
    @abstractmethod
    def apply_replacements(
        self, document_id: str, instructions: Sequence[ReplacementInstruction]
    ) -> None:
        """Apply every instruction against the whole document."""


def call_store(fn: Callable[..., T], *args: Any) -> T:
    """Invoke a store call, tagging any failure as ExternalCallError.

    The status reported by the store (a ``status`` attribute on the raised
    exception) is kept; 500 otherwise.
    """
    try:
        return fn(*args)
    except PipelineError:
        raise
    except Exception as e:
        status = getattr(e, "status", None) or HTTPStatus.INTERNAL_SERVER_ERROR
        raise ExternalCallError(str(e), status=status) from e
