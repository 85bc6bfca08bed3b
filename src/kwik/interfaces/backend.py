"""Protocol definition for document storage backends."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from ..core.types import DocumentId


class DocumentBackend(Protocol):
    """Keyed byte storage underneath a table.

    Invariants:
        - ids() is finite and restartable: every call starts a fresh enumeration
        - write() replaces the whole previous content of an id
        - Failures surface as KwikError subclasses, never raw OSError
    """

    def exists(self, doc_id: DocumentId) -> bool:
        """Return True if a document is stored under doc_id."""
        ...

    def read(self, doc_id: DocumentId) -> bytes:
        """Return stored bytes. Raises DocumentNotFoundError if absent."""
        ...

    def write(self, doc_id: DocumentId, data: bytes) -> None:
        """Store bytes under doc_id, overwriting any previous content."""
        ...

    def remove(self, doc_id: DocumentId) -> None:
        """Remove doc_id. Raises DocumentNotFoundError if absent."""
        ...

    def ids(self) -> Iterator[DocumentId]:
        """Lazily enumerate stored document ids."""
        ...

    def describe(self, doc_id: DocumentId) -> str:
        """Human-readable location of doc_id, used in diagnostics."""
        ...
