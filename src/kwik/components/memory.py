"""In-memory document storage.

Uses sortedcontainers.SortedDict so scans run in id order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from sortedcontainers import SortedDict

from ..core.errors import DocumentNotFoundError
from ..core.ids import validate_document_id
from ..core.types import DocumentId

logger = logging.getLogger(__name__)


class MemoryBackend:
    """Holds encoded documents in a sorted in-process map.

    Drop-in replacement for DirectoryBackend when a table does not need to
    outlive the process.

    Invariants:
        - Ids are always maintained in sorted order
        - ids() enumerates a snapshot, so callers may write or delete while scanning
    """

    def __init__(self):
        self._data: SortedDict = SortedDict()

    def describe(self, doc_id: DocumentId) -> str:
        return f"memory://{doc_id}"

    def exists(self, doc_id: DocumentId) -> bool:
        return validate_document_id(doc_id) in self._data

    def read(self, doc_id: DocumentId) -> bytes:
        try:
            return self._data[validate_document_id(doc_id)]
        except KeyError as e:
            raise DocumentNotFoundError(f"No document {doc_id!r} in memory") from e

    def write(self, doc_id: DocumentId, data: bytes) -> None:
        self._data[validate_document_id(doc_id)] = bytes(data)
        logger.debug(f"Stored {len(data)} bytes under {doc_id!r}")

    def remove(self, doc_id: DocumentId) -> None:
        try:
            del self._data[validate_document_id(doc_id)]
        except KeyError as e:
            raise DocumentNotFoundError(f"No document {doc_id!r} in memory") from e

    def ids(self) -> Iterator[DocumentId]:
        yield from list(self._data.keys())

    def size_bytes(self) -> int:
        """Return total size of stored document bytes."""
        return sum(len(data) for data in self._data.values())

    def __len__(self) -> int:
        return len(self._data)
