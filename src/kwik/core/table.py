"""Kwik table implementation - one named collection of documents.

Every operation funnels through _read and _write. Failures of a single
document are reported to the store's diagnostic sink and never propagate,
except from fetch().
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from .errors import DocumentExistsError, DocumentNotFoundError, InvalidDocumentIdError, KwikError
from .ids import validate_document_id
from .types import Document, DocumentId, Entry, Patch
from ..components.filters import Filter, FilterLike, as_filter, matches

if TYPE_CHECKING:
    from .store import Kwik
    from ..interfaces.backend import DocumentBackend

logger = logging.getLogger(__name__)

_MISSING: Any = object()


class KwikTable:
    """A named collection of documents stored through a backend.

    Args:
        kwik: Store context the table belongs to (shared, not owned)
        name: Table name, used as the directory name
        backend: Storage backend; a directory under the store root by default

    Public API:
        - has(id), get(id), fetch(id)
        - create(id, data), insert(data), set(id, data), update(id, data)
        - delete(id)
        - get_all(), scan(), ids()
        - find_many(filter), find_one(filter)
        - update_one(filter, data), delete_one(filter), delete_many(filter)

    Filters are either a mapping of field -> expected value (every field must
    be present and strictly equal) or a callable over the decoded document.

    Invariants:
        - One document per id; the backend listing is the full table
        - Writes replace the whole document
        - A bad document is skipped by scans, never aborts them
    """

    def __init__(self, kwik: Kwik, name: str, backend: DocumentBackend | None = None):
        try:
            validate_document_id(name)
        except InvalidDocumentIdError as e:
            raise ValueError(f"Invalid table name: {name!r}") from e

        self.kwik = kwik
        self.name = name
        self.backend = backend if backend is not None else kwik.backend_for(name)

        self.kwik.tables.register(self)

    def __repr__(self) -> str:
        return f"KwikTable({self.name!r})"

    def _report(self, op: str, message: str, error: BaseException | None = None) -> None:
        self.kwik.error(f"[Kwik: {op}] {message}", error)

    def _read(self, doc_id: DocumentId) -> Document:
        return self.kwik.codec.decode(self.backend.read(doc_id))

    def _write(self, doc_id: DocumentId, data: Document) -> None:
        self.backend.write(doc_id, self.kwik.codec.encode(data))

    def _save(self, op: str, doc_id: DocumentId, data: Document) -> bool:
        try:
            self._write(doc_id, data)
        except KwikError as e:
            self._report(op, f"Unable to write file {self.backend.describe(doc_id)}", e)
            return False
        return True

    # Single-document operations

    def has(self, doc_id: DocumentId) -> bool:
        """Check if a document exists, without decoding it."""
        try:
            return self.backend.exists(doc_id)
        except KwikError as e:
            self._report("has", f"Unable to check file {self.backend.describe(doc_id)}", e)
            return False

    def fetch(self, doc_id: DocumentId) -> Document:
        """Get a document, raising instead of reporting.

        Raises:
            DocumentNotFoundError: No document with this id
            DecodeError: Stored bytes are malformed
            StorageIOError: The file could not be read
            InvalidDocumentIdError: doc_id is not a usable id
        """
        return self._read(doc_id)

    def get(self, doc_id: DocumentId, default: Any = None) -> Document:
        """Get a document, or default if it is absent or unreadable."""
        try:
            return self._read(doc_id)
        except DocumentNotFoundError:
            return default
        except KwikError as e:
            self._report("get", f"Unable to read file {self.backend.describe(doc_id)}", e)
            return default

    def create(self, doc_id: DocumentId, data: Patch | None = None) -> bool:
        """Create a document; reports and skips the write if the id is taken."""
        if self.has(doc_id):
            self._report(
                "create",
                f"Cannot create already existing file {self.backend.describe(doc_id)}",
                DocumentExistsError(f"Document {doc_id!r} already exists in table {self.name!r}"),
            )
            return False
        return self._save("create", doc_id, {} if data is None else data)

    def insert(self, data: Patch | None = None) -> DocumentId | None:
        """Create a document under a fresh UUID v4 id and return the id."""
        doc_id = self.kwik.uuid4()
        return doc_id if self.create(doc_id, data) else None

    def set(self, doc_id: DocumentId, data: Document) -> bool:
        """Write a document, overwriting whatever is stored under doc_id."""
        return self._save("set", doc_id, data)

    def update(self, doc_id: DocumentId, data: Patch | None = None) -> bool:
        """Shallow-merge data over the stored document, creating it if absent.

        Nested values in data replace the stored ones wholesale.
        """
        patch = {} if data is None else data
        existing = self.get(doc_id, _MISSING)

        if existing is _MISSING:
            merged = dict(patch)
        elif isinstance(existing, Mapping):
            merged = {**existing, **patch}
        else:
            logger.warning(
                f"Document {doc_id!r} in table {self.name!r} is a {type(existing).__name__}, "
                f"replacing it with the patch"
            )
            merged = dict(patch)

        return self._save("update", doc_id, merged)

    def delete(self, doc_id: DocumentId) -> bool:
        """Delete a document. Returns False (and reports) if it cannot be removed."""
        try:
            self.backend.remove(doc_id)
        except KwikError as e:
            self._report("delete", f"Unable to delete file {self.backend.describe(doc_id)}", e)
            return False
        return True

    # Scans

    def _ids(self, op: str) -> Iterator[DocumentId]:
        try:
            yield from self.backend.ids()
        except KwikError as e:
            self._report(op, f"Unable to list table {self.name!r}", e)

    def _entries(self, op: str) -> Iterator[Entry]:
        for doc_id in self._ids(op):
            try:
                value = self._read(doc_id)
            except DocumentNotFoundError:
                # Removed between listing and reading
                continue
            except KwikError as e:
                self._report(op, f"Unable to read file {self.backend.describe(doc_id)}", e)
                continue
            yield doc_id, value

    def _matching(self, op: str, filter_: Filter) -> Iterator[Entry]:
        for doc_id, value in self._entries(op):
            try:
                matched = matches(filter_, value)
            except Exception as e:
                self._report(op, f"Filter failed on {self.backend.describe(doc_id)}", e)
                continue
            if matched:
                yield doc_id, value

    def _first(self, op: str, filter_: FilterLike) -> Entry | None:
        return next(self._matching(op, as_filter(filter_)), None)

    def ids(self) -> Iterator[DocumentId]:
        """Lazily yield document ids in scan order."""
        return self._ids("ids")

    def scan(self) -> Iterator[Entry]:
        """Lazily yield (id, document) pairs; unreadable documents are skipped."""
        return self._entries("scan")

    def get_all(self) -> dict[DocumentId, Document]:
        """Get all documents of the table."""
        return dict(self._entries("get_all"))

    def find_many(
        self, filter_: FilterLike, as_list: bool = False
    ) -> dict[DocumentId, Document] | list[Document]:
        """Get all documents matching a filter, in scan order."""
        found = self._matching("find_many", as_filter(filter_))
        if as_list:
            return [value for _, value in found]
        return dict(found)

    def find_one(self, filter_: FilterLike) -> Document | None:
        """Get the first document matching a filter."""
        entry = self._first("find_one", filter_)
        return entry[1] if entry is not None else None

    def update_one(self, filter_: FilterLike, data: Patch) -> DocumentId | None:
        """Update the first document matching a filter and return its id."""
        entry = self._first("update_one", filter_)
        if entry is None:
            return None
        doc_id = entry[0]
        return doc_id if self.update(doc_id, data) else None

    def delete_one(self, filter_: FilterLike) -> bool:
        """Delete the first document matching a filter."""
        entry = self._first("delete_one", filter_)
        if entry is None:
            return False
        return self.delete(entry[0])

    def delete_many(self, filter_: FilterLike) -> int:
        """Delete every document matching a filter; returns how many were removed."""
        deleted = 0
        for doc_id, _ in self._matching("delete_many", as_filter(filter_)):
            if self.delete(doc_id):
                deleted += 1
        if deleted:
            logger.info(f"Deleted {deleted} documents from table {self.name!r}")
        return deleted

    def __contains__(self, doc_id: object) -> bool:
        return isinstance(doc_id, str) and self.has(doc_id)

    def __iter__(self) -> Iterator[DocumentId]:
        return self.ids()

    def __len__(self) -> int:
        return sum(1 for _ in self.ids())
