"""Directory-backed document storage.

One file per document: ``<directory>/<id>.<extension>``. Writes go to a
temporary sibling first and are moved into place with os.replace.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

from ..core.errors import DocumentNotFoundError, StorageIOError
from ..core.ids import validate_document_id
from ..core.types import DocumentId

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"


class DirectoryBackend:
    """Stores each document as one file inside a table directory.

    Args:
        directory: Table directory; must exist before use
        extension: Document file extension without the dot
        fsync: Whether to fsync the temporary file before replacing

    Invariants:
        - The directory listing is the complete set of documents
        - Entries that are not regular files with the extension are ignored
        - The directory is never created here
    """

    def __init__(self, directory: str | Path, extension: str = "kwik", fsync: bool = False):
        self.directory = Path(directory)
        self.extension = extension.lstrip(".")
        self.fsync = fsync
        self._suffix = f".{self.extension}"

    def path_for(self, doc_id: DocumentId) -> Path:
        """Return the file path of doc_id. Raises InvalidDocumentIdError."""
        return self.directory / f"{validate_document_id(doc_id)}{self._suffix}"

    def describe(self, doc_id: DocumentId) -> str:
        return f"file://{self.directory / f'{doc_id}{self._suffix}'}"

    def exists(self, doc_id: DocumentId) -> bool:
        path = self.path_for(doc_id)
        try:
            mode = path.stat().st_mode
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as e:
            raise StorageIOError(f"Unable to check {path}: {e}") from e
        return stat.S_ISREG(mode)

    def read(self, doc_id: DocumentId) -> bytes:
        path = self.path_for(doc_id)
        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            raise DocumentNotFoundError(f"No document at {path}", path=str(path)) from e
        except OSError as e:
            raise StorageIOError(f"Unable to read {path}: {e}") from e

        logger.debug(f"Read {len(data)} bytes from {path}")
        return data

    def write(self, doc_id: DocumentId, data: bytes) -> None:
        path = self.path_for(doc_id)
        temp_path = path.with_name(path.name + TEMP_SUFFIX)
        try:
            with open(temp_path, "wb") as f:
                f.write(data)
                if self.fsync:
                    f.flush()
                    os.fsync(f.fileno())
            os.replace(temp_path, path)
        except OSError as e:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning(f"Failed to remove temporary file {temp_path}")
            raise StorageIOError(f"Unable to write {path}: {e}") from e

        logger.debug(f"Wrote {len(data)} bytes to {path}")

    def remove(self, doc_id: DocumentId) -> None:
        path = self.path_for(doc_id)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise DocumentNotFoundError(f"No document at {path}", path=str(path)) from e
        except OSError as e:
            raise StorageIOError(f"Unable to delete {path}: {e}") from e

        logger.debug(f"Removed {path}")

    def ids(self) -> Iterator[DocumentId]:
        """Yield document ids in directory order (OS dependent)."""
        try:
            entries = os.scandir(self.directory)
        except OSError as e:
            raise StorageIOError(f"Unable to list {self.directory}: {e}") from e

        with entries:
            for entry in entries:
                try:
                    if not entry.is_file():
                        continue
                except OSError:
                    logger.warning(f"Skipping unreadable entry {entry.path}")
                    continue
                if not entry.name.endswith(self._suffix):
                    continue
                stem = entry.name[: -len(self._suffix)]
                if stem:
                    yield stem
