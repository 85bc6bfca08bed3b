"""Kwik store context - main public API.

Holds the root directory, the table registry, the codec and the diagnostic
sink shared by every table of one store.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import KwikConfig
from .errors import StorageIOError
from .ids import new_document_id
from .table import KwikTable
from ..components.codec import ExtensionRegistry, MsgpackCodec
from ..components.directory import DirectoryBackend
from ..components.registry import TableRegistry
from ..components.sink import LoggingSink
from ..interfaces.codec import Codec
from ..interfaces.sink import DiagnosticSink

logger = logging.getLogger(__name__)


def default_data_dir() -> Path:
    """Return ``db/`` next to the running main script, or under the cwd."""
    main_file = getattr(sys.modules.get("__main__"), "__file__", None)
    base = Path(main_file).resolve().parent if main_file else Path.cwd()
    return base / "db"


class Kwik:
    """Embedded document store: one directory per table, one file per document.

    Args:
        config: Store configuration
        sink: Receives non-fatal failure reports; logs them by default
        codec: Document codec; msgpack with the configured extensions by default

    Usage:
        kwik = Kwik(KwikConfig(data_dir="data"))
        users = kwik.table("users")
        kwik.init()
        users.create("u1", {"name": "Ann"})

    Invariants:
        - Table directories exist once init() returned
        - The sink never raises into table operations
    """

    def __init__(
        self,
        config: KwikConfig | None = None,
        sink: DiagnosticSink | None = None,
        codec: Codec | None = None,
    ):
        self.config = config if config is not None else KwikConfig()
        self.directory_path = Path(self.config.data_dir) if self.config.data_dir else default_data_dir()
        self.tables = TableRegistry()
        self.sink = sink if sink is not None else LoggingSink()

        if codec is None:
            extensions = (
                ExtensionRegistry.with_defaults()
                if self.config.builtin_extensions
                else ExtensionRegistry()
            )
            codec = MsgpackCodec(extensions)
        self.codec = codec

    def __repr__(self) -> str:
        return f"Kwik({str(self.directory_path)!r}, tables={self.tables.names()})"

    def backend_for(self, name: str) -> DirectoryBackend:
        """Directory backend for table name under the store root."""
        return DirectoryBackend(
            self.directory_path / name,
            extension=self.config.extension,
            fsync=self.config.fsync_writes,
        )

    def table(self, name: str) -> KwikTable:
        """Return the registered table called name, creating the handle if needed."""
        existing = self.tables.get(name)
        if existing is not None:
            return existing
        return KwikTable(self, name)

    def init(self) -> Path:
        """Create the root directory and every registered table directory.

        Idempotent. Returns the root directory path.
        """
        directories = [self.directory_path]
        for table in self.tables:
            if isinstance(table.backend, DirectoryBackend):
                directories.append(table.backend.directory)

        for directory in directories:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageIOError(f"Unable to create directory {directory}: {e}") from e

        logger.info(f"Initialized Kwik store at {self.directory_path} with {len(self.tables)} tables")
        return self.directory_path

    def error(self, message: str, error: BaseException | None = None) -> None:
        """Report a non-fatal failure to the sink."""
        try:
            self.sink(message, error)
        except Exception:
            logger.exception(f"Diagnostic sink failed while reporting: {message}")

    def uuid4(self) -> str:
        """Return a UUID v4 string."""
        return new_document_id()
