"""Kwik - embedded document store backed by one msgpack file per document."""

from .core.config import KwikConfig
from .core.errors import (
    KwikError,
    DocumentNotFoundError,
    DocumentExistsError,
    DecodeError,
    EncodeError,
    StorageIOError,
    InvalidDocumentIdError,
)
from .core.store import Kwik
from .core.table import KwikTable
from .core.types import DocumentId, Document, Patch, Entry
from .components.codec import ExtensionRegistry, MsgpackCodec
from .components.directory import DirectoryBackend
from .components.filters import ExactMatch, Predicate
from .components.memory import MemoryBackend
from .components.registry import TableRegistry
from .components.sink import LoggingSink, RecordingSink

__all__ = [
    "Kwik",
    "KwikTable",
    "KwikConfig",
    "KwikError",
    "DocumentNotFoundError",
    "DocumentExistsError",
    "DecodeError",
    "EncodeError",
    "StorageIOError",
    "InvalidDocumentIdError",
    "ExtensionRegistry",
    "MsgpackCodec",
    "DirectoryBackend",
    "MemoryBackend",
    "TableRegistry",
    "ExactMatch",
    "Predicate",
    "LoggingSink",
    "RecordingSink",
    "DocumentId",
    "Document",
    "Patch",
    "Entry",
]
