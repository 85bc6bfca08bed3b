"""Exception hierarchy for Kwik.

Defines all custom exceptions used throughout the implementation.
"""

from __future__ import annotations


class KwikError(Exception):
    """Base exception for all Kwik errors."""
    pass


class DocumentNotFoundError(KwikError):
    """Raised when a document file does not exist."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class DocumentExistsError(KwikError):
    """Raised when creating a document whose id is already taken."""
    pass


class DecodeError(KwikError):
    """Raised when stored bytes are malformed or truncated."""
    pass


class EncodeError(KwikError):
    """Raised when a value has no binary representation."""
    pass


class StorageIOError(KwikError):
    """Raised when the filesystem refuses a read, write or listing."""
    pass


class InvalidDocumentIdError(KwikError):
    """Raised when a document id cannot be used as a filename stem."""
    pass
