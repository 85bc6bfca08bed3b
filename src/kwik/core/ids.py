"""Document id helpers."""

from __future__ import annotations

import os
import uuid

from .errors import InvalidDocumentIdError
from .types import DocumentId

_RESERVED = {".", ".."}


def validate_document_id(doc_id: DocumentId) -> DocumentId:
    """Return doc_id if it can serve as a single filename stem.

    Raises:
        InvalidDocumentIdError: doc_id is empty, not a string, reserved,
            or contains a path separator or NUL
    """
    if not isinstance(doc_id, str) or not doc_id:
        raise InvalidDocumentIdError(f"Document id must be a non-empty string, got {doc_id!r}")
    if doc_id in _RESERVED:
        raise InvalidDocumentIdError(f"Document id {doc_id!r} is reserved")

    separators = {"/", "\0", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in doc_id for sep in separators):
        raise InvalidDocumentIdError(f"Document id {doc_id!r} contains a path separator")
    return doc_id


def new_document_id() -> DocumentId:
    """Return a random UUID v4 string."""
    return str(uuid.uuid4())
