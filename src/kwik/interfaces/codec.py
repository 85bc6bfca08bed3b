"""Protocol definition for the document Codec."""

from __future__ import annotations

from typing import Protocol

from ..core.types import Document


class Codec(Protocol):
    """Converts document values to durable bytes and back."""

    def encode(self, value: Document) -> bytes:
        """Serialize value. Raises EncodeError if it has no representation."""
        ...

    def decode(self, data: bytes) -> Document:
        """Deserialize bytes. Raises DecodeError on malformed or truncated input."""
        ...
