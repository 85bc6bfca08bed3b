"""msgpack document codec with a pluggable extension registry.

Documents are encoded as msgpack. Types msgpack cannot represent natively are
carried as ext types whose codes are resolved through an ExtensionRegistry.
"""

from __future__ import annotations

import datetime
import decimal
import logging
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import msgpack

from ..core.errors import DecodeError, EncodeError
from ..core.types import Document

logger = logging.getLogger(__name__)

# msgpack reserves negative ext codes; 0..127 are free for applications
MIN_EXT_CODE = 0
MAX_EXT_CODE = 127

EXT_DATETIME = 1
EXT_DATE = 2
EXT_UUID = 3
EXT_DECIMAL = 4


@dataclass(frozen=True)
class Extension:
    """A custom type paired with its ext code and byte converters."""

    code: int
    type: type
    encode: Callable[[Any], bytes]
    decode: Callable[[bytes], Any]


class ExtensionRegistry:
    """Registry of (ext code <-> type) pairs consulted before msgpack's own encoding.

    Invariants:
        - Codes and types are each registered at most once
        - Lookup tries the exact type first, then isinstance in registration order
    """

    def __init__(self):
        self._by_code: dict[int, Extension] = {}
        self._by_type: dict[type, Extension] = {}

    def register(
        self,
        code: int,
        type_: type,
        encode: Callable[[Any], bytes],
        decode: Callable[[bytes], Any],
    ) -> None:
        """Register a custom type under an ext code."""
        if not (MIN_EXT_CODE <= code <= MAX_EXT_CODE):
            raise ValueError(f"Extension code must be in [{MIN_EXT_CODE}, {MAX_EXT_CODE}], got {code}")
        if code in self._by_code:
            raise ValueError(f"Extension code {code} already registered for {self._by_code[code].type.__name__}")
        if type_ in self._by_type:
            raise ValueError(f"Type {type_.__name__} already registered under code {self._by_type[type_].code}")

        ext = Extension(code, type_, encode, decode)
        self._by_code[code] = ext
        self._by_type[type_] = ext
        logger.debug(f"Registered codec extension {code} for {type_.__name__}")

    def for_value(self, value: Any) -> Extension | None:
        """Return the extension handling value, if any."""
        ext = self._by_type.get(type(value))
        if ext is not None:
            return ext
        for ext in self._by_type.values():
            if isinstance(value, ext.type):
                return ext
        return None

    def for_code(self, code: int) -> Extension | None:
        return self._by_code.get(code)

    def __contains__(self, code: int) -> bool:
        return code in self._by_code

    def __len__(self) -> int:
        return len(self._by_code)

    @classmethod
    def with_defaults(cls) -> ExtensionRegistry:
        """Registry preloaded with datetime, date, UUID and Decimal support."""
        registry = cls()
        # datetime before date: datetime is a date subclass
        registry.register(
            EXT_DATETIME,
            datetime.datetime,
            lambda v: v.isoformat().encode(),
            lambda b: datetime.datetime.fromisoformat(b.decode()),
        )
        registry.register(
            EXT_DATE,
            datetime.date,
            lambda v: v.isoformat().encode(),
            lambda b: datetime.date.fromisoformat(b.decode()),
        )
        registry.register(EXT_UUID, uuid.UUID, lambda v: v.bytes, lambda b: uuid.UUID(bytes=b))
        registry.register(
            EXT_DECIMAL,
            decimal.Decimal,
            lambda v: str(v).encode(),
            lambda b: decimal.Decimal(b.decode()),
        )
        return registry


class MsgpackCodec:
    """Self-describing binary codec for documents.

    Args:
        extensions: Registry of custom types; empty when omitted

    Invariants:
        - decode(encode(v)) == v for every representable v
          (tuples are stored as arrays and come back as lists)
        - Unknown ext codes decode to msgpack.ExtType and re-encode unchanged
    """

    def __init__(self, extensions: ExtensionRegistry | None = None):
        self.extensions = extensions if extensions is not None else ExtensionRegistry()

    def encode(self, value: Document) -> bytes:
        """Serialize value to msgpack bytes."""
        try:
            return msgpack.packb(self._apply_extensions(value), use_bin_type=True)
        except EncodeError:
            raise
        except RecursionError as e:
            raise EncodeError(f"Cannot encode {type(value).__name__}: value is cyclic or nested too deeply") from e
        except (TypeError, ValueError, OverflowError) as e:
            raise EncodeError(f"Cannot encode {type(value).__name__}: {e}") from e

    def decode(self, data: bytes) -> Document:
        """Deserialize msgpack bytes."""
        try:
            return msgpack.unpackb(
                data,
                ext_hook=self._ext_hook,
                raw=False,
                strict_map_key=False,
            )
        except DecodeError:
            raise
        except (msgpack.UnpackException, ValueError, TypeError, RecursionError) as e:
            raise DecodeError(f"Malformed document bytes ({len(data)} bytes): {e}") from e

    def _apply_extensions(self, value: Any) -> Any:
        """Replace registered custom types with ExtType, walking containers."""
        if isinstance(value, msgpack.ExtType):
            return value

        ext = self.extensions.for_value(value)
        if ext is not None:
            try:
                payload = ext.encode(value)
            except Exception as e:
                raise EncodeError(f"Extension {ext.code} failed to encode {type(value).__name__}: {e}") from e
            return msgpack.ExtType(ext.code, payload)

        if isinstance(value, Mapping):
            return {self._apply_extensions(k): self._apply_extensions(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._apply_extensions(item) for item in value]
        return value

    def _ext_hook(self, code: int, data: bytes) -> Any:
        ext = self.extensions.for_code(code)
        if ext is None:
            logger.debug(f"No extension registered for code {code}, keeping raw ExtType")
            return msgpack.ExtType(code, data)
        try:
            return ext.decode(data)
        except Exception as e:
            raise DecodeError(f"Extension {code} failed to decode {len(data)} bytes: {e}") from e
