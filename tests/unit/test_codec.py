"""Unit tests for the msgpack codec and extension registry."""

import datetime
import decimal
import uuid
from dataclasses import dataclass

import msgpack
import pytest

from kwik.components.codec import EXT_DATE, EXT_DATETIME, ExtensionRegistry, MsgpackCodec
from kwik.core.errors import DecodeError, EncodeError


@dataclass
class Point:
    x: int
    y: int


class Tag(str):
    pass


@pytest.fixture
def codec():
    """Codec with the default extensions."""
    return MsgpackCodec(ExtensionRegistry.with_defaults())


@pytest.fixture
def point_registry():
    registry = ExtensionRegistry()
    registry.register(
        10,
        Point,
        lambda p: msgpack.packb([p.x, p.y]),
        lambda b: Point(*msgpack.unpackb(b)),
    )
    return registry


def test_codec_roundtrip_nested_document(codec):
    """Test that maps, arrays and scalars survive a round trip."""
    document = {
        "name": "Ann",
        "age": 30,
        "score": 9.5,
        "active": True,
        "nickname": None,
        "avatar": b"\x89PNG",
        "tags": ["a", "b"],
        "address": {"city": "Oslo", "zip": [0, 1, 5, 0]},
        7: "int key",
    }

    assert codec.decode(codec.encode(document)) == document


def test_codec_roundtrip_scalars(codec):
    """Test that top-level scalars are valid documents."""
    for value in [None, 0, -1, 2**40, 1.25, "", "text", b"", False]:
        assert codec.decode(codec.encode(value)) == value


def test_codec_tuples_come_back_as_lists(codec):
    """Test that tuples are stored as arrays."""
    assert codec.decode(codec.encode({"pair": (1, 2)})) == {"pair": [1, 2]}


def test_codec_default_extensions_roundtrip(codec):
    """Test datetime, date, UUID and Decimal round trips."""
    document = {
        "created": datetime.datetime(2024, 5, 1, 12, 30, 15, 250, tzinfo=datetime.timezone.utc),
        "naive": datetime.datetime(2024, 5, 1, 8, 0),
        "birthday": datetime.date(1990, 2, 3),
        "ref": uuid.UUID("12345678-1234-5678-1234-567812345678"),
        "price": decimal.Decimal("19.99"),
    }

    decoded = codec.decode(codec.encode(document))

    assert decoded == document
    assert type(decoded["birthday"]) is datetime.date
    assert type(decoded["created"]) is datetime.datetime


def test_codec_date_and_datetime_use_distinct_codes(codec):
    """Test that a datetime is not stored with the date extension."""
    packed = msgpack.unpackb(codec.encode([datetime.date(2020, 1, 1), datetime.datetime(2020, 1, 1)]))

    assert packed[0].code == EXT_DATE
    assert packed[1].code == EXT_DATETIME


def test_codec_custom_extension(point_registry):
    """Test that a registered custom type round trips."""
    codec = MsgpackCodec(point_registry)
    document = {"origin": Point(0, 0), "path": [Point(1, 2), Point(3, 4)]}

    assert codec.decode(codec.encode(document)) == document


def test_codec_extension_checked_before_builtin_encoding():
    """Test that a registered str subclass is not encoded as a plain string."""
    registry = ExtensionRegistry()
    registry.register(20, Tag, lambda t: str(t).encode(), lambda b: Tag(b.decode()))
    codec = MsgpackCodec(registry)

    decoded = codec.decode(codec.encode({"tag": Tag("urgent"), "plain": "urgent"}))

    assert type(decoded["tag"]) is Tag
    assert type(decoded["plain"]) is str


def test_codec_unknown_extension_is_preserved(point_registry):
    """Test that ext codes without a handler survive decode and re-encode."""
    data = MsgpackCodec(point_registry).encode({"p": Point(5, 6)})

    plain = MsgpackCodec()
    decoded = plain.decode(data)

    assert isinstance(decoded["p"], msgpack.ExtType)
    assert decoded["p"].code == 10
    assert plain.encode(decoded) == data


def test_codec_decode_empty_bytes(codec):
    with pytest.raises(DecodeError):
        codec.decode(b"")


def test_codec_decode_truncated(codec):
    """Test that truncated bytes are rejected."""
    data = codec.encode({"name": "a fairly long string value"})

    with pytest.raises(DecodeError):
        codec.decode(data[:-3])


def test_codec_decode_trailing_garbage(codec):
    data = codec.encode({"a": 1}) + b"\x01"

    with pytest.raises(DecodeError):
        codec.decode(data)


def test_codec_decode_invalid_format_byte(codec):
    with pytest.raises(DecodeError):
        codec.decode(b"\xc1")


def test_codec_decode_invalid_utf8(codec):
    with pytest.raises(DecodeError):
        codec.decode(b"\xa2\xff\xfe")


def test_codec_decode_failing_extension():
    """Test that a failing extension decoder surfaces as DecodeError."""
    registry = ExtensionRegistry()
    registry.register(30, Point, lambda p: b"bogus", lambda b: Point(*msgpack.unpackb(b)))
    codec = MsgpackCodec(registry)

    data = codec.encode(Point(1, 1))

    with pytest.raises(DecodeError):
        codec.decode(data)


def test_codec_encode_unsupported_type(codec):
    with pytest.raises(EncodeError):
        codec.encode({"obj": object()})


def test_codec_encode_cyclic_value(codec):
    document = {}
    document["self"] = document

    with pytest.raises(EncodeError):
        codec.encode(document)


def test_codec_encode_deeply_nested_value(codec):
    """Test that nesting past the interpreter limit is an EncodeError."""
    deep = []
    for _ in range(5000):
        deep = [deep]

    with pytest.raises(EncodeError):
        codec.encode(deep)


def test_codec_decode_deeply_nested_bytes(codec):
    data = b"\x91" * 5000 + b"\x90"

    with pytest.raises(DecodeError):
        codec.decode(data)


def test_codec_encode_failing_extension():
    registry = ExtensionRegistry()

    def explode(value):
        raise RuntimeError("boom")

    registry.register(31, Point, explode, lambda b: None)

    with pytest.raises(EncodeError, match="boom"):
        MsgpackCodec(registry).encode(Point(1, 2))


def test_registry_rejects_duplicates(point_registry):
    with pytest.raises(ValueError, match="code 10"):
        point_registry.register(10, Tag, str.encode, bytes.decode)
    with pytest.raises(ValueError, match="Point"):
        point_registry.register(11, Point, str.encode, bytes.decode)


def test_registry_rejects_out_of_range_codes():
    registry = ExtensionRegistry()

    with pytest.raises(ValueError):
        registry.register(-1, Point, str.encode, bytes.decode)
    with pytest.raises(ValueError):
        registry.register(128, Point, str.encode, bytes.decode)


def test_registry_lookup(point_registry):
    """Test lookups by value and by code."""
    assert point_registry.for_value(Point(1, 2)).code == 10
    assert point_registry.for_value("not a point") is None
    assert point_registry.for_code(10).type is Point
    assert point_registry.for_code(99) is None
    assert 10 in point_registry
    assert len(point_registry) == 1
