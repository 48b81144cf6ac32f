from collections.abc import Iterator
from typing import NewType

import pytest

from binlayout.codecs import (
    RegisteredDelegatedCodec,
    SelfCodec,
    SelfDelegatedCodec,
    TypeDispatcher,
    ValueKind,
    classify_type,
    make_codec_for_type,
    make_default_type_map,
    register_delegate,
    unregister_delegate,
)
from binlayout.codecs.delegated_codec import delegates_version
from binlayout.serialization import (
    Deserializer,
    SerializationTypeError,
    Serializer,
    TypeUnsupportedError,
)
from binlayout.serialization.encoding.count import pack_count
from binlayout.types import UInt8, UInt16


class Color:
    def __init__(self, r: int, g: int, b: int) -> None:
        self.rgb = (r, g, b)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Color) and self.rgb == other.rgb

    def __hash__(self) -> int:
        return hash(self.rgb)


def encode_color(serializer: Serializer, color: Color) -> None:
    serializer.write_type_tuple((UInt8, UInt8, UInt8), color.rgb)


def decode_color(deserializer: Deserializer) -> Color:
    return Color(*deserializer.read_type_tuple((UInt8, UInt8, UInt8)))


@pytest.fixture
def color_delegate() -> Iterator[None]:
    register_delegate(Color, encode_color, decode_color)
    yield
    unregister_delegate(Color)


class Version(SelfCodec):
    def __init__(self, major: int, minor: int) -> None:
        self.major = major
        self.minor = minor

    def serialize(self, serializer: Serializer, /) -> None:
        serializer.write_type(UInt16, self.major)
        serializer.write_type(UInt16, self.minor)

    @classmethod
    def deserialize(cls, deserializer: Deserializer, /) -> 'Version':
        return cls(deserializer.read_type(UInt16), deserializer.read_type(UInt16))


class Tag:
    """Implements the protocol without inheriting from it."""

    def __init__(self, name: str) -> None:
        self.name = name

    def serialize(self, serializer: Serializer, /) -> None:
        serializer.write_type(str, self.name)

    @classmethod
    def deserialize(cls, deserializer: Deserializer, /) -> 'Tag':
        return cls(deserializer.read_type(str))


def uint16_bytes(value: int) -> bytes:
    return make_codec_for_type(UInt16).to_bytes(value)


def test_unregistered_type_is_unsupported() -> None:
    with pytest.raises(TypeUnsupportedError):
        make_codec_for_type(Color)


def test_registered_delegate(color_delegate: None) -> None:
    assert classify_type(Color) is ValueKind.DELEGATED
    codec = make_codec_for_type(Color)
    assert isinstance(codec, RegisteredDelegatedCodec)
    data = codec.to_bytes(Color(1, 2, 3))
    assert data == b'\x01\x02\x03'
    assert codec.from_bytes(data) == Color(1, 2, 3)


def test_delegate_value_type_is_checked(color_delegate: None) -> None:
    codec = make_codec_for_type(Color)
    with pytest.raises(SerializationTypeError):
        codec.to_bytes((1, 2, 3))


def test_delegate_inside_containers(color_delegate: None) -> None:
    codec = make_codec_for_type(dict[str, list[Color]])
    value = {'warm': [Color(255, 0, 0), Color(255, 128, 0)], 'none': []}
    assert codec.from_bytes(codec.to_bytes(value)) == value
    # delegated items are never packed
    data = make_codec_for_type(list[Color]).to_bytes([Color(1, 2, 3)])
    assert data == pack_count(1) + b'\x01\x02\x03'


def test_delegate_for_new_type(color_delegate: None) -> None:
    Background = NewType('Background', Color)
    codec = make_codec_for_type(Background)
    assert codec.kind is ValueKind.DELEGATED
    assert codec.from_bytes(codec.to_bytes(Background(Color(4, 5, 6)))) == Color(4, 5, 6)


def test_delegate_takes_precedence_over_type_map() -> None:
    Celsius = NewType('Celsius', float)
    assert classify_type(Celsius) is ValueKind.TRIVIAL
    register_delegate(Celsius, lambda se, v: se.write_type(str, f'{v}C'), lambda de: float(de.read_type(str)[:-1]))
    try:
        codec = make_codec_for_type(Celsius)
        assert codec.kind is ValueKind.DELEGATED
        assert codec.from_bytes(codec.to_bytes(21.5)) == 21.5
    finally:
        unregister_delegate(Celsius)
    assert classify_type(Celsius) is ValueKind.TRIVIAL


def test_dispatcher_cache_follows_registry() -> None:
    dispatcher = TypeDispatcher(make_default_type_map())
    with pytest.raises(TypeUnsupportedError):
        dispatcher.codec_for(Color)
    version = delegates_version()
    register_delegate(Color, encode_color, decode_color)
    try:
        assert delegates_version() != version
        codec = dispatcher.codec_for(Color)
        assert dispatcher.codec_for(Color) is codec
    finally:
        unregister_delegate(Color)
    with pytest.raises(TypeUnsupportedError):
        dispatcher.codec_for(Color)
    # a codec that was already built keeps working
    assert codec.to_bytes(Color(0, 0, 1)) == b'\x00\x00\x01'


def test_register_errors() -> None:
    with pytest.raises(TypeError):
        register_delegate(Color, encode_color, None)  # type: ignore[arg-type]
    with pytest.raises(TypeUnsupportedError):
        register_delegate([Color], encode_color, decode_color)
    with pytest.raises(KeyError):
        unregister_delegate(Color)


def test_self_codec() -> None:
    assert classify_type(Version) is ValueKind.DELEGATED
    codec = make_codec_for_type(Version)
    assert isinstance(codec, SelfDelegatedCodec)
    data = codec.to_bytes(Version(1, 2))
    assert data == uint16_bytes(1) + uint16_bytes(2)
    result = codec.from_bytes(data)
    assert isinstance(result, Version)
    assert (result.major, result.minor) == (1, 2)


def test_self_codec_without_inheritance() -> None:
    codec = make_codec_for_type(list[Tag])
    result = codec.from_bytes(codec.to_bytes([Tag('a'), Tag('bc')]))
    assert [tag.name for tag in result] == ['a', 'bc']
    with pytest.raises(SerializationTypeError):
        codec.to_bytes([Version(1, 2)])