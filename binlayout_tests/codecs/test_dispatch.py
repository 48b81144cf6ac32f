import ctypes
from collections import OrderedDict, deque
from collections.abc import Mapping, Sequence, Set
from typing import Any, NewType, Optional, Union

import pytest

from binlayout.codecs import (
    DEFAULT_TYPE_MAP,
    BoolCodec,
    BytesCodec,
    Codec,
    CodecOptions,
    CTypesCodec,
    DictCodec,
    Float64Codec,
    FrozenSetCodec,
    Int32Codec,
    Int64Codec,
    ListCodec,
    TextCodec,
    TupleCodec,
    TypeDispatcher,
    ValueKind,
    classify_type,
    make_codec_for_type,
    make_default_type_map,
)
from binlayout.conf import BinLayoutSettings
from binlayout.serialization import TypeUnsupportedError
from binlayout.types import Int32


@pytest.mark.parametrize('type_, kind', [
    (int, ValueKind.TRIVIAL),
    (float, ValueKind.TRIVIAL),
    (bool, ValueKind.TRIVIAL),
    (Int32, ValueKind.TRIVIAL),
    (ctypes.c_uint16, ValueKind.TRIVIAL),
    (ctypes.c_double * 4, ValueKind.TRIVIAL),
    (str, ValueKind.ITERABLE),
    (bytes, ValueKind.ITERABLE),
    (list[int], ValueKind.ITERABLE),
    (tuple[int, ...], ValueKind.ITERABLE),
    (tuple[int, str], ValueKind.ITERABLE),
    (dict[str, int], ValueKind.ITERABLE),
    (set[str], ValueKind.ITERABLE),
])
def test_classify(type_: Any, kind: ValueKind) -> None:
    assert classify_type(type_) is kind


@pytest.mark.parametrize('type_', [
    object,
    list,
    dict[str],
    tuple,
    Optional[int],
    int | str,
    Union[int, bytes],
    set[list[int]],
    dict[list[int], int],
    tuple[int, ..., str],
    'int',
    ctypes.c_char_p,
    ctypes.c_void_p,
    ctypes.POINTER(ctypes.c_int),
    ctypes.Structure,
    complex,
])
def test_unsupported_types(type_: Any) -> None:
    with pytest.raises(TypeUnsupportedError):
        make_codec_for_type(type_)
    # it is also a TypeError
    with pytest.raises(TypeError):
        classify_type(type_)


@pytest.mark.parametrize('type_, codec_class', [
    (int, Int64Codec),
    (float, Float64Codec),
    (bool, BoolCodec),
    (Int32, Int32Codec),
    (str, TextCodec),
    (bytes, BytesCodec),
    (bytearray, BytesCodec),
    (list[int], ListCodec),
    (Sequence[int], ListCodec),
    (Set[int], FrozenSetCodec),
    (Mapping[str, int], DictCodec),
    (OrderedDict[str, int], DictCodec),
    (tuple[int, str], TupleCodec),
    (ctypes.c_int8, CTypesCodec),
])
def test_codec_class(type_: Any, codec_class: type[Codec]) -> None:
    assert type(Codec.from_type(type_, type_map=DEFAULT_TYPE_MAP)) is codec_class


def test_new_type_follows_supertype() -> None:
    UserId = NewType('UserId', Int32)
    Name = NewType('Name', str)
    assert isinstance(make_codec_for_type(UserId), Int32Codec)
    assert isinstance(make_codec_for_type(Name), TextCodec)
    assert make_codec_for_type(list[UserId]).to_bytes([1]) == make_codec_for_type(list[Int32]).to_bytes([1])


def test_int_is_eight_bytes() -> None:
    assert len(make_codec_for_type(int).to_bytes(1)) == 8
    assert len(make_codec_for_type(bool).to_bytes(True)) == 1


def test_dispatcher_caches_codecs() -> None:
    dispatcher = TypeDispatcher(DEFAULT_TYPE_MAP)
    codec = dispatcher.codec_for(list[int])
    assert dispatcher.codec_for(list[int]) is codec
    assert dispatcher.classify(list[int]) is ValueKind.ITERABLE


def test_dispatcher_options() -> None:
    settings = BinLayoutSettings(COUNT_FORMAT='B', MAX_CONTAINER_LENGTH=3)
    type_map = make_default_type_map(settings)
    assert type_map.options == CodecOptions(count_format='B', max_length=3, text_encoding='utf-8')
    dispatcher = TypeDispatcher(type_map)
    assert dispatcher.codec_for(str).to_bytes('abc') == b'\x03abc'
    assert dispatcher.codec_for(list[str]).to_bytes(['a']) == b'\x01\x01a'


def test_dispatcher_write_read() -> None:
    from binlayout.serialization import Deserializer, Serializer
    dispatcher = TypeDispatcher(DEFAULT_TYPE_MAP)
    se = Serializer.build_bytes_serializer()
    dispatcher.write(se, dict[str, list[int]], {'a': [1, 2]})
    de = Deserializer.build_bytes_deserializer(se.finalize())
    assert dispatcher.read(de, dict[str, list[int]]) == {'a': [1, 2]}


def test_custom_codecs_map() -> None:
    type_map = Codec.TypeMap({}, {**DEFAULT_TYPE_MAP.codecs_map, int: Int32Codec})
    assert len(Codec.from_type(int, type_map=type_map).to_bytes(1)) == 4
    # the alias map is empty, so abstract types are not replaced anymore
    with pytest.raises(TypeUnsupportedError):
        Codec.from_type(Sequence[int], type_map=type_map)


def test_deque() -> None:
    codec = make_codec_for_type(deque[str])
    assert codec.from_bytes(codec.to_bytes(deque(['a', 'b']))) == deque(['a', 'b'])
