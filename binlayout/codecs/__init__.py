# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import ctypes
from collections import OrderedDict, deque
from collections.abc import Mapping, MutableMapping, MutableSequence, MutableSet, Sequence, Set
from typing import TYPE_CHECKING, Any, Optional, TypeVar

from binlayout.codecs.bytes_codec import BytesCodec, TextCodec
from binlayout.codecs.codec import Codec, CodecOptions, ValueKind
from binlayout.codecs.collection_codec import DequeCodec, FrozenSetCodec, ListCodec, SetCodec
from binlayout.codecs.ctypes_codec import CTypesCodec
from binlayout.codecs.delegated_codec import (
    RegisteredDelegatedCodec,
    SelfCodec,
    SelfDelegatedCodec,
    register_delegate,
    unregister_delegate,
)
from binlayout.codecs.dispatcher import TypeDispatcher, get_default_dispatcher
from binlayout.codecs.map_codec import DictCodec
from binlayout.codecs.scalar_codec import (
    BoolCodec,
    CharCodec,
    Float32Codec,
    Float64Codec,
    Int8Codec,
    Int16Codec,
    Int32Codec,
    Int64Codec,
    TrivialCodec,
    UInt8Codec,
    UInt16Codec,
    UInt32Codec,
    UInt64Codec,
)
from binlayout.codecs.tuple_codec import TupleCodec
from binlayout.codecs.utils import TypeAliasMap, TypeToCodecMap
from binlayout.serialization import Deserializer, Serializer
from binlayout.types import (
    Bool,
    Char,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

if TYPE_CHECKING:
    from binlayout.conf import BinLayoutSettings

__all__ = [
    'DEFAULT_TYPE_ALIAS_MAP',
    'DEFAULT_TYPE_TO_CODEC_MAP',
    'DEFAULT_TYPE_MAP',
    'BoolCodec',
    'BytesCodec',
    'CTypesCodec',
    'CharCodec',
    'Codec',
    'CodecOptions',
    'DequeCodec',
    'DictCodec',
    'Float32Codec',
    'Float64Codec',
    'FrozenSetCodec',
    'Int8Codec',
    'Int16Codec',
    'Int32Codec',
    'Int64Codec',
    'ListCodec',
    'RegisteredDelegatedCodec',
    'SelfCodec',
    'SelfDelegatedCodec',
    'SetCodec',
    'TextCodec',
    'TrivialCodec',
    'TupleCodec',
    'TypeAliasMap',
    'TypeDispatcher',
    'TypeToCodecMap',
    'UInt8Codec',
    'UInt16Codec',
    'UInt32Codec',
    'UInt64Codec',
    'ValueKind',
    'classify_type',
    'get_default_dispatcher',
    'make_codec_for_type',
    'make_default_type_map',
    'read_value',
    'register_delegate',
    'unregister_delegate',
    'write_value',
]

T = TypeVar('T')

# abstract annotations are replaced by the concrete type that is built when decoding
DEFAULT_TYPE_ALIAS_MAP: TypeAliasMap = {
    OrderedDict: dict,
    Sequence: list,
    MutableSequence: list,
    Set: frozenset,
    MutableSet: set,
    Mapping: dict,
    MutableMapping: dict,
}

# Mapping between types and Codec classes.
DEFAULT_TYPE_TO_CODEC_MAP: TypeToCodecMap = {
    # builtin types:
    bool: BoolCodec,
    bytearray: BytesCodec,
    bytes: BytesCodec,
    dict: DictCodec,
    float: Float64Codec,
    frozenset: FrozenSetCodec,
    int: Int64Codec,
    list: ListCodec,
    set: SetCodec,
    str: TextCodec,
    tuple: TupleCodec,
    # other Python types:
    deque: DequeCodec,
    # sized scalars:
    Bool: BoolCodec,
    Char: CharCodec,
    Float32: Float32Codec,
    Float64: Float64Codec,
    Int8: Int8Codec,
    Int16: Int16Codec,
    Int32: Int32Codec,
    Int64: Int64Codec,
    UInt8: UInt8Codec,
    UInt16: UInt16Codec,
    UInt32: UInt32Codec,
    UInt64: UInt64Codec,
    # ctypes, only reached through the base classes of concrete ctypes types:
    ctypes._SimpleCData: CTypesCodec,
    ctypes.Structure: CTypesCodec,
    ctypes.Union: CTypesCodec,
    ctypes.Array: CTypesCodec,
}

# XXX: does not depend on the settings, the count format is the default and there's no maximum container length
DEFAULT_TYPE_MAP = Codec.TypeMap(DEFAULT_TYPE_ALIAS_MAP, DEFAULT_TYPE_TO_CODEC_MAP)


def make_default_type_map(settings: Optional['BinLayoutSettings'] = None) -> Codec.TypeMap:
    """ The default maps with the options from the given settings, or from the global settings if none is given.
    """
    if settings is None:
        from binlayout.conf import get_global_settings
        settings = get_global_settings()
    return Codec.TypeMap(DEFAULT_TYPE_ALIAS_MAP, DEFAULT_TYPE_TO_CODEC_MAP, CodecOptions.from_settings(settings))


def make_codec_for_type(type_: type[T], /) -> Codec[T]:
    """ Like Codec.from_type, but with the default maps and options.

    If you need to customize the mapping use `Codec.from_type` or a `TypeDispatcher` instead.
    """
    return get_default_dispatcher().codec_for(type_)


def classify_type(type_: type[Any], /) -> ValueKind:
    """ Whether a type is trivial, iterable or delegated, raise `TypeUnsupportedError` if it is neither.

    >>> classify_type(int)
    <ValueKind.TRIVIAL: 'trivial'>
    >>> classify_type(list[str])
    <ValueKind.ITERABLE: 'iterable'>
    """
    return get_default_dispatcher().classify(type_)


def write_value(serializer: Serializer, type_: type[T], value: T, /) -> None:
    get_default_dispatcher().write(serializer, type_, value)


def read_value(deserializer: Deserializer, type_: type[T], /) -> T:
    return get_default_dispatcher().read(deserializer, type_)
