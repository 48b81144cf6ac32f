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

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable, Mapping
from typing import Iterable, TypeVar, get_args, get_origin

from typing_extensions import Self, override

from binlayout.codecs.codec import Codec, CodecOptions, ValueKind
from binlayout.codecs.utils import is_origin_hashable, pretty_type
from binlayout.serialization import (
    Deserializer,
    SerializationTypeError,
    SerializationValueError,
    Serializer,
    TooLongError,
    TypeUnsupportedError,
)
from binlayout.serialization.compound_encoding.mapping import decode_mapping, encode_mapping
from binlayout.serialization.encoding.count import count_size

T = TypeVar('T')
H = TypeVar('H', bound=Hashable)


class _MapCodec(Codec[Mapping[H, T]], ABC):
    """ Base class to help implement Codec for mappings.

    Layout: [N: count prefix][key_0][value_0]...[key_N-1][value_N-1]
    """

    __slots__ = ('_key', '_value', '_options')

    kind = ValueKind.ITERABLE
    _key: Codec[H]
    _value: Codec[T]
    _options: CodecOptions

    def __init__(self, key: Codec[H], value: Codec[T], /, *, options: CodecOptions = CodecOptions()) -> None:
        self._key = key
        self._value = value
        self._options = options

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._key!r}, {self._value!r})'

    @abstractmethod
    def _build(self, items: Iterable[tuple[H, T]]) -> Mapping[H, T]:
        """ How to build the concrete map from an iterable of (key, value).
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: type[Mapping[H, T]], /, *, type_map: Codec.TypeMap) -> Self:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, Mapping):
            raise TypeUnsupportedError('expected Mapping type')
        args = get_args(type_)
        if not args or len(args) != 2:
            raise TypeUnsupportedError(f'expected {pretty_type(origin_type)}[<key type>, <value type>]')
        key_type, value_type = args
        if not is_origin_hashable(key_type):
            raise TypeUnsupportedError(f'{pretty_type(key_type)} is not hashable')
        key_codec = Codec.from_type(key_type, type_map=type_map)
        value_codec = Codec.from_type(value_type, type_map=type_map)
        return cls(key_codec, value_codec, options=type_map.options)

    @override
    def min_size(self) -> int:
        return count_size(self._options.count_format)

    @override
    def _check_value(self, value: Mapping[H, T], /, *, deep: bool) -> None:
        if not isinstance(value, Mapping):
            raise SerializationTypeError(f'expected a mapping, got {type(value)}')
        max_length = self._options.max_length
        if max_length is not None and len(value) > max_length:
            raise TooLongError(f'{len(value)} entries is above the maximum of {max_length}')
        if deep:
            for k, v in value.items():
                self._key._check_value(k, deep=True)
                self._value._check_value(v, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: Mapping[H, T], /) -> None:
        encode_mapping(
            serializer,
            value,
            self._key.serialize,
            self._value.serialize,
            count_format=self._options.count_format,
        )

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Mapping[H, T]:
        return decode_mapping(
            deserializer,
            self._key.deserialize,
            self._value.deserialize,
            self._build,
            count_format=self._options.count_format,
            max_length=self._options.max_length,
            min_item_size=self._key.min_size() + self._value.min_size(),
        )


class DictCodec(_MapCodec[H, T]):
    """ Represents builtin `dict` values.

    Decoding a repeated key fails instead of silently keeping the last value.
    """

    __slots__ = ()

    @override
    def _build(self, items: Iterable[tuple[H, T]]) -> dict[H, T]:
        result: dict[H, T] = {}
        for k, v in items:
            if k in result:
                raise SerializationValueError(f'repeated key in a dict: {k!r}')
            result[k] = v
        return result
