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
from collections import deque
from collections.abc import Collection, Hashable, Iterable, Set
from typing import ClassVar, TypeVar, get_args, get_origin

from typing_extensions import Self, override

from binlayout.codecs.codec import Codec, CodecOptions, ValueKind
from binlayout.codecs.scalar_codec import TrivialCodec
from binlayout.codecs.utils import is_origin_hashable, pretty_type
from binlayout.serialization import (
    Deserializer,
    SerializationTypeError,
    SerializationValueError,
    Serializer,
    TooLongError,
    TypeUnsupportedError,
)
from binlayout.serialization.compound_encoding.collection import decode_collection, encode_collection
from binlayout.serialization.compound_encoding.packed import decode_packed, encode_packed
from binlayout.serialization.encoding.count import count_size

T = TypeVar('T')
H = TypeVar('H', bound=Hashable)


class _CollectionCodec(Codec[Collection[T]], ABC):
    """ Used as base for Codec classes that represent dynamically-sized collections.

    Layout: [N: count prefix][item_0]...[item_N-1]

    Ordered collections of trivial items use the packed encoding: the same bytes, but all the items are packed and
    written in a single operation, and read back in a single operation too.
    """
    __slots__ = ('_item', '_options')

    kind = ValueKind.ITERABLE
    # whether iteration order is meaningful, only ordered collections are packed
    _ordered: ClassVar[bool] = True
    _item: Codec[T]
    _options: CodecOptions

    def __init__(self, item_codec: Codec[T], /, *, options: CodecOptions = CodecOptions()) -> None:
        self._item = item_codec
        self._options = options

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._item!r})'

    @abstractmethod
    def _build(self, items: Iterable[T]) -> Collection[T]:
        """ How to build the concrete collection from an iterable of items.
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: type[Collection[T]], /, *, type_map: Codec.TypeMap) -> Self:
        member_type = cls._get_member_type(type_)
        member_codec = Codec.from_type(member_type, type_map=type_map)
        return cls(member_codec, options=type_map.options)

    @classmethod
    def _get_member_type(cls, type_: type[Collection[T]]) -> type[T]:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, Collection):
            raise TypeUnsupportedError('expected Collection type')
        args = get_args(type_)
        if not args or len(args) != 1:
            raise TypeUnsupportedError(f'expected {pretty_type(origin_type)}[<type>]')
        return args[0]

    def _is_packed(self) -> bool:
        return self._ordered and isinstance(self._item, TrivialCodec)

    @override
    def min_size(self) -> int:
        return count_size(self._options.count_format)

    def _check_item(self, item: T) -> None:
        self._item._check_value(item, deep=True)

    @override
    def _check_value(self, value: Collection[T], /, *, deep: bool) -> None:
        if not isinstance(value, Collection) or isinstance(value, (str, bytes, bytearray)):
            raise SerializationTypeError(f'expected a collection, got {type(value)}')
        max_length = self._options.max_length
        if max_length is not None and len(value) > max_length:
            raise TooLongError(f'{len(value)} items is above the maximum of {max_length}')
        if deep:
            for i in value:
                self._check_item(i)

    @override
    def _serialize(self, serializer: Serializer, value: Collection[T], /) -> None:
        if self._is_packed():
            assert isinstance(self._item, TrivialCodec)
            # the packed path skips Codec.serialize of the items, so they're checked here
            for i in value:
                self._item._check_value(i, deep=False)
            encode_packed(serializer, value, self._item.pack_many, count_format=self._options.count_format)
        else:
            encode_collection(serializer, value, self._item.serialize, count_format=self._options.count_format)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Collection[T]:
        if self._is_packed():
            assert isinstance(self._item, TrivialCodec)
            return decode_packed(
                deserializer,
                self._item.unpack_many,
                self._item.size(),
                self._build,
                count_format=self._options.count_format,
                max_length=self._options.max_length,
            )
        return decode_collection(
            deserializer,
            self._item.deserialize,
            self._build,
            count_format=self._options.count_format,
            max_length=self._options.max_length,
            min_item_size=self._item.min_size(),
        )


class ListCodec(_CollectionCodec[T]):
    """ Represents builtin `list` values.
    """

    __slots__ = ()

    @override
    def _build(self, items: Iterable[T]) -> list[T]:
        return list(items)


class DequeCodec(_CollectionCodec[T]):
    """ Represents builtin `collections.deque` values.
    """

    __slots__ = ()

    @override
    def _build(self, items: Iterable[T]) -> deque[T]:
        return deque(items)


class SetCodec(_CollectionCodec[H]):
    """ Represents builtin `set` values.

    Items are written in iteration order, which for sets isn't meaningful, so two equal sets are not guaranteed to
    have the same encoding. Decoding a set with repeated items fails, since the count would not match.
    """

    __slots__ = ()
    _ordered = False

    @override
    def _build(self, items: Iterable[H]) -> Set[H]:
        return set(self._unique(items))

    def _unique(self, items: Iterable[H]) -> list[H]:
        item_list = list(items)
        if len(set(item_list)) != len(item_list):
            raise SerializationValueError('repeated items in a set')
        return item_list

    @override
    @classmethod
    def _get_member_type(cls, type_: type[Collection[T]]) -> type[T]:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, Set):
            raise TypeUnsupportedError('expected Set type')
        member_type = super()._get_member_type(type_)
        if not is_origin_hashable(member_type):
            raise TypeUnsupportedError(f'{pretty_type(member_type)} is not hashable')
        return member_type

    @override
    def _check_item(self, item: H) -> None:
        if not isinstance(item, Hashable):
            raise SerializationTypeError('expected Hashable type')
        super()._check_item(item)


class FrozenSetCodec(SetCodec[H]):
    """ Represents builtin `frozenset` values.
    """

    __slots__ = ()

    @override
    def _build(self, items: Iterable[H]) -> frozenset[H]:
        return frozenset(self._unique(items))
