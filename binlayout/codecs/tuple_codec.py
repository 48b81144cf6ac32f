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

from collections.abc import Iterable
from typing import Any, TypeVar, get_args, get_origin

from typing_extensions import Self, override

from binlayout.codecs.codec import Codec, CodecOptions, ValueKind
from binlayout.codecs.collection_codec import _CollectionCodec
from binlayout.codecs.utils import pretty_type
from binlayout.serialization import Deserializer, SerializationTypeError, Serializer, TypeUnsupportedError
from binlayout.serialization.compound_encoding.tuple import decode_tuple, encode_tuple

T = TypeVar('T')


class _VarTupleCodec(_CollectionCodec[T]):
    __slots__ = ()

    @override
    def _build(self, items: Iterable[T]) -> tuple[T, ...]:
        return tuple(items)


# XXX: we can't usefully describe the tuple type
class TupleCodec(Codec[tuple]):
    """ Represents tuple values, which can either be homogeneous-type variable size or heterogeneous-type fixed size.

    `tuple[T, ...]` is a dynamically-sized collection, it has a count prefix like a `list[T]` and the same encoding.
    `tuple[A, B, C]` has an arity both ends know, so it's just the members one after the other, this is also what a
    `Layout` is.
    """

    __slots__ = ('_varsize', '_args', '_collection')

    kind = ValueKind.ITERABLE
    _varsize: bool
    _args: tuple[Codec, ...]
    _collection: _VarTupleCodec | None

    def __init__(self, args: Codec | Iterable[Codec], /, *, options: CodecOptions = CodecOptions()) -> None:
        if isinstance(args, Codec):
            self._varsize = True
            self._args = (args,)
            self._collection = _VarTupleCodec(args, options=options)
        else:
            self._varsize = False
            self._args = tuple(args)
            for arg in self._args:
                assert isinstance(arg, Codec)
            self._collection = None

    def __repr__(self) -> str:
        if self._varsize:
            return f'{type(self).__name__}({self._args[0]!r}, ...)'
        return f'{type(self).__name__}({", ".join(map(repr, self._args))})'

    @property
    def members(self) -> tuple[Codec, ...]:
        return self._args

    @override
    @classmethod
    def _from_type(cls, type_: type[tuple], /, *, type_map: Codec.TypeMap) -> Self:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, tuple):
            raise TypeUnsupportedError('expected tuple type')
        args: list[Any] = list(get_args(type_))
        if not args:
            raise TypeUnsupportedError('expected tuple[<args...>] or tuple[<type>, ...]')
        if args[-1] is Ellipsis:
            if len(args) != 2:
                raise TypeUnsupportedError('ellipsis only allowed with one type: tuple[T, ...]')
            arg, _ellipsis = args
            return cls(Codec.from_type(arg, type_map=type_map), options=type_map.options)
        if Ellipsis in args:
            raise TypeUnsupportedError(f'misplaced ellipsis in {pretty_type(type_)}')
        return cls((Codec.from_type(arg, type_map=type_map) for arg in args), options=type_map.options)

    @override
    def min_size(self) -> int:
        if self._collection is not None:
            return self._collection.min_size()
        return sum(arg.min_size() for arg in self._args)

    @override
    def _check_value(self, value: tuple, /, *, deep: bool) -> None:
        if self._collection is not None:
            self._collection._check_value(value, deep=deep)
            return
        if not isinstance(value, (tuple, list)):
            raise SerializationTypeError(f'expected tuple-like, got {type(value)}')
        if len(value) != len(self._args):
            raise SerializationTypeError(f'wrong tuple size: expected {len(self._args)}, got {len(value)}')
        if deep:
            for i, arg_codec in zip(value, self._args):
                arg_codec._check_value(i, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: tuple, /) -> None:
        if self._collection is not None:
            self._collection._serialize(serializer, value)
        else:
            encode_tuple(serializer, tuple(value), tuple(i.serialize for i in self._args))

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> tuple:
        if self._collection is not None:
            return tuple(self._collection._deserialize(deserializer))
        return decode_tuple(deserializer, tuple(i.deserialize for i in self._args))
