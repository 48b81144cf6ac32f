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

"""
Delegated types bring their own encoder and decoder instead of being described by a codec from a type map.

There are two ways of doing that: a class can implement the `SelfCodec` protocol, or an encoder/decoder pair can be
registered for a type with `register_delegate`, which is useful for types that can't be changed:

>>> from fractions import Fraction
>>> from binlayout.codecs import make_codec_for_type
>>> from binlayout.types import Int32
>>> register_delegate(
...     Fraction,
...     lambda se, v: se.write_type_tuple((Int32, Int32), (v.numerator, v.denominator)),
...     lambda de: Fraction(*de.read_type_tuple((Int32, Int32))),
... )
>>> codec = make_codec_for_type(Fraction)
>>> codec.kind
<ValueKind.DELEGATED: 'delegated'>
>>> codec.from_bytes(codec.to_bytes(Fraction(3, 4)))
Fraction(3, 4)
>>> unregister_delegate(Fraction)
"""

from __future__ import annotations

import threading
from typing import Any, Callable, NamedTuple, Protocol, TypeVar, get_origin, runtime_checkable

from structlog import get_logger
from typing_extensions import Self, override

from binlayout.codecs.codec import Codec, ValueKind
from binlayout.codecs.utils import pretty_type
from binlayout.serialization import Deserializer, SerializationTypeError, Serializer, TypeUnsupportedError
from binlayout.utils.typing import resolve_new_type

logger = get_logger()

T = TypeVar('T')

DelegateEncoder = Callable[[Serializer, Any], None]
DelegateDecoder = Callable[[Deserializer], Any]


@runtime_checkable
class SelfCodec(Protocol):
    """ A class that knows how to write and read its own instances.

    The usual implementation builds a `Layout` over its own fields, see `binlayout.layout.layout_dataclass`.
    """

    def serialize(self, serializer: Serializer, /) -> None:
        ...

    @classmethod
    def deserialize(cls, deserializer: Deserializer, /) -> Self:
        ...


class Delegate(NamedTuple):
    encoder: DelegateEncoder
    decoder: DelegateDecoder


_delegates: dict[Any, Delegate] = {}
_delegates_lock = threading.Lock()
_delegates_version = 0


def register_delegate(type_: Any, encoder: DelegateEncoder, decoder: DelegateDecoder) -> None:
    """ Register an encoder/decoder pair for a type, it takes precedence over any codec in a type map.

    Codecs that were already built keep the delegate (or codec) they were built with.
    """
    global _delegates_version
    if not callable(encoder) or not callable(decoder):
        raise TypeError('encoder and decoder must be callable')
    try:
        hash(type_)
    except TypeError:
        raise TypeUnsupportedError(f'{pretty_type(type_)} cannot have a delegate') from None
    with _delegates_lock:
        _delegates[type_] = Delegate(encoder, decoder)
        _delegates_version += 1
    logger.debug('delegate registered', type=pretty_type(type_))


def unregister_delegate(type_: Any) -> None:
    """ Remove a delegate registered with `register_delegate`, raise `KeyError` if there isn't one.
    """
    global _delegates_version
    with _delegates_lock:
        del _delegates[type_]
        _delegates_version += 1
    logger.debug('delegate unregistered', type=pretty_type(type_))


def get_delegate(type_: Any) -> Delegate | None:
    try:
        return _delegates.get(type_)
    except TypeError:
        # unhashable, can't have a delegate
        return None


def delegates_version() -> int:
    """ A number that changes every time a delegate is registered or unregistered.
    """
    return _delegates_version


class _DelegatedCodec(Codec[T]):
    __slots__ = ('_type',)

    kind = ValueKind.DELEGATED
    _type: type[T]

    def __init__(self, type_: type[T], /) -> None:
        self._type = type_

    def __repr__(self) -> str:
        return f'{type(self).__name__}({pretty_type(self._type)})'

    @override
    def _check_value(self, value: T, /, *, deep: bool) -> None:
        class_ = resolve_new_type(get_origin(self._type) or self._type)
        if isinstance(class_, type) and not isinstance(value, class_):
            raise SerializationTypeError(f'expected {pretty_type(class_)} instance, got {type(value)}')


class SelfDelegatedCodec(_DelegatedCodec[T]):
    """ Codec for classes that implement `SelfCodec`.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[T], /, *, type_map: Codec.TypeMap) -> Self:
        if not isinstance(type_, type) or not issubclass(type_, SelfCodec):
            raise TypeUnsupportedError(f'{pretty_type(type_)} does not implement serialize/deserialize')
        return cls(type_)

    @override
    def _serialize(self, serializer: Serializer, value: T, /) -> None:
        value.serialize(serializer)  # type: ignore[attr-defined]

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> T:
        return self._type.deserialize(deserializer)  # type: ignore[attr-defined]


class RegisteredDelegatedCodec(_DelegatedCodec[T]):
    """ Codec for types with a delegate registered through `register_delegate`.

    The delegate is looked up when the codec is built.
    """

    __slots__ = ('_delegate',)

    _delegate: Delegate

    def __init__(self, type_: type[T], delegate: Delegate, /) -> None:
        super().__init__(type_)
        self._delegate = delegate

    @override
    @classmethod
    def _from_type(cls, type_: type[T], /, *, type_map: Codec.TypeMap) -> Self:
        delegate = get_delegate(get_origin(type_) or type_)
        if delegate is None:
            raise TypeUnsupportedError(f'no delegate registered for {pretty_type(type_)}')
        return cls(type_, delegate)

    @override
    def _serialize(self, serializer: Serializer, value: T, /) -> None:
        self._delegate.encoder(serializer, value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> T:
        return self._delegate.decoder(deserializer)
