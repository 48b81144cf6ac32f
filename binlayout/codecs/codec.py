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
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Generic, NamedTuple, TypeVar, final

from typing_extensions import Self

from binlayout.codecs.utils import TypeAliasMap, TypeToCodecMap, pretty_type, resolve_codec_class
from binlayout.serialization import Deserializer, Serializer, TypeUnsupportedError
from binlayout.serialization.consts import DEFAULT_COUNT_FORMAT
from binlayout.serialization.encoding.text import DEFAULT_TEXT_ENCODING

if TYPE_CHECKING:
    from binlayout.conf import BinLayoutSettings

T = TypeVar('T')


class ValueKind(Enum):
    """How a type is serialized, decided once when its codec is built."""

    # fixed-size flat bit pattern, copied byte for byte
    TRIVIAL = 'trivial'
    # has a traversal over elements, encoded with a count prefix (unless its arity is fixed) and the elements
    ITERABLE = 'iterable'
    # the type brings its own encoder and decoder
    DELEGATED = 'delegated'


class CodecOptions(NamedTuple):
    """Wire options shared by every codec built from the same type map."""

    count_format: str = DEFAULT_COUNT_FORMAT
    max_length: int | None = None
    text_encoding: str = DEFAULT_TEXT_ENCODING

    @classmethod
    def from_settings(cls, settings: BinLayoutSettings) -> CodecOptions:
        return cls(
            count_format=settings.COUNT_FORMAT,
            max_length=settings.MAX_CONTAINER_LENGTH,
            text_encoding=settings.TEXT_ENCODING,
        )


class Codec(ABC, Generic[T]):
    """ This class is used to model a type with a known type signature and how it will be (de)serialized.

    Codec instances are built from a type annotation with `Codec.from_type`, which is when unsupported types are
    rejected (with `TypeUnsupportedError`). After that, reading and writing never inspects types again, the codec
    already knows which encoding to use, including the codecs of the elements of a container.

    Values are checked before they're written: a value of the wrong type raises `SerializationTypeError`, and a value
    that can't be represented (out of range, too long) raises `SerializationValueError`, in both cases before any of
    its bytes are written.
    """

    class TypeMap(NamedTuple):
        alias_map: TypeAliasMap
        codecs_map: TypeToCodecMap
        options: CodecOptions = CodecOptions()

    # XXX: subclasses must override this if they need any properties
    __slots__ = ()

    # XXX: subclasses must initialize this property
    kind: ClassVar[ValueKind]

    # whether subclasses of a type in a TypeMap can use the same codec class
    _accepts_subclasses: ClassVar[bool] = False

    @final
    @staticmethod
    def from_type(type_: type[T], /, *, type_map: TypeMap) -> Codec[T]:
        """ Instantiate a Codec instance from a type signature using the given maps.

        A `codecs_map` associates concrete types to concrete Codec classes, while an `alias_map` associate types with
        substitute types to use instead.
        """
        codec_class, resolved_type = resolve_codec_class(type_, type_map=type_map)
        return codec_class._from_type(resolved_type, type_map=type_map)

    @classmethod
    def _from_type(cls, type_: type[T], /, *, type_map: TypeMap) -> Self:
        """ Instantiate a Codec instance from a type signature.

        The implementation is expected to inspect the given type's origin and args to check for compatibility and to
        use `Codec.from_type` for the arguments, forwarding the given `type_map`, this is the case for containers.
        """
        # XXX: a Codec that is only meant for local use does not need to implement _from_type
        raise TypeUnsupportedError(f'{cls.__name__} cannot be built from {pretty_type(type_)}')

    def min_size(self) -> int:
        """ The least number of bytes a value can take.

        Used to reject container counts that can't possibly fit in the available bytes.
        """
        return 0

    @final
    def check_value(self, value: T, /) -> None:
        """ Raise a SerializationTypeError or SerializationValueError if the value is not compatible.

        Unlike the check done by `serialize`, this check recurses into containers.
        """
        # XXX: subclasses must implement Codec._check_value, not Codec.check_value
        self._check_value(value, deep=True)

    @final
    def serialize(self, serializer: Serializer, value: T, /) -> None:
        """ Serialize a value instance according to the signature that was abstracted.

        Serialization includes a shallow check of the value, containers check each element when it is serialized.
        """
        # XXX: subclasses must implement Codec._serialize, not Codec.serialize
        self._check_value(value, deep=False)
        self._serialize(serializer, value)

    @final
    def deserialize(self, deserializer: Deserializer, /) -> T:
        """ Deserialize a value instance according to the signature that was abstracted.
        """
        # XXX: subclasses must implement Codec._deserialize, not Codec.deserialize
        value = self._deserialize(deserializer)
        self._check_value(value, deep=False)
        return value

    @final
    def to_bytes(self, value: T, /) -> bytes:
        """ Shortcut to quickly convert a value T to `bytes` and avoid using the serialization system.
        """
        serializer = Serializer.build_bytes_serializer()
        self.serialize(serializer, value)
        return bytes(serializer.finalize())

    @final
    def from_bytes(self, data: bytes, /) -> T:
        """ Shortcut to quickly parse a value T from `bytes` and avoid using the serialization system.

        All bytes must be consumed, otherwise `TrailingDataError` is raised.
        """
        deserializer = Deserializer.build_bytes_deserializer(data)
        value = self.deserialize(deserializer)
        deserializer.finalize()
        return value

    @abstractmethod
    def _check_value(self, value: T, /, *, deep: bool) -> None:
        """ Inner implementation of `Codec.check_value`.

        Compound values should use `Codec._check_value` on the inner codec(s) and pass the appropriate deep argument.
        """
        raise NotImplementedError

    @abstractmethod
    def _serialize(self, serializer: Serializer, value: T, /) -> None:
        """ Inner implementation of `serialize`, you can assume that the given value has been "shallow checked".

        When implementing the serialization with compound encoders, `Codec.serialize` should be passed as an `Encoder`
        instead of `Codec._serialize`, that way each element is checked before it is written.
        """
        raise NotImplementedError

    @abstractmethod
    def _deserialize(self, deserializer: Deserializer, /) -> T:
        """ Inner implementation of `deserialize`.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'
