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
from collections.abc import Collection
from typing import ClassVar, TypeVar, get_args

from typing_extensions import Self, override

from binlayout.codecs.codec import Codec, ValueKind
from binlayout.codecs.utils import pretty_type
from binlayout.serialization import (
    Deserializer,
    SerializationTypeError,
    SerializationValueError,
    Serializer,
    TypeUnsupportedError,
)
from binlayout.serialization.encoding.scalar import (
    decode_scalar,
    encode_scalar,
    pack_scalar,
    pack_scalars,
    scalar_size,
    unpack_scalar,
    unpack_scalars,
)
from binlayout.serialization.types import Buffer

T = TypeVar('T')


class TrivialCodec(Codec[T], ABC):
    """ Base class for codecs of values with a fixed-size flat representation.

    The encoding of a trivial value is its native representation and nothing else, so a run of trivial values can be
    packed and unpacked in one go, which is what containers of trivial elements do.
    """

    __slots__ = ()
    kind = ValueKind.TRIVIAL

    @abstractmethod
    def size(self) -> int:
        """Number of bytes of every encoded value."""
        raise NotImplementedError

    @abstractmethod
    def pack(self, value: T, /) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def unpack(self, data: Buffer, /) -> T:
        raise NotImplementedError

    def pack_many(self, values: Collection[T], /) -> bytes:
        return b''.join(self.pack(value) for value in values)

    def unpack_many(self, data: Buffer, count: int, /) -> list[T]:
        size = self.size()
        view = memoryview(data)
        return [self.unpack(view[i * size:(i + 1) * size]) for i in range(count)]

    @override
    def min_size(self) -> int:
        return self.size()

    @override
    def _serialize(self, serializer: Serializer, value: T, /) -> None:
        serializer.write_bytes(self.pack(value))

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> T:
        return self.unpack(deserializer.read_bytes(self.size()))


class _StructCodec(TrivialCodec[T]):
    """ Base class for scalars that map to a `struct` format code.
    """

    __slots__ = ()

    # XXX: subclass must define these values:
    _code: ClassVar[str]
    _python_type: ClassVar[type | tuple[type, ...]]

    @override
    @classmethod
    def _from_type(cls, type_: type[T], /, *, type_map: Codec.TypeMap) -> Self:
        if get_args(type_):
            raise TypeUnsupportedError(f'{pretty_type(type_)} does not take type arguments')
        return cls()

    @override
    def size(self) -> int:
        return scalar_size(self._code)

    @override
    def _check_value(self, value: T, /, *, deep: bool) -> None:
        if not isinstance(value, self._python_type):
            raise SerializationTypeError(f'{type(self).__name__} expected {self._python_type}, got {type(value)}')

    @override
    def pack(self, value: T, /) -> bytes:
        return pack_scalar(value, self._code)

    @override
    def unpack(self, data: Buffer, /) -> T:
        return unpack_scalar(data, self._code)

    @override
    def pack_many(self, values: Collection[T], /) -> bytes:
        return pack_scalars(values, self._code)

    @override
    def unpack_many(self, data: Buffer, count: int, /) -> list[T]:
        return unpack_scalars(data, self._code, count)

    @override
    def _serialize(self, serializer: Serializer, value: T, /) -> None:
        encode_scalar(serializer, value, self._code)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> T:
        return decode_scalar(deserializer, self._code)


class _SizedIntCodec(_StructCodec[int]):
    """ Base class for classes that represent `int` values with a fixed size and signedness.
    """

    __slots__ = ()
    _python_type = int
    # XXX: subclass must define these values:
    _signed: ClassVar[bool]
    _byte_size: ClassVar[int]

    @classmethod
    def _upper_bound_value(cls) -> int:
        if cls._signed:
            return 2**(cls._byte_size * 8 - 1) - 1
        else:
            return 2**(cls._byte_size * 8) - 1

    @classmethod
    def _lower_bound_value(cls) -> int:
        if cls._signed:
            return -(2**(cls._byte_size * 8 - 1))
        else:
            return 0

    @override
    def _check_value(self, value: int, /, *, deep: bool) -> None:
        super()._check_value(value, deep=deep)
        self._check_range(value)

    def _check_range(self, value: int) -> None:
        if value > self._upper_bound_value():
            raise SerializationValueError(f'{value} is above the upper bound of {type(self).__name__}')
        if value < self._lower_bound_value():
            raise SerializationValueError(f'{value} is below the lower bound of {type(self).__name__}')


class Int8Codec(_SizedIntCodec):
    __slots__ = ()
    _code = 'b'
    _signed = True
    _byte_size = 1


class UInt8Codec(_SizedIntCodec):
    __slots__ = ()
    _code = 'B'
    _signed = False
    _byte_size = 1


class Int16Codec(_SizedIntCodec):
    __slots__ = ()
    _code = 'h'
    _signed = True
    _byte_size = 2


class UInt16Codec(_SizedIntCodec):
    __slots__ = ()
    _code = 'H'
    _signed = False
    _byte_size = 2


class Int32Codec(_SizedIntCodec):
    __slots__ = ()
    _code = 'i'
    _signed = True
    _byte_size = 4  # 4-bytes -> 32-bits


class UInt32Codec(_SizedIntCodec):
    __slots__ = ()
    _code = 'I'
    _signed = False
    _byte_size = 4  # 4-bytes -> 32-bits


class Int64Codec(_SizedIntCodec):
    """ Also used for builtin `int` values, like a C `long long`.
    """
    __slots__ = ()
    _code = 'q'
    _signed = True
    _byte_size = 8


class UInt64Codec(_SizedIntCodec):
    __slots__ = ()
    _code = 'Q'
    _signed = False
    _byte_size = 8


class _FloatCodec(_StructCodec[float]):
    __slots__ = ()
    _python_type = (float, int)

    @override
    def unpack(self, data: Buffer, /) -> float:
        return float(super().unpack(data))


class Float32Codec(_FloatCodec):
    """ Represents C `float` values, a Python float is rounded to the nearest single precision value when written.
    """
    __slots__ = ()
    _code = 'f'


class Float64Codec(_FloatCodec):
    """ Also used for builtin `float` values.
    """
    __slots__ = ()
    _code = 'd'


class BoolCodec(_StructCodec[bool]):
    """ Represents `bool` values, only `b'\\x00'` and `b'\\x01'` are valid encodings.
    """

    __slots__ = ()
    _code = '?'
    _python_type = bool

    def _check_raw(self, data: Buffer) -> None:
        for byte in bytes(data):
            if byte not in (0, 1):
                raise SerializationValueError(f'{bytes([byte])!r} is not a valid boolean')

    @override
    def unpack(self, data: Buffer, /) -> bool:
        self._check_raw(data)
        return super().unpack(data)

    @override
    def unpack_many(self, data: Buffer, count: int, /) -> list[bool]:
        self._check_raw(data)
        return super().unpack_many(data, count)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> bool:
        return self.unpack(deserializer.read_bytes(self.size()))


class CharCodec(_StructCodec[bytes]):
    """ Represents a single byte, as a `bytes` of length 1, like a C `char`.
    """

    __slots__ = ()
    _code = 'c'
    _python_type = bytes

    @override
    def _check_value(self, value: bytes, /, *, deep: bool) -> None:
        super()._check_value(value, deep=deep)
        if len(value) != 1:
            raise SerializationValueError(f'expected a single byte, got {len(value)} bytes')
