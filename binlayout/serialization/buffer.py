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

r"""
In-memory sinks with a bounded capacity.

A `SerializerBuffer` owns a single `bytearray` and two cursors into it. Bytes between the read cursor and the write
cursor are "pending" (written but not read yet), bytes after the write cursor are "free":

    0            read_pos           write_pos          capacity
    |  consumed   |     pending      |       free       |

Writes go to the front of the free region and reads take from the front of the pending region, like a queue that
never wraps around. A write that doesn't fit raises `BufferOverflowError`, a read of more bytes than are pending
raises `BufferUnderflowError`, in both cases the cursors are left untouched.

>>> from binlayout.types import Int32, Int64
>>> buf = FixedSerializerBuffer[16]()
>>> buf.write(7, Int32)
>>> buf.write(-1, Int64)
>>> buf.pending_size(), buf.free_size()
(12, 4)
>>> try:
...     buf.write(2, Int64)
... except BufferOverflowError as e:
...     print(*e.args)
cannot write 8 bytes, only 4 free
>>> buf.read(Int32), buf.read(Int64)
(7, -1)

Reading never makes room for more writes, only `reset()` does:

>>> buf.free_size()
4
>>> buf.reset()
>>> buf.free_size()
16
"""

from __future__ import annotations

from collections.abc import Collection
from functools import lru_cache
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from structlog import get_logger
from typing_extensions import Self, override

from .deserializer import Deserializer
from .exceptions import BufferOverflowError, BufferUnderflowError, TypeUnsupportedError
from .serializer import Serializer
from .types import Buffer

if TYPE_CHECKING:
    from binlayout.codecs.scalar_codec import TrivialCodec

logger = get_logger()

T = TypeVar('T')


class SerializerBuffer(Serializer, Deserializer):
    """ A bounded byte region that is both a Serializer (the free part) and a Deserializer (the pending part).

    Instances are not thread-safe, concurrent use needs external locking.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f'capacity must be positive, got {capacity}')
        self._buffer = bytearray(capacity)
        self._read_pos = 0
        self._write_pos = 0
        self.log = logger.new(capacity=capacity)

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}(capacity={self.capacity}, pending={self.pending_size()}, '
            f'free={self.free_size()})'
        )

    @property
    def capacity(self) -> int:
        return len(self._buffer)

    def free_size(self) -> int:
        """Number of bytes that can still be written."""
        return len(self._buffer) - self._write_pos

    def pending_size(self) -> int:
        """Number of bytes that were written but not read yet."""
        return self._write_pos - self._read_pos

    def pending_view(self) -> memoryview:
        """Read-only view of the pending bytes, nothing is consumed."""
        return memoryview(self._buffer)[self._read_pos:self._write_pos].toreadonly()

    def reset(self) -> None:
        """Make the whole region free again, pending bytes are discarded but the memory is not erased."""
        if self.pending_size():
            self.log.debug('discarding pending bytes', pending=self.pending_size())
        self._read_pos = 0
        self._write_pos = 0

    clear = reset

    # Serializer:

    @override
    def finalize(self) -> Buffer:
        raise TypeError('a buffer cannot be finalized, use pending_view() or read_all() instead')

    @override
    def cur_pos(self) -> int:
        return self._write_pos

    @override
    def write_byte(self, data: int) -> None:
        if not 0 <= data <= 0xff:
            raise ValueError(f'not a byte: {data}')
        if self.free_size() < 1:
            raise BufferOverflowError('cannot write 1 bytes, only 0 free')
        self._buffer[self._write_pos] = data
        self._write_pos += 1

    @override
    def write_bytes(self, data: Buffer) -> None:
        view = memoryview(data).cast('B')
        size = len(view)
        if size > self.free_size():
            raise BufferOverflowError(f'cannot write {size} bytes, only {self.free_size()} free')
        self._buffer[self._write_pos:self._write_pos + size] = view
        self._write_pos += size

    # Deserializer:

    @override
    def is_empty(self) -> bool:
        return self._read_pos == self._write_pos

    @override
    def bytes_available(self) -> int:
        return self.pending_size()

    @override
    def peek_byte(self) -> int:
        if self.is_empty():
            raise BufferUnderflowError('cannot read 1 bytes, only 0 pending')
        return self._buffer[self._read_pos]

    @override
    def peek_bytes(self, n: int, *, exact: bool = True) -> bytes:
        if n < 0:
            raise ValueError('value cannot be negative')
        if exact and n > self.pending_size():
            raise BufferUnderflowError(f'cannot read {n} bytes, only {self.pending_size()} pending')
        end = min(self._read_pos + n, self._write_pos)
        # a copy, so values read out of the buffer don't change when the region is written again after a reset
        return bytes(self._buffer[self._read_pos:end])

    @override
    def read_byte(self) -> int:
        b = self.peek_byte()
        self._read_pos += 1
        return b

    @override
    def read_bytes(self, n: int, *, exact: bool = True) -> bytes:
        data = self.peek_bytes(n, exact=exact)
        self._read_pos += len(data)
        return data

    @override
    def read_all(self) -> bytes:
        return self.read_bytes(self.pending_size())

    # typed transcription of trivial values:

    def _trivial_codec(self, type_: Any) -> TrivialCodec:
        from binlayout.codecs import get_default_dispatcher
        from binlayout.codecs.scalar_codec import TrivialCodec
        from binlayout.codecs.utils import pretty_type
        codec = get_default_dispatcher().codec_for(type_)
        if not isinstance(codec, TrivialCodec):
            raise TypeUnsupportedError(f'{pretty_type(type_)} is not a trivial type')
        return codec

    def write(self, value: Any, type_: Any = None) -> None:
        """ Write a single trivial value, when `type_` is omitted the type of the value is used.

        Nothing is written when the value doesn't fit.
        """
        codec = self._trivial_codec(type(value) if type_ is None else type_)
        codec.check_value(value)
        self.write_bytes(codec.pack(value))

    def read(self, type_: type[T]) -> T:
        """Read a single trivial value, nothing is consumed when there aren't enough pending bytes."""
        codec = self._trivial_codec(type_)
        return codec.unpack(self.read_bytes(codec.size()))

    def write_range(self, values: Collection[Any], type_: Any) -> None:
        """ Write all values back to back, without a count prefix.

        Either all values fit and are written or nothing is written.
        """
        codec = self._trivial_codec(type_)
        for value in values:
            codec.check_value(value)
        self.write_bytes(codec.pack_many(values))

    def read_range(self, count: int, type_: type[T]) -> list[T]:
        """Read `count` values written back to back, either all are read or nothing is consumed."""
        if count < 0:
            raise ValueError('count cannot be negative')
        codec = self._trivial_codec(type_)
        return codec.unpack_many(self.read_bytes(count * codec.size()), count)


@lru_cache(maxsize=None)
def _make_fixed_buffer_class(base: type[FixedSerializerBuffer], capacity: int) -> type[FixedSerializerBuffer]:
    if not isinstance(capacity, int) or capacity <= 0:
        raise TypeError(f'{base.__name__}[...] expects a positive int, got {capacity!r}')
    return type(f'{base.__name__}[{capacity}]', (base,), {'_capacity': capacity})


class FixedSerializerBuffer(SerializerBuffer):
    """ Buffer with the capacity fixed in the class: `FixedSerializerBuffer[16]` is the class of 16-byte buffers.

    >>> FixedSerializerBuffer[16] is FixedSerializerBuffer[16]
    True
    >>> FixedSerializerBuffer[16]().capacity
    16
    """

    _capacity: ClassVar[int]

    def __class_getitem__(cls, capacity: int) -> type[FixedSerializerBuffer]:
        return _make_fixed_buffer_class(cls, capacity)

    def __init__(self) -> None:
        capacity = getattr(self, '_capacity', None)
        if capacity is None:
            raise TypeError('use FixedSerializerBuffer[<capacity>]() to create a fixed buffer')
        super().__init__(capacity)

    @classmethod
    def from_values(cls, values: Collection[Any], type_: Any) -> Self:
        """Create a buffer with the given trivial values already pending."""
        buf = cls()
        buf.write_range(values, type_)
        return buf


class DynamicSerializerBuffer(SerializerBuffer):
    """ Buffer with the capacity chosen when it is created, it is fixed after that.

    When the capacity is omitted `DEFAULT_BUFFER_CAPACITY` from the settings is used.

    >>> DynamicSerializerBuffer(32).capacity
    32
    """

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is None:
            from binlayout.conf import get_global_settings
            capacity = get_global_settings().DEFAULT_BUFFER_CAPACITY
        super().__init__(capacity)

    @classmethod
    def from_bytes(cls, data: Buffer, *, capacity: int | None = None) -> Self:
        """ Create a buffer with the given bytes pending.

        The capacity is the size of the data unless given.
        """
        view = memoryview(data).cast('B')
        buf = cls(capacity if capacity is not None else (len(view) or None))
        buf.write_bytes(view)
        return buf

    @classmethod
    def from_values(cls, values: Collection[Any], type_: Any, *, capacity: int | None = None) -> Self:
        """ Create a buffer with the given trivial values pending.

        The capacity is the size of the values unless given.
        """
        from binlayout.codecs import get_default_dispatcher
        size = len(values) * get_default_dispatcher().codec_for(type_).min_size()
        buf = cls(capacity if capacity is not None else (size or None))
        buf.write_range(values, type_)
        return buf
