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
from typing import TYPE_CHECKING, Any, TypeVar, overload

from typing_extensions import Self

from .serializer import compiled_struct
from .types import Buffer, SupportsRead

if TYPE_CHECKING:
    from .adapters import MaxBytesDeserializer, StreamDeserializer
    from .bytes_deserializer import BytesDeserializer

T = TypeVar('T')


class Deserializer(ABC):
    """The reading half of a sink.

    A failed read must not consume anything: implementations check that enough bytes are pending before moving their
    read position.
    """

    @staticmethod
    def build_bytes_deserializer(data: Buffer) -> BytesDeserializer:
        from .bytes_deserializer import BytesDeserializer
        return BytesDeserializer(data)

    @staticmethod
    def build_stream_deserializer(stream: SupportsRead) -> StreamDeserializer:
        from .adapters import StreamDeserializer
        return StreamDeserializer(stream)

    def finalize(self) -> None:
        """Fail with `TrailingDataError` if anything is left unread, the deserializer is done after this."""
        raise TypeError(f'{type(self).__name__} cannot be finalized')

    @abstractmethod
    def is_empty(self) -> bool:
        raise NotImplementedError

    def bytes_available(self) -> int | None:
        """How many bytes can still be read, or None if that can't be known without reading (like on a stream)."""
        return None

    @abstractmethod
    def peek_byte(self) -> int:
        """Like `read_byte`, but the byte stays pending."""
        raise NotImplementedError

    @abstractmethod
    def peek_bytes(self, n: int, *, exact: bool = True) -> Buffer:
        """Like `read_bytes`, but the bytes stay pending."""
        raise NotImplementedError

    @abstractmethod
    def read_byte(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def read_bytes(self, n: int, *, exact: bool = True) -> Buffer:
        """Read `n` bytes. With `exact=False` fewer bytes are returned when fewer are pending, instead of failing."""
        raise NotImplementedError

    @abstractmethod
    def read_all(self) -> Buffer:
        """Read everything that is pending."""
        raise NotImplementedError

    def peek_struct(self, format: str) -> tuple[Any, ...]:
        compiled = compiled_struct(format)
        return compiled.unpack(self.peek_bytes(compiled.size))

    def read_struct(self, format: str) -> tuple[Any, ...]:
        compiled = compiled_struct(format)
        return compiled.unpack(self.read_bytes(compiled.size))

    def read_type(self, type_: type[T]) -> T:
        """ Read a value of the given type using the default dispatcher, consuming only its encoded bytes.
        """
        from binlayout.codecs import get_default_dispatcher
        return get_default_dispatcher().read(self, type_)

    def read_type_tuple(self, types_tuple: tuple[type[Any], ...]) -> tuple[Any, ...]:
        from binlayout.layout import Layout
        return Layout(*types_tuple).read(self)

    def with_max_bytes(self, max_bytes: int) -> MaxBytesDeserializer[Self]:
        """Wrap this deserializer so that no more than `max_bytes` are read through it."""
        from .adapters import MaxBytesDeserializer
        return MaxBytesDeserializer(self, max_bytes)

    @overload
    def with_optional_max_bytes(self, max_bytes: None) -> Self:
        ...

    @overload
    def with_optional_max_bytes(self, max_bytes: int) -> MaxBytesDeserializer[Self]:
        ...

    def with_optional_max_bytes(self, max_bytes: int | None) -> Self | MaxBytesDeserializer[Self]:
        """Same as `with_max_bytes`, except that `None` means no limit and returns the deserializer itself."""
        if max_bytes is None:
            return self
        return self.with_max_bytes(max_bytes)
