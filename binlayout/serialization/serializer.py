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

import struct
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import TYPE_CHECKING, Any, TypeVar, overload

from typing_extensions import Self

from .types import Buffer, SupportsWrite

if TYPE_CHECKING:
    from .adapters import MaxBytesSerializer, StreamSerializer
    from .bytes_serializer import BytesSerializer

T = TypeVar('T')


@lru_cache(maxsize=256)
def compiled_struct(format: str) -> struct.Struct:
    """Shared cache of compiled `struct` formats, used by both halves of a sink."""
    return struct.Struct(format)


class Serializer(ABC):
    """The writing half of a sink.

    Implementations only have to provide `cur_pos`, `write_byte` and `write_bytes`, everything else is built on top
    of them. A single `write_bytes` call must either write all of the given bytes or none of them.
    """

    @staticmethod
    def build_bytes_serializer() -> BytesSerializer:
        from .bytes_serializer import BytesSerializer
        return BytesSerializer()

    @staticmethod
    def build_stream_serializer(stream: SupportsWrite) -> StreamSerializer:
        from .adapters import StreamSerializer
        return StreamSerializer(stream)

    def finalize(self) -> Buffer:
        """Hand out everything that was written, the serializer is done after this."""
        raise TypeError(f'{type(self).__name__} cannot be finalized')

    @abstractmethod
    def cur_pos(self) -> int:
        """How many bytes were written so far."""
        raise NotImplementedError

    @abstractmethod
    def write_byte(self, data: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_bytes(self, data: Buffer) -> None:
        raise NotImplementedError

    def write_struct(self, data: tuple[Any, ...], format: str) -> None:
        self.write_bytes(compiled_struct(format).pack(*data))

    def write_type(self, type_: type[T], value: T) -> None:
        """Write a value using the codec the default dispatcher picks for the given type."""
        from binlayout.codecs import get_default_dispatcher
        get_default_dispatcher().write(self, type_, value)

    def write_type_tuple(self, types_tuple: tuple[type[Any], ...], values_tuple: tuple[Any, ...]) -> None:
        """Write a tuple of values, each with the codec for the type in the same position.

        This is equivalent to `Layout(*types_tuple).write(self, *values_tuple)`.
        """
        from binlayout.layout import Layout
        Layout(*types_tuple).write(self, *values_tuple)

    def with_max_bytes(self, max_bytes: int) -> MaxBytesSerializer[Self]:
        """Wrap this serializer so that no more than `max_bytes` go through it."""
        from .adapters import MaxBytesSerializer
        return MaxBytesSerializer(self, max_bytes)

    @overload
    def with_optional_max_bytes(self, max_bytes: None) -> Self:
        ...

    @overload
    def with_optional_max_bytes(self, max_bytes: int) -> MaxBytesSerializer[Self]:
        ...

    def with_optional_max_bytes(self, max_bytes: int | None) -> Self | MaxBytesSerializer[Self]:
        """Same as `with_max_bytes`, except that `None` means no limit and returns the serializer itself."""
        if max_bytes is None:
            return self
        return self.with_max_bytes(max_bytes)
