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

from typing_extensions import override

from .deserializer import Deserializer
from .exceptions import BufferUnderflowError, TrailingDataError
from .types import Buffer


class BytesDeserializer(Deserializer):
    """ Deserializer over a byte sequence that is entirely in memory.

    The data is never copied: reads return slices of a view of it, and a read offset marks how much was consumed.
    """

    def __init__(self, data: Buffer) -> None:
        self._view = memoryview(data).cast('B')
        self._offset = 0

    def __repr__(self) -> str:
        return f'{type(self).__name__}(consumed={self._offset}, pending={self.bytes_available()})'

    def _take(self, n: int, *, exact: bool, consume: bool) -> memoryview:
        if n < 0:
            raise ValueError('value cannot be negative')
        pending = len(self._view) - self._offset
        if exact and pending < n:
            raise BufferUnderflowError(f'not enough bytes to read: {n} requested, {pending} pending')
        start = self._offset
        end = start + min(n, pending)
        if consume:
            self._offset = end
        return self._view[start:end]

    @override
    def finalize(self) -> None:
        if not self.is_empty():
            raise TrailingDataError(f'{self.bytes_available()} trailing bytes')
        del self._view

    @override
    def is_empty(self) -> bool:
        return self._offset >= len(self._view)

    @override
    def bytes_available(self) -> int:
        return len(self._view) - self._offset

    @override
    def peek_byte(self) -> int:
        if self.is_empty():
            raise BufferUnderflowError('not enough bytes to read')
        return self._view[self._offset]

    @override
    def peek_bytes(self, n: int, *, exact: bool = True) -> memoryview:
        return self._take(n, exact=exact, consume=False)

    @override
    def read_byte(self) -> int:
        b = self.peek_byte()
        self._offset += 1
        return b

    @override
    def read_bytes(self, n: int, *, exact: bool = True) -> memoryview:
        return self._take(n, exact=exact, consume=True)

    @override
    def read_all(self) -> memoryview:
        return self._take(self.bytes_available(), exact=True, consume=True)
