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
Adapters that put a limit on how many bytes can go through a sink.

The limit is checked before the wrapped sink is touched:

>>> se = Serializer.build_bytes_serializer().with_max_bytes(3)
>>> se.write_bytes(b'ab')
>>> se.bytes_left
1
>>> try:
...     se.write_bytes(b'cd')
... except MaxBytesExceededError as e:
...     print(*e.args)
2 bytes requested, only 1 left of a maximum of 3
>>> bytes(se.finalize())
b'ab'
"""

from typing import TypeVar

from typing_extensions import override

from binlayout.serialization.deserializer import Deserializer
from binlayout.serialization.exceptions import SerializationError
from binlayout.serialization.serializer import Serializer

from ..types import Buffer
from .base import DeserializerAdapter, SerializerAdapter

S = TypeVar('S', bound=Serializer)
D = TypeVar('D', bound=Deserializer)


class MaxBytesExceededError(SerializationError):
    """ The adapted sink reached its maximum number of bytes written or read.

    The adapter cannot be used after this. Handlers are expected to either bubble up the exception (or an equivalent
    one) or return an error, they should not try to use the same adapter again.
    """
    pass


class _Budget:
    __slots__ = ('max_bytes', 'left')

    def __init__(self, max_bytes: int) -> None:
        if max_bytes < 0:
            raise ValueError(f'max_bytes cannot be negative, got {max_bytes}')
        self.max_bytes = max_bytes
        self.left = max_bytes

    def spend(self, size: int) -> None:
        if size > self.left:
            left, self.left = self.left, -1
            raise MaxBytesExceededError(f'{size} bytes requested, only {max(left, 0)} left of a maximum of '
                                        f'{self.max_bytes}')
        self.left -= size


class MaxBytesSerializer(SerializerAdapter[S]):
    def __init__(self, serializer: S, max_bytes: int) -> None:
        super().__init__(serializer)
        self._budget = _Budget(max_bytes)

    @property
    def bytes_left(self) -> int:
        return max(self._budget.left, 0)

    @override
    def write_byte(self, data: int) -> None:
        self._budget.spend(1)
        super().write_byte(data)

    @override
    def write_bytes(self, data: Buffer) -> None:
        data_view = memoryview(data)
        self._budget.spend(data_view.nbytes)
        super().write_bytes(data_view)


class MaxBytesDeserializer(DeserializerAdapter[D]):
    def __init__(self, deserializer: D, max_bytes: int) -> None:
        super().__init__(deserializer)
        self._budget = _Budget(max_bytes)

    @property
    def bytes_left(self) -> int:
        return max(self._budget.left, 0)

    @override
    def bytes_available(self) -> int | None:
        available = super().bytes_available()
        if available is None:
            return None
        return min(available, self.bytes_left)

    @override
    def read_byte(self) -> int:
        self._budget.spend(1)
        return super().read_byte()

    @override
    def read_bytes(self, n: int, *, exact: bool = True) -> Buffer:
        self._budget.spend(n)
        return super().read_bytes(n, exact=exact)

    @override
    def read_all(self) -> Buffer:
        result = super().read_bytes(self.bytes_left, exact=False)
        self._budget.left -= len(result)
        if not self.is_empty():
            raise MaxBytesExceededError(f'more than {self._budget.max_bytes} bytes left to read')
        return result
