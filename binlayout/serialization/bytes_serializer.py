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

from .serializer import Serializer
from .types import Buffer


class BytesSerializer(Serializer):
    """ Unbounded in-memory serializer, the growable counterpart of `SerializerBuffer`.

    Everything is appended to one `bytearray`, so writes never overflow and a finished serializer hands out a single
    contiguous view. After `finalize` the serializer is done, any further use raises `AttributeError`.
    """

    def __init__(self) -> None:
        self._data = bytearray()

    def __repr__(self) -> str:
        return f'{type(self).__name__}(written={len(self._data)})'

    @override
    def finalize(self) -> memoryview:
        data = self._data
        del self._data
        return memoryview(bytes(data))

    @override
    def cur_pos(self) -> int:
        return len(self._data)

    @override
    def write_byte(self, data: int) -> None:
        if not 0 <= data <= 0xff:
            raise ValueError(f'byte must be in range(0, 256), got {data}')
        self._data.append(data)

    @override
    def write_bytes(self, data: Buffer) -> None:
        self._data += memoryview(data).cast('B')
