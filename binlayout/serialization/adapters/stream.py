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
Adapters that bind the sink interface to any file-like object.

The bytes that go through these adapters are exactly the bytes a `SerializerBuffer` would hold for the same writes,
there is no framing added, so data written through a stream can be read back through a buffer and vice-versa:

>>> import io
>>> from binlayout.serialization.encoding.scalar import decode_scalar, encode_scalar
>>> stream = io.BytesIO()
>>> with StreamSerializer(stream) as se:
...     encode_scalar(se, 7, 'B')
...     encode_scalar(se, True, '?')
>>> stream.getvalue()
b'\x07\x01'
>>> _ = stream.seek(0)
>>> de = StreamDeserializer(stream)
>>> decode_scalar(de, 'B'), decode_scalar(de, '?')
(7, True)
>>> de.is_empty()
True

The adapters never close the stream, the caller owns it:

>>> stream.closed
False
"""

from structlog import get_logger
from typing_extensions import override

from binlayout.serialization.deserializer import Deserializer
from binlayout.serialization.exceptions import BufferUnderflowError, SinkError, TrailingDataError
from binlayout.serialization.serializer import Serializer

from ..types import Buffer, SupportsRead, SupportsWrite
from .base import BorrowingContext

logger = get_logger()

# read size used when the amount of data to read isn't bounded, like in `read_all`
_CHUNK_SIZE = 64 * 1024


class StreamSerializer(BorrowingContext, Serializer):
    """ Serializer that writes straight to a stream.

    Every `write_bytes` call maps to one `stream.write` call. Streams that report how much they wrote (raw IO objects)
    are checked for short writes, which are reported with `SinkError` since there's no way to take those bytes back.
    """

    def __init__(self, stream: SupportsWrite) -> None:
        self._stream = stream
        self._pos = 0

    @override
    def cur_pos(self) -> int:
        return self._pos

    @override
    def write_byte(self, data: int) -> None:
        self.write_bytes(int.to_bytes(data, length=1, byteorder='big'))

    @override
    def write_bytes(self, data: Buffer) -> None:
        view = memoryview(data).cast('B')
        if not view:
            return
        written = self._stream.write(view)
        if written is not None and written != len(view):
            logger.debug('short write', expected=len(view), written=written)
            raise SinkError(f'stream accepted {written} of {len(view)} bytes')
        self._pos += len(view)


class StreamDeserializer(BorrowingContext, Deserializer):
    """ Deserializer that reads from a stream.

    Bytes are pulled from the stream on demand and kept in a lookahead buffer, which is what makes peeking possible. A
    read that can't be fully satisfied raises `BufferUnderflowError` and leaves whatever was pulled in the lookahead,
    so from the point of view of the caller nothing was consumed.
    """

    def __init__(self, stream: SupportsRead) -> None:
        self._stream = stream
        self._lookahead = bytearray()
        self._eof = False

    def _fill(self, n: int) -> None:
        """Try to have at least `n` bytes in the lookahead, pulling at most `_CHUNK_SIZE` bytes per read."""
        while not self._eof and len(self._lookahead) < n:
            chunk = self._stream.read(min(n - len(self._lookahead), _CHUNK_SIZE))
            if not chunk:
                self._eof = True
                break
            self._lookahead.extend(chunk)

    def _consume(self, n: int) -> bytes:
        data = bytes(self._lookahead[:n])
        del self._lookahead[:n]
        return data

    @override
    def finalize(self) -> None:
        if not self.is_empty():
            raise TrailingDataError('trailing data')

    @override
    def is_empty(self) -> bool:
        self._fill(1)
        return not self._lookahead

    @override
    def peek_byte(self) -> int:
        self._fill(1)
        if not self._lookahead:
            raise BufferUnderflowError('not enough bytes to read')
        return self._lookahead[0]

    @override
    def peek_bytes(self, n: int, *, exact: bool = True) -> bytes:
        if n < 0:
            raise ValueError('value cannot be negative')
        self._fill(n)
        if exact and len(self._lookahead) < n:
            raise BufferUnderflowError(f'not enough bytes to read: {n} requested, stream ended')
        return bytes(self._lookahead[:n])

    @override
    def read_byte(self) -> int:
        b = self.peek_byte()
        del self._lookahead[:1]
        return b

    @override
    def read_bytes(self, n: int, *, exact: bool = True) -> bytes:
        if n < 0:
            raise ValueError('value cannot be negative')
        self._fill(n)
        if exact and len(self._lookahead) < n:
            raise BufferUnderflowError(f'not enough bytes to read: {n} requested, stream ended')
        return self._consume(n)

    @override
    def read_all(self) -> bytes:
        while not self._eof:
            self._fill(len(self._lookahead) + _CHUNK_SIZE)
        return self._consume(len(self._lookahead))
