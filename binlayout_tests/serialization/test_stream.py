import io
import os

import pytest

from binlayout.codecs import TypeDispatcher, make_codec_for_type, make_default_type_map
from binlayout.conf import BinLayoutSettings
from binlayout.layout import Layout
from binlayout.serialization import BufferUnderflowError, Deserializer, Serializer, SinkError, TrailingDataError
from binlayout.serialization.adapters import StreamDeserializer, StreamSerializer
from binlayout.serialization.adapters.stream import _CHUNK_SIZE
from binlayout.serialization.buffer import DynamicSerializerBuffer
from binlayout.serialization.encoding.count import pack_count
from binlayout.types import Float32, Int16, UInt64
from binlayout_tests import unittest

SAMPLE_LAYOUT = Layout(list[str], tuple[Float32, Float32, Float32], int, dict[Int16, bytes], set[str])
SAMPLE_VALUES = (
    ['ann', 'joseph', 'catherine'],
    (2.0, 3.0, 5.0),
    1234,
    {-1: b'neg', 1: b'pos'},
    {'Ann', 'Joseph'},
)


class StreamTestCase(unittest.TestCase):
    def test_stream_to_buffer(self) -> None:
        stream = io.BytesIO()
        with StreamSerializer(stream) as serializer:
            SAMPLE_LAYOUT.write(serializer, *SAMPLE_VALUES)
        self.assertEqual(serializer.cur_pos(), len(stream.getvalue()))

        buf = DynamicSerializerBuffer.from_bytes(stream.getvalue())
        self.assertEqual(SAMPLE_LAYOUT.read(buf), SAMPLE_VALUES)
        self.assertTrue(buf.is_empty())

    def test_buffer_to_stream(self) -> None:
        buf = DynamicSerializerBuffer(1024)
        SAMPLE_LAYOUT.write(buf, *SAMPLE_VALUES)
        stream = io.BytesIO(bytes(buf.pending_view()))
        with StreamDeserializer(stream) as deserializer:
            self.assertEqual(SAMPLE_LAYOUT.read(deserializer), SAMPLE_VALUES)
            deserializer.finalize()

    def test_same_bytes_as_buffer(self) -> None:
        values = [self.rng.getrandbits(64) for _ in range(20)]
        codec = make_codec_for_type(list[UInt64])

        buf = DynamicSerializerBuffer(1024)
        codec.serialize(buf, values)
        stream = io.BytesIO()
        codec.serialize(StreamSerializer(stream), values)

        self.assertEqual(stream.getvalue(), bytes(buf.pending_view()))

    def test_file_round_trip(self) -> None:
        path = os.path.join(self.mkdtemp(), 'file.bin')
        with open(path, 'wb') as fp:
            SAMPLE_LAYOUT.write(Serializer.build_stream_serializer(fp), *SAMPLE_VALUES)
            self.assertFalse(fp.closed)
        with open(path, 'rb') as fp:
            deserializer = Deserializer.build_stream_deserializer(fp)
            self.assertEqual(SAMPLE_LAYOUT.read(deserializer), SAMPLE_VALUES)
            self.assertTrue(deserializer.is_empty())

    def test_huge_count_on_a_file(self) -> None:
        # a count within the configured maximum, but for far more data than the file has
        settings = BinLayoutSettings(MAX_CONTAINER_LENGTH=2**32)
        codec = TypeDispatcher(make_default_type_map(settings)).codec_for(list[float])
        path = os.path.join(self.mkdtemp(), 'corrupt.bin')
        with open(path, 'wb') as fp:
            fp.write(pack_count(2**32) + b'\x00' * 64)
        with open(path, 'rb') as fp:
            with self.assertRaises(BufferUnderflowError):
                codec.deserialize(Deserializer.build_stream_deserializer(fp))


def test_short_read_consumes_nothing() -> None:
    deserializer = StreamDeserializer(io.BytesIO(b'\x01\x02\x03'))
    with pytest.raises(BufferUnderflowError):
        deserializer.read_bytes(4)
    assert deserializer.read_bytes(3) == b'\x01\x02\x03'
    assert deserializer.is_empty()
    with pytest.raises(BufferUnderflowError):
        deserializer.read_byte()


def test_peek() -> None:
    deserializer = StreamDeserializer(io.BytesIO(b'abc'))
    assert deserializer.peek_byte() == ord('a')
    assert deserializer.peek_bytes(2) == b'ab'
    assert deserializer.read_bytes(1) == b'a'
    assert deserializer.peek_bytes(5, exact=False) == b'bc'
    assert deserializer.read_all() == b'bc'


def test_bytes_available_is_unknown() -> None:
    assert StreamDeserializer(io.BytesIO(b'abc')).bytes_available() is None


def test_finalize_with_trailing_data() -> None:
    deserializer = StreamDeserializer(io.BytesIO(b'abc'))
    deserializer.read_byte()
    with pytest.raises(TrailingDataError):
        deserializer.finalize()


def test_read_in_small_chunks() -> None:
    class Trickle(io.RawIOBase):
        def __init__(self, data: bytes) -> None:
            self._data = data

        def readable(self) -> bool:
            return True

        def read(self, n: int = -1) -> bytes:
            chunk, self._data = self._data[:1], self._data[1:]
            return chunk

    codec = make_codec_for_type(list[str])
    data = codec.to_bytes(['trickle', 'down'])
    assert codec.deserialize(StreamDeserializer(Trickle(data))) == ['trickle', 'down']


def test_short_write() -> None:
    class Short:
        def write(self, data: memoryview) -> int:
            return len(data) - 1

    serializer = StreamSerializer(Short())
    with pytest.raises(SinkError):
        serializer.write_bytes(b'abc')
    assert serializer.cur_pos() == 0


def test_reads_are_bounded() -> None:
    class Recorder(io.BytesIO):
        def __init__(self, data: bytes) -> None:
            super().__init__(data)
            self.requests: list[int] = []

        def read(self, n: int | None = -1) -> bytes:
            self.requests.append(n if n is not None else -1)
            return super().read(n)

    stream = Recorder(pack_count(2**20) + b'\x00' * 100)
    with pytest.raises(BufferUnderflowError):
        make_codec_for_type(list[float]).deserialize(StreamDeserializer(stream))
    assert stream.requests
    assert all(0 < n <= _CHUNK_SIZE for n in stream.requests)
