import pytest

from binlayout.serialization import BufferUnderflowError, Deserializer, Serializer, TrailingDataError


def test_serializer_accumulates() -> None:
    se = Serializer.build_bytes_serializer()
    se.write_byte(1)
    se.write_bytes(b'\x02\x03')
    se.write_struct((4,), '@B')
    assert se.cur_pos() == 4
    assert bytes(se.finalize()) == b'\x01\x02\x03\x04'


def test_serializer_copies_input() -> None:
    data = bytearray(b'ab')
    se = Serializer.build_bytes_serializer()
    se.write_bytes(data)
    data[0] = ord('z')
    assert bytes(se.finalize()) == b'ab'


def test_deserializer_reads() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x02\x03\x04')
    assert de.bytes_available() == 4
    assert de.peek_byte() == 1
    assert de.read_byte() == 1
    assert bytes(de.peek_bytes(2)) == b'\x02\x03'
    assert bytes(de.read_bytes(2)) == b'\x02\x03'
    assert de.read_struct('@B') == (4,)
    assert de.is_empty()
    de.finalize()


def test_deserializer_underflow() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x02')
    with pytest.raises(BufferUnderflowError):
        de.read_bytes(3)
    assert de.bytes_available() == 2
    assert bytes(de.read_bytes(3, exact=False)) == b'\x01\x02'
    with pytest.raises(BufferUnderflowError):
        de.read_byte()


def test_deserializer_trailing_data() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x02')
    de.read_byte()
    with pytest.raises(TrailingDataError):
        de.finalize()


def test_write_and_read_type() -> None:
    se = Serializer.build_bytes_serializer()
    se.write_type(list[int], [1, 2, 3])
    se.write_type_tuple((str, bool), ('x', True))
    de = Deserializer.build_bytes_deserializer(se.finalize())
    assert de.read_type(list[int]) == [1, 2, 3]
    assert de.read_type_tuple((str, bool)) == ('x', True)
    de.finalize()
