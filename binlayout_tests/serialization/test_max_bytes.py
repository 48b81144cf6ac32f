import pytest

from binlayout.serialization import Deserializer, Serializer
from binlayout.serialization.adapters import MaxBytesDeserializer, MaxBytesExceededError, MaxBytesSerializer


def test_max_bytes_serializer() -> None:
    se = Serializer.build_bytes_serializer()
    limited = se.with_max_bytes(4)
    assert isinstance(limited, MaxBytesSerializer)
    limited.write_bytes(b'abc')
    limited.write_byte(ord('d'))
    with pytest.raises(MaxBytesExceededError):
        limited.write_byte(ord('e'))
    # the call that exceeded the limit never reached the inner serializer
    assert bytes(se.finalize()) == b'abcd'


def test_max_bytes_deserializer() -> None:
    de = Deserializer.build_bytes_deserializer(b'abcdef')
    limited = de.with_max_bytes(4)
    assert isinstance(limited, MaxBytesDeserializer)
    assert limited.bytes_available() == 4
    assert bytes(limited.read_bytes(3)) == b'abc'
    assert limited.bytes_available() == 1
    with pytest.raises(MaxBytesExceededError):
        limited.read_bytes(2)


def test_max_bytes_read_all() -> None:
    de = Deserializer.build_bytes_deserializer(b'abc')
    assert bytes(de.with_max_bytes(8).read_all()) == b'abc'

    de = Deserializer.build_bytes_deserializer(b'abcdef')
    with pytest.raises(MaxBytesExceededError):
        de.with_max_bytes(4).read_all()


def test_optional_max_bytes() -> None:
    se = Serializer.build_bytes_serializer()
    assert se.with_optional_max_bytes(None) is se
    assert isinstance(se.with_optional_max_bytes(1), MaxBytesSerializer)


def test_plausibility_uses_the_limit() -> None:
    from binlayout.codecs import make_codec_for_type
    from binlayout.serialization import InvalidLengthError
    codec = make_codec_for_type(bytes)
    data = codec.to_bytes(b'x' * 32)
    # all the bytes are there, but the limit makes the count implausible
    with pytest.raises(InvalidLengthError):
        codec.deserialize(Deserializer.build_bytes_deserializer(data).with_max_bytes(16))
