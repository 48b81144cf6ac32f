from dataclasses import dataclass, field

import pytest

from binlayout.codecs import (
    SelfCodec,
    TypeDispatcher,
    ValueKind,
    classify_type,
    make_codec_for_type,
    make_default_type_map,
    register_delegate,
    unregister_delegate,
)
from binlayout.conf import BinLayoutSettings
from binlayout.layout import Layout, layout_dataclass
from binlayout.serialization import (
    BufferOverflowError,
    BufferUnderflowError,
    Deserializer,
    SerializationTypeError,
    SerializationValueError,
    Serializer,
    TrailingDataError,
    TypeUnsupportedError,
)
from binlayout.serialization.buffer import FixedSerializerBuffer
from binlayout.serialization.encoding.count import pack_count
from binlayout.types import Float32, Int32, UInt8, UInt16
from binlayout_tests import unittest


@layout_dataclass
@dataclass
class UserType:
    id: Int32
    name: str
    scores: list[UInt8]


@layout_dataclass
@dataclass
class Outer:
    user: UserType
    tags: frozenset[str]
    ratio: Float32
    cache: dict[str, int] = field(default_factory=dict, init=False)


class Probe:
    pass


class LayoutTestCase(unittest.TestCase):
    def test_members(self) -> None:
        layout = Layout(int, UserType, str)
        self.assertEqual(len(layout), 3)
        self.assertEqual(layout.types, (int, UserType, str))
        self.assertEqual(repr(Layout(UInt8, list[str])), 'Layout(UInt8, list[str])')

    def test_user_type_between_primitives(self) -> None:
        layout = Layout(int, UserType, str)
        user = UserType(7, 'ana', [1, 2, 3])
        se = Serializer.build_bytes_serializer()
        layout.write(se, 13, user, 'hi')
        de = Deserializer.build_bytes_deserializer(se.finalize())
        self.assertEqual(layout.read(de), (13, user, 'hi'))
        self.assertFullyConsumed(de)

    def test_encoding_is_the_concatenation_of_members(self) -> None:
        user = UserType(-1, '', [])
        data = Layout(UInt8, UserType, UInt16).to_bytes(1, user, 2)
        expected = (
            make_codec_for_type(UInt8).to_bytes(1)
            + make_codec_for_type(Int32).to_bytes(-1)
            + pack_count(0)
            + pack_count(0)
            + make_codec_for_type(UInt16).to_bytes(2)
        )
        self.assertEqual(data, expected)

    def test_write_short_circuits(self) -> None:
        attempted: list[int] = []

        def encode_probe(serializer: Serializer, value: Probe) -> None:
            attempted.append(id(value))
            serializer.write_byte(0xaa)

        register_delegate(Probe, encode_probe, lambda de: Probe() if de.read_byte() == 0xaa else None)
        self.add_pending_cleanup(lambda: unregister_delegate(Probe))

        layout = Layout(UInt8, UInt8, Probe)
        se = Serializer.build_bytes_serializer()
        with self.assertRaises(SerializationValueError) as cm:
            layout.write(se, 1, 300, Probe())
        # the first value was written, the third was never attempted
        self.assertEqual(bytes(se.finalize()), b'\x01')
        self.assertEqual(attempted, [])
        self.assertIn('while writing layout member 1 (UInt8)', cm.exception.__notes__)

        # with valid values everything is written
        self.assertEqual(layout.to_bytes(1, 2, Probe()), b'\x01\x02\xaa')
        self.assertEqual(len(attempted), 1)

    def test_write_type_error(self) -> None:
        layout = Layout(str, int)
        with self.assertRaises(SerializationTypeError) as cm:
            layout.to_bytes(b'not text', 1)
        self.assertIn('while writing layout member 0 (str)', cm.exception.__notes__)

    def test_no_rollback_on_bounded_sink(self) -> None:
        buf = FixedSerializerBuffer[16]()
        layout = Layout(Int32, list[UInt8])
        with self.assertRaises(BufferOverflowError):
            layout.write(buf, 5, list(range(20)))
        # the first member stays in the buffer
        self.assertEqual(buf.pending_size(), 4)
        self.assertEqual(buf.read(Int32), 5)

    def test_read_short_circuits(self) -> None:
        layout = Layout(UInt8, str, UInt16)
        data = layout.to_bytes(1, 'abc', 2)
        de = Deserializer.build_bytes_deserializer(data[:-1])
        with self.assertRaises(BufferUnderflowError) as cm:
            layout.read(de)
        self.assertIn('while reading layout member 2 (UInt16)', cm.exception.__notes__)

    def test_arity(self) -> None:
        layout = Layout(UInt8, UInt8)
        se = Serializer.build_bytes_serializer()
        with self.assertRaises(TypeError):
            layout.write(se, 1)
        with self.assertRaises(TypeError):
            layout.write(se, 1, 2, 3)
        self.assertEqual(se.cur_pos(), 0)

    def test_unsupported_member(self) -> None:
        with self.assertRaises(TypeUnsupportedError):
            Layout(int, Probe)
        with self.assertRaises(TypeUnsupportedError):
            Layout(int, 'str')

    def test_from_bytes_trailing_data(self) -> None:
        layout = Layout(UInt8)
        self.assertEqual(layout.from_bytes(b'\x01'), (1,))
        with self.assertRaises(TrailingDataError):
            layout.from_bytes(b'\x01\x02')

    def test_size_hint(self) -> None:
        layout = Layout(int, list[str], Float32)
        values = (1, ['a', 'bb'], 0.5)
        self.assertEqual(layout.size_hint(*values), len(layout.to_bytes(*values)))
        self.assertEqual(Layout().size_hint(), 0)

    def test_as_codec(self) -> None:
        layout = Layout(UInt8, str)
        codec = layout.as_codec()
        self.assertEqual(codec.to_bytes((3, 'x')), layout.to_bytes(3, 'x'))
        self.assertEqual(codec.from_bytes(layout.to_bytes(3, 'x')), (3, 'x'))

    def test_custom_dispatcher(self) -> None:
        dispatcher = TypeDispatcher(make_default_type_map(BinLayoutSettings(COUNT_FORMAT='B')))
        layout = Layout(bytes, str, dispatcher=dispatcher)
        self.assertEqual(layout.to_bytes(b'ab', 'c'), b'\x02ab\x01c')

    def test_random_round_trips(self) -> None:
        layout = Layout(Int32, UserType, list[UserType], bool)
        for _ in range(10):
            users = [
                UserType(self.rng.randint(-100, 100), str(self.rng.random()), list(self.random_bytes(3)))
                for _ in range(self.rng.randrange(4))
            ]
            values = (self.rng.randint(0, 1000), UserType(0, 'x', []), users, self.rng.random() < 0.5)
            self.assertEqual(layout.from_bytes(layout.to_bytes(*values)), values)


class LayoutDataclassTestCase(unittest.TestCase):
    def test_is_self_codec(self) -> None:
        self.assertTrue(issubclass(UserType, SelfCodec))
        self.assertIs(classify_type(UserType), ValueKind.DELEGATED)
        self.assertEqual(UserType.__layout__.types, (Int32, str, list[UInt8]))

    def test_non_init_fields_are_skipped(self) -> None:
        self.assertEqual(Outer.__layout__.types, (UserType, frozenset[str], Float32))
        value = Outer(UserType(1, 'a', [9]), frozenset({'x', 'y'}), 1.5)
        value.cache['ignored'] = 1
        codec = make_codec_for_type(Outer)
        result = codec.from_bytes(codec.to_bytes(value))
        self.assertEqual(result.user, value.user)
        self.assertEqual(result.tags, value.tags)
        self.assertEqual(result.ratio, 1.5)
        self.assertEqual(result.cache, {})

    def test_requires_dataclass(self) -> None:
        with self.assertRaises(TypeError):
            layout_dataclass(Probe)

    def test_unsupported_field(self) -> None:
        with self.assertRaises(TypeUnsupportedError):
            @layout_dataclass
            @dataclass
            class Broken:
                value: Probe

    def test_with_dispatcher(self) -> None:
        dispatcher = TypeDispatcher(make_default_type_map(BinLayoutSettings(COUNT_FORMAT='H')))

        @layout_dataclass(dispatcher=dispatcher)
        @dataclass
        class Name:
            value: str

        se = Serializer.build_bytes_serializer()
        Name('ok').serialize(se)
        self.assertEqual(bytes(se.finalize()), make_codec_for_type(UInt16).to_bytes(2) + b'ok')
        de = Deserializer.build_bytes_deserializer(make_codec_for_type(UInt16).to_bytes(1) + b'z')
        self.assertEqual(Name.deserialize(de), Name('z'))


def test_layout_of_nothing() -> None:
    assert Layout().to_bytes() == b''
    assert Layout().from_bytes(b'') == ()


@pytest.mark.parametrize('types, values', [
    ((UInt8,), (255,)),
    ((str, bytes), ('π', b'\x00')),
    ((tuple[int, int], dict[int, str]), ((1, 2), {3: 'c'})),
])
def test_round_trip(types: tuple, values: tuple) -> None:
    layout = Layout(*types)
    assert layout.from_bytes(layout.to_bytes(*values)) == values
