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
This module implements fixed-size scalar values in their native in-memory representation.

The representation is described by a `struct` format code (`b`, `H`, `i`, `q`, `f`, `d`, `?`, `c`, ...) and is
always read and written in native mode, that is, with the size and byte order of the host. There's no framing, the
encoding of a value is exactly `struct.calcsize(code)` bytes.

The examples only use 1-byte codes so they don't depend on the host:

>>> se = Serializer.build_bytes_serializer()
>>> encode_scalar(se, -1, 'b')  # writes ff
>>> encode_scalar(se, 200, 'B')  # writes c8
>>> encode_scalar(se, True, '?')  # writes 01
>>> encode_scalar(se, b'x', 'c')  # writes 78
>>> bytes(se.finalize()).hex()
'ffc80178'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('ffc80178'))
>>> decode_scalar(de, 'b'), decode_scalar(de, 'B'), decode_scalar(de, '?'), decode_scalar(de, 'c')
(-1, 200, True, b'x')
>>> de.finalize()

Values that don't fit are rejected before anything is written:

>>> se = Serializer.build_bytes_serializer()
>>> try:
...     encode_scalar(se, 256, 'B')
... except SerializationValueError as e:
...     print(*e.args)
cannot pack 256 with struct code 'B'
>>> se.cur_pos()
0

The plural variants handle a run of values of the same code with a single write/read, and no count:

>>> se = Serializer.build_bytes_serializer()
>>> encode_scalars(se, [1, 2, 3], 'B')
>>> bytes(se.finalize()).hex()
'010203'
>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('010203'))
>>> decode_scalars(de, 'B', 3)
[1, 2, 3]
"""

import struct
from collections.abc import Collection
from typing import Any

from binlayout.serialization import Deserializer, Serializer
from binlayout.serialization.consts import NATIVE
from binlayout.serialization.exceptions import SerializationValueError
from binlayout.serialization.types import Buffer


def scalar_size(code: str) -> int:
    return struct.calcsize(NATIVE + code)


def pack_scalar(value: Any, code: str) -> bytes:
    try:
        return struct.pack(NATIVE + code, value)
    except (struct.error, OverflowError) as e:
        raise SerializationValueError(f'cannot pack {value!r} with struct code {code!r}') from e


def unpack_scalar(data: Buffer, code: str) -> Any:
    value, = struct.unpack(NATIVE + code, data)
    return value


def pack_scalars(values: Collection[Any], code: str) -> bytes:
    try:
        return struct.pack(f'{NATIVE}{len(values)}{code}', *values)
    except (struct.error, OverflowError) as e:
        raise SerializationValueError(f'cannot pack values with struct code {code!r}: {e}') from e


def unpack_scalars(data: Buffer, code: str, count: int) -> list[Any]:
    return list(struct.unpack(f'{NATIVE}{count}{code}', data))


def encode_scalar(serializer: Serializer, value: Any, code: str) -> None:
    """ Encode a single value with the given `struct` code.

    This modules's docstring has more details and examples.
    """
    serializer.write_bytes(pack_scalar(value, code))


def decode_scalar(deserializer: Deserializer, code: str) -> Any:
    """ Decode a single value with the given `struct` code.

    This modules's docstring has more details and examples.
    """
    data = deserializer.read_bytes(scalar_size(code))
    return unpack_scalar(data, code)


def encode_scalars(serializer: Serializer, values: Collection[Any], code: str) -> None:
    serializer.write_bytes(pack_scalars(values, code))


def decode_scalars(deserializer: Deserializer, code: str, count: int) -> list[Any]:
    data = deserializer.read_bytes(count * scalar_size(code))
    return unpack_scalars(data, code, count)
