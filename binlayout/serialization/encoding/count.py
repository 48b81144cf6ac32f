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
This module implements the count prefix that goes before the body of every dynamically-sized container.

Layout: [N: unsigned integer, `struct` code `count_format`, native byte order]

The default code is `N`, which is the native `size_t`, so it takes 8 bytes on 64-bit hosts:

>>> count_size('N') == struct.calcsize('@P')
True

The examples below use `B` (1 byte) so the output doesn't depend on the host:

>>> se = Serializer.build_bytes_serializer()
>>> encode_count(se, 3, count_format='B')
>>> bytes(se.finalize())
b'\x03'

>>> de = Deserializer.build_bytes_deserializer(b'\x03abc')
>>> decode_count(de, count_format='B', min_item_size=1)
3
>>> bytes(de.read_all())
b'abc'

A count is rejected as soon as it is read when it can't possibly be satisfied by the remaining bytes:

>>> de = Deserializer.build_bytes_deserializer(b'\x03ab')
>>> try:
...     decode_count(de, count_format='B', min_item_size=1)
... except InvalidLengthError as e:
...     print(*e.args)
count of 3 needs at least 3 bytes, only 2 available

Or when it is above the given maximum:

>>> de = Deserializer.build_bytes_deserializer(b'\xff')
>>> try:
...     decode_count(de, count_format='B', max_length=100)
... except InvalidLengthError as e:
...     print(*e.args)
count of 255 is above the maximum of 100

>>> se = Serializer.build_bytes_serializer()
>>> try:
...     encode_count(se, 256, count_format='B')
... except InvalidLengthError as e:
...     print(*e.args)
count of 256 does not fit in struct code 'B'
"""

import struct

from binlayout.serialization import Deserializer, Serializer
from binlayout.serialization.consts import DEFAULT_COUNT_FORMAT, NATIVE
from binlayout.serialization.exceptions import InvalidLengthError


def count_size(count_format: str = DEFAULT_COUNT_FORMAT) -> int:
    """How many bytes a count prefix takes."""
    return struct.calcsize(NATIVE + count_format)


def pack_count(count: int, *, count_format: str = DEFAULT_COUNT_FORMAT) -> bytes:
    if count < 0:
        raise InvalidLengthError(f'count cannot be negative: {count}')
    try:
        return struct.pack(NATIVE + count_format, count)
    except struct.error as e:
        raise InvalidLengthError(f'count of {count} does not fit in struct code {count_format!r}') from e


def encode_count(serializer: Serializer, count: int, *, count_format: str = DEFAULT_COUNT_FORMAT) -> None:
    """ Encode a container element count.

    This modules's docstring has more details and examples.
    """
    serializer.write_bytes(pack_count(count, count_format=count_format))


def decode_count(
    deserializer: Deserializer,
    *,
    count_format: str = DEFAULT_COUNT_FORMAT,
    max_length: int | None = None,
    min_item_size: int = 0,
) -> int:
    """ Decode a container element count and check it is plausible.

    `min_item_size` is the least amount of bytes a single element takes, together with `bytes_available()` it
    allows rejecting counts that would only fail after reading (or allocating for) a lot of elements. It's a lower
    bound, so it is always safe to use 0.
    """
    count, = deserializer.read_struct(NATIVE + count_format)
    if count < 0:
        raise InvalidLengthError(f'count cannot be negative: {count}')
    if max_length is not None and count > max_length:
        raise InvalidLengthError(f'count of {count} is above the maximum of {max_length}')
    available = deserializer.bytes_available()
    if available is not None and count * min_item_size > available:
        raise InvalidLengthError(
            f'count of {count} needs at least {count * min_item_size} bytes, only {available} available'
        )
    return count
