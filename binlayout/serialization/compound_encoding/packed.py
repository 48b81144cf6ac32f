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
A packed collection is a collection of trivial values whose body is copied in bulk instead of element by element.

Layout: [N: count prefix][N * item_size bytes]

The wire format is the same a collection would have when every element is encoded with its trivial encoder, the
difference is that packing/unpacking happens in a single call and the body is written and read with one operation.
The count and the body are written together, so on a bounded sink the whole container either fits or nothing is
written.

>>> from binlayout.serialization.encoding.scalar import pack_scalars, unpack_scalars
>>> se = Serializer.build_bytes_serializer()
>>> encode_packed(se, [1, 2, 255], lambda vs: pack_scalars(vs, 'B'), count_format='B')
>>> bytes(se.finalize()).hex()
'030102ff'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('030102ff'))
>>> decode_packed(de, lambda data, n: unpack_scalars(data, 'B', n), 1, tuple, count_format='B')
(1, 2, 255)
>>> de.finalize()
"""

from collections.abc import Collection, Iterable
from typing import Callable, TypeVar

from binlayout.serialization import Deserializer, Serializer
from binlayout.serialization.consts import DEFAULT_COUNT_FORMAT
from binlayout.serialization.encoding.count import decode_count, pack_count
from binlayout.serialization.types import Buffer

T = TypeVar('T')
R = TypeVar('R', bound=Collection)


def encode_packed(
    serializer: Serializer,
    values: Collection[T],
    packer: Callable[[Collection[T]], bytes],
    *,
    count_format: str = DEFAULT_COUNT_FORMAT,
) -> None:
    # pack first, an invalid element must fail before the count is written
    body = packer(values)
    serializer.write_bytes(pack_count(len(values), count_format=count_format) + body)


def decode_packed(
    deserializer: Deserializer,
    unpacker: Callable[[Buffer, int], Iterable[T]],
    item_size: int,
    builder: Callable[[Iterable[T]], R],
    *,
    count_format: str = DEFAULT_COUNT_FORMAT,
    max_length: int | None = None,
) -> R:
    count = decode_count(deserializer, count_format=count_format, max_length=max_length, min_item_size=item_size)
    data = deserializer.read_bytes(count * item_size)
    return builder(unpacker(data, count))
