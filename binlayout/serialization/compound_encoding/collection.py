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
A collection is basically any value that has a known size and is iterable.

Layout: [N: count prefix][value_0]...[value_N-1]

>>> from binlayout.serialization.encoding.text import encode_text, decode_text
>>> se = Serializer.build_bytes_serializer()
>>> value = ['foobar', 'π', 'test']
>>> encode_collection(se, value, lambda s, v: encode_text(s, v, count_format='B'), count_format='B')
>>> bytes(se.finalize()).hex()
'0306666f6f62617202cf800474657374'

Breakdown of the result:

    03: 3 elements (using a 1-byte count)
    06666f6f626172: 'foobar' with length prefix
    02cf80: 'π' (with length prefix)
    0474657374: 'test' (with length prefix)

When decoding, the builder can be any compatible collection, in the previous example a `list` was encoded, but when
decoding a `tuple` could be used, it only matters that the collection can be initialized with an `Iterable[T]`.

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0306666f6f62617202cf800474657374'))
>>> decode_collection(de, lambda d: decode_text(d, count_format='B'), tuple, count_format='B')
('foobar', 'π', 'test')
>>> de.finalize()

An empty collection is only the count:

>>> se = Serializer.build_bytes_serializer()
>>> encode_collection(se, [], lambda s, v: None, count_format='B')
>>> bytes(se.finalize())
b'\x00'
"""

from collections.abc import Collection, Iterable
from typing import Callable, TypeVar

from binlayout.serialization import Deserializer, Serializer
from binlayout.serialization.consts import DEFAULT_COUNT_FORMAT
from binlayout.serialization.encoding.count import decode_count, encode_count

from . import Decoder, Encoder

T = TypeVar('T')
R = TypeVar('R', bound=Collection)


def encode_collection(
    serializer: Serializer,
    values: Collection[T],
    encoder: Encoder[T],
    *,
    count_format: str = DEFAULT_COUNT_FORMAT,
) -> None:
    encode_count(serializer, len(values), count_format=count_format)
    for value in values:
        encoder(serializer, value)


def decode_collection(
    deserializer: Deserializer,
    decoder: Decoder[T],
    builder: Callable[[Iterable[T]], R],
    *,
    count_format: str = DEFAULT_COUNT_FORMAT,
    max_length: int | None = None,
    min_item_size: int = 0,
) -> R:
    length = decode_count(
        deserializer,
        count_format=count_format,
        max_length=max_length,
        min_item_size=min_item_size,
    )
    return builder(decoder(deserializer) for _ in range(length))
