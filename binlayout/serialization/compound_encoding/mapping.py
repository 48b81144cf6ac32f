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
Encoding a mapping is equivalent to encoding a collection of 2-tuples.

Layout: [N: count prefix][key_0][value_0]...[key_N-1][value_N-1]

>>> from binlayout.serialization.encoding.text import encode_text, decode_text
>>> from binlayout.serialization.encoding.scalar import encode_scalar, decode_scalar
>>> se = Serializer.build_bytes_serializer()
>>> value = {
...     'foo': False,
...     'bar': True,
... }
>>> encode_mapping(
...     se,
...     value,
...     lambda s, k: encode_text(s, k, count_format='B'),
...     lambda s, v: encode_scalar(s, v, '?'),
...     count_format='B',
... )
>>> bytes(se.finalize()).hex()
'0203666f6f000362617201'

Breakdown of the result:

    02: 2 entries (using a 1-byte count)
    03666f6f: 'foo' with length prefix
    00: False
    03626172: 'bar' with length prefix
    01: True

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0203666f6f000362617201'))
>>> decode_mapping(
...     de,
...     lambda d: decode_text(d, count_format='B'),
...     lambda d: decode_scalar(d, '?'),
...     dict,
...     count_format='B',
... )
{'foo': False, 'bar': True}
>>> de.finalize()
"""

from collections.abc import Iterable, Mapping
from typing import Callable, TypeVar

from binlayout.serialization import Deserializer, Serializer
from binlayout.serialization.consts import DEFAULT_COUNT_FORMAT
from binlayout.serialization.encoding.count import decode_count, encode_count

from . import Decoder, Encoder

KT = TypeVar('KT')
VT = TypeVar('VT')
R = TypeVar('R', bound=Mapping)


def encode_mapping(
    serializer: Serializer,
    values_mapping: Mapping[KT, VT],
    key_encoder: Encoder[KT],
    value_encoder: Encoder[VT],
    *,
    count_format: str = DEFAULT_COUNT_FORMAT,
) -> None:
    encode_count(serializer, len(values_mapping), count_format=count_format)
    for key, value in values_mapping.items():
        key_encoder(serializer, key)
        value_encoder(serializer, value)


def decode_mapping(
    deserializer: Deserializer,
    key_decoder: Decoder[KT],
    value_decoder: Decoder[VT],
    mapping_builder: Callable[[Iterable[tuple[KT, VT]]], R],
    *,
    count_format: str = DEFAULT_COUNT_FORMAT,
    max_length: int | None = None,
    min_item_size: int = 0,
) -> R:
    size = decode_count(
        deserializer,
        count_format=count_format,
        max_length=max_length,
        min_item_size=min_item_size,
    )
    return mapping_builder(
        (key_decoder(deserializer), value_decoder(deserializer))
        for _ in range(size)
    )
