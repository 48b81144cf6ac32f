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
In Python a tuple type can be used in annotations in 2 different ways:

1. `tuple[A, B, C]`: known fixed length and heterogeneous types
2. `tuple[X, ...]`: variable length and homogeneous type

This module only implements encoding of the first case, the second case can be encoded using the collection encoder.

There actually isn't a "format" per-se, the encoding of `tuple[A, B, C]` is just the encoding of A concatenated with B
concatenated with C. The arity is known by both ends, so there's no count prefix. This is also the format of a
`Layout`.

>>> from binlayout.serialization.encoding.text import encode_text, decode_text
>>> from binlayout.serialization.encoding.scalar import encode_scalar, decode_scalar
>>> se = Serializer.build_bytes_serializer()
>>> values = ('foobar', False, 7)
>>> encoders = (
...     lambda s, v: encode_text(s, v, count_format='B'),
...     lambda s, v: encode_scalar(s, v, '?'),
...     lambda s, v: encode_scalar(s, v, 'B'),
... )
>>> encode_tuple(se, values, encoders)
>>> bytes(se.finalize()).hex()
'06666f6f6261720007'

Breakdown of the result:

    06666f6f626172: 'foobar'
    00: False
    07: 7

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('06666f6f6261720007'))
>>> decoders = (
...     lambda d: decode_text(d, count_format='B'),
...     lambda d: decode_scalar(d, '?'),
...     lambda d: decode_scalar(d, 'B'),
... )
>>> decode_tuple(de, decoders)
('foobar', False, 7)
"""

from typing import Any

from typing_extensions import TypeVarTuple, Unpack

from binlayout.serialization import Deserializer, SerializationError, SerializationTypeError, Serializer

from . import Decoder, Encoder

Ts = TypeVarTuple('Ts')


def encode_tuple(serializer: Serializer, values: tuple[Unpack[Ts]], encoders: tuple[Encoder[Any], ...]) -> None:
    """Encode each value with the encoder in the same position, an error names the position that failed."""
    if len(values) != len(encoders):
        raise SerializationTypeError(f'{len(values)} values for {len(encoders)} encoders')
    for index, (value, encoder) in enumerate(zip(values, encoders)):
        try:
            encoder(serializer, value)
        except SerializationError as e:
            e.add_note(f'while encoding tuple element {index}')
            raise


def decode_tuple(deserializer: Deserializer, decoders: tuple[Decoder[Any], ...]) -> tuple[Unpack[Ts]]:
    values = []
    for index, decoder in enumerate(decoders):
        try:
            values.append(decoder(deserializer))
        except SerializationError as e:
            e.add_note(f'while decoding tuple element {index}')
            raise
    return tuple(values)
