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

"""
Encodings of containers, built out of the encodings of their items.

None of these functions know how an item is written: they take the item encoder or decoder as an argument and only
add the container framing around it.

- `collection`: a count prefix, then each item through its encoder.
- `packed`: a count prefix and every item in a single write, for items with a fixed-size `struct` representation.
- `mapping`: a count prefix, then each key and its value.
- `tuple`: the items one after the other, with no count since both ends know the arity.

Item encoders and decoders are any callables matching `Encoder` and `Decoder`. A codec's bound `serialize` and
`deserialize` methods fit, and so does a lambda over an encoding function with its options fixed:

>>> from binlayout.serialization.encoding.scalar import decode_scalar, encode_scalar
>>> from binlayout.serialization.compound_encoding.collection import decode_collection, encode_collection
>>> se = Serializer.build_bytes_serializer()
>>> encode_collection(se, [1, 2], lambda s, v: encode_scalar(s, v, 'B'), count_format='B')
>>> data = bytes(se.finalize())
>>> data.hex()
'020102'
>>> decode_collection(Deserializer.build_bytes_deserializer(data), lambda d: decode_scalar(d, 'B'), tuple,
...                   count_format='B')
(1, 2)
"""

from typing import Protocol, TypeVar

from binlayout.serialization.deserializer import Deserializer
from binlayout.serialization.serializer import Serializer

T_co = TypeVar('T_co', covariant=True)
T_contra = TypeVar('T_contra', contravariant=True)


class Encoder(Protocol[T_contra]):
    """Writes one item to the serializer."""

    def __call__(self, serializer: Serializer, value: T_contra, /) -> None:
        ...


class Decoder(Protocol[T_co]):
    """Reads one item from the deserializer."""

    def __call__(self, deserializer: Deserializer, /) -> T_co:
        ...
