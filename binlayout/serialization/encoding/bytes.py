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
This modules implements encoding of byte sequences by prefixing them with their length as a count prefix.

A byte sequence is a dynamically-sized container of trivial 1-byte elements, so the body is written with a single
bulk copy. With `count_format='B'` (the default is the native `size_t`, see the `count` module):

>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'test', count_format='B')  # will prepend b'\x04' before writing b'test'
>>> bytes(se.finalize()).hex()
'0474657374'

>>> de = Deserializer.build_bytes_deserializer(b'\x04testfoo')
>>> decode_bytes(de, count_format='B')
b'test'
>>> bytes(de.read_all())
b'foo'

An empty sequence is just the count:

>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'', count_format='B')
>>> bytes(se.finalize())
b'\x00'

>>> from binlayout.serialization.exceptions import InvalidLengthError
>>> de = Deserializer.build_bytes_deserializer(b'\x04tes')
>>> try:
...     decode_bytes(de, count_format='B')
... except InvalidLengthError as e:
...     print(*e.args)
count of 4 needs at least 4 bytes, only 3 available
"""

from binlayout.serialization import Deserializer, Serializer
from binlayout.serialization.consts import DEFAULT_COUNT_FORMAT
from binlayout.serialization.types import Buffer

from .count import decode_count, pack_count


def encode_bytes(serializer: Serializer, data: Buffer, *, count_format: str = DEFAULT_COUNT_FORMAT) -> None:
    """ Encodes a byte-sequence adding a count prefix.

    This modules's docstring has more details and examples.
    """
    view = memoryview(data).cast('B')
    # count and body in one write, a sink that can't take all of it is left untouched
    serializer.write_bytes(pack_count(len(view), count_format=count_format) + view)


def decode_bytes(
    deserializer: Deserializer,
    *,
    count_format: str = DEFAULT_COUNT_FORMAT,
    max_length: int | None = None,
) -> bytes:
    """ Decodes a byte-sequence with a count prefix.

    This modules's docstring has more details and examples.
    """
    size = decode_count(deserializer, count_format=count_format, max_length=max_length, min_item_size=1)
    return bytes(deserializer.read_bytes(size))
