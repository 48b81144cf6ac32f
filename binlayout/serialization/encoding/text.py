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
This module implements text encoding with a count prefix.

It works exactly like bytes-encoding but it takes/returns a `str`, the count is the number of bytes of the encoded
text (for UTF-8 that is the number of code units).

>>> se = Serializer.build_bytes_serializer()
>>> encode_text(se, 'foobar', count_format='B')  # writes 06666f6f626172
>>> encode_text(se, 'π', count_format='B')  # writes 02cf80
>>> bytes(se.finalize()).hex()
'06666f6f62617202cf80'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('06666f6f62617202cf80'))
>>> decode_text(de, count_format='B')
'foobar'
>>> decode_text(de, count_format='B')
'π'
>>> de.finalize()

>>> de = Deserializer.build_bytes_deserializer(b'\x01\xff')
>>> try:
...     decode_text(de, count_format='B')
... except SerializationValueError as e:
...     print(*e.args)
invalid utf-8 text
"""

from binlayout.serialization import Deserializer, Serializer
from binlayout.serialization.consts import DEFAULT_COUNT_FORMAT
from binlayout.serialization.exceptions import SerializationValueError, TooLongError

from .bytes import decode_bytes, encode_bytes

DEFAULT_TEXT_ENCODING = 'utf-8'


def encode_text(
    serializer: Serializer,
    value: str,
    *,
    encoding: str = DEFAULT_TEXT_ENCODING,
    count_format: str = DEFAULT_COUNT_FORMAT,
    max_length: int | None = None,
) -> None:
    """ Encodes a string adding a count prefix.

    The limit in `max_length` applies to the encoded bytes, the same as when decoding. This modules's docstring has
    more details and examples.
    """
    try:
        data = value.encode(encoding)
    except UnicodeEncodeError as e:
        raise SerializationValueError(f'text cannot be encoded with {encoding}') from e
    if max_length is not None and len(data) > max_length:
        raise TooLongError(f'{len(data)} bytes of {encoding} text is above the maximum of {max_length}')
    encode_bytes(serializer, data, count_format=count_format)


def decode_text(
    deserializer: Deserializer,
    *,
    encoding: str = DEFAULT_TEXT_ENCODING,
    count_format: str = DEFAULT_COUNT_FORMAT,
    max_length: int | None = None,
) -> str:
    """ Decodes a string with a count prefix.

    This modules's docstring has more details and examples.
    """
    data = decode_bytes(deserializer, count_format=count_format, max_length=max_length)
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise SerializationValueError(f'invalid {encoding} text') from e
