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

from __future__ import annotations

from typing_extensions import Self, override

from binlayout.codecs.codec import Codec, CodecOptions, ValueKind
from binlayout.codecs.utils import pretty_type
from binlayout.serialization import Deserializer, SerializationTypeError, Serializer, TooLongError, TypeUnsupportedError
from binlayout.serialization.encoding.bytes import decode_bytes, encode_bytes
from binlayout.serialization.encoding.count import count_size
from binlayout.serialization.encoding.text import decode_text, encode_text


class BytesCodec(Codec[bytes]):
    """ Represents builtin `bytes` and `bytearray` values, a container of 1-byte elements.

    Decoding gives back the same type the codec was built for.
    """

    __slots__ = ('_actual_type', '_options')
    kind = ValueKind.ITERABLE
    _actual_type: type[bytes] | type[bytearray]
    _options: CodecOptions

    def __init__(
        self,
        actual_type: type[bytes] | type[bytearray] = bytes,
        /,
        *,
        options: CodecOptions = CodecOptions(),
    ) -> None:
        self._actual_type = actual_type
        self._options = options

    @override
    @classmethod
    def _from_type(cls, type_: type[bytes], /, *, type_map: Codec.TypeMap) -> Self:
        if type_ is not bytes and type_ is not bytearray:
            raise TypeUnsupportedError(f'expected bytes or bytearray, got {pretty_type(type_)}')
        return cls(type_, options=type_map.options)

    @override
    def min_size(self) -> int:
        return count_size(self._options.count_format)

    @override
    def _check_value(self, value: bytes, /, *, deep: bool) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise SerializationTypeError(f'expected bytes or bytearray, got {type(value)}')
        max_length = self._options.max_length
        if max_length is not None and len(value) > max_length:
            raise TooLongError(f'{len(value)} bytes is above the maximum of {max_length}')

    @override
    def _serialize(self, serializer: Serializer, value: bytes, /) -> None:
        encode_bytes(serializer, value, count_format=self._options.count_format)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> bytes:
        data = decode_bytes(
            deserializer,
            count_format=self._options.count_format,
            max_length=self._options.max_length,
        )
        return self._actual_type(data)


class TextCodec(Codec[str]):
    """ Represents builtin `str` values, encoded with the configured text encoding (UTF-8 by default).

    The count prefix is the number of bytes of the encoded text.
    """

    __slots__ = ('_options',)
    kind = ValueKind.ITERABLE
    _options: CodecOptions

    def __init__(self, *, options: CodecOptions = CodecOptions()) -> None:
        self._options = options

    @override
    @classmethod
    def _from_type(cls, type_: type[str], /, *, type_map: Codec.TypeMap) -> Self:
        if type_ is not str:
            raise TypeUnsupportedError(f'expected str, got {pretty_type(type_)}')
        return cls(options=type_map.options)

    @override
    def min_size(self) -> int:
        return count_size(self._options.count_format)

    @override
    def _check_value(self, value: str, /, *, deep: bool) -> None:
        if not isinstance(value, str):
            raise SerializationTypeError(f'expected str, got {type(value)}')

    @override
    def _serialize(self, serializer: Serializer, value: str, /) -> None:
        encode_text(
            serializer,
            value,
            encoding=self._options.text_encoding,
            count_format=self._options.count_format,
            max_length=self._options.max_length,
        )

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> str:
        return decode_text(
            deserializer,
            encoding=self._options.text_encoding,
            count_format=self._options.count_format,
            max_length=self._options.max_length,
        )
