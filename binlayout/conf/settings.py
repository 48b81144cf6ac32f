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

import codecs

from pydantic import PositiveInt, field_validator

from binlayout.serialization.consts import DEFAULT_COUNT_FORMAT, UNSIGNED_COUNT_FORMATS
from binlayout.utils.pydantic import BaseModel


class BinLayoutSettings(BaseModel):
    # `struct` code of the count prefix of dynamically-sized containers, must be an unsigned integer code, the default
    # is the native `size_t`
    COUNT_FORMAT: str = DEFAULT_COUNT_FORMAT

    # Decoded containers with a count above this are rejected with InvalidLengthError
    MAX_CONTAINER_LENGTH: PositiveInt = 2**32

    # Capacity of a DynamicSerializerBuffer created without an explicit capacity
    DEFAULT_BUFFER_CAPACITY: PositiveInt = 4096

    # Codec used for `str` values
    TEXT_ENCODING: str = 'utf-8'

    @field_validator('COUNT_FORMAT', mode='after')
    @classmethod
    def _validate_count_format(cls, count_format: str) -> str:
        if count_format not in UNSIGNED_COUNT_FORMATS:
            raise ValueError(
                f'COUNT_FORMAT must be one of {", ".join(sorted(UNSIGNED_COUNT_FORMATS))}, got {count_format!r}'
            )
        return count_format

    @field_validator('TEXT_ENCODING', mode='after')
    @classmethod
    def _validate_text_encoding(cls, text_encoding: str) -> str:
        try:
            codecs.lookup(text_encoding)
        except LookupError as e:
            raise ValueError(f'unknown text encoding: {text_encoding!r}') from e
        return text_encoding
