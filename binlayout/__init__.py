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
This module exports the types and functions that make up the main API.
"""

from binlayout.codecs import (
    Codec,
    SelfCodec,
    TypeDispatcher,
    ValueKind,
    classify_type,
    get_default_dispatcher,
    make_codec_for_type,
    read_value,
    register_delegate,
    unregister_delegate,
    write_value,
)
from binlayout.layout import Layout, layout_dataclass
from binlayout.serialization import (
    BufferOverflowError,
    BufferUnderflowError,
    Deserializer,
    InvalidLengthError,
    SerializationError,
    Serializer,
    TypeUnsupportedError,
)
from binlayout.serialization.adapters import StreamDeserializer, StreamSerializer
from binlayout.serialization.buffer import DynamicSerializerBuffer, FixedSerializerBuffer, SerializerBuffer
from binlayout.types import Bool, Char, Float32, Float64, Int8, Int16, Int32, Int64, UInt8, UInt16, UInt32, UInt64
from binlayout.version import __version__

__all__ = [
    'Codec',
    'SelfCodec',
    'TypeDispatcher',
    'ValueKind',
    'classify_type',
    'get_default_dispatcher',
    'make_codec_for_type',
    'read_value',
    'register_delegate',
    'unregister_delegate',
    'write_value',
    'Layout',
    'layout_dataclass',
    'BufferOverflowError',
    'BufferUnderflowError',
    'Deserializer',
    'InvalidLengthError',
    'SerializationError',
    'Serializer',
    'TypeUnsupportedError',
    'StreamDeserializer',
    'StreamSerializer',
    'DynamicSerializerBuffer',
    'FixedSerializerBuffer',
    'SerializerBuffer',
    'Bool',
    'Char',
    'Float32',
    'Float64',
    'Int8',
    'Int16',
    'Int32',
    'Int64',
    'UInt8',
    'UInt16',
    'UInt32',
    'UInt64',
    '__version__',
]
