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

__all__ = [
    'SerializationError',
    'BufferOverflowError',
    'BufferUnderflowError',
    'OutOfDataError',
    'InvalidLengthError',
    'TypeUnsupportedError',
    'SerializationTypeError',
    'SerializationValueError',
    'TooLongError',
    'TrailingDataError',
    'SinkError',
]


class SerializationError(Exception):
    """Base class for every error raised while writing to or reading from a sink."""
    pass


class BufferOverflowError(SerializationError):
    """A write needs more bytes than the sink has free."""
    pass


class BufferUnderflowError(SerializationError):
    """A read needs more bytes than the sink has pending."""
    pass


# XXX: kept for readers coming from the generic deserializer interface
OutOfDataError = BufferUnderflowError


class InvalidLengthError(SerializationError, ValueError):
    """A decoded count prefix is negative or cannot possibly be satisfied."""
    pass


class TypeUnsupportedError(SerializationError, TypeError):
    """No codec can be built for a type.

    This is raised when a codec or layout is built, never while values are being written or read.
    """
    pass


class SerializationTypeError(SerializationError, TypeError):
    """A value given to a codec is not of the type the codec was built for."""
    pass


class SerializationValueError(SerializationError, ValueError):
    """A value is of the right type but cannot be represented (out of range, duplicated key, ...)."""
    pass


class TooLongError(SerializationError, ValueError):
    pass


class TrailingDataError(SerializationError, ValueError):
    """There are bytes left on a deserializer that was expected to be fully consumed."""
    pass


class SinkError(SerializationError):
    """The underlying stream did not accept the bytes it was given."""
    pass
