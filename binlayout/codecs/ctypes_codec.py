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
Codec for `ctypes` types, which are the closest Python has to trivially copyable C types.

Simple types (`c_int32`, `c_double`, ...), structures, unions and arrays are all supported as long as there isn't a
pointer anywhere in them. The encoding is the raw memory of the object (`bytes(obj)`), arrays have a fixed arity and
so they don't have a count prefix.

Simple types take and give plain Python values, the same way structure fields do:

>>> import ctypes
>>> from binlayout.codecs import make_codec_for_type
>>> codec = make_codec_for_type(ctypes.c_uint8)
>>> codec.to_bytes(200)
b'\\xc8'
>>> codec.from_bytes(b'\\xc8')
200

While structures, unions and arrays are given back as instances of the ctypes class:

>>> Pair = ctypes.c_uint8 * 2
>>> list(make_codec_for_type(Pair).from_bytes(b'\\x01\\x02'))
[1, 2]
"""

from __future__ import annotations

import ctypes
from typing import Any

from typing_extensions import Self, override

from binlayout.codecs.codec import Codec
from binlayout.codecs.scalar_codec import TrivialCodec
from binlayout.codecs.utils import pretty_type
from binlayout.serialization import SerializationTypeError, SerializationValueError, TypeUnsupportedError
from binlayout.serialization.types import Buffer

CTYPES_BASES: tuple[type, ...] = (ctypes._SimpleCData, ctypes.Structure, ctypes.Union, ctypes.Array)

# `_type_` codes of simple types that hold a pointer: void*, char*, wchar_t* and PyObject*
_POINTER_CODES = frozenset('PzZO')


def check_flat_ctype(ctype: type) -> None:
    """ Raise TypeUnsupportedError if there's a pointer anywhere in the given ctypes type.

    >>> import ctypes
    >>> class Point(ctypes.Structure):
    ...     _fields_ = [('x', ctypes.c_int32), ('y', ctypes.c_int32)]
    >>> check_flat_ctype(Point)
    >>> class Node(ctypes.Structure):
    ...     _fields_ = [('value', ctypes.c_int32), ('name', ctypes.c_char_p)]
    >>> try:
    ...     check_flat_ctype(Node)
    ... except TypeUnsupportedError as e:
    ...     print(*e.args)
    c_char_p holds a pointer
    """
    if issubclass(ctype, ctypes._Pointer):
        raise TypeUnsupportedError(f'{ctype.__name__} is a pointer')
    if issubclass(ctype, ctypes._SimpleCData) and getattr(ctype, '_type_', None) in _POINTER_CODES:
        raise TypeUnsupportedError(f'{ctype.__name__} holds a pointer')
    if issubclass(ctype, (ctypes.Structure, ctypes.Union)):
        for field in getattr(ctype, '_fields_', ()):
            check_flat_ctype(field[1])
    elif issubclass(ctype, ctypes.Array):
        check_flat_ctype(ctype._type_)
    elif not issubclass(ctype, ctypes._SimpleCData):
        raise TypeUnsupportedError(f'{pretty_type(ctype)} is not a flat ctypes type')


class CTypesCodec(TrivialCodec[Any]):
    """ Represents values of a ctypes type, the encoding is the memory of the object.
    """

    __slots__ = ('_ctype', '_simple')

    _accepts_subclasses = True

    def __init__(self, ctype: type, /) -> None:
        self._ctype = ctype
        self._simple = issubclass(ctype, ctypes._SimpleCData)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._ctype.__name__})'

    @override
    @classmethod
    def _from_type(cls, type_: type, /, *, type_map: Codec.TypeMap) -> Self:
        if not isinstance(type_, type) or not issubclass(type_, CTYPES_BASES):
            raise TypeUnsupportedError(f'{pretty_type(type_)} is not a ctypes type')
        if type_ in CTYPES_BASES:
            raise TypeUnsupportedError(f'{type_.__name__} is abstract, use a concrete ctypes type')
        check_flat_ctype(type_)
        return cls(type_)

    @override
    def size(self) -> int:
        return ctypes.sizeof(self._ctype)

    @override
    def _check_value(self, value: Any, /, *, deep: bool) -> None:
        if isinstance(value, self._ctype):
            return
        if not self._simple or isinstance(value, CTYPES_BASES):
            raise SerializationTypeError(f'expected {self._ctype.__name__} instance, got {type(value)}')
        try:
            converted = self._ctype(value)
        except TypeError as e:
            raise SerializationTypeError(f'{value!r} cannot be converted to {self._ctype.__name__}') from e
        # ctypes silently truncates integers
        if isinstance(value, int) and isinstance(converted.value, int) and converted.value != value:
            raise SerializationValueError(f'{value} does not fit in {self._ctype.__name__}')

    @override
    def pack(self, value: Any, /) -> bytes:
        if not isinstance(value, self._ctype):
            value = self._ctype(value)
        return bytes(value)

    @override
    def unpack(self, data: Buffer, /) -> Any:
        obj = self._ctype.from_buffer_copy(data)
        return obj.value if self._simple else obj
