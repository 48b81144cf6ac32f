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

from types import UnionType
from typing import get_origin


def is_subclass(cls: type, class_or_tuple: type | tuple[type, ...] | UnionType, /) -> bool:
    """ Reimplements issubclass() with support for recursive NewType classes.

    Normal behavior from `issubclass`:

    >>> is_subclass(int, int)
    True
    >>> is_subclass(bool, int)
    True
    >>> is_subclass(bool, (int, str))
    True
    >>> is_subclass(bool, int | str)
    True
    >>> is_subclass(bool, bytes | str)
    False
    >>> is_subclass(str, int)
    False

    But `is_subclass` also works when a NewType is given as arg 1:

    >>> from typing import NewType
    >>> N = NewType('N', int)
    >>> is_subclass(N, int)
    True
    >>> is_subclass(N, int | str)
    True
    >>> is_subclass(N, str)
    False
    >>> M = NewType('M', N)
    >>> is_subclass(M, int)
    True
    """
    while (super_type := getattr(cls, '__supertype__', None)) is not None:
        cls = super_type
    if get_origin(cls) is not None or not isinstance(cls, type):
        return False
    return issubclass(cls, class_or_tuple)


def resolve_new_type(type_: type, /) -> type:
    """ Follow NewType aliases down to the class they're based on.

    >>> from typing import NewType
    >>> N = NewType('N', int)
    >>> resolve_new_type(NewType('M', N))
    <class 'int'>
    >>> resolve_new_type(str)
    <class 'str'>
    """
    while (super_type := getattr(type_, '__supertype__', None)) is not None:
        type_ = super_type
    return type_
