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

from collections.abc import Hashable, Mapping
from types import NoneType, UnionType
from typing import TYPE_CHECKING, Any, TypeAlias, get_args, get_origin

from structlog import get_logger

from binlayout.serialization.exceptions import TypeUnsupportedError
from binlayout.utils.typing import is_subclass

if TYPE_CHECKING:
    from binlayout.codecs.codec import Codec


logger = get_logger()

TypeAliasMap: TypeAlias = Mapping[Any, type]
TypeToCodecMap: TypeAlias = Mapping[Any, type['Codec']]


def pretty_type(type_: Any) -> str:
    """ Shows a cleaner string representation for a type.

    >>> pretty_type(int)
    'int'
    >>> pretty_type(list[int])
    'list[int]'
    >>> pretty_type(None)
    'None'
    """
    if type_ is NoneType or type_ is None:
        return 'None'
    elif hasattr(type_, '__args__'):
        return str(type_)
    else:
        return getattr(type_, '__name__', None) or repr(type_)


def is_origin_hashable(type_: Any) -> bool:
    """ Checks whether the values of the given type signature satisfy `collections.abc.Hashable`.

    This check ignores type arguments.

    >>> is_origin_hashable(int)
    True
    >>> is_origin_hashable(frozenset[int])
    True
    >>> is_origin_hashable(set[int])
    False
    >>> is_origin_hashable(dict)
    False
    >>> is_origin_hashable(tuple[int, str])
    True
    """
    origin_type = get_origin(type_) or type_
    if origin_type is UnionType:
        return all(is_origin_hashable(arg) for arg in get_args(type_))
    return is_subclass(origin_type, Hashable)


def _lookup(mapping: Mapping[Any, Any], key: Any) -> Any:
    try:
        return mapping.get(key)
    except TypeError:
        # unhashable, can't be in the map
        return None


def get_aliased_type(type_: Any, alias_map: TypeAliasMap, *, _verbose: bool = True) -> Any:
    """ Map a type to its usable alias including the type's arguments.

    For example, `collections.abc.Sequence` is mapped to `list` in the default alias map:

    >>> from collections.abc import Sequence, Set
    >>> orig_type = tuple[str, Sequence[Set[int]], bool]
    >>> from binlayout.codecs import DEFAULT_TYPE_ALIAS_MAP as alias_map
    >>> get_aliased_type(orig_type, alias_map, _verbose=False)
    tuple[str, list[frozenset[int]], bool]

    Types that don't need any replacement are returned as they are:

    >>> get_aliased_type(tuple[int, ...], alias_map, _verbose=False)
    tuple[int, ...]
    """
    new_type, replaced = _get_aliased_type(type_, alias_map)
    if replaced and _verbose:
        logger.debug('type replaced', old=pretty_type(type_), new=pretty_type(new_type))
    return new_type


def _get_aliased_type(type_: Any, alias_map: TypeAliasMap) -> tuple[Any, bool]:
    """ Implementation of get_aliased_type with indication of whether there was a replacement.
    """
    origin_type = get_origin(type_) or type_
    aliased_origin = _lookup(alias_map, origin_type)
    replaced = aliased_origin is not None
    if aliased_origin is None:
        aliased_origin = origin_type

    type_args = get_args(type_)
    if not type_args:
        return (aliased_origin if replaced else type_), replaced

    # use _get_aliased_type for recursion so we don't log multiple times when a replacement happens
    aliased_args_replaced = [_get_aliased_type(arg, alias_map) for arg in type_args]
    aliased_args, args_replaced = zip(*aliased_args_replaced)
    replaced |= any(args_replaced)
    if not replaced:
        return type_, False

    if not hasattr(aliased_origin, '__class_getitem__'):
        raise TypeUnsupportedError(f'cannot replace arguments of {pretty_type(type_)}')
    return aliased_origin[tuple(aliased_args)], True


def resolve_codec_class(
    type_: Any,
    /,
    *,
    type_map: 'Codec.TypeMap',
    _verbose: bool = True,
) -> tuple[type['Codec'], Any]:
    """ Find the codec class for a type and the (aliased) type it has to be built from.

    Resolution goes in this order, the first match wins:

    1. a delegate registered with `register_delegate` for the type's origin
    2. the type's origin in `type_map.codecs_map`
    3. for `NewType` aliases, the same two steps again for the type they're based on
    4. classes that implement the `SelfCodec` protocol
    5. the closest base class in `type_map.codecs_map` whose codec accepts subclasses (`ctypes` types use this)

    Anything else is rejected with `TypeUnsupportedError`, which is a `TypeError`:

    >>> from binlayout.codecs import DEFAULT_TYPE_MAP as type_map
    >>> codec_class, _ = resolve_codec_class(list[int], type_map=type_map, _verbose=False)
    >>> codec_class.__name__
    'ListCodec'
    >>> try:
    ...     resolve_codec_class(int | None, type_map=type_map, _verbose=False)
    ... except TypeUnsupportedError as e:
    ...     print(*e.args)
    type int | None is not supported by any codec
    """
    from binlayout.codecs.delegated_codec import RegisteredDelegatedCodec, SelfCodec, SelfDelegatedCodec, get_delegate

    if isinstance(type_, str):
        raise TypeUnsupportedError('string annotations are not supported, resolve them first (typing.get_type_hints)')

    current = get_aliased_type(type_, type_map.alias_map, _verbose=_verbose)
    while True:
        origin = get_origin(current) or current
        if get_delegate(origin) is not None:
            return RegisteredDelegatedCodec, current
        codec_class = _lookup(type_map.codecs_map, origin)
        if codec_class is not None:
            return codec_class, current
        super_type = getattr(current, '__supertype__', None)
        if super_type is None:
            break
        current = get_aliased_type(super_type, type_map.alias_map, _verbose=_verbose)

    if isinstance(origin, type) and origin is not UnionType:
        if issubclass(origin, SelfCodec):
            return SelfDelegatedCodec, current
        for base in origin.__mro__[1:]:
            codec_class = _lookup(type_map.codecs_map, base)
            if codec_class is not None and codec_class._accepts_subclasses:
                return codec_class, current

    raise TypeUnsupportedError(f'type {pretty_type(type_)} is not supported by any codec')
