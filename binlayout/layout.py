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
A `Layout` writes and reads a fixed sequence of heterogeneous values as a single unit.

The encoding of a layout is just the encoding of each member, in order, without any padding or header:

>>> from binlayout.types import UInt8, UInt16
>>> layout = Layout(UInt8, str, UInt16)
>>> len(layout)
3
>>> data = layout.to_bytes(7, 'hi', 513)
>>> layout.from_bytes(data)
(7, 'hi', 513)
>>> layout.size_hint(7, 'hi', 513) == len(data)
True

Every member type is checked when the layout is built:

>>> try:
...     Layout(int, object)
... except TypeError as e:
...     print(*e.args)
type object is not supported by any codec

Writing stops at the first value that fails and the bytes of the values before it stay in the sink, there is no
rollback, a sink where a layout failed to be written should be discarded.
"""

from dataclasses import fields, is_dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar, get_type_hints, overload

from structlog import get_logger

from binlayout.codecs import Codec, TupleCodec, TypeDispatcher, get_default_dispatcher
from binlayout.codecs.utils import pretty_type
from binlayout.serialization import Deserializer, SerializationError, Serializer

if TYPE_CHECKING:
    from _typeshed import DataclassInstance

logger = get_logger()

D = TypeVar('D', bound='DataclassInstance')


class Layout:
    """ An ordered group of types that are written and read together.

    A layout holds no values, the values are given to each `write` call and returned by each `read` call.
    """

    __slots__ = ('_types', '_codecs')

    _types: tuple[Any, ...]
    _codecs: tuple[Codec, ...]

    def __init__(self, *types: Any, dispatcher: Optional[TypeDispatcher] = None) -> None:
        if dispatcher is None:
            dispatcher = get_default_dispatcher()
        self._types = types
        self._codecs = tuple(dispatcher.codec_for(type_) for type_ in types)

    def __len__(self) -> int:
        return len(self._codecs)

    def __repr__(self) -> str:
        return f'Layout({", ".join(map(pretty_type, self._types))})'

    @property
    def types(self) -> tuple[Any, ...]:
        return self._types

    def _check_arity(self, values: tuple[Any, ...]) -> None:
        if len(values) != len(self._codecs):
            raise TypeError(f'{self!r} takes {len(self._codecs)} values, got {len(values)}')

    def write(self, serializer: Serializer, *values: Any) -> None:
        """ Write each value with the codec of the type in the same position.

        The first failure is raised with a note of the member that failed, the following values are not written.
        """
        self._check_arity(values)
        for index, (type_, codec, value) in enumerate(zip(self._types, self._codecs, values)):
            try:
                codec.serialize(serializer, value)
            except SerializationError as e:
                logger.debug('layout write failed', member=index, type=pretty_type(type_), error=repr(e))
                e.add_note(f'while writing layout member {index} ({pretty_type(type_)})')
                raise

    def read(self, deserializer: Deserializer) -> tuple[Any, ...]:
        """ Read one value for each member, in order.
        """
        values: list[Any] = []
        for index, (type_, codec) in enumerate(zip(self._types, self._codecs)):
            try:
                values.append(codec.deserialize(deserializer))
            except SerializationError as e:
                logger.debug('layout read failed', member=index, type=pretty_type(type_), error=repr(e))
                e.add_note(f'while reading layout member {index} ({pretty_type(type_)})')
                raise
        return tuple(values)

    def to_bytes(self, *values: Any) -> bytes:
        serializer = Serializer.build_bytes_serializer()
        self.write(serializer, *values)
        return bytes(serializer.finalize())

    def from_bytes(self, data: bytes) -> tuple[Any, ...]:
        """ Read the values from the given bytes, which must be consumed entirely.
        """
        deserializer = Deserializer.build_bytes_deserializer(data)
        values = self.read(deserializer)
        deserializer.finalize()
        return values

    def size_hint(self, *values: Any) -> int:
        """ Number of bytes the given values take when written, nothing is written to any sink.
        """
        serializer = Serializer.build_bytes_serializer()
        self.write(serializer, *values)
        return serializer.cur_pos()

    def as_codec(self) -> TupleCodec:
        """ A codec for tuples with the same members, it has the same encoding as the layout.
        """
        return TupleCodec(self._codecs)


@overload
def layout_dataclass(cls: type[D], /) -> type[D]:
    ...


@overload
def layout_dataclass(*, dispatcher: Optional[TypeDispatcher] = None) -> Callable[[type[D]], type[D]]:
    ...


def layout_dataclass(
    cls: Optional[type[D]] = None,
    /,
    *,
    dispatcher: Optional[TypeDispatcher] = None,
) -> type[D] | Callable[[type[D]], type[D]]:
    """ Make a dataclass serializable by giving it a `Layout` over its `__init__` fields.

    The class gets `serialize` and `deserialize` methods, which makes it a `SelfCodec`, and a `__layout__` attribute.

    >>> from dataclasses import dataclass
    >>> from binlayout.types import UInt8
    >>> @layout_dataclass
    ... @dataclass
    ... class Point:
    ...     x: UInt8
    ...     y: UInt8
    >>> Point.__layout__
    Layout(UInt8, UInt8)
    >>> Layout(Point, str).to_bytes(Point(1, 2), '') == bytes([1, 2]) + Layout(str).to_bytes('')
    True
    """
    def wrap(class_: type[D]) -> type[D]:
        if not is_dataclass(class_):
            raise TypeError(f'{class_.__name__} is not a dataclass, apply @dataclass first')
        type_hints = get_type_hints(class_)
        names = [field.name for field in fields(class_) if field.init]
        layout = Layout(*(type_hints[name] for name in names), dispatcher=dispatcher)

        def serialize(self: D, serializer: Serializer, /) -> None:
            layout.write(serializer, *(getattr(self, name) for name in names))

        def deserialize(cls_: type[D], deserializer: Deserializer, /) -> D:
            return cls_(**dict(zip(names, layout.read(deserializer))))

        setattr(class_, '__layout__', layout)
        setattr(class_, 'serialize', serialize)
        setattr(class_, 'deserialize', classmethod(deserialize))
        return class_

    if cls is None:
        return wrap
    return wrap(cls)
