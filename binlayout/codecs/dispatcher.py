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

import threading
from typing import Any, Optional, TypeVar

from structlog import get_logger

from binlayout.codecs.codec import Codec, ValueKind
from binlayout.codecs.delegated_codec import delegates_version
from binlayout.codecs.utils import pretty_type
from binlayout.serialization import Deserializer, Serializer

logger = get_logger()

T = TypeVar('T')


class TypeDispatcher:
    """ Picks the codec for a type annotation, building it the first time the type is seen.

    Built codecs are kept per annotation until a delegate is registered or unregistered, after which every codec is
    built again so the new delegate is taken into account.
    """

    def __init__(self, type_map: Codec.TypeMap) -> None:
        self.log = logger.new()
        self.type_map = type_map
        self._codecs: dict[Any, Codec] = {}
        self._version = delegates_version()
        self._lock = threading.RLock()

    def codec_for(self, type_: type[T], /) -> Codec[T]:
        """ Return the codec for the given type, raise `TypeUnsupportedError` if there's none.
        """
        with self._lock:
            version = delegates_version()
            if version != self._version:
                self._codecs.clear()
                self._version = version
            try:
                return self._codecs[type_]
            except KeyError:
                pass
            except TypeError:
                # unhashable annotation, build it every time
                return Codec.from_type(type_, type_map=self.type_map)
            codec = Codec.from_type(type_, type_map=self.type_map)
            self._codecs[type_] = codec
        self.log.debug('codec built', type=pretty_type(type_), codec=repr(codec))
        return codec

    def classify(self, type_: type[Any], /) -> ValueKind:
        return self.codec_for(type_).kind

    def write(self, serializer: Serializer, type_: type[T], value: T, /) -> None:
        self.codec_for(type_).serialize(serializer, value)

    def read(self, deserializer: Deserializer, type_: type[T], /) -> T:
        return self.codec_for(type_).deserialize(deserializer)


_default_dispatcher: Optional[TypeDispatcher] = None


def get_default_dispatcher() -> TypeDispatcher:
    """ Return the dispatcher used by `Serializer.write_type`, `Layout` and friends, created on the first call.

    Its type map is `make_default_type_map()`, so its options come from the global settings.
    """
    global _default_dispatcher
    if _default_dispatcher is None:
        from binlayout.codecs import make_default_type_map
        _default_dispatcher = TypeDispatcher(make_default_type_map())
    return _default_dispatcher
