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

from copy import deepcopy
from typing import Any, Mapping, TypeVar

K = TypeVar('K')


def deep_merge(base: Mapping[K, Any], override: Mapping[K, Any]) -> dict[K, Any]:
    """
    Merge `override` over `base`, descending into values that are dicts on both sides.

    Neither input is modified, the result shares no dicts with them:

    >>> base = dict(COUNT_FORMAT='N', nested=dict(x=1, y=2))
    >>> override = dict(nested=dict(x=3), MAX_CONTAINER_LENGTH=64)
    >>> merged = deep_merge(base, override)
    >>> merged == dict(COUNT_FORMAT='N', nested=dict(x=3, y=2), MAX_CONTAINER_LENGTH=64)
    True
    >>> base['nested']
    {'x': 1, 'y': 2}

    A value that is not a dict on both sides is replaced as a whole:

    >>> deep_merge(dict(a=dict(b=1)), dict(a=2))
    {'a': 2}
    """
    merged: dict[K, Any] = {}
    for key in base.keys() | override.keys():
        if key not in override:
            merged[key] = deepcopy(base[key])
        elif key in base and isinstance(base[key], dict) and isinstance(override[key], dict):
            merged[key] = deep_merge(base[key], override[key])
        else:
            merged[key] = deepcopy(override[key])
    return merged
