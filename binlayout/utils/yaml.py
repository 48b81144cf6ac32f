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
Loading of yaml configuration files, with support for a file extending another one.

A file can name a base file in its top level `extends` key. The base is loaded first (and it can extend yet another
file), then the keys of the extending file are deep-merged over it. The `extends` key itself never reaches the
returned dictionary.
"""

import os
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import yaml
from pydantic import BaseModel

from binlayout.utils.dict import deep_merge

_EXTENDS_KEY = 'extends'

T = TypeVar('T', bound=BaseModel)


def dict_from_yaml(*, filepath: Union[Path, str]) -> dict[str, Any]:
    """Takes a filepath to a yaml file and returns a dictionary with its contents."""
    if not os.path.isfile(filepath):
        raise ValueError(f"'{filepath}' is not a file")

    with open(filepath, 'r') as file:
        contents = yaml.safe_load(file)

    if contents is None:
        return {}
    if not isinstance(contents, dict):
        raise ValueError(f"'{filepath}' cannot be parsed as a dictionary")
    return contents


def _resolve_base(filepath: Path, base: str, custom_root: Optional[Path]) -> Path:
    """Find the file named by an `extends` key, next to the extending file first and then under `custom_root`."""
    candidate = filepath.parent / base
    if custom_root is not None and not candidate.is_file():
        candidate = custom_root / base
    return candidate


def dict_from_extended_yaml(*, filepath: Union[Path, str], custom_root: Optional[Path] = None) -> dict[str, Any]:
    """
    Takes a filepath to a yaml file and returns a dictionary with its contents, following its `extends` chain.

    Relative `extends` paths are looked up next to the file that has the key, and then under `custom_root` when it's
    given. A chain that comes back to a file already in it is rejected with a `ValueError`.
    """
    chain: list[dict[str, Any]] = []
    visited: set[Path] = set()
    current: Optional[Path] = Path(filepath)

    while current is not None:
        resolved = current.resolve()
        if resolved in visited:
            raise ValueError('Cannot parse yaml with recursive extensions.')
        visited.add(resolved)

        contents = dict_from_yaml(filepath=current)
        base = contents.pop(_EXTENDS_KEY, None)
        chain.append(contents)
        current = _resolve_base(current, str(base), custom_root) if base else None

    result: dict[str, Any] = {}
    for contents in reversed(chain):
        result = deep_merge(result, contents)
    return result


def model_from_extended_yaml(model: type[T], *, filepath: str, custom_root: Optional[Path] = None) -> T:
    """Takes a pydantic model and a filepath to a yaml file and returns a validated model instance."""
    return model.model_validate(dict_from_extended_yaml(filepath=filepath, custom_root=custom_root))
