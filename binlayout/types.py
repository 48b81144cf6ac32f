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
Sized scalar types.

These are annotations only, at runtime the values are plain `int`, `float`, `bool` and `bytes`. Using them in a
`Layout` (or any container) picks the native representation of the matching C type:

| alias     | C type      | size |
|-----------|-------------|------|
| `Int8`    | `int8_t`    | 1    |
| `UInt8`   | `uint8_t`   | 1    |
| `Int16`   | `int16_t`   | 2    |
| `UInt16`  | `uint16_t`  | 2    |
| `Int32`   | `int32_t`   | 4    |
| `UInt32`  | `uint32_t`  | 4    |
| `Int64`   | `int64_t`   | 8    |
| `UInt64`  | `uint64_t`  | 8    |
| `Float32` | `float`     | 4    |
| `Float64` | `double`    | 8    |
| `Char`    | `char`      | 1    |
| `Bool`    | `bool`      | 1    |

The builtins map to `Int64` (`int`), `Float64` (`float`) and `Bool` (`bool`).
"""

from typing import NewType

Int8 = NewType('Int8', int)
UInt8 = NewType('UInt8', int)
Int16 = NewType('Int16', int)
UInt16 = NewType('UInt16', int)
Int32 = NewType('Int32', int)
UInt32 = NewType('UInt32', int)
Int64 = NewType('Int64', int)
UInt64 = NewType('UInt64', int)

Float32 = NewType('Float32', float)
Float64 = NewType('Float64', float)

# a single byte, the value is a `bytes` of length 1
Char = NewType('Char', bytes)
Bool = NewType('Bool', bool)

__all__ = [
    'Int8',
    'UInt8',
    'Int16',
    'UInt16',
    'Int32',
    'UInt32',
    'Int64',
    'UInt64',
    'Float32',
    'Float64',
    'Char',
    'Bool',
]
