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
Writes a few values to files and reads them back, the files are the ones from the usage example:

- `file.bin`: a list of names, 12 heights and a measurement, followed by 3 records, a text and a number
- `set.bin`: a number followed by a set of names
"""

import ctypes
import os
from argparse import ArgumentParser, Namespace
from dataclasses import dataclass, field
from typing import Any

from structlog import get_logger

from binlayout.layout import Layout, layout_dataclass
from binlayout.serialization import Deserializer, Serializer
from binlayout.types import Float32, Int32

logger = get_logger()

Heights = ctypes.c_float * 12

# 12 Float32 values, there's no count prefix because the arity is in the type
HeightsTuple = tuple[(Float32,) * 12]  # type: ignore[misc]

SAMPLE_LAYOUT = Layout(list[str], Heights, int)
SET_LAYOUT = Layout(int, set[str])


@layout_dataclass
@dataclass
class Record:
    names: list[str] = field(default_factory=list)
    heights: HeightsTuple = (0.0,) * 12  # type: ignore[assignment]
    measurements: int = 0


RECORDS_LAYOUT = Layout(Record, Record, Record, str, Int32)


def write_files(output_dir: str) -> None:
    names = ['ann', 'joseph', 'catherine']
    heights = Heights(2, 3, 5, 7, 11, 13, 17, 23, 29, 31, 37, 43)
    records = [
        Record(),
        Record(['bob'], (1.5,) * 12, 7),
        Record(names, tuple(heights), 1234),
    ]

    with open(os.path.join(output_dir, 'file.bin'), 'wb') as fp:
        with Serializer.build_stream_serializer(fp) as serializer:
            SAMPLE_LAYOUT.write(serializer, names, heights, 1234)
            RECORDS_LAYOUT.write(serializer, *records, 'Some string, idk', 1009)
            logger.info('values written', path=fp.name, size=serializer.cur_pos())

    with open(os.path.join(output_dir, 'set.bin'), 'wb') as fp:
        with Serializer.build_stream_serializer(fp) as serializer:
            SET_LAYOUT.write(serializer, 0xDEADFACE, {'Ann', 'Joseph', 'Catherine'})
            logger.info('values written', path=fp.name, size=serializer.cur_pos())


def read_files(output_dir: str) -> dict[str, Any]:
    result: dict[str, Any] = {}

    with open(os.path.join(output_dir, 'file.bin'), 'rb') as fp:
        with Deserializer.build_stream_deserializer(fp) as deserializer:
            names, heights, measurements = SAMPLE_LAYOUT.read(deserializer)
            *records, text, number = RECORDS_LAYOUT.read(deserializer)
            deserializer.finalize()
    result.update(
        names=names,
        heights=list(heights),
        measurements=measurements,
        records=records,
        text=text,
        number=number,
    )

    with open(os.path.join(output_dir, 'set.bin'), 'rb') as fp:
        with Deserializer.build_stream_deserializer(fp) as deserializer:
            result['tag'], result['name_set'] = SET_LAYOUT.read(deserializer)
            deserializer.finalize()

    return result


def create_parser() -> ArgumentParser:
    from binlayout.cli.util import create_parser
    parser = create_parser()
    parser.add_argument('--output', required=True, help='Directory where the files are written')
    return parser


def execute(args: Namespace) -> int:
    os.makedirs(args.output, exist_ok=True)
    write_files(args.output)
    result = read_files(args.output)
    for key, value in result.items():
        print(f'{key}: {value!r}')
    if result['tag'] != 0xDEADFACE or result['name_set'] != {'Ann', 'Joseph', 'Catherine'}:
        logger.error('values read back do not match')
        return 1
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
