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

from argparse import ArgumentParser, Namespace
from collections.abc import Iterator

from binlayout.serialization.types import Buffer


def hexdump_lines(data: Buffer, width: int = 16) -> Iterator[str]:
    """ Format bytes as lines of offset, hex bytes and printable characters.

    >>> print(*hexdump_lines(b'hi\\x00there!', width=8), sep='\\n')
    00000000  68 69 00 74 68 65 72 65  hi.there
    00000008  21                       !
    """
    view = memoryview(data).cast('B')
    for offset in range(0, len(view), width):
        chunk = bytes(view[offset:offset + width])
        hex_part = ' '.join(f'{b:02x}' for b in chunk).ljust(width * 3 - 1)
        text_part = ''.join(chr(b) if 0x20 <= b < 0x7f else '.' for b in chunk)
        yield f'{offset:08x}  {hex_part}  {text_part}'


def create_parser() -> ArgumentParser:
    from binlayout.cli.util import create_parser
    parser = create_parser()
    parser.add_argument('--input', required=True, help='File to dump')
    parser.add_argument('--width', type=int, default=16, help='Bytes per line')
    return parser


def execute(args: Namespace) -> int:
    from binlayout.cli.util import check_or_exit
    check_or_exit(args.width > 0, '--width must be positive')
    with open(args.input, 'rb') as fp:
        data = fp.read()
    for line in hexdump_lines(data, args.width):
        print(line)
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
