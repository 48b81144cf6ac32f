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

import os
import sys
from types import ModuleType
from typing import NamedTuple

from structlog import get_logger

logger = get_logger()


class Command(NamedTuple):
    group: str
    module: ModuleType
    description: str


class CliManager:
    """ Dispatches `binlayout-cli <command> [args...]` to the `main()` of the command's module.
    """

    def __init__(self) -> None:
        self.basename: str = os.path.basename(sys.argv[0])
        self.commands: dict[str, Command] = {}

        from . import demo, hexdump

        self.add_cmd('examples', 'demo', demo, 'Write and read back sample values through a file')
        self.add_cmd('dev', 'hexdump', hexdump, 'Print the bytes of a file in hex')

    def add_cmd(self, group: str, cmd: str, module: ModuleType, description: str = '') -> None:
        if cmd in self.commands:
            raise ValueError(f'command {cmd!r} already registered')
        self.commands[cmd] = Command(group, module, description)

    def help(self) -> None:
        from colorama import Fore, Style

        width = max(map(len, self.commands), default=0)
        print()
        print('Available subcommands:')
        print()
        for group in sorted({command.group for command in self.commands.values()}):
            print(f'{Fore.RED}{Style.BRIGHT}[{group}]{Style.RESET_ALL}')
            for name, command in self.commands.items():
                if command.group == group:
                    print(f'    {name.ljust(width)}   {command.description}')
            print()

    def execute_from_command_line(self) -> int:
        from binlayout.cli.util import parse_logging_args, setup_logging

        if len(sys.argv) < 2 or sys.argv[1] == 'help':
            self.help()
            return 0

        name = sys.argv.pop(1)
        command = self.commands.get(name)
        if command is None:
            print(f'Unknown command: "{name}"')
            print(f'Type "{self.basename} help" for usage.')
            return -1

        sys.argv[0] = f'{sys.argv[0]} {name}'
        setup_logging(parse_logging_args(sys.argv))
        return command.module.main() or 0


def main() -> None:
    try:
        sys.exit(CliManager().execute_from_command_line())
    except KeyboardInterrupt:
        logger.warning('interrupted, exiting')
        sys.exit(1)
    except Exception:
        logger.exception('uncaught exception')
        sys.exit(2)


if __name__ == '__main__':
    main()
