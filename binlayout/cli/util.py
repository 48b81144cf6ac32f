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
Helpers shared by the `binlayout-cli` subcommands: argument parsers and logging setup.

Logging flags are taken out of argv before a subcommand parses it, so every subcommand accepts them without declaring
them:

>>> argv = ['binlayout-cli demo', '--json-logs', '--output=x.bin', '--debug']
>>> parse_logging_args(argv)
LoggingOptions(output=<LoggingOutput.JSON: 2>, debug=True)
>>> argv
['binlayout-cli demo', '--output=x.bin']
"""

import sys
from argparse import ArgumentParser
from enum import IntEnum
from typing import Any, NamedTuple

import configargparse
import structlog

# timestamps of both structlog events and records coming from plain `logging` loggers
_TIMESTAMPER = structlog.processors.TimeStamper(fmt='%Y-%m-%d %H:%M:%S')


def create_parser(*, prefix: str | None = None, add_help: bool = True) -> ArgumentParser:
    """Parser where every option can also come from an environment variable, `BINLAYOUT_<OPTION>` by default."""
    return configargparse.ArgumentParser(auto_env_var_prefix=prefix or 'binlayout_', add_help=add_help)


class LoggingOutput(IntEnum):
    PRETTY = 1
    JSON = 2
    NULL = 3


class LoggingOptions(NamedTuple):
    output: LoggingOutput
    debug: bool


def parse_logging_args(argv: list[str]) -> LoggingOptions:
    """Remove the logging flags from `argv` (in place) and return what they asked for."""
    parser = create_parser(add_help=False)
    outputs = parser.add_mutually_exclusive_group()
    outputs.add_argument('--json-logs', action='store_true')
    outputs.add_argument('--disable-logs', action='store_true')
    parser.add_argument('--debug', action='store_true')

    args, remaining = parser.parse_known_args(argv)
    argv[:] = remaining

    if args.json_logs:
        output = LoggingOutput.JSON
    elif args.disable_logs:
        output = LoggingOutput.NULL
    else:
        output = LoggingOutput.PRETTY
    return LoggingOptions(output=output, debug=args.debug)


def _level_styles(colors: bool) -> dict[str, str]:
    if not colors:
        return structlog.dev.ConsoleRenderer.get_default_level_styles(False)
    from colorama import Fore, Style
    return {
        'critical': Style.BRIGHT + Fore.RED,
        'exception': Fore.RED,
        'error': Fore.RED,
        'warn': Fore.YELLOW,
        'warning': Fore.YELLOW,
        'info': Fore.GREEN,
        'debug': Style.BRIGHT + Fore.CYAN,
        'notset': Fore.WHITE,
    }


def _formatter(renderer: Any) -> dict[str, Any]:
    return {
        '()': structlog.stdlib.ProcessorFormatter,
        'processor': renderer,
        'foreign_pre_chain': [structlog.stdlib.add_log_level, structlog.stdlib.add_logger_name, _TIMESTAMPER],
    }


def _handler(output: LoggingOutput) -> dict[str, Any]:
    if output is LoggingOutput.NULL:
        return {'class': 'logging.NullHandler'}
    return {
        'class': 'logging.StreamHandler',
        'stream': 'ext://sys.stderr',
        'formatter': output.name.lower(),
    }


def setup_logging(options: LoggingOptions) -> None:
    """Route structlog through the standard `logging` module, rendered as requested by `options`."""
    import logging.config

    colors = sys.stderr.isatty()
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'pretty': _formatter(structlog.dev.ConsoleRenderer(colors=colors, level_styles=_level_styles(colors))),
            'json': _formatter(structlog.processors.JSONRenderer()),
        },
        'handlers': {
            'main': _handler(options.output),
        },
        'root': {
            'handlers': ['main'],
            'level': 'DEBUG' if options.debug else 'INFO',
        },
    })

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            _TIMESTAMPER,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def check_or_exit(condition: bool, message: str) -> None:
    """Print `message` and exit with status 2 if `condition` is False."""
    if not condition:
        print(message)
        sys.exit(2)
