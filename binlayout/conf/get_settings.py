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
from pathlib import Path
from typing import NamedTuple, Optional

from structlog import get_logger

from binlayout.conf.settings import BinLayoutSettings as Settings
from binlayout.conf.utils import load_yaml_settings

logger = get_logger()

CONFIG_YAML_ENV_VAR = 'BINLAYOUT_CONFIG_YAML'
DEFAULT_CONFIG_YAML = str(Path(__file__).parent / 'default.yml')


class _SettingsMetadata(NamedTuple):
    source: str
    settings: Settings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> Settings:
    """ Return the settings, loading them on the first call.

    The file is taken from the environment variable 'BINLAYOUT_CONFIG_YAML', when it isn't set the packaged
    `default.yml` is used.
    """
    settings_yaml_filepath = os.environ.get(CONFIG_YAML_ENV_VAR, DEFAULT_CONFIG_YAML)
    return _load_settings_singleton(settings_yaml_filepath)


def _load_settings_singleton(source: str) -> Settings:
    global _settings_singleton

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception('loading config twice with a different file')

        return _settings_singleton.settings

    settings = load_yaml_settings(Settings, source)
    logger.debug('settings loaded', source=source)
    _settings_singleton = _SettingsMetadata(source=source, settings=settings)

    return _settings_singleton.settings
