import os

from binlayout.conf import UNITTESTS_SETTINGS_FILEPATH

os.environ['BINLAYOUT_CONFIG_YAML'] = os.environ.get('BINLAYOUT_TEST_CONFIG_YAML', UNITTESTS_SETTINGS_FILEPATH)
