import doctest
import importlib

import pytest

MODULES_WITH_DOCTESTS = [
    'binlayout.cli.hexdump',
    'binlayout.cli.util',
    'binlayout.codecs',
    'binlayout.codecs.ctypes_codec',
    'binlayout.codecs.delegated_codec',
    'binlayout.codecs.utils',
    'binlayout.layout',
    'binlayout.serialization.adapters.max_bytes',
    'binlayout.serialization.adapters.stream',
    'binlayout.serialization.buffer',
    'binlayout.serialization.compound_encoding',
    'binlayout.serialization.compound_encoding.collection',
    'binlayout.serialization.compound_encoding.mapping',
    'binlayout.serialization.compound_encoding.packed',
    'binlayout.serialization.compound_encoding.tuple',
    'binlayout.serialization.encoding.bytes',
    'binlayout.serialization.encoding.count',
    'binlayout.serialization.encoding.scalar',
    'binlayout.serialization.encoding.text',
    'binlayout.utils.dict',
    'binlayout.utils.typing',
]


@pytest.mark.parametrize('module_name', MODULES_WITH_DOCTESTS)
def test_doctests(module_name: str) -> None:
    module = importlib.import_module(module_name)
    result = doctest.testmod(module, optionflags=doctest.ELLIPSIS)
    assert result.attempted > 0
    assert result.failed == 0
