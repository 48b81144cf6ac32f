import secrets
import shutil
import tempfile
from random import Random
from typing import Any, Callable, Optional
from unittest import main as ut_main

from structlog import get_logger
from twisted.trial import unittest

from binlayout.conf.get_settings import get_global_settings
from binlayout.serialization import Deserializer, Serializer

logger = get_logger()
main = ut_main


class TestCase(unittest.TestCase):
    seed_config: Optional[int] = None

    def setUp(self) -> None:
        self.tmpdirs: list[str] = []
        self.log = logger.new()
        self.seed = secrets.randbits(64) if self.seed_config is None else self.seed_config
        self.log.info('set seed', seed=self.seed)
        self.rng = Random(self.seed)
        self._pending_cleanups: list[Callable[..., Any]] = []
        self._settings = get_global_settings()

    def tearDown(self) -> None:
        self.clean_tmpdirs()
        for fn in self._pending_cleanups:
            fn()

    def mkdtemp(self) -> str:
        tmpdir = tempfile.mkdtemp()
        self.tmpdirs.append(tmpdir)
        return tmpdir

    def clean_tmpdirs(self) -> None:
        for tmpdir in self.tmpdirs:
            shutil.rmtree(tmpdir)

    def add_pending_cleanup(self, fn: Callable[..., Any]) -> None:
        self._pending_cleanups.append(fn)

    def encode(self, fn: Callable[[Serializer], None]) -> bytes:
        """Run `fn` against a fresh bytes serializer and return what was written."""
        serializer = Serializer.build_bytes_serializer()
        fn(serializer)
        return bytes(serializer.finalize())

    def random_bytes(self, size: int) -> bytes:
        return bytes(self.rng.getrandbits(8) for _ in range(size))

    def assertFullyConsumed(self, deserializer: Deserializer) -> None:
        self.assertTrue(deserializer.is_empty())
