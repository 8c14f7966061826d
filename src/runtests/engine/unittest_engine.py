"""Test engine backed by the standard library ``unittest`` runner."""

import sys
import unittest
from pathlib import Path
from typing import Optional, TextIO

from runtests.engine.base import TestEngine
from runtests.errors import EngineError


class UnittestEngine(TestEngine):
    """Imports test files and runs their ``TestCase`` classes."""

    def __init__(self, stream: Optional[TextIO] = None, verbosity: int = 1):
        super().__init__()
        self.stream = stream
        self.verbosity = verbosity
        self.loader = unittest.TestLoader()
        self.suite = unittest.TestSuite()
        self._failfast = False
        self._loaded: set[Path] = set()

    def bail(self, value: bool) -> None:
        self._failfast = bool(value)

    def timeout(self, value: float) -> None:
        raise EngineError("The unittest engine does not support a global timeout")

    def grep(self, value: str) -> None:
        self.loader.testNamePatterns = [f"*{value}*"]

    def load(self, path: Path) -> None:
        if path in self._loaded:
            return
        module = super().load(path)
        self._loaded.add(path)
        self.suite.addTests(self.loader.loadTestsFromModule(module))

    def start(self) -> None:
        runner = unittest.TextTestRunner(
            stream=self.stream or sys.stderr,
            verbosity=self.verbosity,
            failfast=self._failfast,
        )
        result = runner.run(self.suite)
        self._notify_complete(0 if result.wasSuccessful() else 1)
