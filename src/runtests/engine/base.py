"""Base test engine interface."""

import hashlib
import importlib.util
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from types import ModuleType
from typing import Callable, Optional

from runtests.errors import EngineError

CompletionCallback = Callable[[int], None]


def module_name_for(path: Path | str) -> str:
    """Build a stable, unique module name for a test file."""
    path = Path(path)
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    stem = "".join(c if c.isalnum() else "_" for c in path.stem)
    return f"_runtests_{stem}_{digest}"


class TestEngine(ABC):
    """Abstract base class for test engines.

    An engine receives configuration, has test files loaded into it and is
    then started. It reports completion through the callbacks registered
    with :meth:`on_complete`, passing ``0`` when every test passed and ``1``
    when any test failed.
    """

    __test__ = False

    # Set by engines whose start() returns before the run has finished
    completes_in_background = False

    def __init__(self) -> None:
        self._completion_callbacks: list[CompletionCallback] = []
        self._completed: Optional[int] = None

    @abstractmethod
    def bail(self, value: bool) -> None:
        """Stop at the first failing test."""
        pass

    @abstractmethod
    def timeout(self, value: float) -> None:
        """Set the per-test timeout in seconds."""
        pass

    @abstractmethod
    def grep(self, value: str) -> None:
        """Only run tests whose title matches the value."""
        pass

    @abstractmethod
    def start(self) -> None:
        """Run every loaded test.

        Implementations must call :meth:`_notify_complete` exactly once.
        Engines that report from another thread after returning set
        :attr:`completes_in_background`; for every other engine, returning
        without having reported is an error.
        """
        pass

    def load(self, path: Path) -> Optional[ModuleType]:
        """Import a test file so its module-level code registers tests.

        Loading the same file twice returns the cached module.
        """
        name = module_name_for(path)
        if name in sys.modules:
            return sys.modules[name]

        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise EngineError(f"Cannot load test file: {path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            del sys.modules[name]
            raise
        return module

    def on_complete(self, callback: CompletionCallback) -> None:
        """Register a callback receiving the final exit code."""
        self._completion_callbacks.append(callback)
        if self._completed is not None:
            callback(self._completed)

    def _notify_complete(self, exit_code: int) -> None:
        if self._completed is not None:
            return
        self._completed = exit_code
        for callback in list(self._completion_callbacks):
            callback(exit_code)
