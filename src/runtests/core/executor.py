"""Test file executor.

This module hands the selected test files to a test engine and waits for
the engine to report completion. The engine decides when every test has
finished; the executor only observes the exit code it reports.
"""

from concurrent.futures import Future, InvalidStateError
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from runtests.config import Configuration
from runtests.engine.base import TestEngine
from runtests.errors import EngineError

FAILURE_EXIT_CODE = 1


def exit_status(code: Any) -> int:
    """Translate a ``SystemExit`` code into a process exit status."""
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of a run, derived from the engine's exit code."""

    exit_code: int
    reason: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.exit_code != FAILURE_EXIT_CODE

    @classmethod
    def failure(cls, reason: str) -> "ExecutionOutcome":
        return cls(exit_code=FAILURE_EXIT_CODE, reason=reason)

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        return {
            "success": self.success,
            "exit_code": self.exit_code,
            "reason": self.reason,
        }


class TestExecutor:
    """Loads test files into an engine and waits for it to finish."""

    __test__ = False

    def __init__(self, engine: TestEngine, config: Configuration):
        """Initialize test executor.

        Args:
            engine: The engine that runs the tests
            config: Configuration whose bail, timeout and grep are forwarded
        """
        self.engine = engine
        self.config = config
        self.loaded: list[Path] = []

    def execute(self, files: list[Path]) -> ExecutionOutcome:
        """Load every file once, in order, then start the engine.

        Returns:
            ExecutionOutcome, a failure only when the engine reported exit code 1

        Raises:
            EngineError: If start() returns without the engine reporting completion
        """
        completion: Future = Future()

        def _resolve(code: int) -> None:
            try:
                completion.set_result(code)
            except InvalidStateError:
                # First signal wins
                pass

        # Must be registered before any file is loaded
        self.engine.on_complete(_resolve)
        self._push_configuration()

        try:
            seen = set(self.loaded)
            for path in files:
                if path in seen:
                    continue
                self.engine.load(path)
                self.loaded.append(path)
                seen.add(path)
            self.engine.start()
        except SystemExit as e:
            _resolve(exit_status(e.code))

        if not completion.done() and not self.engine.completes_in_background:
            raise EngineError(f"{type(self.engine).__name__} returned from start() without reporting completion")

        exit_code = completion.result()
        if exit_code == FAILURE_EXIT_CODE:
            return ExecutionOutcome.failure("Tests failed")
        return ExecutionOutcome(exit_code=exit_code)

    def _push_configuration(self) -> None:
        """Forward only the values that were explicitly set."""
        if self.config.stop_on_failure:
            self.engine.bail(True)
        if self.config.timeout_seconds is not None:
            self.engine.timeout(self.config.timeout_seconds)
        if self.config.grep_pattern is not None:
            self.engine.grep(self.config.grep_pattern)
