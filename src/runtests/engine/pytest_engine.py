"""pytest-backed test engine."""

from pathlib import Path
from typing import Optional

import pytest

from runtests.engine.base import TestEngine

# pytest exit codes that still mean "nothing failed"
_PASSING_EXIT_CODES = {pytest.ExitCode.OK, pytest.ExitCode.NO_TESTS_COLLECTED}


def _format_seconds(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


class GrepSelector:
    """pytest plugin keeping only the items whose title contains a substring.

    The title is the item's node id, matched either as written or with
    underscores read as spaces, so ``"adds two"`` selects ``test_adds_two``.
    """

    def __init__(self, pattern: str):
        self.pattern = pattern

    def matches(self, nodeid: str) -> bool:
        return self.pattern in nodeid or self.pattern in nodeid.replace("_", " ")

    def pytest_collection_modifyitems(self, config, items):
        selected = []
        deselected = []
        for item in items:
            if self.matches(item.nodeid):
                selected.append(item)
            else:
                deselected.append(item)

        if deselected:
            config.hook.pytest_deselected(items=deselected)
            items[:] = selected


class PytestEngine(TestEngine):
    """Runs the loaded files in-process with ``pytest.main``."""

    def __init__(
        self,
        project_root: Optional[Path] = None,
        extra_args: Optional[list[str]] = None,
    ):
        """Initialize the pytest engine.

        Args:
            project_root: Directory passed to pytest as ``--rootdir``
            extra_args: Additional command line arguments for pytest
        """
        super().__init__()
        self.project_root = project_root
        self.extra_args = list(extra_args or [])
        self.files: list[Path] = []
        self._bail = False
        self._timeout: Optional[float] = None
        self._grep: Optional[str] = None

    def bail(self, value: bool) -> None:
        self._bail = bool(value)

    def timeout(self, value: float) -> None:
        self._timeout = value

    def grep(self, value: str) -> None:
        self._grep = value

    def load(self, path: Path) -> None:
        """Queue a file; pytest imports it during collection."""
        if path not in self.files:
            self.files.append(path)

    def build_args(self) -> list[str]:
        """Build the argument list handed to pytest."""
        args = ["--import-mode=importlib", "-p", "no:cacheprovider"]
        if self.project_root is not None:
            args.append(f"--rootdir={self.project_root}")
        if self._bail:
            args.append("-x")
        if self._timeout is not None:
            # Enforced by the pytest-timeout plugin
            args.append(f"--timeout={_format_seconds(self._timeout)}")
        args.extend(self.extra_args)
        args.extend(str(f) for f in self.files)
        return args

    def build_plugins(self) -> list:
        """Build the plugin objects registered for the run.

        Grep goes through a plugin rather than ``-k`` because ``-k`` parses
        its value as a keyword expression.
        """
        plugins = []
        if self._grep is not None:
            plugins.append(GrepSelector(self._grep))
        return plugins

    def start(self) -> None:
        """Run pytest and report 0 when nothing failed, 1 otherwise."""
        if not self.files:
            self._notify_complete(0)
            return

        exit_code = pytest.main(self.build_args(), plugins=self.build_plugins())
        self._notify_complete(0 if exit_code in _PASSING_EXIT_CODES else 1)
