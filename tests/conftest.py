"""Shared fixtures for the runtests test suite."""

from pathlib import Path

import pytest

from runtests.engine.base import TestEngine


class RecordingEngine(TestEngine):
    """Engine double that records every call it receives."""

    def __init__(self, exit_code: int = 0):
        super().__init__()
        self.exit_code = exit_code
        self.calls: list[tuple] = []
        self.loaded: list[Path] = []

    def on_complete(self, callback):
        self.calls.append(("on_complete",))
        super().on_complete(callback)

    def bail(self, value):
        self.calls.append(("bail", value))

    def timeout(self, value):
        self.calls.append(("timeout", value))

    def grep(self, value):
        self.calls.append(("grep", value))

    def load(self, path):
        self.calls.append(("load", path))
        self.loaded.append(path)

    def start(self):
        self.calls.append(("start",))
        self._notify_complete(self.exit_code)


@pytest.fixture
def make_engine():
    """Build a RecordingEngine that reports the given exit code."""
    return RecordingEngine


@pytest.fixture
def project(tmp_path):
    """Create a project with two spec files and one helper."""
    test_dir = tmp_path / "test"
    test_dir.mkdir()
    (test_dir / "a.spec.py").write_text("A = 1\n")
    (test_dir / "b.spec.py").write_text("B = 2\n")
    (test_dir / "helpers.py").write_text("HELPER = 3\n")
    return tmp_path


PASSING_CASE = """
import unittest


class PassingCase(unittest.TestCase):
    def test_alpha(self):
        self.assertEqual(1 + 1, 2)
"""

FAILING_CASE = """
import unittest


class FailingCase(unittest.TestCase):
    def test_beta(self):
        self.assertEqual(1 + 1, 3)
"""


@pytest.fixture
def unittest_project(tmp_path):
    """Create a project whose spec files are unittest modules."""

    def _build(*sources: str) -> Path:
        test_dir = tmp_path / "test"
        test_dir.mkdir(exist_ok=True)
        for index, source in enumerate(sources):
            (test_dir / f"case{index}.spec.py").write_text(source)
        return tmp_path

    return _build
