"""Tests for filtering discovered files."""

from pathlib import Path

import pytest

from runtests.core.filtering import filter_files
from runtests.errors import FilterError

FILES = [Path("/project/test/a.spec.py"), Path("/project/test/b.spec.py")]


class TestFilterFiles:
    """Tests for filter_files."""

    def test_without_callback(self):
        result = filter_files(FILES, None)
        assert result == FILES
        assert result is not FILES

    def test_truthy_callback_excludes(self):
        received = []

        def ignore_a(file):
            received.append(file)
            return file.endswith("a.spec.py")

        assert filter_files(FILES, ignore_a) == [Path("/project/test/b.spec.py")]
        assert received == [str(f) for f in FILES]

    def test_falsy_callback_keeps_everything(self):
        assert filter_files(FILES, lambda f: None) == FILES

    def test_order_is_preserved(self):
        files = [Path(f"/t/{n}.py") for n in "dcba"]
        assert filter_files(files, lambda f: f.endswith("c.py")) == [
            Path("/t/d.py"),
            Path("/t/b.py"),
            Path("/t/a.py"),
        ]

    def test_callback_exception_propagates(self):
        def broken(file):
            raise RuntimeError("filter exploded")

        with pytest.raises(RuntimeError, match="filter exploded"):
            filter_files(FILES, broken)

    @pytest.mark.parametrize("code", [0, 3, None])
    def test_callback_exit_becomes_filter_error(self, code):
        def exiting(file):
            raise SystemExit(code)

        with pytest.raises(FilterError, match=f"exited with code {code}"):
            filter_files(FILES, exiting)
