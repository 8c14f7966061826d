"""Tests for the project override script loader."""

import pytest

from runtests.config import DEFAULT_TESTS_GLOB, Configuration
from runtests.core.overrides import OVERRIDE_FILE_NAME, OverrideHandle, load_project_overrides
from runtests.errors import OverrideLoadError


def _write_overrides(root, source):
    path = root / OVERRIDE_FILE_NAME
    path.write_text(source)
    return path


class TestLoadProjectOverrides:
    """Tests for load_project_overrides."""

    def test_missing_file_is_ignored(self, tmp_path):
        config = Configuration()
        assert load_project_overrides(tmp_path, config) is None
        assert config.tests_glob == DEFAULT_TESTS_GLOB

    def test_script_updates_configuration(self, tmp_path):
        path = _write_overrides(tmp_path, 'config.run("custom path")\n')
        config = Configuration()

        assert load_project_overrides(tmp_path, config) == path
        assert config.tests_glob == "custom path"

    def test_chained_calls(self, tmp_path):
        _write_overrides(
            tmp_path,
            'config.filter(["test/slow.spec.py"]).run("test/**/*.spec.py").bail(True).timeout(5).grep("fast")\n',
        )
        config = Configuration()
        load_project_overrides(tmp_path, config)

        assert config.ignore_patterns == ["test/slow.spec.py"]
        assert config.tests_glob == "test/**/*.spec.py"
        assert config.stop_on_failure is True
        assert config.timeout_seconds == 5
        assert config.grep_pattern == "fast"

    def test_filter_callback_from_script(self, tmp_path):
        _write_overrides(tmp_path, 'config.filter(lambda f: f.endswith("a.spec.py"))\n')
        config = Configuration()
        load_project_overrides(tmp_path, config)

        assert config.filter_callback("/x/a.spec.py") is True
        assert config.filter_callback("/x/b.spec.py") is False

    def test_unknown_method_raises(self, tmp_path):
        _write_overrides(tmp_path, "config.foo()\n")

        with pytest.raises(OverrideLoadError, match="has no attribute 'foo'"):
            load_project_overrides(tmp_path, Configuration())

    def test_invalid_argument_raises(self, tmp_path):
        _write_overrides(tmp_path, 'config.run(["test/*.py"])\n')

        with pytest.raises(OverrideLoadError, match="run expects glob pattern to be a string"):
            load_project_overrides(tmp_path, Configuration())

    def test_syntax_error_raises(self, tmp_path):
        _write_overrides(tmp_path, "config.run(\n")

        with pytest.raises(OverrideLoadError) as exc_info:
            load_project_overrides(tmp_path, Configuration())
        assert isinstance(exc_info.value.__cause__, SyntaxError)

    def test_failed_script_leaves_configuration_untouched(self, tmp_path):
        _write_overrides(tmp_path, 'config.run("partial/*.py")\nraise RuntimeError("boom")\n')
        config = Configuration().filter("keep.py")

        with pytest.raises(OverrideLoadError, match="boom"):
            load_project_overrides(tmp_path, config)

        assert config.tests_glob == DEFAULT_TESTS_GLOB
        assert config.ignore_patterns == ["keep.py"]

    @pytest.mark.parametrize("code", [0, 3])
    def test_sys_exit_raises(self, tmp_path, code):
        _write_overrides(tmp_path, f'config.run("partial/*.py")\nimport sys\nsys.exit({code})\n')
        config = Configuration()

        with pytest.raises(OverrideLoadError, match=f"exited with code {code}") as exc_info:
            load_project_overrides(tmp_path, config)

        assert isinstance(exc_info.value.__cause__, SystemExit)
        assert config.tests_glob == DEFAULT_TESTS_GLOB


class TestOverrideHandle:
    """Tests for OverrideHandle."""

    def test_exposes_only_setters(self):
        handle = OverrideHandle(Configuration())

        assert not hasattr(handle, "reset")
        assert not hasattr(handle, "tests_glob")

    def test_returns_itself(self):
        handle = OverrideHandle(Configuration())
        assert handle.run("a/*.py") is handle
