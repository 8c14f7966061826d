"""Loading of the project override script (runtestsfile.py)."""

import runpy
from pathlib import Path
from typing import Any, Optional

from runtests.config import Configuration
from runtests.errors import OverrideLoadError

OVERRIDE_FILE_NAME = "runtestsfile.py"


class OverrideHandle:
    """The only object an override script sees, exposed as ``config``.

    Example runtestsfile.py::

        config.filter(lambda f: f.endswith("slow.spec.py")).run("test/**/*.spec.py")
        config.timeout(5)
    """

    def __init__(self, config: Configuration):
        self._config = config

    def run(self, pattern: Any) -> "OverrideHandle":
        self._config.run(pattern)
        return self

    def filter(self, pattern: Any) -> "OverrideHandle":
        self._config.filter(pattern)
        return self

    def bail(self, value: bool) -> "OverrideHandle":
        self._config.bail(value)
        return self

    def timeout(self, value: Optional[float]) -> "OverrideHandle":
        self._config.timeout(value)
        return self

    def grep(self, value: Optional[str]) -> "OverrideHandle":
        self._config.grep(value)
        return self


def load_project_overrides(project_root: Path | str, config: Configuration) -> Optional[Path]:
    """Run runtestsfile.py against the configuration, if the file exists.

    Mutations are staged on a snapshot and only committed once the script
    has run to completion, so a failing script leaves ``config`` untouched.

    Returns:
        The path of the script that was applied, or None when there is none

    Raises:
        OverrideLoadError: If the script raises or calls sys.exit while running
    """
    override_path = Path(project_root) / OVERRIDE_FILE_NAME
    if not override_path.is_file():
        return None

    staged = config.snapshot()
    try:
        runpy.run_path(str(override_path), init_globals={"config": OverrideHandle(staged)})
    except SystemExit as e:
        raise OverrideLoadError(f"{override_path} exited with code {e.code}") from e
    except Exception as e:
        raise OverrideLoadError(f"Failed to load {override_path}: {e}") from e

    config.update_from(staged)
    return override_path
