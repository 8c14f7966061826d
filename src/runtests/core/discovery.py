"""Test file discovery."""

import glob
import os
from pathlib import Path

from runtests.config import Configuration
from runtests.errors import DiscoveryError


def _validate_pattern(pattern: str) -> None:
    """Reject patterns the glob module would silently misread."""
    if not pattern.strip():
        raise DiscoveryError("Glob pattern cannot be empty")
    if "\0" in pattern:
        raise DiscoveryError(f"Glob pattern contains a NUL byte: {pattern!r}")

    # An unterminated character class, e.g. "test/[ab.spec.py"
    i = 0
    while i < len(pattern):
        if pattern[i] == "[":
            j = i + 1
            if j < len(pattern) and pattern[j] == "!":
                j += 1
            if j < len(pattern) and pattern[j] == "]":
                j += 1
            end = pattern.find("]", j)
            if end == -1:
                raise DiscoveryError(f"Invalid glob pattern {pattern!r}: unterminated '['")
            i = end
        i += 1


class TestFileDiscovery:
    """Resolves the tests glob and ignore list into an ordered file list."""

    __test__ = False

    def __init__(self, config: Configuration, project_root: Path | str):
        """Initialize test file discovery."""
        self.config = config
        self.project_root = Path(project_root)

    def discover(self) -> list[Path]:
        """Return the absolute real paths of every test file, sorted.

        Every ignore pattern is resolved against the project root and the
        whole ignored set is subtracted from the candidates at once.

        Raises:
            DiscoveryError: If a pattern is invalid or the tree cannot be read
        """
        if not self.project_root.is_dir():
            raise DiscoveryError(f"Project root not found: {self.project_root}")

        tests_glob = self.config.tests_glob
        ignore_patterns = list(self.config.ignore_patterns)
        for pattern in [tests_glob, *ignore_patterns]:
            _validate_pattern(pattern)

        candidates = self._expand(tests_glob)
        ignored: set[str] = set()
        for pattern in ignore_patterns:
            ignored |= self._expand(pattern)

        return [Path(p) for p in sorted(candidates - ignored)]

    def _expand(self, pattern: str) -> set[str]:
        """Expand one pattern into a set of real file paths."""
        full_pattern = os.path.join(glob.escape(str(self.project_root.resolve())), pattern)
        try:
            matches = glob.glob(full_pattern, recursive=True)
            return {os.path.realpath(m) for m in matches if os.path.isfile(m)}
        except OSError as e:
            raise DiscoveryError(f"Failed to expand {pattern!r}: {e}") from e
