"""Filtering of discovered test files."""

from pathlib import Path
from typing import Optional

from runtests.config import FilterCallback
from runtests.errors import FilterError


def filter_files(files: list[Path], callback: Optional[FilterCallback]) -> list[Path]:
    """Drop the files for which the callback returns a truthy value.

    The callback answers "should this file be ignored?" and is called once
    per file, in order, with the path as a string. Exceptions it raises are
    not caught, but a ``sys.exit`` from the callback becomes a FilterError.
    """
    if callback is None:
        return list(files)

    kept = []
    for f in files:
        try:
            ignored = callback(str(f))
        except SystemExit as e:
            raise FilterError(f"Filter callback exited with code {e.code} on {f}") from e
        if not ignored:
            kept.append(f)
    return kept
