"""Core discovery and execution pipeline."""

from runtests.core.discovery import TestFileDiscovery
from runtests.core.executor import ExecutionOutcome, TestExecutor
from runtests.core.filtering import filter_files
from runtests.core.runner import RunCommand

__all__ = ["RunCommand", "TestFileDiscovery", "TestExecutor", "ExecutionOutcome", "filter_files"]
