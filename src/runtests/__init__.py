"""
runtests - command-line orchestrator for project test suites.

This package provides tools to:
- Discover test files with a glob pattern and an ignore list
- Filter the discovered files with a project-defined callback
- Hand the selected files to a test engine (pytest by default)
- Report the outcome to the shell through the process exit code
"""

__version__ = "0.1.0"
__author__ = "runtests contributors"
