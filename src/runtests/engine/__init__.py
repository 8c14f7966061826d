"""Test engines that runtests can hand test files to."""

import importlib
from pathlib import Path
from typing import Optional

from runtests.engine.base import TestEngine
from runtests.errors import EngineError, EngineNotFoundError

DEFAULT_ENGINE = "pytest"


def _missing(package: str) -> EngineNotFoundError:
    return EngineNotFoundError(
        f"Make sure to install {package} before running tests. pip install {package}"
    )


def load_engine(name: str = DEFAULT_ENGINE, project_root: Optional[Path] = None) -> TestEngine:
    """Resolve an engine by name.

    ``pytest`` and ``unittest`` are built in. Anything else must be a
    ``package.module:attribute`` reference to an engine class, a factory
    returning an engine, or an engine instance.
    """
    if name == "pytest":
        try:
            from runtests.engine.pytest_engine import PytestEngine
        except ImportError as e:
            raise _missing("pytest") from e
        return PytestEngine(project_root=project_root)

    if name == "unittest":
        from runtests.engine.unittest_engine import UnittestEngine

        return UnittestEngine()

    module_name, _, attribute = name.partition(":")
    if not module_name or not attribute:
        raise EngineError(f"Unknown engine {name!r}. Use pytest, unittest or module:attribute")

    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        raise _missing(module_name.split(".")[0]) from e

    try:
        target = getattr(module, attribute)
    except AttributeError as e:
        raise EngineError(f"Module {module_name!r} has no attribute {attribute!r}") from e

    engine = target
    if not isinstance(engine, TestEngine) and callable(target):
        engine = target()
    if not isinstance(engine, TestEngine):
        raise EngineError(f"{name!r} did not produce a TestEngine")
    return engine


__all__ = ["DEFAULT_ENGINE", "TestEngine", "load_engine"]
