"""Configuration management for runtests."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from runtests.errors import InvalidArgument, SettingsError

DEFAULT_TESTS_GLOB = "test/*.spec.py"
SETTINGS_FILE_NAMES = ["runtests.json", ".runtests.json"]

FilterCallback = Callable[[str], Any]


@dataclass(frozen=True)
class FilterSpec:
    """A filter argument, classified once at the call site."""

    @staticmethod
    def from_argument(argument: Any) -> "FilterSpec":
        """Classify a glob string, a sequence of globs or a callback."""
        if isinstance(argument, str):
            return ExcludeGlobs(globs=(argument,))
        if isinstance(argument, (list, tuple)) and all(isinstance(g, str) for g in argument):
            return ExcludeGlobs(globs=tuple(argument))
        if callable(argument):
            return Predicate(fn=argument)
        raise InvalidArgument("filter only accepts a glob string, array, or callback")


@dataclass(frozen=True)
class ExcludeGlobs(FilterSpec):
    """Ignore every file matching one of the globs."""

    globs: tuple[str, ...] = ()


@dataclass(frozen=True)
class Predicate(FilterSpec):
    """Ignore every file for which the callback returns a truthy value."""

    fn: Optional[FilterCallback] = None


class Configuration(BaseModel):
    """Mutable run configuration shared by every pipeline stage.

    The setter methods mirror what a project override script may call and
    return the configuration itself, so calls can be chained::

        config.filter("test/slow.spec.py").run("test/**/*.spec.py")
    """

    model_config = ConfigDict(validate_assignment=True)

    tests_glob: str = Field(default=DEFAULT_TESTS_GLOB, description="Glob used to discover test files")
    ignore_patterns: list[str] = Field(default_factory=list, description="Globs excluded from discovery")
    filter_callback: Optional[FilterCallback] = Field(
        default=None, exclude=True, description="Returns true for files that should be ignored"
    )
    stop_on_failure: bool = Field(default=False, description="Stop the engine at the first failure")
    timeout_seconds: Optional[float] = Field(default=None, description="Global test timeout, engine default when unset")
    grep_pattern: Optional[str] = Field(default=None, description="Only run tests whose title matches")

    def filter(self, pattern: Any) -> "Configuration":
        """Set the ignore globs or the filter callback."""
        spec = FilterSpec.from_argument(pattern)
        if isinstance(spec, ExcludeGlobs):
            self.ignore_patterns = list(spec.globs)
        else:
            self.filter_callback = spec.fn
        return self

    def run(self, pattern: Any) -> "Configuration":
        """Set the glob used to discover test files."""
        if not isinstance(pattern, str):
            raise InvalidArgument(
                f"run expects glob pattern to be a string, got {type(pattern).__name__}"
            )
        self.tests_glob = pattern
        return self

    def bail(self, value: bool) -> "Configuration":
        self.stop_on_failure = value
        return self

    def timeout(self, value: Optional[float]) -> "Configuration":
        self.timeout_seconds = value
        return self

    def grep(self, value: Optional[str]) -> "Configuration":
        self.grep_pattern = value
        return self

    def reset(self) -> "Configuration":
        """Restore every field to its default value."""
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.get_default(call_default_factory=True))
        return self

    def snapshot(self) -> "Configuration":
        """Return an independent copy that can be mutated and committed later."""
        return self.model_copy(update={"ignore_patterns": list(self.ignore_patterns)})

    def update_from(self, other: "Configuration") -> None:
        """Copy every field of another configuration into this one."""
        for name in type(self).model_fields:
            value = getattr(other, name)
            if isinstance(value, list):
                value = list(value)
            setattr(self, name, value)


class ProjectSettings(BaseModel):
    """Declarative settings read from runtests.json."""

    tests_glob: Optional[str] = Field(default=None, description="Glob used to discover test files")
    ignore: Union[str, list[str]] = Field(default_factory=list, description="Glob or globs to ignore")
    bail: Optional[bool] = Field(default=None, description="Stop at the first failing test")
    timeout_seconds: Optional[float] = Field(default=None, description="Global test timeout")
    grep: Optional[str] = Field(default=None, description="Only run tests whose title matches")
    engine: Optional[str] = Field(default=None, description="Test engine (pytest, unittest or module:attr)")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("Timeout cannot be negative")
        return v

    @field_validator("engine")
    @classmethod
    def validate_engine(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Engine name cannot be empty")
        return v

    @classmethod
    def from_file(cls, path: Path | str) -> "ProjectSettings":
        """Load settings from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        try:
            with open(path, "r") as f:
                data = json.load(f)
            return cls.model_validate(data)
        except json.JSONDecodeError as e:
            raise SettingsError(f"Invalid JSON in {path}: {e}") from e
        except ValidationError as e:
            raise SettingsError(f"Invalid settings in {path}: {e}") from e

    @classmethod
    def find(cls, project_root: Path | str) -> Optional["ProjectSettings"]:
        """Load the settings file from the project root, if there is one."""
        project_root = Path(project_root)
        for name in SETTINGS_FILE_NAMES:
            settings_path = project_root / name
            if settings_path.exists():
                return cls.from_file(settings_path)
        return None

    def to_file(self, path: Path | str) -> None:
        """Save settings to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(exclude_none=True), f, indent=2)

    def apply_to(self, config: Configuration) -> Configuration:
        """Write every value set in this file onto the configuration."""
        if self.tests_glob is not None:
            config.run(self.tests_glob)
        if self.ignore:
            config.filter(self.ignore)
        if self.bail is not None:
            config.bail(self.bail)
        if self.timeout_seconds is not None:
            config.timeout(self.timeout_seconds)
        if self.grep is not None:
            config.grep(self.grep)
        return config


def get_default_settings() -> ProjectSettings:
    """Return the settings written by ``runtests init``."""
    return ProjectSettings(
        tests_glob=DEFAULT_TESTS_GLOB,
        ignore=[],
        bail=False,
        engine="pytest",
    )


def create_example_settings(output_path: Path | str) -> Path:
    """Create an example settings file."""
    output_path = Path(output_path)
    get_default_settings().to_file(output_path)
    return output_path
