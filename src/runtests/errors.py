"""Exceptions raised by the runtests pipeline."""


class RunTestsError(Exception):
    """Base class for every error reported by runtests."""

    pass


class InvalidArgument(RunTestsError, ValueError):
    """Raised when a configuration value has the wrong shape."""

    pass


class SettingsError(RunTestsError):
    """Raised when runtests.json cannot be read or validated."""

    pass


class DiscoveryError(RunTestsError):
    """Raised when test files cannot be discovered."""

    pass


class OverrideLoadError(RunTestsError):
    """Raised when the project override script fails."""

    pass


class FilterError(RunTestsError):
    """Raised when the filter callback exits the interpreter."""

    pass


class ExecutionFailure(RunTestsError):
    """Raised when the engine reports at least one failing test."""

    pass


class EngineError(RunTestsError):
    """Raised when the test engine cannot be configured or started."""

    pass


class EngineNotFoundError(EngineError):
    """Raised when the requested test engine is not installed."""

    pass
