"""Test run orchestration."""

from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.markup import escape

from runtests.config import Configuration, ProjectSettings
from runtests.core.discovery import TestFileDiscovery
from runtests.core.executor import ExecutionOutcome, TestExecutor
from runtests.core.filtering import filter_files
from runtests.core.overrides import load_project_overrides
from runtests.engine import DEFAULT_ENGINE, TestEngine, load_engine
from runtests.errors import ExecutionFailure


class RunCommand:
    """Runs the pipeline: settings, overrides, discovery, filtering, execution.

    Each stage runs to completion before the next one starts and the first
    error stops the pipeline.
    """

    def __init__(
        self,
        project_root: Path | str,
        engine: Union[TestEngine, str, None] = None,
        bail: Optional[bool] = None,
        timeout: Optional[float] = None,
        grep: Optional[str] = None,
        config: Optional[Configuration] = None,
        verbose: bool = False,
        console: Optional[Console] = None,
    ):
        """Initialize the run command.

        Args:
            project_root: Directory that globs and project files are resolved against
            engine: Engine instance or name; defaults to runtests.json, then pytest
            bail: Command line ``--bail``, None when not given
            timeout: Command line ``--timeout``, None when not given
            grep: Command line ``--grep``, None when not given
            config: Configuration to mutate; a fresh one when omitted
            verbose: Print discovery diagnostics
            console: Console used for diagnostics and error reporting
        """
        self.project_root = Path(project_root).resolve()
        self.engine = engine
        self.bail = bail
        self.timeout = timeout
        self.grep = grep
        self.config = config if config is not None else Configuration()
        self.verbose = verbose
        self.console = console or Console()

        self.settings: Optional[ProjectSettings] = None
        self.files: list[Path] = []

    def load_settings(self) -> Optional[ProjectSettings]:
        """Apply runtests.json when the project has one."""
        self.settings = ProjectSettings.find(self.project_root)
        if self.settings is not None:
            self.settings.apply_to(self.config)
        return self.settings

    def load_overrides(self) -> Optional[Path]:
        return load_project_overrides(self.project_root, self.config)

    def apply_cli_flags(self) -> None:
        """Command line values win over both project files."""
        if self.bail is not None:
            self.config.bail(self.bail)
        if self.timeout is not None:
            self.config.timeout(self.timeout)
        if self.grep is not None:
            self.config.grep(self.grep)

    def discover(self) -> list[Path]:
        return TestFileDiscovery(self.config, self.project_root).discover()

    def filter(self, files: list[Path]) -> list[Path]:
        return filter_files(files, self.config.filter_callback)

    def resolve_engine(self) -> TestEngine:
        if isinstance(self.engine, TestEngine):
            return self.engine
        name = self.engine
        if name is None and self.settings is not None:
            name = self.settings.engine
        return load_engine(name or DEFAULT_ENGINE, project_root=self.project_root)

    def execute(self) -> ExecutionOutcome:
        """Run every stage in order.

        Raises:
            RunTestsError: When a stage fails or a test fails
        """
        self.load_settings()
        self.load_overrides()
        self.apply_cli_flags()

        if self.verbose:
            self._print_diagnostics()

        files = self.discover()
        self.files = self.filter(files)

        if self.verbose:
            self.console.print(
                f"[dim]Running {len(self.files)} of {len(files)} discovered test files[/dim]"
            )

        engine = self.resolve_engine()
        outcome = TestExecutor(engine, self.config).execute(self.files)
        if not outcome.success:
            raise ExecutionFailure(f"runtests: {outcome.reason or 'Tests failed'}")
        return outcome

    def run(self) -> ExecutionOutcome:
        """Run the pipeline and report any error instead of raising it."""
        try:
            return self.execute()
        except SystemExit as e:
            # Raised by user code outside the engine, never a completion signal
            message = f"runtests: exited with code {e.code} before the tests ran"
            self.console.print(f"[red]Error:[/red] {escape(message)}")
            return ExecutionOutcome.failure(message)
        except Exception as e:
            self.console.print(f"[red]Error:[/red] {escape(str(e))}")
            return ExecutionOutcome.failure(str(e))

    def _print_diagnostics(self) -> None:
        self.console.print(f"[dim]Project root:[/dim] {escape(str(self.project_root))}")
        self.console.print(f"[dim]Tests glob:[/dim] {escape(self.config.tests_glob)}")
        ignored = ", ".join(self.config.ignore_patterns) or "(none)"
        self.console.print(f"[dim]Ignoring:[/dim] {escape(ignored)}")
