"""Command-line interface for runtests."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from runtests import __version__
from runtests.config import SETTINGS_FILE_NAMES, create_example_settings
from runtests.core.runner import RunCommand


console = Console()


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="runtests")
@click.option("--bail", "-b", is_flag=True, help="Exit early when a test fails")
@click.option("--timeout", "-t", type=float, default=None, help="Define global timeout for all the tests")
@click.option("--grep", "-g", type=str, default=None, help="Run only tests whose title matches")
@click.option("--engine", "-e", type=str, default=None, help="Test engine: pytest, unittest or module:attr")
@click.option(
    "--project-root",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Project directory (default: current directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(
    ctx: click.Context,
    bail: bool,
    timeout: Optional[float],
    grep: Optional[str],
    engine: Optional[str],
    project_root: Optional[str],
    verbose: bool,
) -> None:
    """runtests - discover test files and run them.

    Without a subcommand every matching test file is executed and the exit
    code reports whether all tests passed.
    """
    ctx.ensure_object(dict)
    ctx.obj["bail"] = True if bail else None
    ctx.obj["timeout"] = timeout
    ctx.obj["grep"] = grep
    ctx.obj["engine"] = engine
    ctx.obj["project_root"] = Path(project_root) if project_root else Path.cwd()
    ctx.obj["verbose"] = verbose

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@main.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Discover, filter and execute the test files."""
    command = RunCommand(
        ctx.obj["project_root"],
        engine=ctx.obj.get("engine"),
        bail=ctx.obj.get("bail"),
        timeout=ctx.obj.get("timeout"),
        grep=ctx.obj.get("grep"),
        verbose=ctx.obj.get("verbose", False),
        console=console,
    )
    outcome = command.run()

    if not outcome.success:
        sys.exit(1)
    if ctx.obj.get("verbose"):
        console.print("[green]All tests passed![/green]")


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing settings")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Create a runtests.json settings file."""
    output_path = ctx.obj["project_root"] / SETTINGS_FILE_NAMES[0]
    if output_path.exists() and not force:
        console.print(f"[yellow]Settings file already exists:[/yellow] {output_path}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_settings(output_path)
    except OSError as e:
        console.print(f"[red]Error creating settings:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]Created settings file:[/green] {output_path}")
    console.print("\nNext steps:")
    console.print("  1. Edit the glob and ignore list for your project")
    console.print("  2. Add a runtestsfile.py for programmatic overrides (optional)")
    console.print("  3. Run [bold]runtests[/bold] to execute tests")


if __name__ == "__main__":
    main()
