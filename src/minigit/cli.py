"""CLI for minigit."""

import contextlib
import logging
import os
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import load_repo_config
from .constants import MINIGIT_VERSION
from .context import ProjectContext
from .errors import MinigitError, NotInitializedError
from .repository import Repository
from .utils import humanize_date, humanize_size


app = typer.Typer(help="""\
Minimal local file versioning. Track individual files, snapshot their
contents under increasing version numbers, and restore any snapshot.""")

console = Console()


def _configure_logging(verbose: bool) -> None:
    """Route minigit logs through rich; MINIGIT_LOG_LEVEL overrides --verbose."""
    level = os.environ.get("MINIGIT_LOG_LEVEL", "DEBUG" if verbose else "WARNING").upper()

    logger = logging.getLogger("minigit")
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
    )
    logger.setLevel(level)


def _fail(error: Exception) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[red]✗[/red] {escape(str(error))}")
    raise typer.Exit(1)


def require_project_context() -> ProjectContext:
    """Find the repository containing the current directory.

    Raises:
        typer.Exit: If not inside a repository
    """
    try:
        return ProjectContext.discover(Path.cwd())
    except NotInitializedError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        console.print()
        console.print("To initialize a repository here, run:")
        console.print("  [cyan]minigit init[/cyan]")
        raise typer.Exit(1)


@contextlib.contextmanager
def open_repository(ctx: ProjectContext) -> Iterator[Repository]:
    """Load the repository while holding the store lock."""
    config = load_repo_config(ctx.root)
    with ctx.lock(timeout=config.lock_timeout):
        yield Repository.load(ctx)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"minigit {MINIGIT_VERSION}")
        raise typer.Exit()


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Minimal local file versioning."""
    _configure_logging(verbose)


@app.command()
def init(
    path: Optional[str] = typer.Argument(None, help="Directory to initialize (default: current directory)"),
):
    """Initialize an empty repository.

    Examples:
        minigit init
        minigit init my-project
    """
    target_dir = Path(path).resolve() if path else Path.cwd()
    if not target_dir.exists():
        target_dir.mkdir(parents=True)
        console.print(f"[green]✓[/green] Created directory: {escape(str(target_dir))}")

    try:
        repo = Repository.create(ProjectContext(target_dir))
        repo.save()
    except MinigitError as e:
        _fail(e)

    console.print(f"[green]✓[/green] Initialized empty minigit repository in {escape(str(repo.ctx.store_dir))}")


@app.command()
def add(
    name: str = typer.Argument(..., help="File to track"),
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Commit message"),
):
    """Track a file and commit all tracked files.

    Examples:
        minigit add notes.txt
        minigit add src/main.py -m "Start tracking main"
    """
    ctx = require_project_context()
    try:
        with open_repository(ctx) as repo:
            commit = repo.add(ctx.resolve(Path.cwd() / name), message)
            repo.save()
    except MinigitError as e:
        _fail(e)

    console.print(f"[green]✓[/green] Tracking {escape(commit.files[-1].file.path)}")
    console.print(f"[green]✓[/green] Committed version {commit.version}: {escape(commit.message)}")


@app.command()
def remove(
    name: str = typer.Argument(..., help="Tracked file name to untrack"),
):
    """Stop tracking a file (doesn't delete it or its history).

    Examples:
        minigit remove notes.txt
    """
    ctx = require_project_context()
    try:
        with open_repository(ctx) as repo:
            removed = repo.remove(name)
            repo.save()
    except MinigitError as e:
        _fail(e)

    console.print(f"[green]✓[/green] Untracked {escape(removed.path)}")


@app.command()
def commit(
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Commit message"),
):
    """Snapshot every tracked file as a new version.

    Examples:
        minigit commit -m "Fix typo"
    """
    ctx = require_project_context()
    try:
        with open_repository(ctx) as repo:
            new_commit = repo.commit(message)
            repo.save()
    except MinigitError as e:
        _fail(e)

    console.print(
        f"[green]✓[/green] Committed version {new_commit.version}: {escape(new_commit.message)} "
        f"[dim]({len(new_commit.files)} files, {humanize_size(new_commit.total_size)})[/dim]"
    )


@app.command()
def checkout(
    version: int = typer.Argument(..., help="Version to restore"),
):
    """Restore files to the contents recorded at a version.

    Overwrites working files; the repository itself is not changed.

    Examples:
        minigit checkout 3
    """
    ctx = require_project_context()
    try:
        with open_repository(ctx) as repo:
            restored = repo.checkout(version)
    except MinigitError as e:
        _fail(e)

    console.print(f"[green]✓[/green] Restored version {restored.version}: {escape(restored.message)}")
    for cf in restored.files:
        console.print(f"  [cyan]←[/cyan] {escape(cf.file.path)}")


@app.command()
def history(
    lines: Optional[int] = typer.Option(None, "--lines", "-n", help="Show the last N versions"),
):
    """Show recent commits (default: the latest one).

    Examples:
        minigit history
        minigit history -n 5
    """
    ctx = require_project_context()
    try:
        with open_repository(ctx) as repo:
            commits = repo.history(lines)
    except MinigitError as e:
        _fail(e)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Version", justify="right", style="cyan")
    table.add_column("Message")
    table.add_column("Files")
    table.add_column("Created", style="dim")

    for c in commits:
        table.add_row(
            str(c.version),
            escape(c.message),
            escape(", ".join(c.file_names)) or "[dim](none)[/dim]",
            humanize_date(c.created) if c.created else "",
        )

    console.print(table)


@app.command()
def tracked():
    """List tracked files in the order they were added."""
    ctx = require_project_context()
    try:
        with open_repository(ctx) as repo:
            files = list(repo.tracked_files.files)
            current = repo.version
    except MinigitError as e:
        _fail(e)

    if not files:
        console.print("[yellow]No files tracked[/yellow]")
        return

    console.print(f"[bold]Tracked files[/bold] [dim](version {current})[/dim]")
    for f in files:
        console.print(f"  {escape(f.path)}")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
