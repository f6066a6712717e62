"""CLI for deploy-state."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .changes import commit_snapshot, compute_changes
from .context import ProjectContext
from .deps import compute_dep_changes, current_program_info
from .errors import DeployStateError, SnapshotNotFoundError
from .runtimes import detect_runtime
from .status import ChangeType, StatusSummary
from .store import SnapshotStore
from .utils import humanize_size


app = typer.Typer(help="""\
Track a program's source tree between deployments. Detect changed, added
and deleted files and changed dependencies since the last commit, so a
deploy only uploads the delta.""")

console = Console()

PathOption = typer.Option(None, "--path", "-C", help="Directory inside the project (default: cwd)")


def _setup_logging(verbose: bool) -> None:
    logger = logging.getLogger("deploy_state")
    logger.handlers.clear()
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    _setup_logging(verbose)


def require_project_context(path: Optional[Path] = None) -> ProjectContext:
    """Ensure project is initialized and return context.

    Raises:
        typer.Exit: If not in a project directory
    """
    try:
        return ProjectContext(path)
    except ValueError as e:
        console.print(f"[red]✗[/red] {e}")
        console.print()
        console.print("To initialize a new project, run:")
        console.print("  [cyan]deploy-state init[/cyan]")
        raise typer.Exit(1)


def _fail(e: DeployStateError) -> None:
    console.print(f"[red]✗[/red] {escape(str(e))}")
    raise typer.Exit(1)


@app.command()
def init(
    path: Optional[Path] = typer.Argument(None, help="Directory to initialize (default: current directory)"),
):
    """Initialize state tracking for a project directory."""
    target = path or Path.cwd()
    if not target.is_dir():
        console.print(f"[red]✗[/red] {target} is not a directory")
        raise typer.Exit(1)
    if ProjectContext.is_initialized(target):
        console.print(f"[yellow]⚠[/yellow] Already initialized: {target.resolve()}")
        return

    ctx = ProjectContext.init(target)
    console.print(f"[green]✓[/green] Initialized deploy-state in {ctx.storage_dir}")
    console.print("[dim]Run 'deploy-state status' to see what a first deploy would upload.[/dim]")


@app.command()
def status(
    path: Optional[Path] = PathOption,
    as_json: bool = typer.Option(False, "--json", help="Print a JSON summary"),
):
    """Show files changed since the last commit."""
    ctx = require_project_context(path)
    store = SnapshotStore(ctx)

    try:
        try:
            baseline = store.load_snapshot()
        except SnapshotNotFoundError:
            baseline = None
        changes = compute_changes(ctx, store)
    except DeployStateError as e:
        _fail(e)

    summary = StatusSummary.from_changes(changes, baseline)

    if as_json:
        typer.echo(json.dumps(summary.to_dict(), indent=2))
        return

    if summary.first_run:
        console.print("[yellow]No snapshot committed yet: every file counts as added.[/yellow]")

    if not summary.has_changes:
        console.print("[green]✓[/green] No changes since last commit")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Change")
    table.add_column("Path")
    table.add_column("Size", justify="right")
    styles = {
        ChangeType.ADDED: "[green]added[/green]",
        ChangeType.MODIFIED: "[yellow]modified[/yellow]",
        ChangeType.DELETED: "[red]deleted[/red]",
    }
    for row in summary.rows:
        size = humanize_size(row.size) if row.size is not None else ""
        table.add_row(styles[row.change], row.path, size)
    console.print(table)

    console.print(
        f"↑ {summary.added + summary.modified} files to upload "
        f"({humanize_size(summary.upload_size)}), {summary.deleted} to delete"
    )


@app.command()
def deps(path: Optional[Path] = PathOption):
    """Show dependencies added or removed since the last commit."""
    ctx = require_project_context(path)
    try:
        changes = compute_dep_changes(ctx)
    except DeployStateError as e:
        _fail(e)

    console.print(f"[dim]Runtime: {changes.runtime.value if changes.runtime else 'unknown'}[/dim]")
    for dep in changes.added:
        console.print(f"  [green]+ {dep}[/green]")
    for dep in changes.removed:
        console.print(f"  [red]- {dep}[/red]")
    console.print(changes.summary())


@app.command()
def runtime(path: Optional[Path] = PathOption):
    """Show the runtime detected from entrypoint files."""
    ctx = require_project_context(path)
    try:
        detected = detect_runtime(ctx.root, ctx.get_ignore_spec())
    except DeployStateError as e:
        _fail(e)
    console.print(detected.value)


@app.command()
def commit(
    path: Optional[Path] = PathOption,
    files_only: bool = typer.Option(False, "--files-only", help="Only commit the file snapshot"),
    deps_only: bool = typer.Option(False, "--deps-only", help="Only commit program info"),
):
    """Record the current tree and dependencies as the deployed baseline.

    Run this after a deploy has successfully applied the reported changes.
    """
    if files_only and deps_only:
        console.print("[red]✗[/red] --files-only and --deps-only are mutually exclusive")
        raise typer.Exit(1)

    ctx = require_project_context(path)
    store = SnapshotStore(ctx)
    try:
        if not deps_only:
            snapshot = commit_snapshot(ctx, store)
            console.print(f"[green]✓[/green] Committed snapshot of {len(snapshot)} files")
        if not files_only:
            info = current_program_info(ctx, store)
            store.save_program_info(info)
            console.print(
                f"[green]✓[/green] Committed {len(info.dependencies)} dependencies "
                f"({info.runtime.value if info.runtime else 'unknown'} runtime)"
            )
    except DeployStateError as e:
        _fail(e)


@app.command()
def reset(
    path: Optional[Path] = PathOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Forget the committed state so the next deploy uploads everything."""
    ctx = require_project_context(path)
    if not yes and not typer.confirm("Clear stored snapshot and program info?"):
        raise typer.Exit(1)
    try:
        SnapshotStore(ctx).clear()
    except DeployStateError as e:
        _fail(e)
    console.print("[green]✓[/green] Cleared stored state")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
