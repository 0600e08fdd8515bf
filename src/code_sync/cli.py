"""
CLI module - Command line interface for Code Sync

Entry point for the `code-sync` command using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import BarColumn, DownloadColumn, Progress, TextColumn, TransferSpeedColumn
from rich.table import Table

from . import __version__
from .config import SyncSettings, load_settings
from .exceptions import CodeSyncError
from .manifest import find_manifest, load_manifest
from .runners import RunnerCallbacks, RunnerResult, SequentialRunner
from .workflow import SyncTask, SyncWorkflow, TaskStatus, create_sync_workflow

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(
    name="code-sync",
    help="Code Sync - download remote archives and extract them into your project.",
    add_completion=False,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    if value:
        console.print(f"code-sync version {__version__}")
        raise typer.Exit()


def setup_logging(level: str, verbose: bool = False) -> None:
    """Route log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def format_size(num_bytes: int) -> str:
    """Format a byte count as a human-readable string."""
    if num_bytes < 1024:
        return f"{num_bytes}B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f}KB"
    return f"{num_bytes / (1024 * 1024):.1f}MB"


def fail(message: str) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    raise typer.Exit(1)


def print_task_table(tasks: list[SyncTask], manifest: Path) -> None:
    table = Table(title=f"Tasks: {manifest}")
    table.add_column("Name", style="cyan")
    table.add_column("URL")
    table.add_column("Destination", style="dim")
    table.add_column("Checksum")
    table.add_column("Clean")

    for task in tasks:
        table.add_row(
            task.name,
            task.source_url,
            str(task.destination),
            task.expected_checksum or "-",
            "yes" if task.clean else "no",
        )

    console.print(table)


def build_callbacks(dry_run: bool) -> tuple[RunnerCallbacks, Progress]:
    """Progress narration for a run. The Progress bar is only drawn on a terminal."""
    progress = Progress(
        TextColumn("  "),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        console=console,
        transient=True,
        disable=not console.is_terminal,
    )
    bar: dict[str, object] = {}

    def stop_bar():
        if "id" in bar:
            progress.remove_task(bar.pop("id"))
            progress.stop()

    def on_task_start(task: SyncTask, idx: int, total: int):
        console.print(f"\n[bold][{idx}/{total}] {escape(task.name)}[/bold]")
        console.print(f"  URL:         {escape(task.source_url)}")
        console.print(f"  Destination: {escape(str(task.destination))}")
        if dry_run:
            steps = ["download"]
            if task.expected_checksum:
                steps.append(f"verify {task.expected_checksum}")
            if task.clean:
                steps.append("clean")
            steps.append("extract")
            console.print(f"  [dim]Would {', '.join(steps)}[/dim]")

    def on_status_change(task: SyncTask, status: TaskStatus):
        stop_bar()
        if status == TaskStatus.DOWNLOADING:
            console.print("  Downloading...")
            progress.start()
            bar["id"] = progress.add_task("download", total=None)
        elif status == TaskStatus.VERIFYING:
            console.print("  Verifying checksum...")
        elif status == TaskStatus.CLEANING:
            console.print("  Cleaning target directory...")
        elif status == TaskStatus.EXTRACTING:
            console.print("  Extracting...")

    def on_download_progress(task: SyncTask, current: int, total: int | None):
        if "id" in bar:
            progress.update(bar["id"], completed=current, total=total)

    def on_task_complete(task: SyncTask, success: bool, error: str | None):
        stop_bar()
        if success:
            console.print(f"  [green]✓[/green] {escape(task.name)} completed")
        else:
            console.print(f"  [red]✗[/red] {escape(task.name)} failed")

    callbacks = RunnerCallbacks(
        on_task_start=on_task_start,
        on_status_change=on_status_change,
        on_download_progress=on_download_progress,
        on_task_complete=on_task_complete,
    )
    return callbacks, progress


def print_summary(result: RunnerResult, dry_run: bool) -> None:
    console.print()
    if dry_run:
        console.print(f"[bold]Dry run:[/bold] {result.tasks_skipped} tasks would run")
        console.print("[dim]Dry run - nothing downloaded. Remove --dry-run to execute.[/dim]")
        return

    console.print(
        f"[bold]Complete:[/bold] {result.tasks_completed} synced, {result.tasks_failed} failed, "
        f"{result.tasks_skipped} skipped ({format_size(result.bytes_downloaded)} downloaded, "
        f"{result.files_extracted} files extracted)"
    )
    if result.success:
        console.print("[green]All tasks completed![/green]")


def run_workflow(workflow: SyncWorkflow, settings: SyncSettings, dry_run: bool = False) -> RunnerResult:
    """Run a workflow with console narration."""
    callbacks, progress = build_callbacks(dry_run)
    runner = SequentialRunner(settings=settings, dry_run=dry_run)
    try:
        return runner.run(workflow, callbacks)
    finally:
        progress.stop()


@app.command()
def sync(
    task: Annotated[str | None, typer.Argument(help="Run only the task(s) with this name")] = None,
    manifest: Annotated[
        Path | None,
        typer.Option("--manifest", "-m", help="Manifest file (default: ./package.json)", dir_okay=False),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Settings file", exists=True, dir_okay=False),
    ] = None,
    list_tasks: Annotated[bool, typer.Option("--list", "-l", help="List configured tasks and exit")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would be done without downloading")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging")] = False,
    version: Annotated[
        bool, typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
):
    """
    Download archives listed in package.json and extract them into place.

    Tasks are read from the [cyan]"code-sync"[/cyan] array of the manifest and run
    in order. The first failure stops the run with exit code 1.

    [bold]Examples:[/bold]

        code-sync                       # Run every task

        code-sync assets                # Run only the "assets" task

        code-sync --list                # Show configured tasks
    """
    try:
        settings = load_settings(config)
    except CodeSyncError as e:
        fail(str(e))

    setup_logging(settings.logging.level, verbose)

    manifest_path = manifest or find_manifest(filename=settings.manifest.filename)

    try:
        tasks = load_manifest(manifest_path, settings.manifest.section)
        if list_tasks:
            print_task_table(tasks, manifest_path)
            return
        workflow = create_sync_workflow(tasks, task, manifest=manifest_path)
    except CodeSyncError as e:
        fail(str(e))

    console.print("[bold]Code Sync[/bold]")
    if task:
        console.print(f"Running task: {escape(task)}")
    else:
        console.print(f"Running {len(workflow.tasks)} tasks")

    result = run_workflow(workflow, settings, dry_run)
    print_summary(result, dry_run)

    if not result.success:
        message = str(result.error) if result.error else "; ".join(result.errors)
        fail(f"[{result.failed_task}] {message}")


def main_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main_cli()
