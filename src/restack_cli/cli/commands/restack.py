"""Restack command implementation.

Rebases each of your open pull requests that declares ``Depends on: #N``
onto the default branch once pull request #N has been merged.
"""

from __future__ import annotations

import json
import signal
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, NoReturn

import typer
from rich.console import Console

from restack_cli.cli.ui import StepTracker, live_tracker
from restack_cli.config import resolve_settings
from restack_cli.core.exceptions import (
    ConfigError,
    PreconditionError,
    RestackError,
    ToolNotFoundError,
)
from restack_cli.core.gh import GhClient
from restack_cli.core.git import GitClient
from restack_cli.core.process import require_tool
from restack_cli.logging_setup import configure_logging
from restack_cli.restack.pipeline import CancellationToken, RestackResult, execute_restack
from restack_cli.restack.report import has_errors, outcomes_to_dict, render_report

console = Console()

EXIT_FATAL = 1
EXIT_STRICT_FAILURE = 2
EXIT_INTERRUPTED = 130


@contextmanager
def handle_interrupts(token: CancellationToken) -> Iterator[None]:
    """Turn SIGINT/SIGTERM into a cancellation request for the block.

    The current pull request always runs to a safe terminal state; only the
    remaining ones are skipped.
    """
    original_sigint = signal.getsignal(signal.SIGINT)
    original_sigterm = signal.getsignal(signal.SIGTERM)

    def signal_handler(sig, frame):
        if token.cancelled:
            console.print("\n[yellow]Still finishing the current pull request, please wait...[/yellow]")
            return
        console.print("\n[yellow]Interrupt received, finishing the current pull request...[/yellow]")
        token.cancel()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, original_sigint)
        signal.signal(signal.SIGTERM, original_sigterm)


def _fail(message: str, *, as_json: bool, error_code: str, symbol: str = "[red]Error:[/red]") -> NoReturn:
    if as_json:
        typer.echo(json.dumps({"error_code": error_code, "error": message}, indent=2))
    else:
        console.print(f"{symbol} {message}")
    raise typer.Exit(EXIT_FATAL)


def restack(
    repo_root: Path = typer.Option(
        None,
        "--repo-root",
        help="Repository to operate on (defaults to the current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    remote: str = typer.Option(None, "--remote", help="Remote holding the default branch (default: origin)"),
    author: str = typer.Option(None, "--author", help="Only consider pull requests by this author (default: @me)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be rebased without changing anything"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    strict: bool = typer.Option(False, "--strict", help="Exit with status 2 if any pull request failed to rebase"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Rebase dependent pull requests onto their merged dependencies."""
    configure_logging(verbose)
    root = (repo_root or Path.cwd()).resolve()

    try:
        git_path = require_tool("git")
        gh_path = require_tool("gh")
    except ToolNotFoundError as exc:
        _fail(str(exc), as_json=as_json, error_code="TOOL_NOT_FOUND")

    try:
        settings = resolve_settings(root, remote=remote, author=author)
    except ConfigError as exc:
        _fail(str(exc), as_json=as_json, error_code="INVALID_CONFIG")

    git = GitClient(root, executable=git_path)
    gh = GhClient(root, executable=gh_path)
    token = CancellationToken()

    try:
        with handle_interrupts(token):
            if as_json:
                result = execute_restack(git, gh, settings, cancel_token=token, dry_run=dry_run)
            else:
                tracker = StepTracker.for_restack()
                with live_tracker(tracker, console):
                    result = execute_restack(
                        git, gh, settings, tracker=tracker, cancel_token=token, dry_run=dry_run
                    )
    except PreconditionError as exc:
        _fail(str(exc), as_json=as_json, error_code="PRECONDITION_FAILED", symbol="[red]x[/red]")
    except RestackError as exc:
        _fail(str(exc), as_json=as_json, error_code="RESTACK_FAILED")

    if as_json:
        _print_json(result, dry_run)
    else:
        _print_summary(result, dry_run)

    if result.cancelled:
        raise typer.Exit(EXIT_INTERRUPTED)
    if strict and has_errors(result.outcomes):
        raise typer.Exit(EXIT_STRICT_FAILURE)


def _print_json(result: RestackResult, dry_run: bool) -> None:
    payload = {
        "default_branch": result.default_branch,
        "target_base": result.target_base,
        "dry_run": dry_run,
        "cancelled": result.cancelled,
        **outcomes_to_dict(result.outcomes),
    }
    if dry_run:
        payload["planned_commands"] = result.planned_commands
    typer.echo(json.dumps(payload, indent=2))


def _print_summary(result: RestackResult, dry_run: bool) -> None:
    if not result.outcomes:
        console.print("[green]✔[/green] No open or draft pull requests found.")
        return

    console.print(f"[green]✔[/green] Found {len(result.outcomes)} open or draft pull requests.")
    render_report(result.outcomes, console, dry_run=dry_run)

    if dry_run and result.planned_commands:
        console.print("\n[bold]Dry run: commands that would run[/bold]")
        for command in result.planned_commands:
            console.print(f"  [dim]$[/dim] {command}")
