"""Outcome aggregation and rendering."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.markup import escape

from .models import ProcessedPullRequest, PullRequest

__all__ = [
    "has_errors",
    "is_informational",
    "outcomes_to_dict",
    "partition",
    "render_report",
    "state_style",
]


def partition(
    outcomes: Sequence[ProcessedPullRequest],
) -> tuple[list[ProcessedPullRequest], list[ProcessedPullRequest]]:
    """Split outcomes into (rebased, not rebased), keeping fetch order."""
    rebased = [outcome for outcome in outcomes if outcome.rebased]
    not_rebased = [outcome for outcome in outcomes if not outcome.rebased]
    return rebased, not_rebased


def is_informational(outcome: ProcessedPullRequest) -> bool:
    """True when the outcome is not worth alarming the user about."""
    return outcome.failure is not None and outcome.failure.is_informational


def has_errors(outcomes: Sequence[ProcessedPullRequest]) -> bool:
    return any(
        outcome.failure is not None and not outcome.failure.is_informational
        for outcome in outcomes
    )


def state_style(pull_request: PullRequest) -> str:
    """Rich style for a pull request number, by lifecycle state."""
    if pull_request.state == "OPEN":
        return "bright_black" if pull_request.is_draft else "green"
    if pull_request.state == "MERGED":
        return "magenta"
    if pull_request.state == "CLOSED":
        return "red"
    return "bright_black"


def _number(pull_request: PullRequest, style: str) -> str:
    return f"[{style}]#{pull_request.number:<4d}[/{style}]"


def _branches(pull_request: PullRequest) -> str:
    return f"  [white]{escape(pull_request.base_ref_name)}[/white] ← [white]{escape(pull_request.head_ref_name)}[/white]"


def render_report(
    outcomes: Sequence[ProcessedPullRequest],
    console: Console,
    dry_run: bool = False,
) -> None:
    rebased, not_rebased = partition(outcomes)

    console.print()
    heading = "Pull requests that would be rebased" if dry_run else "Rebased pull requests"
    console.print(f"[bold]{heading}[/bold]")
    if not rebased:
        console.print("  [dim]none[/dim]")
    for outcome in rebased:
        pr = outcome.pull_request
        console.print(_branches(pr))
        console.print(f"    └─ {_number(pr, state_style(pr))} {pr.url}")
        depended = outcome.depended_pull_request
        if depended is not None:
            console.print(f"       └─ {_number(depended, state_style(depended))} {depended.url}")

    console.print()
    console.print("[bold]Pull requests not rebased[/bold]")
    if not not_rebased:
        console.print("  [dim]none[/dim]")
    for outcome in not_rebased:
        pr = outcome.pull_request
        # Draft status only changes emphasis
        style = "bright_black" if pr.is_draft else "green"
        console.print(_branches(pr))
        console.print(f"    └─ {_number(pr, style)} {pr.url}")
        message = escape(outcome.failure.message) if outcome.failure else ""
        if is_informational(outcome):
            console.print(f"             [bright_yellow]{message}[/bright_yellow]")
        else:
            console.print(f"             [red]{message}[/red]")


def outcomes_to_dict(outcomes: Sequence[ProcessedPullRequest]) -> dict[str, object]:
    rebased, not_rebased = partition(outcomes)
    return {
        "total": len(outcomes),
        "rebased_count": len(rebased),
        "not_rebased_count": len(not_rebased),
        "rebased": [outcome.to_dict() for outcome in rebased],
        "not_rebased": [outcome.to_dict() for outcome in not_rebased],
    }
