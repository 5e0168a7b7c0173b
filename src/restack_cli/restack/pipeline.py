"""Sequential restack pipeline.

Coordinates the whole run:
1. Pre-flight (clean working copy, no rebase in progress)
2. Default branch resolution and fetch of ``<remote>/<default>``
3. Listing of the user's open pull requests
4. Per pull request, in fetch order: extract -> resolve -> rebase

Pull requests share the single working copy, so they are never processed
concurrently. Per-request failures are recorded on the outcome and never
abort the batch.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from restack_cli.config import RestackSettings
from restack_cli.core.exceptions import (
    FailureKind,
    PreconditionError,
    RestackError,
    RestackFailure,
)
from restack_cli.core.gh import GhClient
from restack_cli.core.git import GitClient

from .dependencies import extract_dependencies
from .executor import RebaseExecutor
from .models import ProcessedPullRequest, PullRequest
from .resolver import resolve_dependency

if TYPE_CHECKING:
    from restack_cli.cli.ui import StepTracker

__all__ = [
    "CancellationToken",
    "RestackResult",
    "check_preconditions",
    "execute_restack",
    "process_pull_request",
    "process_pull_requests",
]

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative cancellation flag, set from a signal handler."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class RestackResult:
    """Result of a full restack run."""

    default_branch: str
    target_base: str
    outcomes: list[ProcessedPullRequest] = field(default_factory=list)
    planned_commands: list[str] = field(default_factory=list)
    cancelled: bool = False


def check_preconditions(git: GitClient) -> None:
    """Refuse to start when the working copy is not in a known state."""
    if git.is_dirty():
        raise PreconditionError(
            "current branch is dirty. please retry after stashing or committing your changes."
        )
    if git.is_rebase_in_progress():
        raise PreconditionError(
            "a rebase is already in progress. finish it or run 'git rebase --abort' first."
        )


def process_pull_request(
    pull_request: PullRequest,
    gh: GhClient,
    executor: RebaseExecutor,
    target_base: str,
) -> ProcessedPullRequest:
    """Run one pull request to its terminal outcome."""
    dependencies = tuple(extract_dependencies(pull_request.body))
    try:
        depended = resolve_dependency(pull_request, dependencies, gh.get_pull_request)
        executor.execute(
            pull_request.number,
            target_base,
            str(depended.merge_commit_oid),
            pull_request.head_ref_name,
        )
    except RestackFailure as failure:
        if failure.is_informational:
            logger.debug("PR #%d: %s", pull_request.number, failure.message)
        else:
            logger.info("PR #%d not rebased: %s", pull_request.number, failure.message)
        return ProcessedPullRequest(
            pull_request=pull_request,
            dependencies=dependencies,
            failure=failure,
        )

    return ProcessedPullRequest(
        pull_request=pull_request,
        dependencies=dependencies,
        depended_pull_request=depended,
    )


def process_pull_requests(
    pull_requests: list[PullRequest],
    gh: GhClient,
    executor: RebaseExecutor,
    target_base: str,
    cancel_token: CancellationToken | None = None,
) -> list[ProcessedPullRequest]:
    """Process every pull request sequentially; one outcome per input."""
    outcomes: list[ProcessedPullRequest] = []
    for pull_request in pull_requests:
        if cancel_token is not None and cancel_token.cancelled:
            outcomes.append(
                ProcessedPullRequest(
                    pull_request=pull_request,
                    dependencies=tuple(extract_dependencies(pull_request.body)),
                    failure=RestackFailure(
                        FailureKind.CANCELLED, "skipped: run was interrupted"
                    ),
                )
            )
            continue
        outcomes.append(process_pull_request(pull_request, gh, executor, target_base))
    return outcomes


def execute_restack(
    git: GitClient,
    gh: GhClient,
    settings: RestackSettings,
    tracker: StepTracker | None = None,
    cancel_token: CancellationToken | None = None,
    dry_run: bool = False,
) -> RestackResult:
    """Run the whole restack flow.

    Raises:
        PreconditionError: Working copy is dirty or mid-rebase
        ExternalCommandError: Default branch, fetch or listing failed
        ToolNotFoundError: git or gh disappeared from PATH
    """
    _start(tracker, "preflight")
    try:
        check_preconditions(git)
    except PreconditionError as exc:
        _error(tracker, "preflight", str(exc))
        raise
    _complete(tracker, "preflight", "working copy clean")

    _start(tracker, "fetch")
    try:
        default_branch = gh.default_branch()
        git.fetch(settings.remote, default_branch)
    except RestackError as exc:
        _error(tracker, "fetch", str(exc))
        raise
    target_base = f"{settings.remote}/{default_branch}"
    _complete(tracker, "fetch", target_base)

    _start(tracker, "list")
    try:
        pull_requests = gh.list_pull_requests(settings.author)
    except RestackError as exc:
        _error(tracker, "list", str(exc))
        raise
    _complete(tracker, "list", f"found {len(pull_requests)} open or draft pull requests")

    result = RestackResult(default_branch=default_branch, target_base=target_base)
    if not pull_requests:
        _skip(tracker, "restack", "nothing to do")
        return result

    executor = RebaseExecutor(
        git,
        gh,
        conflict_marker=settings.conflict_marker,
        dry_run=dry_run,
    )

    _start(tracker, "restack")
    result.outcomes = process_pull_requests(
        pull_requests, gh, executor, target_base, cancel_token
    )
    result.planned_commands = list(executor.planned)
    result.cancelled = bool(cancel_token and cancel_token.cancelled)

    rebased = sum(1 for outcome in result.outcomes if outcome.rebased)
    if result.cancelled:
        _error(tracker, "restack", f"interrupted after {rebased} rebased")
    else:
        _complete(tracker, "restack", f"{rebased} of {len(result.outcomes)} rebased")
    return result


def _start(tracker: StepTracker | None, key: str) -> None:
    if tracker:
        tracker.start(key)


def _complete(tracker: StepTracker | None, key: str, detail: str = "") -> None:
    if tracker:
        tracker.complete(key, detail)


def _error(tracker: StepTracker | None, key: str, detail: str = "") -> None:
    if tracker:
        tracker.error(key, detail)


def _skip(tracker: StepTracker | None, key: str, detail: str = "") -> None:
    if tracker:
        tracker.skip(key, detail)
