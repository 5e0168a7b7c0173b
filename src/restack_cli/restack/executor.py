"""Rebase execution for a single dependent pull request.

The sequence is strictly ordered:

1. ``gh pr checkout <number>`` switches the working copy to the dependent
   branch. A failure stops here (CHECKOUT_FAILED).
2. ``git rebase --onto <remote>/<default> <old-commit> <branch>`` replays the
   commits that are on the branch but not on the dependency's merge commit.
   On any failure ``git rebase --abort`` runs before the error is classified
   as REBASE_CONFLICT or REBASE_FAILED.

After ``execute`` returns or raises, no rebase is left in progress.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from restack_cli.core.exceptions import (
    ExternalCommandError,
    FailureKind,
    GitCommandError,
    RestackFailure,
)
from restack_cli.core.gh import GhClient
from restack_cli.core.git import GitClient

__all__ = ["DEFAULT_CONFLICT_MARKER", "RebaseExecutor", "rebase_guard", "short_oid"]

logger = logging.getLogger(__name__)

DEFAULT_CONFLICT_MARKER = "could not apply"


def short_oid(oid: str) -> str:
    return oid[:7]


@contextmanager
def rebase_guard(git: GitClient) -> Iterator[None]:
    """Abort any in-progress rebase if the guarded block exits with an error.

    The abort result is ignored; the original exception always propagates.
    """
    try:
        yield
    except BaseException:
        git.rebase_abort()
        raise


class RebaseExecutor:
    """Checkout a pull request and rebase it onto the default branch."""

    def __init__(
        self,
        git: GitClient,
        gh: GhClient,
        conflict_marker: str = DEFAULT_CONFLICT_MARKER,
        dry_run: bool = False,
    ):
        self.git = git
        self.gh = gh
        self.conflict_marker = conflict_marker
        self.dry_run = dry_run
        self.planned: list[str] = []

    def execute(
        self,
        number: int,
        target_base: str,
        old_base: str,
        branch: str,
    ) -> None:
        """Restack ``branch`` (pull request ``number``) onto ``target_base``.

        Args:
            number: Dependent pull request number, used for checkout
            target_base: New base, e.g. ``origin/main``
            old_base: Merge commit of the dependency (the commit being replaced)
            branch: Head branch of the dependent pull request

        Raises:
            RestackFailure: CHECKOUT_FAILED, REBASE_CONFLICT or REBASE_FAILED
        """
        if self.dry_run:
            self.planned.append(f"gh pr checkout {number}")
            self.planned.append(f"git rebase --onto {target_base} {old_base} {branch}")
            logger.info("Dry run: would rebase %s onto %s", branch, target_base)
            return

        try:
            self.gh.checkout(number)
        except ExternalCommandError as exc:
            raise RestackFailure(
                FailureKind.CHECKOUT_FAILED,
                f"failed to checkout PR #{number}: {exc.stderr.strip() or exc}",
                cause=exc,
                stderr=exc.stderr,
            ) from exc

        try:
            with rebase_guard(self.git):
                self.git.rebase_onto(target_base, old_base, branch)
        except GitCommandError as exc:
            raise self._classify(exc, target_base, old_base, branch) from exc

        logger.info("Rebased %s onto %s (old parent %s)", branch, target_base, short_oid(old_base))

    def _classify(
        self,
        exc: GitCommandError,
        target_base: str,
        old_base: str,
        branch: str,
    ) -> RestackFailure:
        if self.conflict_marker in exc.stderr:
            return RestackFailure(
                FailureKind.REBASE_CONFLICT,
                f"conflicted while rebasing {branch} onto {target_base} "
                f"(old parent: {short_oid(old_base)})",
                cause=exc,
                stderr=exc.stderr,
            )
        return RestackFailure(
            FailureKind.REBASE_FAILED,
            f"failed to rebase {branch}: {exc.stderr.strip() or exc}",
            cause=exc,
            stderr=exc.stderr,
        )
