"""Dependency validation and resolution.

Given a pull request and the dependency numbers extracted from its body,
decide whether it can be restacked. Only a single, merged dependency with a
recorded merge commit is eligible; everything else ends in a classified
``RestackFailure``.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from restack_cli.core.exceptions import FailureKind, RestackError, RestackFailure

from .models import PullRequest

__all__ = ["PullRequestFetcher", "resolve_dependency"]

logger = logging.getLogger(__name__)

PullRequestFetcher = Callable[[int], PullRequest]


def resolve_dependency(
    pull_request: PullRequest,
    dependencies: Sequence[int],
    fetch: PullRequestFetcher,
) -> PullRequest:
    """Return the merged pull request ``pull_request`` depends on.

    Args:
        pull_request: The dependent pull request
        dependencies: Numbers extracted from its body, in order
        fetch: Looks up a pull request by number

    Raises:
        RestackFailure: NO_DEPENDENCY, AMBIGUOUS_DEPENDENCY,
            DEPENDENCY_LOOKUP_FAILED or DEPENDENCY_NOT_MERGED
    """
    if not dependencies:
        raise RestackFailure(FailureKind.NO_DEPENDENCY, "no dependencies found")

    if len(dependencies) > 1:
        # Ambiguity is a hard stop: picking one could rebase onto the wrong base.
        refs = ", ".join(f"#{number}" for number in dependencies)
        raise RestackFailure(
            FailureKind.AMBIGUOUS_DEPENDENCY,
            f"multiple dependencies found: {refs}",
            dependencies=dependencies,
        )

    number = dependencies[0]
    logger.debug("PR #%d depends on #%d", pull_request.number, number)
    try:
        depended = fetch(number)
    except (RestackError, ValueError) as exc:
        raise RestackFailure(
            FailureKind.DEPENDENCY_LOOKUP_FAILED,
            f"failed to get depended PR #{number}: {exc}",
            dependencies=dependencies,
            cause=exc,
        ) from exc

    if not depended.is_merged:
        raise RestackFailure(
            FailureKind.DEPENDENCY_NOT_MERGED,
            f"depended PR #{number} is not merged",
            dependencies=dependencies,
        )

    if not depended.merge_commit_oid:
        raise RestackFailure(
            FailureKind.DEPENDENCY_NOT_MERGED,
            f"depended PR #{number} has no recorded merge commit",
            dependencies=dependencies,
        )

    return depended
