"""Data model for pull requests and their restack outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from restack_cli.core.exceptions import FailureKind, RestackFailure

__all__ = [
    "PULL_REQUEST_FIELDS",
    "PullRequest",
    "ProcessedPullRequest",
]

# Fields requested from ``gh pr list`` / ``gh pr view``.
PULL_REQUEST_FIELDS = (
    "baseRefName",
    "body",
    "headRefName",
    "isDraft",
    "number",
    "title",
    "url",
    "mergeCommit",
    "state",
)


@dataclass(frozen=True)
class PullRequest:
    """Snapshot of a pull request as reported by the GitHub CLI."""

    number: int
    base_ref_name: str
    head_ref_name: str
    body: str = ""
    is_draft: bool = False
    state: str = "OPEN"
    url: str = ""
    title: str = ""
    merge_commit_oid: str | None = None

    @property
    def is_merged(self) -> bool:
        return self.state == "MERGED"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PullRequest":
        if not isinstance(data, dict):
            raise ValueError(f"expected pull request object, got {type(data).__name__}")
        number = data.get("number")
        if not isinstance(number, int) or isinstance(number, bool):
            raise ValueError(f"pull request number is not an integer: {number!r}")

        merge_commit = data.get("mergeCommit")
        oid = merge_commit.get("oid") if isinstance(merge_commit, dict) else None

        return cls(
            number=number,
            base_ref_name=str(data.get("baseRefName") or ""),
            head_ref_name=str(data.get("headRefName") or ""),
            body=str(data.get("body") or ""),
            is_draft=bool(data.get("isDraft", False)),
            state=str(data.get("state") or "").upper(),
            url=str(data.get("url") or ""),
            title=str(data.get("title") or ""),
            merge_commit_oid=str(oid) if oid else None,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "number": self.number,
            "title": self.title,
            "url": self.url,
            "state": self.state,
            "is_draft": self.is_draft,
            "base_ref_name": self.base_ref_name,
            "head_ref_name": self.head_ref_name,
            "merge_commit_oid": self.merge_commit_oid,
        }


@dataclass(frozen=True)
class ProcessedPullRequest:
    """Terminal outcome for one fetched pull request.

    Exactly one of ``failure`` or ``depended_pull_request`` is set.
    """

    pull_request: PullRequest
    dependencies: tuple[int, ...] = ()
    depended_pull_request: PullRequest | None = None
    failure: RestackFailure | None = None

    def __post_init__(self) -> None:
        if (self.failure is None) == (self.depended_pull_request is None):
            raise ValueError(
                "ProcessedPullRequest requires exactly one of failure or depended_pull_request"
            )

    @property
    def rebased(self) -> bool:
        return self.failure is None

    @property
    def kind(self) -> FailureKind | None:
        return self.failure.kind if self.failure else None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "pull_request": self.pull_request.to_dict(),
            "dependencies": list(self.dependencies),
            "rebased": self.rebased,
        }
        if self.depended_pull_request is not None:
            payload["depended_pull_request"] = self.depended_pull_request.to_dict()
        if self.failure is not None:
            payload["failure"] = self.failure.to_dict()
        return payload
