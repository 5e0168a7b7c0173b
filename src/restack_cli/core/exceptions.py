"""Exception hierarchy for gh-restack.

Fatal errors (``ToolNotFoundError``, ``PreconditionError``, ``ConfigError``)
stop the whole run before any pull request is processed. Everything raised
while handling a single pull request is a ``RestackFailure`` and is recorded
on that pull request's outcome instead of propagating.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class RestackError(Exception):
    """Base exception for gh-restack errors."""
    pass


class ToolNotFoundError(RestackError):
    """A required executable (git or gh) is not available on PATH."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"'{tool}' executable not found on PATH")


class PreconditionError(RestackError):
    """The repository is not in a state where restacking may start."""
    pass


class ConfigError(RestackError):
    """Raised when .restack/config.yaml cannot be parsed or validated."""
    pass


class ExternalCommandError(RestackError):
    """An external command exited non-zero or reported diagnostics."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"{' '.join(self.command)}: {detail}")


class GitCommandError(ExternalCommandError):
    """A git invocation failed."""
    pass


class GhCommandError(ExternalCommandError):
    """A GitHub CLI invocation failed."""
    pass


class FailureKind(str, Enum):
    """Terminal failure states of a single pull request."""

    NO_DEPENDENCY = "no_dependency"
    AMBIGUOUS_DEPENDENCY = "ambiguous_dependency"
    DEPENDENCY_LOOKUP_FAILED = "dependency_lookup_failed"
    DEPENDENCY_NOT_MERGED = "dependency_not_merged"
    CHECKOUT_FAILED = "checkout_failed"
    REBASE_CONFLICT = "rebase_conflict"
    REBASE_FAILED = "rebase_failed"
    CANCELLED = "cancelled"


class RestackFailure(RestackError):
    """Classified failure scoped to one pull request."""

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        *,
        dependencies: Sequence[int] = (),
        cause: BaseException | None = None,
        stderr: str = "",
    ):
        self.kind = kind
        self.message = message
        self.dependencies = tuple(dependencies)
        self.cause = cause
        self.stderr = stderr
        super().__init__(message)

    @property
    def is_informational(self) -> bool:
        return self.kind is FailureKind.NO_DEPENDENCY

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.dependencies:
            payload["dependencies"] = list(self.dependencies)
        if self.stderr:
            payload["stderr"] = self.stderr
        return payload


__all__ = [
    "RestackError",
    "ToolNotFoundError",
    "PreconditionError",
    "ConfigError",
    "ExternalCommandError",
    "GitCommandError",
    "GhCommandError",
    "FailureKind",
    "RestackFailure",
]
