"""Core utilities: external command runner, git and gh collaborators, errors."""

from .exceptions import (
    ConfigError,
    ExternalCommandError,
    FailureKind,
    GhCommandError,
    GitCommandError,
    PreconditionError,
    RestackError,
    RestackFailure,
    ToolNotFoundError,
)
from .git import GitClient
from .process import CommandResult, require_tool, run_command

__all__ = [
    "CommandResult",
    "ConfigError",
    "ExternalCommandError",
    "FailureKind",
    "GhCommandError",
    "GitClient",
    "GitCommandError",
    "PreconditionError",
    "RestackError",
    "RestackFailure",
    "ToolNotFoundError",
    "require_tool",
    "run_command",
]
