"""Subprocess helpers shared by the git and gh collaborators."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from .exceptions import ToolNotFoundError

__all__ = ["CommandResult", "first_line", "require_tool", "run_command"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Normalized outcome of one external command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def require_tool(name: str) -> str:
    """Return the absolute path of ``name`` or raise ToolNotFoundError."""
    path = shutil.which(name)
    if path is None:
        raise ToolNotFoundError(name)
    return path


def run_command(
    args: Sequence[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run a command and capture its output without raising on failure.

    The child runs in its own session so a terminal interrupt is delivered
    to this process only; an in-flight rebase is always allowed to finish
    or be aborted by the caller.
    """
    merged_env = None
    if env:
        merged_env = {**os.environ, **env}

    logger.debug("Running %s (cwd=%s)", " ".join(args), cwd)
    try:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            env=merged_env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            start_new_session=True,
        )
    except FileNotFoundError as exc:
        # A missing cwd raises the same error with the directory as filename
        if exc.filename != args[0]:
            raise
        raise ToolNotFoundError(args[0]) from exc

    result = CommandResult(
        args=tuple(args),
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    if not result.ok:
        logger.debug(
            "Command %s exited %d: %s",
            args[0],
            result.returncode,
            first_line(result.stderr),
        )
    return result


def first_line(text: str) -> str:
    for line in text.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped
    return ""
