"""Git operations used by the restack pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

from .exceptions import GitCommandError
from .process import CommandResult, first_line, run_command

__all__ = ["GitClient"]

logger = logging.getLogger(__name__)


class GitClient:
    """Thin wrapper around the git executable for one working copy."""

    def __init__(self, repo_root: Path, executable: str = "git"):
        self.repo_root = repo_root
        self.executable = executable

    def _run(self, *args: str) -> CommandResult:
        return run_command([self.executable, *args], cwd=self.repo_root)

    def _check(self, *args: str) -> CommandResult:
        result = self._run(*args)
        if not result.ok:
            raise GitCommandError(result.args, result.returncode, result.stderr)
        return result

    def is_dirty(self) -> bool:
        """True if any tracked or untracked change exists relative to HEAD."""
        result = self._check("status", "--porcelain")
        return bool(result.stdout.strip())

    def is_rebase_in_progress(self) -> bool:
        """Check for rebase-merge / rebase-apply state directories."""
        for name in ("rebase-merge", "rebase-apply"):
            result = self._check("rev-parse", "--git-path", name)
            state_dir = Path(result.stdout.strip())
            if not state_dir.is_absolute():
                state_dir = self.repo_root / state_dir
            if state_dir.exists():
                return True
        return False

    def fetch(self, remote: str, branch: str) -> None:
        self._check("fetch", remote, branch)

    def rebase_onto(self, new_base: str, old_base: str, branch: str) -> None:
        """git rebase --onto <new_base> <old_base> <branch>.

        Raises GitCommandError on failure; the rebase is left in progress
        and the caller is responsible for aborting it.
        """
        self._check("rebase", "--onto", new_base, old_base, branch)

    def rebase_abort(self) -> bool:
        """Abort an in-progress rebase, reporting success instead of raising."""
        result = self._run("rebase", "--abort")
        if not result.ok:
            logger.warning("git rebase --abort failed: %s", first_line(result.stderr))
        return result.ok
