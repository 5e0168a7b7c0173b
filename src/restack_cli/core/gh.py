"""GitHub CLI (gh) queries and the pull request checkout mutation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from restack_cli.restack.models import PULL_REQUEST_FIELDS, PullRequest

from .exceptions import GhCommandError
from .process import CommandResult, run_command

__all__ = ["GhClient"]

_JSON_FIELDS = ",".join(PULL_REQUEST_FIELDS)


class GhClient:
    """Query and checkout pull requests for the repository at ``repo_root``."""

    def __init__(self, repo_root: Path, executable: str = "gh"):
        self.repo_root = repo_root
        self.executable = executable

    def _run(self, *args: str, env: dict[str, str] | None = None) -> CommandResult:
        return run_command([self.executable, *args], cwd=self.repo_root, env=env)

    def _query(self, *args: str) -> Any:
        """Run a JSON query. Non-zero exit or any stderr output is a failure."""
        result = self._run(*args)
        if not result.ok or result.stderr.strip():
            raise GhCommandError(result.args, result.returncode, result.stderr)
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as exc:
            raise GhCommandError(
                result.args, result.returncode, f"invalid JSON output: {exc}"
            ) from exc

    def default_branch(self) -> str:
        payload = self._query("repo", "view", "--json", "defaultBranchRef")
        ref = payload.get("defaultBranchRef") if isinstance(payload, dict) else None
        name = ref.get("name") if isinstance(ref, dict) else None
        if not name:
            raise GhCommandError(
                ["repo", "view"], 0, "repository has no default branch"
            )
        return str(name)

    def list_pull_requests(self, author: str = "@me") -> list[PullRequest]:
        """Open (including draft) pull requests authored by ``author``."""
        payload = self._query(
            "pr", "list",
            "--author", author,
            "--state", "open",
            "--json", _JSON_FIELDS,
        )
        if not isinstance(payload, list):
            raise GhCommandError(["pr", "list"], 0, "expected a JSON array")
        try:
            return [PullRequest.from_dict(item) for item in payload]
        except ValueError as exc:
            raise GhCommandError(["pr", "list"], 0, str(exc)) from exc

    def get_pull_request(self, number: int) -> PullRequest:
        payload = self._query("pr", "view", str(number), "--json", _JSON_FIELDS)
        try:
            return PullRequest.from_dict(payload)
        except ValueError as exc:
            raise GhCommandError(["pr", "view", str(number)], 0, str(exc)) from exc

    def checkout(self, number: int) -> None:
        """Switch the working copy to the pull request's head branch."""
        result = self._run("pr", "checkout", str(number), env={"CLICOLOR_FORCE": "0"})
        if not result.ok:
            raise GhCommandError(result.args, result.returncode, result.stderr)
