from __future__ import annotations

from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from restack_cli.core.gh import GhClient
from restack_cli.core.git import GitClient
from restack_cli.restack.models import PullRequest
from tests.utils import GIT_AVAILABLE, commit_file, git


@pytest.fixture()
def git_repo(tmp_path: Path) -> Path:
    """Git repository on branch ``main`` with one commit."""
    if not GIT_AVAILABLE:
        pytest.skip("git not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "commit.gpgsign", "false")
    commit_file(repo, "README.md", "# Test Repo\n", "Initial commit")
    return repo


@pytest.fixture()
def make_pr() -> Callable[..., PullRequest]:
    def _make(
        number: int,
        body: str = "",
        *,
        state: str = "OPEN",
        is_draft: bool = False,
        head: str | None = None,
        base: str = "main",
        merge_commit_oid: str | None = None,
    ) -> PullRequest:
        return PullRequest(
            number=number,
            base_ref_name=base,
            head_ref_name=head or f"feature-{number}",
            body=body,
            is_draft=is_draft,
            state=state,
            url=f"https://github.com/octo/repo/pull/{number}",
            title=f"PR {number}",
            merge_commit_oid=merge_commit_oid,
        )

    return _make


@pytest.fixture()
def fake_git() -> MagicMock:
    mock = MagicMock(spec=GitClient)
    mock.is_dirty.return_value = False
    mock.is_rebase_in_progress.return_value = False
    mock.rebase_abort.return_value = True
    return mock


@pytest.fixture()
def fake_gh() -> MagicMock:
    mock = MagicMock(spec=GhClient)
    mock.default_branch.return_value = "main"
    mock.list_pull_requests.return_value = []
    return mock
