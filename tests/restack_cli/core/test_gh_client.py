"""Tests for GhClient with the gh executable mocked out."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from restack_cli.core.exceptions import GhCommandError
from restack_cli.core.gh import GhClient
from restack_cli.core.process import CommandResult

PR_PAYLOAD = {
    "baseRefName": "main",
    "headRefName": "feature",
    "body": "Depends on: #1",
    "isDraft": False,
    "number": 2,
    "title": "Feature",
    "url": "https://github.com/octo/repo/pull/2",
    "state": "OPEN",
    "mergeCommit": None,
}


def _result(stdout: str = "", stderr: str = "", returncode: int = 0) -> CommandResult:
    return CommandResult(args=("gh",), returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture()
def client(tmp_path: Path) -> GhClient:
    return GhClient(tmp_path)


class TestQueries:
    def test_default_branch(self, client: GhClient):
        payload = json.dumps({"defaultBranchRef": {"name": "trunk"}})
        with patch("restack_cli.core.gh.run_command", return_value=_result(payload)) as run:
            assert client.default_branch() == "trunk"
        args = run.call_args.args[0]
        assert args == ["gh", "repo", "view", "--json", "defaultBranchRef"]

    def test_default_branch_missing(self, client: GhClient):
        payload = json.dumps({"defaultBranchRef": {"name": ""}})
        with patch("restack_cli.core.gh.run_command", return_value=_result(payload)):
            with pytest.raises(GhCommandError):
                client.default_branch()

    def test_list_pull_requests(self, client: GhClient):
        with patch("restack_cli.core.gh.run_command", return_value=_result(json.dumps([PR_PAYLOAD]))) as run:
            [pr] = client.list_pull_requests("@me")
        assert pr.number == 2
        assert pr.body == "Depends on: #1"
        args = run.call_args.args[0]
        assert args[:7] == ["gh", "pr", "list", "--author", "@me", "--state", "open"]
        assert "mergeCommit" in args[-1]
        assert "headRefName" in args[-1]

    def test_get_pull_request(self, client: GhClient):
        merged = {**PR_PAYLOAD, "number": 1, "state": "MERGED", "mergeCommit": {"oid": "abc1234"}}
        with patch("restack_cli.core.gh.run_command", return_value=_result(json.dumps(merged))) as run:
            pr = client.get_pull_request(1)
        assert pr.is_merged
        assert pr.merge_commit_oid == "abc1234"
        assert run.call_args.args[0][:4] == ["gh", "pr", "view", "1"]

    def test_stderr_is_failure_even_with_zero_exit(self, client: GhClient):
        result = _result(json.dumps([PR_PAYLOAD]), stderr="warning: something odd")
        with patch("restack_cli.core.gh.run_command", return_value=result):
            with pytest.raises(GhCommandError) as excinfo:
                client.list_pull_requests()
        assert "something odd" in excinfo.value.stderr

    def test_non_zero_exit(self, client: GhClient):
        result = _result(stderr="no pull requests found for 99", returncode=1)
        with patch("restack_cli.core.gh.run_command", return_value=result):
            with pytest.raises(GhCommandError) as excinfo:
                client.get_pull_request(99)
        assert excinfo.value.returncode == 1

    def test_invalid_json(self, client: GhClient):
        with patch("restack_cli.core.gh.run_command", return_value=_result("not json")):
            with pytest.raises(GhCommandError, match="invalid JSON"):
                client.get_pull_request(1)

    def test_malformed_pull_request(self, client: GhClient):
        with patch("restack_cli.core.gh.run_command", return_value=_result(json.dumps({"number": "x"}))):
            with pytest.raises(GhCommandError):
                client.get_pull_request(1)


class TestCheckout:
    def test_checkout_disables_color(self, client: GhClient):
        result = _result(stderr="Switched to branch 'feature'")
        with patch("restack_cli.core.gh.run_command", return_value=result) as run:
            client.checkout(2)
        assert run.call_args.args[0] == ["gh", "pr", "checkout", "2"]
        assert run.call_args.kwargs["env"] == {"CLICOLOR_FORCE": "0"}

    def test_checkout_failure(self, client: GhClient):
        result = _result(stderr="could not find pull request", returncode=1)
        with patch("restack_cli.core.gh.run_command", return_value=result):
            with pytest.raises(GhCommandError) as excinfo:
                client.checkout(2)
        assert "could not find pull request" in str(excinfo.value)
