from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

GIT_AVAILABLE = shutil.which("git") is not None

MERGE_OID = "abc1234def5678901234567890abcdef12345678"


def git(repo: Path, *args: str) -> str:
    completed = subprocess.run(
        ["git", *args],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return completed.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str) -> str:
    (repo / name).write_text(content, encoding="utf-8")
    git(repo, "add", name)
    git(repo, "commit", "-m", message)
    return git(repo, "rev-parse", "HEAD")
