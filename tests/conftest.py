# tests/conftest.py
from __future__ import annotations

import hashlib
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import pytest
from typer.testing import CliRunner

_CI_VARS = (
    "CI",
    "GITHUB_ACTIONS",
    "GITHUB_REF_TYPE",
    "GITHUB_REF_NAME",
    "GITHUB_SHA",
    "GITLAB_CI",
    "CI_COMMIT_SHA",
    "CI_COMMIT_TAG",
    "CI_COMMIT_BRANCH",
    "CI_MERGE_REQUEST_SOURCE_BRANCH_NAME",
    "CI_EXTERNAL_PULL_REQUEST_SOURCE_BRANCH_NAME",
)


def sha(label: str) -> str:
    """Stable 40-hex commit id for a readable label."""
    return hashlib.sha1(label.encode("utf-8")).hexdigest()


@pytest.fixture(autouse=True)
def _no_ci_env(monkeypatch: pytest.MonkeyPatch):
    # the suite itself may be running under CI
    for var in _CI_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def runner():
    return CliRunner()


@dataclass
class GitSandbox:
    path: Path
    _tick: int = field(default=0, repr=False)

    def git(self, *args: str, env: Dict[str, str] | None = None) -> str:
        r = subprocess.run(
            ["git", "-c", "commit.gpgsign=false", "-c", "tag.gpgsign=false", *args],
            cwd=str(self.path),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            env={**os.environ, **(env or {})},
            check=False,
        )
        assert r.returncode == 0, r.stderr
        return r.stdout.strip()

    def commit(self, msg: str) -> str:
        # strictly increasing committer dates keep rev-list order deterministic
        self._tick += 1
        date = f"{1_700_000_000 + self._tick * 60} +0000"
        self.git(
            "commit",
            "-q",
            "--allow-empty",
            "-m",
            msg,
            env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
        )
        return self.git("rev-parse", "HEAD")


@pytest.fixture
def git_sandbox(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GitSandbox:
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Committer")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "committer@example.com")

    repo = tmp_path / "repo"
    repo.mkdir()
    sandbox = GitSandbox(path=repo)
    sandbox.git("init", "-q")
    sandbox.git("symbolic-ref", "HEAD", "refs/heads/main")
    return sandbox
