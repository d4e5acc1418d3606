"""Shared test fixtures."""

import shutil
import subprocess
from pathlib import Path

import pytest

from relgen.models import GitHubUser, PullRequest, ReleaseLabel, RepoIdentifier
from relgen.paths import resolve_path
from relgen.settings import Settings

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")

MIGRATION_BODY = """\
# Objective

Fix X.

## Migration Guide

* `Foo::bar` is now `Foo::baz`.
"""


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(["git", "-C", str(repo), *args], capture_output=True, text=True, check=True)
    return result.stdout.strip()


@pytest.fixture
def pull_request() -> PullRequest:
    return PullRequest(
        number=1234,
        title="Fix X",
        body=MIGRATION_BODY,
        closed_at="2024-01-01T00:00:00Z",
        user=GitHubUser(login="JaneDoe", id=4242),
        labels=[],
    )


@pytest.fixture
def release() -> ReleaseLabel:
    return ReleaseLabel(value="0.10.0")


@pytest.fixture
def notes_repo(tmp_path: Path) -> Path:
    """An initialised working copy with one commit and a local identity."""
    repo = tmp_path / "migration-notes"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "user.name", "Release Bot")
    git(repo, "config", "user.email", "bot@example.com")
    git(repo, "config", "commit.gpgsign", "false")
    (repo / "README.md").write_text("notes\n")
    git(repo, "add", "README.md")
    git(repo, "commit", "-q", "-m", "Initial commit")
    return repo


def make_settings(local_path: Path, project_prefix: str | None = None) -> Settings:
    return Settings(
        source_repo=RepoIdentifier(owner="bevyengine", name="bevy"),
        notes_repo=RepoIdentifier(owner="bevyengine", name="bevy-website"),
        notes_local_path=resolve_path(str(local_path)),
        project_prefix=ReleaseLabel(value=project_prefix) if project_prefix else None,
    )
