"""Shared pydantic models: the contract between providers, settings and the pipeline."""

import os
from pathlib import Path, PurePath

from pydantic import BaseModel, ConfigDict, Field

# GitHub usernames: alphanumerics and single hyphens, no leading hyphen.
OWNER_PATTERN = r"^(?:[a-zA-Z])(?:-?[a-zA-Z\d])*-?$"
NAME_PATTERN = r"^[\w.-]+$"
LABEL_PATTERN = r"^[\w][\w.-]*$"


class RepoIdentifier(BaseModel):
    """A GitHub repository as ``owner/name``, without host, slash or ``.git`` suffix."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(pattern=OWNER_PATTERN)
    name: str = Field(pattern=NAME_PATTERN)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def url(self) -> str:
        return f"https://github.com/{self}"


class ReleaseLabel(BaseModel):
    """A release folder name or project prefix; a single safe path segment."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(pattern=LABEL_PATTERN)

    def __str__(self) -> str:
        return self.value


class ResolvedPath(BaseModel):
    """Absolute path canonicalized as far as its existing ancestry allows.

    ``existing_prefix`` is the canonical form of the longest ancestor that
    existed at resolution time; the rest of ``path`` is the verbatim tail.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    existing_prefix: Path

    @property
    def tail(self) -> PurePath:
        return self.path.relative_to(self.existing_prefix)

    def __fspath__(self) -> str:
        return os.fspath(self.path)

    def __str__(self) -> str:
        return str(self.path)


class GitHubUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    login: str
    id: int


class PullRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    body: str | None = None
    closed_at: str  # ISO-8601, kept exactly as GitHub returns it
    user: GitHubUser
    labels: list[str] = []


class MigrationNote(BaseModel):
    """A rendered note, ready to write."""

    model_config = ConfigDict(frozen=True)

    relative_path: str  # posix, relative to the notes working copy root
    content: str
    section_found: bool = True
