"""Repository identifier and release label validation."""

import re

from relgen.errors import InvalidLabel, InvalidRepoIdentifier
from relgen.models import LABEL_PATTERN, NAME_PATTERN, OWNER_PATTERN, ReleaseLabel, RepoIdentifier

_GITHUB_URL = re.compile(r"github\.com/(?P<repo>.+?)(?:\.git)?/?\Z")
_OWNER = re.compile(OWNER_PATTERN.strip("^$"))
_NAME = re.compile(NAME_PATTERN.strip("^$"))
_LABEL = re.compile(LABEL_PATTERN.strip("^$"))


def normalize_repo_identifier(raw: str) -> RepoIdentifier:
    """Reduce a GitHub URL or ``owner/name`` string to a RepoIdentifier.

    ``https://github.com/owner/name.git/``, ``github.com/owner/name`` and
    ``owner/name`` all yield the same identifier.
    """
    match = _GITHUB_URL.search(raw)
    if match:
        candidate = match.group("repo")
    else:
        candidate = raw.removesuffix("/").removesuffix(".git")

    owner, sep, name = candidate.partition("/")
    # fullmatch, since "$" would also accept a trailing newline
    if not sep or not _OWNER.fullmatch(owner) or not _NAME.fullmatch(name):
        raise InvalidRepoIdentifier(candidate)
    return RepoIdentifier(owner=owner, name=name)


def validate_label(raw: str, kind: str = "release name") -> ReleaseLabel:
    """Validate a release name or project prefix."""
    if not _LABEL.fullmatch(raw):
        raise InvalidLabel(raw, kind=kind)
    return ReleaseLabel(value=raw)
