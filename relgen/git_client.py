"""Local git working copy, driven through the git executable."""

import base64
import os
import subprocess
from enum import Enum
from pathlib import Path, PurePath

from relgen.errors import CloneFailed, CommitFailed, RepoError, RepositoryNotFound
from relgen.settings import GitHubCredentials


class SessionState(str, Enum):
    UNOPENED = "unopened"
    CLONING = "cloning"
    OPEN = "open"
    FAILED = "failed"


def _git(*args: str, input: str | None = None, env: dict[str, str] | None = None) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(["git", *args], capture_output=True, text=True, input=input, env=env)
    except FileNotFoundError as exc:
        raise RepoError("git executable not found. Install git and make sure it is on PATH") from exc


def _cause(result: subprocess.CompletedProcess) -> str:
    return (result.stderr or "").strip() or f"git exited with status {result.returncode}"


def _auth_env(credentials: GitHubCredentials) -> dict[str, str]:
    """Return environment entries carrying basic auth for one git invocation.

    Passed as GIT_CONFIG_* variables, so the header is neither in the process
    arguments nor in .git/config. Entries already in the environment are kept.
    """
    if credentials.github_token is None:
        return {}
    index = int(os.environ.get("GIT_CONFIG_COUNT") or 0)
    username = credentials.github_username or "x-access-token"
    raw = f"{username}:{credentials.github_token.get_secret_value()}".encode()
    header = f"AUTHORIZATION: basic {base64.b64encode(raw).decode()}"
    return {
        "GIT_CONFIG_COUNT": str(index + 1),
        f"GIT_CONFIG_KEY_{index}": "http.https://github.com/.extraheader",
        f"GIT_CONFIG_VALUE_{index}": header,
    }


class RepositorySession:
    """Owns one local working copy: its index and its HEAD.

    Created through :func:`open_or_clone`. Only single-file commits with the
    current HEAD as sole parent are supported.
    """

    def __init__(self, local_path: str | os.PathLike, remote_url: str) -> None:
        self.local_path = Path(local_path)
        self.remote_url = remote_url
        self.state = SessionState.UNOPENED
        self.cloned = False

    def __repr__(self) -> str:
        return f"RepositorySession(local_path={str(self.local_path)!r}, state={self.state.value!r})"

    def _open(self) -> bool:
        result = _git("-C", str(self.local_path), "rev-parse", "--show-toplevel")
        if result.returncode != 0:
            return False
        # A subdirectory of some other repository is not a working copy of its own
        if Path(result.stdout.strip()).resolve() != self.local_path.resolve():
            return False
        self.state = SessionState.OPEN
        return True

    def _clone(self, credentials: GitHubCredentials | None) -> None:
        self.state = SessionState.CLONING
        env = None
        if credentials is not None and credentials.github_token is not None:
            env = {**os.environ, **_auth_env(credentials)}
        result = _git("clone", "--", self.remote_url, str(self.local_path), env=env)
        if result.returncode != 0:
            self.state = SessionState.FAILED
            raise CloneFailed(self.remote_url, _cause(result))
        self.state = SessionState.OPEN
        self.cloned = True

    def _run(self, relative_path: str, *args: str, input: str | None = None, env: dict[str, str] | None = None) -> str:
        result = _git("-C", str(self.local_path), *args, input=input, env=env)
        if result.returncode != 0:
            raise CommitFailed(relative_path, _cause(result))
        return result.stdout.strip()

    def signature(self) -> tuple[str, str]:
        """Return (name, email) of the local git identity."""
        name = _git("-C", str(self.local_path), "config", "user.name")
        email = _git("-C", str(self.local_path), "config", "user.email")
        if name.returncode != 0 or email.returncode != 0:
            raise RepoError(f"No git identity configured in {self.local_path}. Set user.name and user.email")
        return name.stdout.strip(), email.stdout.strip()

    def commit_single_file(self, relative_path: str | PurePath, message: str) -> str:
        """Stage ``relative_path`` and commit it on top of HEAD. Returns the new commit id.

        Only the given path is staged; anything already in the index is
        committed along with it.
        """
        path = PurePath(relative_path).as_posix()
        if self.state is not SessionState.OPEN:
            raise CommitFailed(path, f"repository session is {self.state.value}, not open")

        try:
            name, email = self.signature()
        except RepoError as exc:
            raise CommitFailed(path, str(exc)) from exc

        self._run(path, "add", "--", path)
        tree = self._run(path, "write-tree")
        head = self._run(path, "rev-parse", "--verify", "HEAD^{commit}")

        env = {
            **os.environ,
            "GIT_AUTHOR_NAME": name,
            "GIT_AUTHOR_EMAIL": email,
            "GIT_COMMITTER_NAME": name,
            "GIT_COMMITTER_EMAIL": email,
        }
        commit = self._run(path, "commit-tree", tree, "-p", head, input=message, env=env)

        subject = message.splitlines()[0] if message else ""
        # Old value guards against HEAD moving underneath us
        self._run(path, "update-ref", "-m", f"commit: {subject}", "HEAD", commit, head)
        return commit


def open_or_clone(
    local_path: str | os.PathLike,
    remote_url: str,
    allow_clone: bool,
    credentials: GitHubCredentials | None = None,
) -> RepositorySession:
    """Open the working copy at ``local_path``, cloning ``remote_url`` there if allowed."""
    session = RepositorySession(local_path, remote_url)
    if session._open():
        return session
    if not allow_clone:
        session.state = SessionState.FAILED
        raise RepositoryNotFound(str(local_path))
    session._clone(credentials)
    return session
