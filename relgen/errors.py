"""Exception hierarchy. Every error is terminal for the current invocation."""


class RelgenError(Exception):
    """Base class for all errors raised by relgen."""


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


class IdentifierError(RelgenError):
    def __init__(self, value: str, message: str) -> None:
        super().__init__(message)
        self.value = value


class InvalidRepoIdentifier(IdentifierError):
    def __init__(self, value: str) -> None:
        super().__init__(value, f'"{value}" is not a valid GitHub repository name (expected owner/name)')


class InvalidLabel(IdentifierError):
    def __init__(self, value: str, kind: str = "release name") -> None:
        super().__init__(value, f'The {kind} "{value}" is invalid. Use letters, digits, "_", "." or "-"')
        self.kind = kind


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class PathError(RelgenError):
    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class MissingBaseDir(PathError):
    def __init__(self, path: str) -> None:
        super().__init__(path, f"Cannot resolve relative path '{path}': no base directory available")


class CanonicalizationFailed(PathError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, f"Cannot canonicalize '{path}': {reason}")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class SettingsError(RelgenError):
    pass


class MissingRequiredKey(SettingsError):
    def __init__(self, key: str, hint: str = "") -> None:
        super().__init__(f"No {key} specified" + (f". {hint}" if hint else ""))
        self.key = key


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class RepoError(RelgenError):
    pass


class RepositoryNotFound(RepoError):
    def __init__(self, path: str) -> None:
        super().__init__(
            f"No git repository found at {path}. Try --clone if you would like to clone it from the remote"
        )
        self.path = path


class CloneFailed(RepoError):
    def __init__(self, remote_url: str, cause: str) -> None:
        super().__init__(f"Failed to clone {remote_url}: {cause}")
        self.remote_url = remote_url
        self.cause = cause


class CommitFailed(RepoError):
    def __init__(self, path: str, cause: str) -> None:
        super().__init__(f"Failed to commit {path}: {cause}")
        self.path = path
        self.cause = cause


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class PipelineError(RelgenError):
    pass


class ReleaseFolderMissing(PipelineError):
    def __init__(self, path: str) -> None:
        super().__init__(f"The release folder {path} was not found. Use --create-release to create it.")
        self.path = path


class MissingBody(PipelineError):
    def __init__(self, number: int) -> None:
        super().__init__(f"Pull request #{number} has no description to extract a migration guide from")
        self.number = number


class WriteFailed(PipelineError):
    def __init__(self, path: str, cause: str) -> None:
        super().__init__(f"Failed to write {path}: {cause}")
        self.path = path
        self.cause = cause
