"""Resolve paths that may not exist yet to a predictable absolute form."""

import re
from pathlib import Path

from relgen.errors import CanonicalizationFailed, MissingBaseDir
from relgen.models import ResolvedPath

_ABSOLUTE = re.compile(r"^/|^[A-Za-z]:[/\\]")


def resolve_path(raw: str, base_dir: str | Path | None = None) -> ResolvedPath:
    """Return ``raw`` as an absolute path, canonicalized as far as it exists.

    A relative ``raw`` is joined onto ``base_dir``. The ancestors are walked
    from the root down and the walk stops at the first one that cannot be
    canonicalized; the remaining components are appended unchanged, so a
    folder that will only be created later still resolves the same way.
    """
    if _ABSOLUTE.match(raw):
        path = Path(raw)
    elif base_dir is None:
        raise MissingBaseDir(raw)
    else:
        path = (Path(base_dir) / raw).absolute()

    existing: Path | None = None
    canonical: Path | None = None
    for candidate in [*reversed(path.parents), path]:
        try:
            resolved = candidate.resolve(strict=True)
        except (OSError, RuntimeError):
            break
        existing, canonical = candidate, resolved

    if existing is None or canonical is None:
        raise CanonicalizationFailed(raw, f"{path.anchor or path} is not accessible")

    return ResolvedPath(path=canonical / path.relative_to(existing), existing_prefix=canonical)
