"""Migration note generation: one markdown file, and optionally one commit, per pull request."""

import io
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

import tomlkit
from rich import print as rprint
from rich.markup import escape

from relgen.errors import MissingBody, PipelineError, ReleaseFolderMissing, WriteFailed
from relgen.git_client import RepositorySession
from relgen.markdown import write_markdown_section
from relgen.models import MigrationNote, PullRequest, ReleaseLabel, RepoIdentifier
from relgen.settings import Settings

SECTION_TITLE = "migration guide"
AREA_PREFIX = "A-"


def get_pr_areas(pr: PullRequest) -> list[str]:
    """Area tags from labels such as ``A-ECS``, in label order."""
    return [label[len(AREA_PREFIX) :] for label in pr.labels if label.startswith(AREA_PREFIX)]


def note_relative_path(settings: Settings, release: ReleaseLabel, number: int) -> PurePosixPath:
    """``[prefix/]release/<number>.md``, relative to the notes working copy."""
    parts = [settings.project_prefix.value] if settings.project_prefix else []
    return PurePosixPath(*parts, release.value, f"{number}.md")


def release_folder(settings: Settings, release: ReleaseLabel) -> Path:
    folder = settings.notes_local_path.path
    if settings.project_prefix:
        folder = folder / settings.project_prefix.value
    return folder / release.value


def ensure_release_folder(settings: Settings, release: ReleaseLabel, create: bool) -> Path:
    """Return the release folder, creating it only when ``create`` is set."""
    folder = release_folder(settings, release)
    if folder.is_dir():
        return folder
    if not create:
        raise ReleaseFolderMissing(str(folder))
    try:
        folder.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteFailed(str(folder), str(exc)) from exc
    return folder


def render_front_matter(pr: PullRequest) -> str:
    doc = tomlkit.document()
    doc.add("pr", pr.number)
    doc.add("title", pr.title)
    doc.add("close_date", pr.closed_at)
    areas = get_pr_areas(pr)
    if areas:
        doc.add("areas", areas)
    return f"+++\n{tomlkit.dumps(doc)}+++\n"


def render_migration_note(settings: Settings, release: ReleaseLabel, pr: PullRequest) -> MigrationNote:
    if pr.body is None:
        raise MissingBody(pr.number)

    body = io.StringIO()
    found = write_markdown_section(pr.body, SECTION_TITLE, body, True)
    return MigrationNote(
        relative_path=note_relative_path(settings, release, pr.number).as_posix(),
        content=render_front_matter(pr) + body.getvalue(),
        section_found=found,
    )


def commit_message(source_repo: RepoIdentifier, pr: PullRequest) -> str:
    login = pr.user.login
    return (
        f"Create migration note for {source_repo}#{pr.number}\n"
        "\n"
        f"Co-authored-by: {login} <{pr.user.id}+{login.lower()}@users.noreply.github.com>"
    )


def create_migration_note(
    settings: Settings,
    release: ReleaseLabel,
    pr: PullRequest,
    create_commit: bool,
    session: RepositorySession | None = None,
) -> MigrationNote:
    """Write the note for ``pr``, overwriting any previous version, and commit it if asked."""
    if create_commit and session is None:
        raise PipelineError("Cannot create a commit without an open repository session")

    note = render_migration_note(settings, release, pr)
    target = settings.notes_local_path.path / note.relative_path
    try:
        with target.open("w", encoding="utf-8", newline="\n") as f:
            f.write(note.content)
    except OSError as exc:
        raise WriteFailed(str(target), str(exc)) from exc

    if create_commit and session is not None:
        session.commit_single_file(note.relative_path, commit_message(settings.source_repo, pr))
    return note


def generate(
    settings: Settings,
    release: ReleaseLabel,
    prs: Iterable[PullRequest],
    create_commit: bool,
    session: RepositorySession | None = None,
) -> list[MigrationNote]:
    """Create a note for each PR in the order ``prs`` yields them.

    The first failure stops the run; notes written before it are kept.
    """
    if create_commit and session is None:
        raise PipelineError("Cannot create commits without an open repository session")
    folder = release_folder(settings, release)
    if not folder.is_dir():
        raise ReleaseFolderMissing(str(folder))

    notes = []
    for pr in prs:
        rprint(f"creating note for #{pr.number} [dim]{escape(pr.title)}[/dim]")
        note = create_migration_note(settings, release, pr, create_commit, session)
        if not note.section_found:
            rprint(f"[yellow]Warning:[/yellow] #{pr.number} has no '{SECTION_TITLE}' section, wrote front-matter only")
        notes.append(note)
    return notes
