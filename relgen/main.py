"""relgen CLI: all commands."""

from pathlib import Path
from typing import Annotated

import httpx
import typer
from rich import print as rprint
from rich.markup import escape
from rich.table import Table

from relgen.errors import RelgenError
from relgen.git_client import open_or_clone
from relgen.identifiers import validate_label
from relgen.migration_notes import ensure_release_folder, generate
from relgen.providers.base import PullRequestSource
from relgen.providers.github import GitHubClient
from relgen.settings import CONFIG_PATH, GitHubCredentials, Settings, get_credentials, get_settings

app = typer.Typer(help="relgen: release documentation from merged pull requests", no_args_is_help=True)

BREAKING_CHANGE_LABEL = "C-Breaking-Change"


def _fail(exc: Exception) -> typer.Exit:
    rprint(f"[red]{escape(str(exc))}[/red]")
    return typer.Exit(1)


def get_provider(settings: Settings, credentials: GitHubCredentials) -> PullRequestSource:
    token = credentials.github_token.get_secret_value() if credentials.github_token else ""
    return GitHubClient(token, settings.source_repo)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("migration-notes")
def migration_notes(
    release: Annotated[str, typer.Option("--release", "-r", help="Release name, used as the folder name")],
    from_ref: Annotated[str, typer.Option("--from", help="The branch / tag / commit to start from")],
    to_ref: Annotated[str, typer.Option("--to", help="The branch / tag / commit to end on")],
    create_release: Annotated[
        bool, typer.Option("--create-release", help="Create the release folder if it doesn't exist")
    ] = False,
    clone: Annotated[
        bool, typer.Option("--clone", help="Clone the migration notes repository if it doesn't exist")
    ] = False,
    no_create_commit: Annotated[
        bool, typer.Option("--no-create-commit", help="Write the files without committing them")
    ] = False,
    label: Annotated[str, typer.Option("--label", help="Only include PRs with this label")] = BREAKING_CHANGE_LABEL,
) -> None:
    """Write one migration note per breaking PR merged between --from and --to.

    Each note is committed on its own to the migration notes repository,
    co-authored by the PR author, unless --no-create-commit is passed.
    """
    # Everything that can be checked locally is checked before touching disk or network
    try:
        release_label = validate_label(release)
        settings = get_settings()
        credentials = get_credentials()
    except RelgenError as exc:
        raise _fail(exc) from exc

    local_path = settings.notes_local_path.path
    try:
        if not local_path.exists() and clone:
            rprint(f"[yellow]Repository {local_path} not found. Cloning {settings.notes_repo.url}[/yellow]")
        session = open_or_clone(local_path, settings.notes_repo.url, allow_clone=clone, credentials=credentials)
        rprint(f"[green]✓[/green] {'Cloned' if session.cloned else 'Opened'} repository {local_path}")

        folder = ensure_release_folder(settings, release_label, create=create_release)
        provider = get_provider(settings, credentials)
        prs = provider.merged_pull_requests(from_ref, to_ref, label=label or None)
        notes = generate(settings, release_label, prs, create_commit=not no_create_commit, session=session)
    except (RelgenError, RuntimeError, httpx.HTTPError) as exc:
        raise _fail(exc) from exc

    rprint(f"[green]✓[/green] Wrote {len(notes)} migration note(s) to {folder}")


@app.command("config-show")
def config_show() -> None:
    """Show resolved configuration (masks credentials)."""
    try:
        settings = get_settings()
    except RelgenError as exc:
        raise _fail(exc) from exc
    credentials = GitHubCredentials()

    def mask(val: str | None, prefix: str = "") -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"{prefix}...{val[-5:]}"

    table = Table(title=f"relgen configuration ({Path(CONFIG_PATH)})")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("source_repo", str(settings.source_repo))
    table.add_row("migration_notes_repo", str(settings.notes_repo))
    table.add_row("migration_notes_local_path", escape(str(settings.notes_local_path)))
    table.add_row("project_prefix", str(settings.project_prefix) if settings.project_prefix else "[dim](not set)[/dim]")
    table.add_row(
        "github_token",
        mask(
            credentials.github_token.get_secret_value() if credentials.github_token else None,
            prefix="ghp_",
        ),
    )
    table.add_row("github_username", credentials.github_username or "[dim](not set)[/dim]")

    rprint(table)
