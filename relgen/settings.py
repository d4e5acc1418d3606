"""Settings resolution: relgen.toml, RELGEN_* env vars and .env, assembled into validated Settings."""

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict
from tomlkit.exceptions import TOMLKitError

from relgen.errors import MissingRequiredKey, SettingsError
from relgen.identifiers import normalize_repo_identifier, validate_label
from relgen.models import ReleaseLabel, RepoIdentifier, ResolvedPath
from relgen.paths import resolve_path

CONFIG_PATH = Path("relgen.toml")
ENV_PREFIX = "RELGEN_"

SOURCE_REPO = "source_repo"
MIGRATION_NOTES_REPO = "migration_notes_repo"
MIGRATION_NOTES_LOCAL_PATH = "migration_notes_local_path"
PROJECT_PREFIX = "project_prefix"


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load relgen.toml, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    with CONFIG_PATH.open(encoding="utf-8") as f:
        return tomlkit.load(f)


def _toml_values() -> dict[str, Any]:
    # Keys are case-insensitive, like the environment variables.
    return {
        str(key).lower(): value if isinstance(value, Mapping) else str(value)
        for key, value in _load_toml().unwrap().items()
    }


class TomlConfigSource(PydanticBaseSettingsSource):
    """Lowest-priority settings source backed by relgen.toml."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return _toml_values().get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        values = _toml_values()
        return {name: values[name] for name in self.settings_cls.model_fields if values.get(name) is not None}


class RelgenSettings(BaseSettings):
    """Raw, unvalidated configuration values."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    source_repo: str | None = None
    migration_notes_repo: str | None = None
    migration_notes_local_path: str | None = None
    project_prefix: str | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment always overrides the config file
        return init_settings, env_settings, dotenv_settings, TomlConfigSource(settings_cls)


class GitHubCredentials(BaseSettings):
    """Credentials for the GitHub API and for cloning. Never written to disk."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr | None = None
    github_username: str | None = None


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_repo: RepoIdentifier
    notes_repo: RepoIdentifier
    notes_local_path: ResolvedPath
    project_prefix: ReleaseLabel | None = None


def _required(values: Mapping[str, Any], key: str) -> str:
    value = values.get(key)
    if not value:
        raise MissingRequiredKey(key, hint=f"Set {ENV_PREFIX}{key.upper()} or {key} in {CONFIG_PATH}")
    return str(value)


def assemble(raw_map: Mapping[str, Any], base_dir: str | Path | None = None) -> Settings:
    """Validate raw configuration values into Settings.

    Raises MissingRequiredKey for an absent key, or the identifier/path error
    for an invalid one. Relative paths are resolved against ``base_dir``.
    """
    values = {key.lower(): value for key, value in raw_map.items()}

    source_repo = normalize_repo_identifier(_required(values, SOURCE_REPO))
    notes_repo = normalize_repo_identifier(_required(values, MIGRATION_NOTES_REPO))
    notes_local_path = resolve_path(_required(values, MIGRATION_NOTES_LOCAL_PATH), base_dir)

    project_prefix = None
    if values.get(PROJECT_PREFIX):
        project_prefix = validate_label(str(values[PROJECT_PREFIX]), kind=PROJECT_PREFIX)

    return Settings(
        source_repo=source_repo,
        notes_repo=notes_repo,
        notes_local_path=notes_local_path,
        project_prefix=project_prefix,
    )


def get_settings() -> Settings:
    """Load configuration and assemble it. Relative paths are relative to relgen.toml."""
    try:
        raw = RelgenSettings()
    except (TOMLKitError, ValidationError, OSError) as exc:
        raise SettingsError(f"Could not read {CONFIG_PATH}: {exc}") from exc
    return assemble(raw.model_dump(), base_dir=CONFIG_PATH.absolute().parent)


def get_credentials() -> GitHubCredentials:
    credentials = GitHubCredentials()
    if credentials.github_token is None or not credentials.github_token.get_secret_value():
        raise MissingRequiredKey("GITHUB_TOKEN", hint="Set it in the environment or in a .env file")
    if not credentials.github_username:
        raise MissingRequiredKey("GITHUB_USERNAME", hint="Set it in the environment or in a .env file")
    return credentials
