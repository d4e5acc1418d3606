"""Tests for relgen.identifiers."""

import pytest

from relgen.errors import IdentifierError, InvalidLabel, InvalidRepoIdentifier
from relgen.identifiers import normalize_repo_identifier, validate_label
from relgen.models import ReleaseLabel, RepoIdentifier


class TestNormalizeRepoIdentifier:
    @pytest.mark.parametrize(
        "raw",
        [
            "https://github.com/bevyengine/bevy.git/",
            "https://github.com/bevyengine/bevy.git",
            "https://github.com/bevyengine/bevy/",
            "https://github.com/bevyengine/bevy",
            "github.com/bevyengine/bevy",
            "bevyengine/bevy",
            "bevyengine/bevy/",
            "bevyengine/bevy.git",
        ],
    )
    def test_url_forms_are_equivalent(self, raw: str) -> None:
        assert normalize_repo_identifier(raw) == RepoIdentifier(owner="bevyengine", name="bevy")

    @pytest.mark.parametrize("raw", ["bevyengine/bevy", "a/b", "my-org/repo.name_2", "x-/y"])
    def test_idempotent(self, raw: str) -> None:
        once = normalize_repo_identifier(raw)
        assert normalize_repo_identifier(str(once)) == once

    def test_str_is_owner_slash_name(self) -> None:
        assert str(normalize_repo_identifier("https://github.com/bevyengine/bevy-website")) == (
            "bevyengine/bevy-website"
        )

    def test_url_property(self) -> None:
        assert normalize_repo_identifier("bevyengine/bevy").url == "https://github.com/bevyengine/bevy"

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "/bevy",
            "-bevyengine/bevy",
            "bevy--engine/bevy",
            "bevyengine/bevy/extra",
            "https://github.com/bevyengine/bevy/tree/main",
            "bevyengine",
            "1bevy/bevy",
            "bevyengine/",
            "bevyengine/bevy\n",
            "https://github.com/bevyengine/bevy\n",
            "github.com/bevyengine/bevy.git\n",
        ],
    )
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(InvalidRepoIdentifier):
            normalize_repo_identifier(raw)

    def test_error_names_value(self) -> None:
        with pytest.raises(InvalidRepoIdentifier, match="not/a/repo") as exc_info:
            normalize_repo_identifier("not/a/repo")
        assert isinstance(exc_info.value, IdentifierError)
        assert exc_info.value.value == "not/a/repo"


class TestValidateLabel:
    @pytest.mark.parametrize("raw", ["0.10.0", "v0.9.0-rc.1", "main", "_draft", "release_2024"])
    def test_accepts(self, raw: str) -> None:
        assert validate_label(raw) == ReleaseLabel(value=raw)

    @pytest.mark.parametrize("raw", ["", "/etc/passwd", ".hidden", "..", "../up", "-rc", "a/b", "a b", "0.10\n"])
    def test_rejects(self, raw: str) -> None:
        with pytest.raises(InvalidLabel):
            validate_label(raw)

    def test_kind_in_message(self) -> None:
        with pytest.raises(InvalidLabel, match="project_prefix"):
            validate_label("../x", kind="project_prefix")
