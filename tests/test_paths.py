"""Tests for relgen.paths.resolve_path."""

import os
from pathlib import Path

import pytest

from relgen.errors import MissingBaseDir, PathError
from relgen.paths import resolve_path


def test_existing_path_is_fully_canonical(tmp_path: Path) -> None:
    target = tmp_path / "notes"
    target.mkdir()
    resolved = resolve_path(str(target))
    assert resolved.path == target.resolve()
    assert resolved.existing_prefix == target.resolve()


def test_missing_tail_appended_verbatim(tmp_path: Path) -> None:
    (tmp_path / "a" / "b").mkdir(parents=True)
    resolved = resolve_path(str(tmp_path / "a" / "b" / "0.10.0"))

    assert resolved.existing_prefix == (tmp_path / "a" / "b").resolve()
    assert resolved.path == (tmp_path / "a" / "b").resolve() / "0.10.0"
    assert str(resolved.tail) == "0.10.0"


def test_stops_at_first_missing_ancestor(tmp_path: Path) -> None:
    resolved = resolve_path(str(tmp_path / "missing" / "deeper" / "leaf"))
    assert resolved.existing_prefix == tmp_path.resolve()
    assert resolved.path == tmp_path.resolve() / "missing" / "deeper" / "leaf"


def test_dotdot_inside_existing_prefix_is_collapsed(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    resolved = resolve_path(str(tmp_path / "a" / ".." / "b" / "new"))
    assert resolved.path == tmp_path.resolve() / "b" / "new"


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_symlink_in_existing_prefix_is_resolved(tmp_path: Path) -> None:
    real = tmp_path / "real"
    real.mkdir()
    link = tmp_path / "link"
    link.symlink_to(real, target_is_directory=True)

    resolved = resolve_path(str(link / "notes"))
    assert resolved.path == real.resolve() / "notes"
    assert ".." not in resolved.path.parts


def test_relative_joined_onto_base_dir(tmp_path: Path) -> None:
    (tmp_path / "checkouts").mkdir()
    resolved = resolve_path("checkouts/migration-notes", base_dir=tmp_path)
    assert resolved.path == tmp_path.resolve() / "checkouts" / "migration-notes"
    assert resolved.path.is_absolute()


def test_relative_without_base_dir_fails() -> None:
    with pytest.raises(MissingBaseDir) as exc_info:
        resolve_path("migration-notes")
    assert isinstance(exc_info.value, PathError)
    assert exc_info.value.path == "migration-notes"


def test_idempotent_and_side_effect_free(tmp_path: Path) -> None:
    raw = str(tmp_path / "x" / "y")
    first = resolve_path(raw)
    second = resolve_path(raw)
    assert first == second
    assert not (tmp_path / "x").exists()


def test_existing_prefix_is_prefix_of_path(tmp_path: Path) -> None:
    resolved = resolve_path(str(tmp_path / "one" / "two"))
    assert resolved.path.is_relative_to(resolved.existing_prefix)
    assert os.fspath(resolved) == str(resolved.path)
