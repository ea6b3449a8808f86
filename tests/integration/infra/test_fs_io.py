from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates path normalization, output directory recreation, asset copying
and the staging directory swap.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from zettelbuilder.infra.fs import (
    copy_path,
    is_within,
    normalize_path,
    recreate_dir,
    replace_dir,
    write_text,
)

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_normalize_path_expansion() -> None:
    """Environment variables and user shortcuts are expanded."""
    with patch.dict(os.environ, {"TEST_VAR": "my_folder"}):
        path = normalize_path("$TEST_VAR/sub", fallback=".")
        assert path.endswith(os.path.join("my_folder", "sub"))
        assert os.path.isabs(path)


def test_normalize_path_fallback(tmp_path: Path) -> None:
    assert normalize_path("   ", fallback=str(tmp_path)) == str(tmp_path)
    assert normalize_path(None, fallback=str(tmp_path)) == str(tmp_path)


def test_is_within(tmp_path: Path) -> None:
    root = tmp_path / "site"
    assert is_within(str(root), str(root))
    assert is_within(str(root), str(root / "a" / "b.html"))
    assert not is_within(str(root), str(tmp_path / "site.old"))
    assert not is_within(str(root), str(root / ".." / "other"))

# -----------------------------------------------------------------------------
# DIRECTORY OPERATIONS
# -----------------------------------------------------------------------------

def test_recreate_dir_empties_existing(tmp_path: Path) -> None:
    target = tmp_path / "site"
    (target / "nested").mkdir(parents=True)
    (target / "nested" / "old.html").write_text("x", encoding="utf-8")

    recreate_dir(str(target))

    assert target.is_dir()
    assert list(target.iterdir()) == []


def test_recreate_dir_replaces_file(tmp_path: Path) -> None:
    target = tmp_path / "site"
    target.write_text("not a dir", encoding="utf-8")

    recreate_dir(str(target))

    assert target.is_dir()


def test_copy_path_file_and_tree(tmp_path: Path) -> None:
    src = tmp_path / "assets"
    (src / "img").mkdir(parents=True)
    (src / "img" / "a.png").write_bytes(b"a")
    single = tmp_path / "robots.txt"
    single.write_text("allow", encoding="utf-8")
    out = tmp_path / "out"

    copy_path(str(src), str(out / "assets"))
    copy_path(str(single), str(out / "deep" / "robots.txt"))

    assert (out / "assets" / "img" / "a.png").read_bytes() == b"a"
    assert (out / "deep" / "robots.txt").read_text(encoding="utf-8") == "allow"


def test_copy_path_missing_source(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        copy_path(str(tmp_path / "missing"), str(tmp_path / "out"))


def test_write_text_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "page.html"
    write_text(str(target), "<p>ü</p>")
    assert target.read_text(encoding="utf-8") == "<p>ü</p>"


def test_replace_dir_swaps_in_staging(tmp_path: Path) -> None:
    target = tmp_path / "site"
    target.mkdir()
    (target / "old.html").write_text("old", encoding="utf-8")
    staging = tmp_path / ".stage"
    staging.mkdir()
    (staging / "new.html").write_text("new", encoding="utf-8")

    replace_dir(str(staging), str(target))

    assert [p.name for p in target.iterdir()] == ["new.html"]
    assert not staging.exists()
    assert not (tmp_path / "site.old").exists()


def test_replace_dir_without_previous_target(tmp_path: Path) -> None:
    staging = tmp_path / ".stage"
    staging.mkdir()

    replace_dir(str(staging), str(tmp_path / "site"))

    assert (tmp_path / "site").is_dir()
