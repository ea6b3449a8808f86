from __future__ import annotations

"""
Unit tests for pretty-URL file resolution.
"""

import os
from pathlib import Path

import pytest

from zettelbuilder.core.server.files import resolve_request_path


@pytest.fixture
def site(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    (root / "guide").mkdir(parents=True)
    (root / "index.html").write_text("home", encoding="utf-8")
    (root / "foo.html").write_text("foo page", encoding="utf-8")
    (root / "style.css").write_text("body {}", encoding="utf-8")
    (root / "guide" / "index.html").write_text("guide", encoding="utf-8")
    (tmp_path / "secret.html").write_text("secret", encoding="utf-8")
    return root


@pytest.mark.parametrize("request_path, relative", [
    ("/", "index.html"),
    ("", "index.html"),
    ("/foo", "foo.html"),
    ("/foo.html", "foo.html"),
    ("/style.css", "style.css"),
    ("/guide", os.path.join("guide", "index.html")),
    ("/guide/", os.path.join("guide", "index.html")),
])
def test_resolves_pretty_urls(site: Path, request_path: str, relative: str) -> None:
    lookup = resolve_request_path(str(site), "/", request_path)

    assert lookup.found
    assert lookup.file_path == os.path.join(str(site), relative)


def test_missing_page_is_not_found(site: Path) -> None:
    lookup = resolve_request_path(str(site), "/", "/missing")

    assert not lookup.found
    assert lookup.file_path == os.path.join(str(site), "missing.html")
    info = lookup.debug_info()
    assert info["url"] == "/missing"
    assert info["cwd"] == os.getcwd()


def test_paths_cannot_escape_build_dir(site: Path) -> None:
    lookup = resolve_request_path(str(site), "/", "/../secret")
    assert not lookup.found


def test_url_root_is_stripped(site: Path) -> None:
    assert resolve_request_path(str(site), "/docs/", "/docs/foo").found
    assert resolve_request_path(str(site), "/docs/", "/docs").file_path == os.path.join(str(site), "index.html")
    assert not resolve_request_path(str(site), "/docs/", "/foo").found
    assert not resolve_request_path(str(site), "/docs/", "/docsfoo").found
