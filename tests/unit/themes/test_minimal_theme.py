from __future__ import annotations

"""
Unit tests for the minimal theme and theme resolution.
"""

import asyncio
from pathlib import Path

import pytest

from zettelbuilder.core.analysis.analyser import analyse_project
from zettelbuilder.core.build.orchestrator import BuildOrchestrator
from zettelbuilder.core.services.themes import load_theme
from zettelbuilder.domain.errors import ThemeLoadError
from zettelbuilder.domain.project_models import RenderContext, Theme
from zettelbuilder.themes import minimal


@pytest.fixture
def mixed_notes(tmp_path: Path) -> Path:
    root = tmp_path / "notes"
    (root / "links").mkdir(parents=True)
    (root / "intro.note.md").write_text(
        "# Introduction\n\nRead @details and [the list](@todo).\n", encoding="utf-8"
    )
    (root / "details.note.md").write_text("No heading here.\n", encoding="utf-8")
    (root / "todo.note.txt").write_text("1. <write> tests\n", encoding="utf-8")
    (root / "links" / "python.note.url").write_text(
        "[InternetShortcut]\nURL=https://www.python.org/about/\n", encoding="utf-8"
    )
    return root

# -----------------------------------------------------------------------------
# Note types
# -----------------------------------------------------------------------------

def test_note_types_classify(mixed_notes: Path, make_project) -> None:
    analysis = analyse_project(make_project(mixed_notes))

    tags = {name: note.tag for name, note in analysis.notes.items()}
    assert tags == {"intro": "markdown", "details": "markdown", "todo": "plain text", "python": "url"}


def test_markdown_title_and_refs(mixed_notes: Path, make_project) -> None:
    analysis = analyse_project(make_project(mixed_notes))

    assert analysis.notes["intro"].title == "Introduction"
    assert analysis.notes["details"].title == "details"
    assert analysis.refs.outgoing["intro"] == {"details", "todo"}


def test_link_handles() -> None:
    text = "See @a-b and [list](@todo)."
    assert minimal.link_handles(text) == "See [@a-b](a-b.html) and [list](todo.html)."


def test_url_description(mixed_notes: Path, make_project) -> None:
    analysis = analyse_project(make_project(mixed_notes))
    assert analysis.notes["python"].description == "www.python.org link"


def test_url_without_link_fails(tmp_path: Path, make_project) -> None:
    (tmp_path / "broken.note.url").write_text("nothing here", encoding="utf-8")
    analysis = analyse_project(make_project(tmp_path))

    with pytest.raises(ValueError, match="Couldn't parse URL"):
        minimal.note_url(analysis.notes["broken"])

# -----------------------------------------------------------------------------
# Rendered pages
# -----------------------------------------------------------------------------

def test_rendered_pages(mixed_notes: Path, make_project, tmp_path: Path) -> None:
    asyncio.run(BuildOrchestrator(make_project(mixed_notes)).build())
    site = tmp_path / "site"

    intro = (site / "intro.html").read_text(encoding="utf-8")
    assert "<h1>Introduction</h1>" in intro
    assert "<a href=\"details.html\">@details</a>" in intro
    assert "<a href=\"todo.html\">the list</a>" in intro
    assert "Outgoing:" in intro

    todo = (site / "todo.html").read_text(encoding="utf-8")
    assert "<pre>1. &lt;write&gt; tests\n</pre>" in todo
    assert "Incoming:" in todo

    python = (site / "python.html").read_text(encoding="utf-8")
    assert "<iframe class=\"page\" src=\"https://www.python.org/about/\">" in python


def test_index_lists_notes_then_folders(mixed_notes: Path, make_project) -> None:
    project = make_project(mixed_notes)
    context = RenderContext(project=project, analysis=analyse_project(project))

    index = minimal.render_index(context)

    assert "<h2>Notes by folder</h2>" in index
    positions = [index.index(f"<code>[{n}]</code></a>") for n in ("details", "intro", "todo")]
    assert positions == sorted(positions)
    assert index.index("[todo]</code></a>") < index.index("<strong>links</strong>")
    assert ", links to <code>[details]</code><code>[todo]</code>" in index


def test_note_header_links_to_url_root(mixed_notes: Path, make_project, tmp_path: Path) -> None:
    asyncio.run(BuildOrchestrator(make_project(mixed_notes, url_root="docs")).build())

    page = (tmp_path / "site" / "todo.html").read_text(encoding="utf-8")
    assert "<a href=\"/docs/\">Index</a>" in page

# -----------------------------------------------------------------------------
# Theme resolution
# -----------------------------------------------------------------------------

def test_load_bundled_theme() -> None:
    theme = load_theme("minimal")
    assert theme is minimal.THEME
    assert [t.tag for t in theme.note_types] == ["markdown", "plain text", "url", "typst pdf"]


def test_load_theme_by_import_spec() -> None:
    assert load_theme("zettelbuilder.themes.minimal") is minimal.THEME
    assert load_theme("zettelbuilder.themes.minimal:THEME") is minimal.THEME


def test_load_theme_from_factory(monkeypatch) -> None:
    custom = Theme(name="custom", url_root="/", note_types=(), render_index=lambda ctx: "")
    monkeypatch.setattr(minimal, "make_custom", lambda: custom, raising=False)

    assert load_theme("zettelbuilder.themes.minimal:make_custom") is custom


@pytest.mark.parametrize("spec", [
    "",
    "no_such_module_xyz",
    "zettelbuilder.themes.minimal:MISSING",
    "zettelbuilder.themes.minimal:NOTE_TYPES",
])
def test_load_theme_errors(spec: str) -> None:
    with pytest.raises(ThemeLoadError):
        load_theme(spec)
