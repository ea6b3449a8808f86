from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures: a sample notes tree, simple note types and projects.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from zettelbuilder.domain.note_models import NoteType  # noqa: E402
from zettelbuilder.domain.project_models import Project, Theme  # noqa: E402
from zettelbuilder.themes.minimal import THEME as MINIMAL_THEME  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """
    Create a small notes tree.

    Structure:
    /notes
      /maths
        a.note.md   (links to @b)
        b.note.md
      c.note.typ
      c.note.pdf
      readme.txt
    """
    root = tmp_path / "notes"
    (root / "maths").mkdir(parents=True)

    (root / "maths" / "a.note.md").write_text("# Alpha\n\nSee @b for details.\n", encoding="utf-8")
    (root / "maths" / "b.note.md").write_text("# Beta\n\nNothing else.\n", encoding="utf-8")
    (root / "c.note.typ").write_text("= Gamma\n", encoding="utf-8")
    (root / "c.note.pdf").write_bytes(b"%PDF-1.4 fake")
    (root / "readme.txt").write_text("not a note", encoding="utf-8")

    return root


@pytest.fixture
def simple_note_types() -> tuple:
    """Descriptors with default capabilities: markdown {md}, typstpdf {typ, pdf}."""
    return (
        NoteType(tag="markdown", extensions=frozenset({"md"})),
        NoteType(tag="typstpdf", extensions=frozenset({"typ", "pdf"})),
    )


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Project]:
    """Factory for projects building into tmp_path/site, using the minimal theme by default."""

    def _make(
            src_dir: Path,
            *,
            theme: Optional[Theme] = None,
            copy_paths: Optional[Dict[str, str]] = None,
            build_dir: Optional[Path] = None,
            **kwargs: Any,
    ) -> Project:
        return Project(
            src_dir=str(src_dir),
            build_dir=str(build_dir or tmp_path / "site"),
            theme=theme or MINIMAL_THEME,
            copy_paths=copy_paths or {},
            **kwargs,
        )

    return _make
