from __future__ import annotations

"""
Unit tests for the Project Analyser (full analysis pass).
"""

import dataclasses
from pathlib import Path

import pytest

from zettelbuilder.core.analysis.analyser import analyse_project
from zettelbuilder.domain.errors import PathNotFound, UndefinedCrossReference, UnclassifiedNote


def test_analysis_of_sample_tree(notes_dir: Path, make_project) -> None:
    analysis = analyse_project(make_project(notes_dir))

    assert len(analysis.files) == 4
    assert set(analysis.notes) == {"a", "b", "c"}
    assert analysis.notes["c"].tag == "typst pdf"
    assert analysis.refs.outgoing["a"] == {"b"}
    assert [n.name for n in analysis.notes["b"].refs.incoming] == ["a"]
    assert set(analysis.tree.folders["maths"].notes) == {"a", "b"}
    assert analysis.diagnostics == ()


def test_analysis_is_frozen(notes_dir: Path, make_project) -> None:
    analysis = analyse_project(make_project(notes_dir))

    with pytest.raises(dataclasses.FrozenInstanceError):
        analysis.notes = {}  # type: ignore[misc]


def test_each_pass_builds_fresh_notes(notes_dir: Path, make_project) -> None:
    project = make_project(notes_dir)

    first = analyse_project(project)
    second = analyse_project(project)

    assert first.notes["a"] is not second.notes["a"]


def test_diagnostics_are_collected(notes_dir: Path, make_project) -> None:
    (notes_dir / "data.note.csv").write_text("1,2", encoding="utf-8")

    analysis = analyse_project(make_project(notes_dir))

    assert [d.name for d in analysis.diagnostics if isinstance(d, UnclassifiedNote)] == ["data"]


def test_dangling_reference_aborts(notes_dir: Path, make_project) -> None:
    (notes_dir / "maths" / "b.note.md").write_text("# Beta\n\nSee @z\n", encoding="utf-8")

    with pytest.raises(UndefinedCrossReference) as exc:
        analyse_project(make_project(notes_dir))

    assert exc.value.note_name == "b"
    assert exc.value.unknown == ("z",)


def test_missing_source_dir(tmp_path: Path, make_project) -> None:
    with pytest.raises(PathNotFound):
        analyse_project(make_project(tmp_path / "nope"))
