from __future__ import annotations

"""
Unit tests for the Note Folder Tree and its ASCII renderer.
"""

from pathlib import Path

from zettelbuilder.core.analysis.assembler import assemble_notes
from zettelbuilder.core.analysis.discovery import find_note_files
from zettelbuilder.core.analysis.folder_tree import (
    build_note_tree,
    count_notes,
    sorted_folders,
    sorted_notes,
)
from zettelbuilder.core.analysis.tree_renderer import format_note_tree, render_note_tree
from zettelbuilder.domain.note_models import Note, NoteFolder


def _notes(*specs):
    return {name: Note(name=name, dir=tuple(d), files={}) for name, d in specs}


def test_tree_mirrors_directories() -> None:
    notes = _notes(("c", []), ("a", ["maths"]), ("b", ["maths"]), ("deep", ["maths", "algebra"]))

    tree = build_note_tree(notes)

    assert set(tree.notes) == {"c"}
    assert set(tree.folders) == {"maths"}
    maths = tree.folders["maths"]
    assert set(maths.notes) == {"a", "b"}
    assert set(maths.folders["algebra"].notes) == {"deep"}
    assert count_notes(tree) == 4


def test_tree_is_a_pure_function_of_notes() -> None:
    notes = _notes(("a", ["x"]), ("b", []))

    first = build_note_tree(notes)
    second = build_note_tree(notes)

    assert first is not second
    assert first == second


def test_empty_notes_give_empty_root() -> None:
    assert build_note_tree({}) == NoteFolder()


def test_sorted_helpers() -> None:
    tree = build_note_tree(_notes(("z", []), ("m", []), ("a", []), ("q", ["b"]), ("r", ["a"])))

    assert [n.name for n in sorted_notes(tree)] == ["a", "m", "z"]
    assert [segment for segment, _ in sorted_folders(tree)] == ["a", "b"]


def test_render_tree_lines(notes_dir: Path, simple_note_types: tuple) -> None:
    notes = assemble_notes(find_note_files(str(notes_dir)), str(notes_dir), simple_note_types)
    tree = build_note_tree(notes)

    assert format_note_tree(tree).splitlines() == [
        ".",
        "├── maths/",
        "│   ├── a [markdown]",
        "│   └── b [markdown]",
        "└── c [typstpdf]",
    ]


def test_render_tree_without_tags() -> None:
    tree = build_note_tree(_notes(("a", ["x", "y"]), ("b", [])))
    lines: list = []

    render_note_tree(tree, lines, show_tags=False)

    assert lines == [
        "├── x/",
        "│   └── y/",
        "│       └── a",
        "└── b",
    ]
