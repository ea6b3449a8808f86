from __future__ import annotations

"""
Note Folder Tree Builder.

Arranges notes into a tree mirroring their source directories. The tree
carries nothing that is not already in the notes; it exists so indexes can
be rendered folder by folder.
"""

from typing import List, Mapping, Tuple

from zettelbuilder.domain.note_models import Note, NoteFolder

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_note_tree(notes: Mapping[str, Note]) -> NoteFolder:
    """
    Group notes by directory into a fresh NoteFolder tree.

    Args:
        notes: Notes by name.

    Returns:
        NoteFolder: Root folder; no ordering is imposed on its maps.
    """
    tree = NoteFolder()

    for name, note in notes.items():
        folder = tree
        for segment in note.dir:
            folder = folder.folders.setdefault(segment, NoteFolder())
        folder.notes[name] = note

    return tree


def sorted_notes(folder: NoteFolder) -> List[Note]:
    """Notes directly in a folder, sorted by name."""
    return [folder.notes[name] for name in sorted(folder.notes)]


def sorted_folders(folder: NoteFolder) -> List[Tuple[str, NoteFolder]]:
    """Child folders of a folder, sorted by segment."""
    return [(segment, folder.folders[segment]) for segment in sorted(folder.folders)]


def count_notes(folder: NoteFolder) -> int:
    """Total number of notes in a folder and all of its descendants."""
    return len(folder.notes) + sum(count_notes(child) for child in folder.folders.values())
