from __future__ import annotations

"""
Note Tree Renderer.

Converts a NoteFolder tree into ASCII lines: folders first, then notes,
each note annotated with its classification tag.
"""

from typing import List

from zettelbuilder.core.analysis.folder_tree import sorted_folders, sorted_notes
from zettelbuilder.domain.note_models import NoteFolder

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_note_tree(
        folder: NoteFolder,
        lines: List[str],
        prefix: str = "",
        show_tags: bool = True,
) -> None:
    """
    Recursively transform a NoteFolder into a list of strings.

    Uses ASCII connectors (├──, └──) and indents nested folders.

    Args:
        folder: Current folder to process.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix for the current recursion level.
        show_tags: Append the note type tag after each note name.
    """
    entries = [(f"{segment}/", child) for segment, child in sorted_folders(folder)]
    entries += [
        (f"{note.name} [{note.tag}]" if show_tags else note.name, None)
        for note in sorted_notes(folder)
    ]
    total = len(entries)

    for i, (label, child) in enumerate(entries):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{label}")

        if child is not None:
            new_prefix = prefix + ("    " if is_last else "│   ")
            render_note_tree(child, lines, prefix=new_prefix, show_tags=show_tags)


def format_note_tree(folder: NoteFolder, root_label: str = ".", show_tags: bool = True) -> str:
    """Render the full tree as a single string headed by root_label."""
    lines: List[str] = [root_label]
    render_note_tree(folder, lines, show_tags=show_tags)
    return "\n".join(lines)
