from __future__ import annotations

"""
Note Assembly and Classification.

Groups discovered note files into named notes, attaches each file under its
extension and selects the note type whose extension combination exactly
matches the files present.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from zettelbuilder.core.analysis.discovery import parse_note_file_name
from zettelbuilder.domain.errors import RepeatedNameConflict, UnclassifiedNote
from zettelbuilder.domain.note_models import (
    UNCLASSIFIED,
    Diagnostic,
    LazyFile,
    Note,
    NoteType,
)

logger = logging.getLogger(__name__)


@dataclass
class _NoteShell:
    """Mutable grouping state for one note while paths are consumed."""
    name: str
    dir: Tuple[str, ...]
    files: Dict[str, LazyFile] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def split_note_path(path: str, src_dir: str) -> Tuple[str, str, Tuple[str, ...]]:
    """
    Split a note file path into (identifier, extension, directory segments).

    Args:
        path: Path of a note file.
        src_dir: Source root the directory segments are relative to.

    Returns:
        Tuple[str, str, Tuple[str, ...]]: Note name, extension and the
        directory of the file as segments relative to src_dir.

    Raises:
        ValueError: If the basename does not follow the note convention.
    """
    parent, file_name = os.path.split(path)
    parsed = parse_note_file_name(file_name)
    if parsed is None:
        raise ValueError(f"Not a note file: {path}")
    name, ext = parsed

    rel = os.path.relpath(parent or ".", src_dir or ".")
    segments = () if rel in (".", "") else tuple(rel.split(os.sep))
    return name, ext, segments


def detect_note_type(note_types: Sequence[NoteType], extensions: Set[str]) -> Optional[NoteType]:
    """
    Find the first note type whose extension set equals the given one.

    Args:
        note_types: Candidate descriptors, in priority order.
        extensions: Extensions present on a note.

    Returns:
        Optional[NoteType]: The matching descriptor, or None.
    """
    for note_type in note_types:
        if note_type.matches(extensions):
            return note_type
    return None


def assemble_notes(
        paths: Iterable[str],
        src_dir: str,
        note_types: Sequence[NoteType],
        diagnostics: Optional[List[Diagnostic]] = None,
) -> Dict[str, Note]:
    """
    Group note files into classified notes.

    The first directory seen for a name is kept. Files of the same name
    found in another directory are still attached to that note, and a
    RepeatedNameConflict is logged. Two files with the same extension
    overwrite each other (last one wins). Notes whose extension set matches
    no descriptor are unclassified and logged.

    Args:
        paths: Discovered note file paths.
        src_dir: Source root used for directory segments.
        note_types: Descriptors tried in order.
        diagnostics: Optional list collecting non-fatal diagnostics.

    Returns:
        Dict[str, Note]: Notes by name, in discovery order.
    """
    found: List[Diagnostic] = diagnostics if diagnostics is not None else []
    shells: Dict[str, _NoteShell] = {}

    # 1. Group files by note name
    for path in paths:
        name, ext, segments = split_note_path(path, src_dir)

        shell = shells.get(name)
        if shell is None:
            shell = shells[name] = _NoteShell(name=name, dir=segments)
        elif shell.dir != segments:
            conflict = RepeatedNameConflict(
                name=name,
                kept_dir=shell.dir,
                paths=(path, *(f.path for f in shell.files.values())),
            )
            found.append(conflict)
            _log_repeated_name(conflict)

        shell.files[ext] = LazyFile(path)

    # 2. Classify and build note values
    notes: Dict[str, Note] = {}
    for name, shell in shells.items():
        extensions = set(shell.files)
        note_type = detect_note_type(note_types, extensions)
        if note_type is None:
            unclassified = UnclassifiedNote(name=name, extensions=tuple(sorted(extensions)))
            found.append(unclassified)
            logger.warning(f"Unknown type {unclassified.message}")
            note_type = UNCLASSIFIED

        notes[name] = Note(name=name, dir=shell.dir, files=shell.files, note_type=note_type)

    logger.debug(f"Assembled {len(notes)} notes from {sum(len(s.files) for s in shells.values())} files")
    return notes


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _log_repeated_name(conflict: RepeatedNameConflict) -> None:
    lines = [f"┌ Repeated name \"{conflict.name}\" occurs in different directories:"]
    lines.extend(f"├╴ {p}" for p in conflict.paths)
    lines.append("└ Multi-file notes are expected to be in the same directory.")
    logger.warning("\n".join(lines))
