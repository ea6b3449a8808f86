from __future__ import annotations

"""
Error Taxonomy and Analysis Diagnostics.

Defines the fatal exceptions that abort an analysis or build pass, and the
non-fatal diagnostic records that are logged and collected while the pass
continues.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

# -----------------------------------------------------------------------------
# FATAL ERRORS
# -----------------------------------------------------------------------------

class ZettelbuilderError(Exception):
    """Base class for every error raised by the build and serve pipeline."""


class PathNotFound(ZettelbuilderError):
    """The source root handed to discovery does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Source directory not found: {path}")


class NoteReadError(ZettelbuilderError):
    """A note file could not be read as UTF-8 text."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read note file '{path}': {reason}")


class UndefinedCrossReference(ZettelbuilderError):
    """
    A note references names that are not part of the project.

    Attributes:
        note_name: Name of the note holding the dangling references.
        description: Human description of the note's classification.
        unknown: Sorted tuple of the unknown names.
    """

    def __init__(self, note_name: str, description: str, unknown: Iterable[str]) -> None:
        self.note_name = note_name
        self.description = description
        self.unknown: Tuple[str, ...] = tuple(sorted(unknown))
        refs = ", ".join(repr(u) for u in self.unknown)
        super().__init__(
            f"Found unknown crossrefs in {description} note \"{note_name}\": {refs}"
        )


class AssetCopyFailure(ZettelbuilderError):
    """A configured asset path is missing or could not be copied."""

    def __init__(self, src: str, dest: str, reason: str) -> None:
        self.src = src
        self.dest = dest
        super().__init__(f"Failed to copy asset '{src}' to '{dest}': {reason}")


class RenderFailure(ZettelbuilderError):
    """The renderer collaborator failed for a page."""

    def __init__(self, page: str, cause: BaseException) -> None:
        self.page = page
        self.cause = cause
        super().__init__(f"Failed to render '{page}': {cause}")


class PortExhausted(ZettelbuilderError):
    """No free port was found in the probing range."""

    def __init__(self, start: int, stop: int) -> None:
        self.start = start
        self.stop = stop
        super().__init__(f"Couldn't find a free port in range {start}-{stop - 1}")


class ThemeLoadError(ZettelbuilderError):
    """A theme specification could not be resolved to a Theme value."""

# -----------------------------------------------------------------------------
# NON-FATAL DIAGNOSTICS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class RepeatedNameConflict:
    """
    The same note identifier was found in more than one directory.

    Attributes:
        name: The repeated note identifier.
        kept_dir: Directory segments of the first occurrence (authoritative).
        paths: Every file path involved, the offending one first.
    """
    name: str
    kept_dir: Tuple[str, ...]
    paths: Tuple[str, ...]

    @property
    def message(self) -> str:
        return f"\"{self.name}\" occurs in different directories: {', '.join(self.paths)}"


@dataclass(frozen=True)
class UnclassifiedNote:
    """
    No note type matched the extension set of a note.

    Attributes:
        name: The note identifier.
        extensions: Sorted extensions present on the note.
    """
    name: str
    extensions: Tuple[str, ...]

    @property
    def message(self) -> str:
        return f"of note \"{self.name}\" with extensions: {', '.join(self.extensions)}"
