from __future__ import annotations

"""
Note File Discovery Service.

Walks a source directory and yields the files that follow the note naming
convention `<identifier>.note.<extension>`.
"""

import logging
import os
import re
from typing import Iterator, List, Optional, Tuple

from zettelbuilder.domain.errors import PathNotFound

logger = logging.getLogger(__name__)

NOTE_FILE_RX = re.compile(r"^(?P<name>.+)\.note\.(?P<ext>\w+)$")

# ==============================================================================
# PUBLIC API (DISCOVERY SERVICES)
# ==============================================================================

def parse_note_file_name(file_name: str) -> Optional[Tuple[str, str]]:
    """
    Split a basename into (identifier, extension).

    Args:
        file_name: Basename such as `graphs.note.md`.

    Returns:
        Optional[Tuple[str, str]]: The identifier and extension, or None if
        the name does not follow the convention. Identifiers containing
        `.note` themselves are rejected.
    """
    match = NOTE_FILE_RX.match(file_name)
    if match is None or ".note" in match.group("name"):
        return None
    return match.group("name"), match.group("ext")


def is_note_file(file_name: str) -> bool:
    return parse_note_file_name(file_name) is not None


def yield_note_files(src_dir: str) -> Iterator[str]:
    """
    Traverse the source tree and yield the path of every note file.

    Directories and files are visited in sorted order so the sequence is
    deterministic. The generator is finite and each call starts a new walk.
    Paths are joined onto src_dir as given (not made absolute).

    Args:
        src_dir: Root directory containing notes.

    Returns:
        Iterator[str]: Lazy sequence of note file paths.

    Raises:
        PathNotFound: If src_dir is not an existing directory. Raised
                      eagerly, before iteration starts.
    """
    root = src_dir.rstrip("/\\") or src_dir
    if not os.path.isdir(root):
        raise PathNotFound(src_dir)
    return _walk(root)


def find_note_files(src_dir: str) -> List[str]:
    """Materialize yield_note_files() into a list."""
    files = list(yield_note_files(src_dir))
    logger.debug(f"Discovered {len(files)} note files under {src_dir}")
    return files


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _walk(root: str) -> Iterator[str]:
    for current, dirs, files in os.walk(root):
        dirs.sort()
        files.sort()
        for file_name in files:
            if is_note_file(file_name):
                yield os.path.join(current, file_name)
