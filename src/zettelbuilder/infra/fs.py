from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, output directory recreation, asset copying and
page writing. Acts as the single place where the build touches the disk.
"""

import logging
import os
import shutil
from typing import Optional

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def is_within(root: str, path: str) -> bool:
    """Whether path resolves to root or somewhere below it."""
    root_abs = os.path.realpath(root)
    path_abs = os.path.realpath(path)
    return path_abs == root_abs or path_abs.startswith(root_abs + os.sep)

# -----------------------------------------------------------------------------
# DIRECTORY AND FILE OPERATIONS
# -----------------------------------------------------------------------------

def recreate_dir(path: str) -> None:
    """
    Remove a directory tree if present and create it again, empty.

    Args:
        path: Directory to reset.
    """
    if os.path.isdir(path):
        shutil.rmtree(path)
    elif os.path.exists(path):
        os.remove(path)
    os.makedirs(path)


def copy_path(src: str, dest: str) -> None:
    """
    Copy a file or a directory tree, creating parent directories as needed.

    Args:
        src: Existing file or directory.
        dest: Target path; directories are merged into existing ones.

    Raises:
        FileNotFoundError: If src does not exist.
        OSError: If the copy fails.
    """
    if not os.path.exists(src):
        raise FileNotFoundError(f"No such file or directory: '{src}'")

    parent = os.path.dirname(os.path.abspath(dest))
    os.makedirs(parent, exist_ok=True)

    if os.path.isdir(src):
        shutil.copytree(src, dest, dirs_exist_ok=True)
    else:
        shutil.copy2(src, dest)


def write_text(path: str, text: str) -> None:
    """Write UTF-8 text, creating the parent directory when missing."""
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def replace_dir(staging: str, target: str) -> None:
    """
    Move a fully written staging directory into place.

    The previous target (if any) is renamed aside first and removed only
    after the staging directory took its place.

    Args:
        staging: Completed directory to publish.
        target: Destination path.
    """
    backup = f"{target}.old"
    if os.path.exists(backup):
        shutil.rmtree(backup, ignore_errors=True)

    had_target = os.path.exists(target)
    if had_target:
        os.rename(target, backup)
    try:
        os.rename(staging, target)
    except OSError:
        if had_target:
            os.rename(backup, target)
        raise

    if had_target:
        shutil.rmtree(backup, ignore_errors=True)
