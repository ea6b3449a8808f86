from __future__ import annotations

"""
Pretty-URL File Resolution.

Maps request paths to files in the build directory: the path itself, a
directory's index.html, or the path with `.html` appended.
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional

from zettelbuilder.infra.fs import is_within


@dataclass(frozen=True)
class FileLookup:
    """
    Outcome of resolving one request path.

    Attributes:
        url: The request path as received.
        file_path: Last candidate tried; the served file when found.
        found: Whether file_path exists and may be served.
    """
    url: str
    file_path: Optional[str]
    found: bool

    def debug_info(self) -> Dict[str, Optional[str]]:
        return {"url": self.url, "file_path": self.file_path, "cwd": os.getcwd()}


def resolve_request_path(build_dir: str, url_root: str, request_path: str) -> FileLookup:
    """
    Resolve a request path to a file below build_dir.

    Args:
        build_dir: Directory being served.
        url_root: Prefix all pages live under, e.g. "/" or "/docs/".
        request_path: Path component of the request URL.

    Returns:
        FileLookup: found is False for paths outside url_root, paths that
        escape build_dir and paths with no matching file.
    """
    root = "/" + url_root.strip("/")
    path = "/" + request_path.lstrip("/")

    if root != "/":
        if path != root and not path.startswith(root + "/"):
            return FileLookup(url=request_path, file_path=None, found=False)
        path = path[len(root):]

    relative = path.strip("/")
    candidate = os.path.normpath(os.path.join(build_dir, relative)) if relative else build_dir

    if not is_within(build_dir, candidate):
        return FileLookup(url=request_path, file_path=candidate, found=False)

    if os.path.isdir(candidate):
        candidate = os.path.join(candidate, "index.html")
    elif not os.path.isfile(candidate):
        candidate += ".html"

    return FileLookup(url=request_path, file_path=candidate, found=os.path.isfile(candidate))
