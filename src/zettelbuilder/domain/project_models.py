from __future__ import annotations

"""
Project Domain Data Models.

Defines the explicit configuration values handed to the analysis and build
stages (theme, project) and the objects exchanged with renderers and
callers (render context, build result).
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Tuple

from zettelbuilder.domain.note_models import Markup, NoteType, ProjectAnalysis

# -----------------------------------------------------------------------------
# CONFIGURATION VALUES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Theme:
    """
    Bundle of note types and the index renderer.

    Attributes:
        name: Theme identifier used in logs.
        url_root: Root URL prefix pages are served under.
        note_types: Descriptors tried in order during classification.
        render_index: Renders the index page from a RenderContext.
    """
    name: str
    url_root: str
    note_types: Tuple[NoteType, ...]
    render_index: Callable[["RenderContext"], Markup]


@dataclass(frozen=True)
class Project:
    """
    A single project to analyse, build and serve.

    Attributes:
        src_dir: Directory containing note files.
        build_dir: Output directory for generated pages.
        theme: Note types and renderers.
        copy_paths: Asset paths to copy; values are relative to build_dir.
        url_root: URL prefix; defaults to the theme's root when empty.
    """
    src_dir: str
    build_dir: str
    theme: Theme
    copy_paths: Dict[str, str] = field(default_factory=dict)
    url_root: str = ""

    @property
    def root_url(self) -> str:
        root = self.url_root or self.theme.url_root or "/"
        return "/" + root.strip("/") + ("/" if root.strip("/") else "")

    @property
    def note_types(self) -> Tuple[NoteType, ...]:
        return self.theme.note_types

    @property
    def watch_paths(self) -> Tuple[str, ...]:
        return (self.src_dir, *self.copy_paths.keys())

# -----------------------------------------------------------------------------
# RENDERING AND RESULTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class RenderContext:
    """
    What renderers receive.

    Attributes:
        project: The project being built.
        analysis: The analysis snapshot being rendered.
        out_dir: Directory pages are currently written to. Equals the build
                 directory, except during staged builds.
    """
    project: Project
    analysis: ProjectAnalysis
    out_dir: str = ""

    @property
    def output_dir(self) -> str:
        return self.out_dir or self.project.build_dir


@dataclass(frozen=True)
class BuildResult:
    """
    Summary of a completed build.

    Attributes:
        build_dir: Directory the pages were published to.
        pages: Page paths written, relative to build_dir.
        elapsed: Wall time of the build in seconds.
        analysis: The analysis snapshot the pages were rendered from.
    """
    build_dir: str
    pages: Tuple[str, ...]
    elapsed: float
    analysis: ProjectAnalysis
