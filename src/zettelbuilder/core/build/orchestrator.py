from __future__ import annotations

"""
Build Orchestrator.

Coordinates one build of the site:
1. Analyses the project (before the output directory is touched).
2. Recreates the output directory (or a staging area).
3. Copies configured assets.
4. Renders the index and every note page.
5. Publishes the staging area and the new analysis snapshot.
"""

import inspect
import logging
import os
import re
import shutil
import tempfile
import time
from typing import Any, List, Optional

from zettelbuilder.core.analysis.analyser import analyse_project
from zettelbuilder.domain.errors import AssetCopyFailure, RenderFailure
from zettelbuilder.domain.note_models import Markup, ProjectAnalysis
from zettelbuilder.domain.project_models import BuildResult, Project, RenderContext
from zettelbuilder.infra.fs import copy_path, recreate_dir, replace_dir, write_text

logger = logging.getLogger(__name__)

DOCTYPE = "<!DOCTYPE html>"
INDEX_PAGE = "index.html"
STAGING_PREFIX = ".zettelbuilder-"

_DOCTYPE_RX = re.compile(r"^\s*<!doctype", re.IGNORECASE)


class BuildOrchestrator:
    """
    Builds a project's site into its build directory.

    In direct mode (the default) the build directory is cleared and written
    in place; a failing render leaves it partially written. In staged mode
    pages go to a temporary sibling directory that replaces the build
    directory only once every page is written, so a failed build keeps the
    previous output.

    Attributes:
        project: The project to build.
        staged: Whether to build through a staging directory.
        analysis: Snapshot of the last successful build, or None.
    """

    def __init__(self, project: Project, *, staged: bool = False) -> None:
        self.project = project
        self.staged = staged
        self.analysis: Optional[ProjectAnalysis] = None

    async def build(self) -> BuildResult:
        """
        Run a full build.

        Returns:
            BuildResult: Pages written and timing.

        Raises:
            PathNotFound: The source directory is missing.
            UndefinedCrossReference: A note references an unknown name.
            AssetCopyFailure: An asset path is missing or cannot be copied.
            RenderFailure: A renderer raised or returned a non-string.
        """
        started = time.perf_counter()
        build_dir = self.project.build_dir
        logger.info(f"Building {self.project.src_dir} -> {build_dir}")

        # 1. Analysis; nothing is written if it fails
        analysis = analyse_project(self.project)

        # 2. Output directory
        if self.staged:
            parent = os.path.dirname(os.path.abspath(build_dir))
            os.makedirs(parent, exist_ok=True)
            out_dir = tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=parent)
            logger.debug(f"Using staging directory: {out_dir}")
        else:
            recreate_dir(build_dir)
            out_dir = build_dir

        try:
            pages = await self._write_site(analysis, out_dir)
            if self.staged:
                replace_dir(out_dir, build_dir)
        except BaseException:
            if self.staged:
                shutil.rmtree(out_dir, ignore_errors=True)
            raise

        # 3. Publish snapshot
        self.analysis = analysis

        elapsed = time.perf_counter() - started
        logger.info(f"Built site in {elapsed * 1000:.0f}ms ({len(pages)} pages)")
        return BuildResult(
            build_dir=build_dir,
            pages=tuple(pages),
            elapsed=elapsed,
            analysis=analysis,
        )

    # -------------------------------------------------------------------------
    # Internal steps
    # -------------------------------------------------------------------------

    async def _write_site(self, analysis: ProjectAnalysis, out_dir: str) -> List[str]:
        self._copy_assets(out_dir)

        context = RenderContext(project=self.project, analysis=analysis, out_dir=out_dir)
        pages: List[str] = []

        logger.debug("Writing index")
        try:
            markup = self.project.theme.render_index(context)
        except Exception as e:
            raise RenderFailure(INDEX_PAGE, e) from e
        text = await _resolve_markup(INDEX_PAGE, markup)
        write_text(os.path.join(out_dir, INDEX_PAGE), with_doctype(text))
        pages.append(INDEX_PAGE)

        for name in sorted(analysis.notes):
            page = f"{name}.html"
            logger.debug(f"Writing {page}")
            try:
                markup = analysis.notes[name].render(context)
            except Exception as e:
                raise RenderFailure(page, e) from e
            text = await _resolve_markup(page, markup)
            write_text(os.path.join(out_dir, page), with_doctype(text))
            pages.append(page)

        return pages

    def _copy_assets(self, out_dir: str) -> None:
        for src, dest in self.project.copy_paths.items():
            target = os.path.join(out_dir, dest)
            logger.debug(f"Copying {src} -> {target}")
            try:
                copy_path(src, target)
            except OSError as e:
                raise AssetCopyFailure(src, target, str(e)) from e


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def with_doctype(markup: str) -> str:
    """Prefix the HTML5 doctype unless the markup already declares one."""
    if _DOCTYPE_RX.match(markup):
        return markup
    return f"{DOCTYPE}\n{markup}"


async def _resolve_markup(page: str, markup: Markup) -> str:
    result: Any = markup
    try:
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        raise RenderFailure(page, e) from e

    if not isinstance(result, str):
        raise RenderFailure(page, TypeError(f"renderer returned {type(result).__name__}, expected str"))
    return result
