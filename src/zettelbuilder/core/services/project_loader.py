from __future__ import annotations

"""
Project Construction Service.

Turns a validated configuration dictionary into the Project value consumed
by the analysis, build and serve stages.
"""

import logging
import os
from typing import Any, Dict

from zettelbuilder.core.services.themes import load_theme
from zettelbuilder.domain.project_models import Project
from zettelbuilder.infra.fs import normalize_path

logger = logging.getLogger(__name__)


def create_project(cfg: Dict[str, Any]) -> Project:
    """
    Build a Project from validated configuration.

    Directories are made absolute against the current working directory.
    Asset sources are normalized the same way; their destinations stay
    relative to the build directory.

    Raises:
        ThemeLoadError: If the configured theme cannot be resolved.
    """
    cwd = os.getcwd()
    theme = load_theme(cfg["theme"])

    project = Project(
        src_dir=normalize_path(cfg["src_dir"], cwd),
        build_dir=normalize_path(cfg["build_dir"], cwd),
        theme=theme,
        copy_paths={
            normalize_path(src, cwd): dest
            for src, dest in (cfg.get("copy_paths") or {}).items()
        },
        url_root=cfg.get("url_root") or "",
    )
    logger.debug(f"Project: src={project.src_dir} build={project.build_dir} theme={theme.name}")
    return project
