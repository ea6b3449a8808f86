from __future__ import annotations

"""
Configuration Domain Management.

Handles the project file (JSON) that describes where notes live, where the
site is built, which assets are copied and which theme renders the pages.
Missing keys fall back to defaults.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = "zettelbuilder.json"
DEFAULT_THEME = "minimal"
DEFAULT_WARMUP_MS = 100
DEFAULT_COOLDOWN_MS = 500


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default project configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "src_dir": "notes",
        "build_dir": "site",
        "copy_paths": {},

        # Rendering
        "theme": DEFAULT_THEME,
        "url_root": None,

        # Dev server
        "port": None,
        "warmup_ms": DEFAULT_WARMUP_MS,
        "cooldown_ms": DEFAULT_COOLDOWN_MS,

        # Diagnostics
        "log_level": "INFO",
        "log_file": None,
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_project_file(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the project file and merge it over the defaults.

    A missing file is not an error: the defaults are returned. Relative
    paths inside the file are resolved against the file's directory.

    Args:
        path: Path to the project file. Defaults to CONFIG_FILE in the cwd.

    Returns:
        Dict[str, Any]: Raw (unvalidated) configuration.

    Raises:
        ValueError: If the file exists but is not a JSON object.
    """
    config = get_default_config()
    config_path = os.path.abspath(path or CONFIG_FILE)

    if not os.path.exists(config_path):
        logger.debug(f"Project file not found at {config_path}. Using defaults.")
        return config

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in project file '{config_path}': {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Project file '{config_path}' must contain a JSON object.")

    base_dir = os.path.dirname(config_path)
    for key in ("src_dir", "build_dir", "log_file"):
        value = data.get(key)
        if isinstance(value, str) and value and not os.path.isabs(value):
            data[key] = os.path.join(base_dir, value)

    copy_paths = data.get("copy_paths")
    if isinstance(copy_paths, dict):
        data["copy_paths"] = {
            (os.path.join(base_dir, src) if isinstance(src, str) and not os.path.isabs(src) else src): dest
            for src, dest in copy_paths.items()
        }

    config.update(data)
    logger.debug(f"Loaded project file {config_path}")
    return config
