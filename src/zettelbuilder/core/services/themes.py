from __future__ import annotations

"""
Theme Resolution Service.

Turns the `theme` configuration value into a Theme. Accepts the name of a
bundled theme or an import spec `package.module[:attribute]`; the attribute
defaults to `THEME` and may be a Theme or a callable returning one.
"""

import importlib
import logging
from typing import Dict

from zettelbuilder.domain.errors import ThemeLoadError
from zettelbuilder.domain.project_models import Theme

logger = logging.getLogger(__name__)

BUNDLED_THEMES: Dict[str, str] = {
    "minimal": "zettelbuilder.themes.minimal:THEME",
}

DEFAULT_ATTRIBUTE = "THEME"


def load_theme(spec: str) -> Theme:
    """
    Resolve a theme name or import spec.

    Args:
        spec: Bundled theme name or `package.module[:attribute]`.

    Returns:
        Theme: The resolved theme.

    Raises:
        ThemeLoadError: If the module cannot be imported, the attribute is
                        missing, or it does not yield a Theme.
    """
    name = (spec or "").strip()
    if not name:
        raise ThemeLoadError("Empty theme specification")

    target = BUNDLED_THEMES.get(name, name)
    module_name, _, attribute = target.partition(":")
    attribute = attribute or DEFAULT_ATTRIBUTE

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ThemeLoadError(f"Cannot import theme module '{module_name}': {e}") from e

    try:
        value = getattr(module, attribute)
    except AttributeError as e:
        raise ThemeLoadError(f"Theme module '{module_name}' has no attribute '{attribute}'") from e

    if not isinstance(value, Theme) and callable(value):
        value = value()

    if not isinstance(value, Theme):
        raise ThemeLoadError(f"'{target}' is a {type(value).__name__}, not a Theme")

    logger.debug(f"Loaded theme '{value.name}' from {target}")
    return value
