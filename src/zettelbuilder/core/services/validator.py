from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper between raw configuration (project file, CLI
overrides) and the build pipeline. Handles type coercion, default value
injection and range checks, reporting every correction as a warning.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from zettelbuilder.domain.config import get_default_config

logger = logging.getLogger(__name__)

_MAX_PORT = 65535
_INT_RX = re.compile(r"^-?\d+$")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    unknown = sorted(set(config) - set(defaults))
    for key in unknown:
        warnings.append(f"Unknown field '{key}' ignored.")
        merged.pop(key)

    # 2. Schema Definition (Declarative mapping)
    string_fields = ["src_dir", "build_dir", "theme", "log_level"]
    optional_string_fields = ["url_root", "log_file"]
    non_negative_int_fields = ["warmup_ms", "cooldown_ms"]

    # 3. Field Processing & Normalization
    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in optional_string_fields:
        merged[field] = _as_optional_str(merged.get(field), field, warnings, strict)

    for field in non_negative_int_fields:
        merged[field] = _as_non_negative_int(
            merged.get(field), defaults[field], field, warnings, strict
        )

    merged["port"] = _as_port(merged.get("port"), warnings, strict)
    merged["copy_paths"] = _as_str_mapping(merged.get("copy_paths"), "copy_paths", warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_optional_str(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[str]:
    """Strings that may legitimately be absent; blanks become None."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None

    msg = f"Invalid field '{field}': expected str or null, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using null.")
    return None


def _as_int(value: Any) -> Optional[int]:
    """Coerce ints and numeric strings; bools are rejected."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RX.match(value.strip()):
        return int(value.strip())
    return None


def _as_non_negative_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Durations in milliseconds."""
    if value is None:
        return fallback
    number = _as_int(value)
    if number is not None and not isinstance(value, int):
        if strict:
            raise TypeError(f"Invalid field '{field}': expected int, received {type(value).__name__}.")
        warnings.append(f"Field '{field}' converted from '{value}' to {number}.")

    if number is None:
        msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if number < 0:
        msg = f"Invalid field '{field}': must be >= 0, received {number}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    return number


def _as_port(value: Any, warnings: List[str], strict: bool) -> Optional[int]:
    """An explicit TCP port, or None to probe for a free one."""
    if value is None:
        return None
    number = _as_int(value)
    if number is None:
        msg = f"Invalid field 'port': expected int or null, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Port will be probed.")
        return None

    if not 0 < number <= _MAX_PORT:
        msg = f"Invalid field 'port': {number} is out of range."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Port will be probed.")
        return None

    if not isinstance(value, int):
        warnings.append(f"Field 'port' converted from '{value}' to {number}.")
    return number


def _as_str_mapping(value: Any, field: str, warnings: List[str], strict: bool) -> Dict[str, str]:
    """Ensure input is a mapping of non-empty strings to strings."""
    if value is None:
        return {}

    if not isinstance(value, dict):
        msg = f"Invalid field '{field}': expected object, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using empty mapping.")
        return {}

    out: Dict[str, str] = {}
    for key, item in value.items():
        if isinstance(key, str) and key.strip() and isinstance(item, str):
            out[key.strip()] = item.strip()
            continue
        msg = f"Invalid item in '{field}': {key!r} -> {item!r}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Item discarded.")
    return out
