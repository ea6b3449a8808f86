from __future__ import annotations

"""
Unit tests for the project file (zettelbuilder.json) loader.
"""

import json
import os
from pathlib import Path

import pytest

from zettelbuilder.domain.config import CONFIG_FILE, get_default_config, load_project_file


def test_default_config_values() -> None:
    cfg = get_default_config()

    assert cfg["src_dir"] == "notes"
    assert cfg["build_dir"] == "site"
    assert cfg["theme"] == "minimal"
    assert cfg["port"] is None
    assert cfg["warmup_ms"] == 100
    assert cfg["cooldown_ms"] == 500


def test_default_config_is_fresh_each_call() -> None:
    first = get_default_config()
    first["copy_paths"]["x"] = "y"
    assert get_default_config()["copy_paths"] == {}


def test_missing_file_returns_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_project_file() == get_default_config()


def test_relative_paths_resolve_against_file(tmp_path: Path) -> None:
    project_dir = tmp_path / "proj"
    project_dir.mkdir()
    config_path = project_dir / CONFIG_FILE
    config_path.write_text(json.dumps({
        "src_dir": "content",
        "build_dir": "/abs/out",
        "copy_paths": {"static": "static"},
        "port": 8080,
    }), encoding="utf-8")

    cfg = load_project_file(str(config_path))

    assert cfg["src_dir"] == os.path.join(str(project_dir), "content")
    assert cfg["build_dir"] == "/abs/out"
    assert cfg["copy_paths"] == {os.path.join(str(project_dir), "static"): "static"}
    assert cfg["port"] == 8080
    assert cfg["theme"] == "minimal"


def test_invalid_json_raises(tmp_path: Path) -> None:
    config_path = tmp_path / CONFIG_FILE
    config_path.write_text("{ not json", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid JSON"):
        load_project_file(str(config_path))


def test_non_object_raises(tmp_path: Path) -> None:
    config_path = tmp_path / CONFIG_FILE
    config_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="JSON object"):
        load_project_file(str(config_path))
