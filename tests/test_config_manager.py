"""Tests for TOML project configuration."""

from pathlib import Path

import toml

from syl import config
from syl.config_manager import (
    DEFAULT_PROJECT_CONFIG,
    config_path,
    load_project_config,
    save_project_config,
)


def test_defaults_when_missing(temp_dir: Path):
    assert load_project_config(temp_dir / ".syl") == DEFAULT_PROJECT_CONFIG


def test_save_and_load(temp_dir: Path):
    syl_dir = temp_dir / ".syl"
    save_project_config(syl_dir, author="ana", root_dir="src")

    loaded = load_project_config(syl_dir)
    assert loaded["author"] == "ana"
    assert loaded["root_dir"] == "src"
    assert loaded["version"] == 1


def test_save_preserves_other_tables(temp_dir: Path):
    syl_dir = temp_dir / ".syl"
    syl_dir.mkdir()
    config_path(syl_dir).write_text('[ui]\ntheme = "dark"\n', encoding="utf-8")

    save_project_config(syl_dir, author="bo")

    data = toml.loads(config_path(syl_dir).read_text(encoding="utf-8"))
    assert data["ui"] == {"theme": "dark"}
    assert data["syl"]["author"] == "bo"


def test_unreadable_config_falls_back(temp_dir: Path):
    syl_dir = temp_dir / ".syl"
    syl_dir.mkdir()
    config_path(syl_dir).write_text("this is = = not toml", encoding="utf-8")

    assert load_project_config(syl_dir) == DEFAULT_PROJECT_CONFIG


def test_wrong_type_uses_default(temp_dir: Path):
    syl_dir = temp_dir / ".syl"
    syl_dir.mkdir()
    config_path(syl_dir).write_text('[syl]\nauthor = 42\nextra = "kept"\n', encoding="utf-8")

    loaded = load_project_config(syl_dir)
    assert loaded["author"] == DEFAULT_PROJECT_CONFIG["author"]
    assert loaded["extra"] == "kept"


def test_ensure_syl_dir(temp_dir: Path):
    path = config.ensure_syl_dir(temp_dir)
    assert path == temp_dir / config.SYL_DIR_NAME
    assert path.is_dir()
