"""Project configuration stored as TOML in ``<syl_dir>/config.toml``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import toml

from .config import CONFIG_FILE_NAME, DEFAULT_AUTHOR

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_CONFIG: Dict[str, Any] = {
    "version": 1,
    "root_dir": ".",
    "author": DEFAULT_AUTHOR,
}


def config_path(syl_dir: Path) -> Path:
    return syl_dir / CONFIG_FILE_NAME


def load_full_config(syl_dir: Path) -> Dict[str, Any]:
    """Load the entire TOML file (all tables), or ``{}`` when unreadable."""
    path = config_path(syl_dir)
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}


def load_project_config(syl_dir: Path) -> Dict[str, Any]:
    """Return defaults merged with the ``[syl]`` table.

    Unknown keys in the table are kept; values of the wrong type for a
    known key fall back to the default.
    """
    merged = DEFAULT_PROJECT_CONFIG.copy()
    section = load_full_config(syl_dir).get("syl", {})
    if not isinstance(section, dict):
        return merged
    for key, value in section.items():
        default = DEFAULT_PROJECT_CONFIG.get(key)
        if default is not None and not isinstance(value, type(default)):
            logger.warning("Config key '%s' has wrong type, using default", key)
            continue
        merged[key] = value
    return merged


def save_project_config(syl_dir: Path, **values: Any) -> Dict[str, Any]:
    """Update the ``[syl]`` table, preserving other tables. Returns the table."""
    full = load_full_config(syl_dir)
    section = full.get("syl")
    if not isinstance(section, dict):
        section = {}
    section.update({k: v for k, v in values.items() if v is not None})
    full["syl"] = section
    syl_dir.mkdir(parents=True, exist_ok=True)
    with open(config_path(syl_dir), "w", encoding="utf-8") as f:
        toml.dump(full, f)
    return section
