"""Configuration defaults for local syl annotation storage."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Set

PROJECT_ROOT = Path(os.environ.get("SYL_PROJECT_ROOT", str(Path.cwd()))).expanduser()
SYL_DIR_NAME = os.environ.get("SYL_DIR_NAME", ".syl")
DEFAULT_AUTHOR = os.environ.get("SYL_AUTHOR", "anonymous")
CONFIG_FILE_NAME = "config.toml"

SKIP_DIRS: Set[str] = {
    ".venv", "venv", "__pycache__", "node_modules", ".git",
    "site-packages", ".tox", ".pytest_cache", "build", "dist",
    ".mypy_cache", ".ruff_cache", "htmlcov", ".eggs", ".next",
    SYL_DIR_NAME,
}


def syl_dir_for(project_root: Path) -> Path:
    return project_root / SYL_DIR_NAME


def ensure_syl_dir(project_root: Path) -> Path:
    """Create the annotation directory for *project_root* if needed."""
    path = syl_dir_for(project_root)
    path.mkdir(parents=True, exist_ok=True)
    return path
