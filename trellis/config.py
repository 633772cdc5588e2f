"""
Trellis configuration: environment-driven settings and fixed file names in one place.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Tuple

# --- Environments ---
DEFAULT_NAMESPACE = "default"

# --- Declaration files ---
MODULE_CONFIG_FILENAME = "trellis.yml"
PROJECT_CONFIG_FILENAME = MODULE_CONFIG_FILENAME
STATE_DIR_NAME = ".trellis"

# --- Tree scanning ---
IGNORE_FILENAMES: Tuple[str, ...] = (".gitignore", ".trellisignore")
DEFAULT_IGNORES: Tuple[str, ...] = (".git", "node_modules", STATE_DIR_NAME)

# --- Identifiers ---
IDENTIFIER_PATTERN = r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$"
IDENTIFIER_MAX_LENGTH = 63


def get_project_root() -> Path:
    raw = os.environ.get("TRELLIS_PROJECT_ROOT", "").strip()
    return Path(raw) if raw else Path.cwd()


def get_log_level() -> str:
    return os.environ.get("TRELLIS_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
