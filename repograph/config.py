"""Configuration paths and scan defaults for repograph."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("REPOGRAPH_HOME", str(Path.home() / ".repograph"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

SUPPORTED_EXTENSIONS = {".py"}
DEFAULT_SNIPPET_LINES = 10
DEFAULT_TAB_WIDTH = 4
DEFAULT_ENCODING = "utf-8"

# Matched against entry base names. Dot-prefixed names are always excluded.
DEFAULT_EXCLUDES = (
    "__pycache__",
    "node_modules",
    "site-packages",
    "venv",
    "env",
    ".venv",
    ".git",
    ".hg",
    ".svn",
    "__init__.py",
)

