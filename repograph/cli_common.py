"""Helpers shared by the CLI command modules."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from .config_manager import ScanSettings
from .errors import ConfigError


def load_settings(
    config_path: Optional[Path] = None,
    exclude: Optional[List[str]] = None,
    snippet_lines: Optional[int] = None,
    tab_width: Optional[int] = None,
) -> ScanSettings:
    """Build scan settings, reporting a bad config file as a usage error."""
    try:
        return ScanSettings.from_config(
            path=config_path,
            extra_exclude=exclude or (),
            snippet_lines=snippet_lines,
            tab_width=tab_width,
        )
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))
