"""Configuration manager for repograph scan settings using TOML files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import toml

from . import config
from .errors import ConfigError


SCAN_SECTION = "scan"


def _config_path(path: Optional[Path]) -> Path:
    return Path(path) if path is not None else config.CONFIG_FILE


def load_full_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the entire TOML config (all sections).

    Returns an empty dict when the file does not exist.

    Raises:
        ConfigError: if the file exists but is not valid TOML.
    """
    cfg_path = _config_path(path)
    if not cfg_path.exists():
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {cfg_path}: {exc}") from exc


def load_scan_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Return the ``[scan]`` table, or an empty dict."""
    section = load_full_config(path).get(SCAN_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{SCAN_SECTION}] must be a table")
    return section


def save_scan_config(values: Dict[str, Any], path: Optional[Path] = None) -> Path:
    """Merge *values* into the ``[scan]`` table, preserving other sections.

    Returns:
        The path that was written.
    """
    cfg_path = _config_path(path)
    full = load_full_config(cfg_path)
    section = dict(full.get(SCAN_SECTION, {}))
    section.update(values)
    full[SCAN_SECTION] = section

    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    with open(cfg_path, "w", encoding="utf-8") as f:
        toml.dump(full, f)
    return cfg_path


def _normalize_extensions(values: Iterable[str]) -> Tuple[str, ...]:
    out = []
    for ext in values:
        ext = ext.strip().lower()
        if not ext:
            continue
        out.append(ext if ext.startswith(".") else f".{ext}")
    return tuple(sorted(set(out)))


@dataclass(frozen=True)
class ScanSettings:
    """Options controlling one repository scan."""

    exclude: Tuple[str, ...] = config.DEFAULT_EXCLUDES
    extensions: Tuple[str, ...] = tuple(sorted(config.SUPPORTED_EXTENSIONS))
    snippet_lines: int = config.DEFAULT_SNIPPET_LINES
    tab_width: int = config.DEFAULT_TAB_WIDTH
    encoding: str = config.DEFAULT_ENCODING
    follow_symlinks: bool = True
    _exclude_set: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.snippet_lines < 0:
            raise ValueError("snippet_lines must be >= 0")
        if self.tab_width < 1:
            raise ValueError("tab_width must be >= 1")
        object.__setattr__(self, "_exclude_set", frozenset(self.exclude))

    def is_excluded(self, name: str) -> bool:
        """Return True if a directory entry with base name *name* is skipped."""
        return name.startswith(".") or name in self._exclude_set

    def is_supported(self, name: str) -> bool:
        return Path(name).suffix.lower() in self.extensions

    @classmethod
    def from_config(
        cls,
        path: Optional[Path] = None,
        extra_exclude: Iterable[str] = (),
        **overrides: Any,
    ) -> "ScanSettings":
        """Build settings from defaults, the ``[scan]`` table and overrides.

        ``exclude`` entries from the file and *extra_exclude* extend the
        default list rather than replacing it. Keyword *overrides* set to
        ``None`` are ignored.
        """
        section = load_scan_config(path)

        exclude = list(config.DEFAULT_EXCLUDES)
        for name in list(section.get("exclude", [])) + list(extra_exclude):
            if name not in exclude:
                exclude.append(name)

        kwargs: Dict[str, Any] = {"exclude": tuple(exclude)}
        if "extensions" in section:
            kwargs["extensions"] = _normalize_extensions(section["extensions"])
        for key in ("snippet_lines", "tab_width", "encoding", "follow_symlinks"):
            if key in section:
                kwargs[key] = section[key]
        for key, value in overrides.items():
            if value is None:
                continue
            kwargs[key] = _normalize_extensions(value) if key == "extensions" else value

        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid scan settings: {exc}") from exc
