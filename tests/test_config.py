"""Tests for TOML-backed scan configuration."""

from pathlib import Path

import pytest

from repograph import config
from repograph.config_manager import (
    ScanSettings,
    load_full_config,
    load_scan_config,
    save_scan_config,
)
from repograph.errors import ConfigError


def test_defaults_without_config_file():
    settings = ScanSettings.from_config()
    assert settings.exclude == config.DEFAULT_EXCLUDES
    assert settings.extensions == (".py",)
    assert settings.snippet_lines == 10
    assert settings.tab_width == 4


def test_exclusion_policy():
    settings = ScanSettings()
    assert settings.is_excluded(".git")
    assert settings.is_excluded(".anything")
    assert settings.is_excluded("__pycache__")
    assert settings.is_excluded("__init__.py")
    assert settings.is_excluded("node_modules")
    assert not settings.is_excluded("src")
    assert not settings.is_excluded("main.py")


def test_supported_extension_is_case_insensitive():
    settings = ScanSettings()
    assert settings.is_supported("a.py")
    assert settings.is_supported("A.PY")
    assert not settings.is_supported("a.pyc")
    assert not settings.is_supported("Makefile")


def test_scan_section_extends_defaults(temp_dir: Path):
    cfg = temp_dir / "config.toml"
    cfg.write_text(
        '[scan]\nexclude = ["build", "dist"]\nextensions = ["py", ".PYI"]\n'
        "snippet_lines = 4\ntab_width = 8\n",
        encoding="utf-8",
    )
    settings = ScanSettings.from_config(path=cfg, extra_exclude=["tmp"])

    assert settings.exclude[: len(config.DEFAULT_EXCLUDES)] == config.DEFAULT_EXCLUDES
    assert settings.exclude[-3:] == ("build", "dist", "tmp")
    assert settings.extensions == (".py", ".pyi")
    assert settings.snippet_lines == 4
    assert settings.tab_width == 8


def test_overrides_win_and_none_is_ignored(temp_dir: Path):
    cfg = temp_dir / "config.toml"
    cfg.write_text("[scan]\nsnippet_lines = 4\n", encoding="utf-8")
    settings = ScanSettings.from_config(path=cfg, snippet_lines=2, tab_width=None)
    assert settings.snippet_lines == 2
    assert settings.tab_width == 4


def test_invalid_toml_raises_config_error(temp_dir: Path):
    cfg = temp_dir / "config.toml"
    cfg.write_text("[scan\nexclude = ", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_scan_config(cfg)


def test_invalid_values_raise_config_error(temp_dir: Path):
    cfg = temp_dir / "config.toml"
    cfg.write_text("[scan]\ntab_width = 0\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ScanSettings.from_config(path=cfg)


def test_save_preserves_other_sections(temp_dir: Path):
    cfg = temp_dir / "nested" / "config.toml"
    cfg.parent.mkdir()
    cfg.write_text('[ui]\ntheme = "dark"\n', encoding="utf-8")

    save_scan_config({"exclude": ["build"]}, cfg)
    save_scan_config({"snippet_lines": 3}, cfg)

    full = load_full_config(cfg)
    assert full["ui"] == {"theme": "dark"}
    assert full["scan"] == {"exclude": ["build"], "snippet_lines": 3}


def test_default_path_follows_config_module(_isolated_config):
    written = save_scan_config({"tab_width": 2})
    assert written == _isolated_config / "config.toml"
    assert ScanSettings.from_config().tab_width == 2
