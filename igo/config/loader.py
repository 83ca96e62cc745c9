"""Configuration loader for igo."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from igo.config.models import IgoConfig

SECTIONS = ("toolchain", "repl", "output", "log")


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> IgoConfig:
    """Load configuration with optional overrides.

    Args:
        config_path: Optional path to a TOML config file.
        overrides: Optional dictionary of overrides; keys may be dotted
            (``"toolchain.run_timeout"``).

    Returns:
        IgoConfig instance.

    Raises:
        FileNotFoundError: If ``config_path`` is given but missing.
        ValueError: If the file is not valid TOML or fails validation.
    """
    config_dict: dict[str, Any] = {}

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with open(config_path, "rb") as f:
            try:
                raw_config = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

        for section in SECTIONS:
            if section in raw_config:
                config_dict[section] = dict(raw_config[section])

    if overrides:
        for key, value in overrides.items():
            parts = key.split(".")
            current = config_dict
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = value

    return IgoConfig(**config_dict)


def find_config_file() -> Optional[Path]:
    """Find the configuration file in standard locations.

    Searches in order:
    1. ./igo.toml
    2. ./.igo.toml
    3. ~/.config/igo/config.toml

    Returns:
        Path to the config file if found, None otherwise.
    """
    search_paths = [
        Path.cwd() / "igo.toml",
        Path.cwd() / ".igo.toml",
        Path.home() / ".config" / "igo" / "config.toml",
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None
