"""In-memory configuration adapters for testing.

Satisfy the same Protocols as the production adapters without touching
the filesystem.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from lib_layered_config import Config

from ...domain.enums import OutputFormat
from ..config.settings import AppSettings, load_settings


def get_config_in_memory(
    *,
    profile: str | None = None,
    start_dir: str | None = None,
) -> Config:
    """Return an empty in-memory Config."""
    return Config({}, {})


def get_default_config_path_in_memory() -> Path:
    """Return a synthetic path (not a real file)."""
    return Path(tempfile.gettempdir()) / "printfkit" / "defaultconfig.toml"


def display_config_in_memory(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    profile: str | None = None,
) -> None:
    """No-op display -- satisfies the DisplayConfig protocol."""


def load_settings_in_memory(config: Config) -> AppSettings:
    """Validate the in-memory *config*; absent sections keep their defaults.

    Example:
        >>> load_settings_in_memory(Config({}, {})).printf.default_int_bits
        32
    """
    return load_settings(config)


__all__ = [
    "display_config_in_memory",
    "get_config_in_memory",
    "get_default_config_path_in_memory",
    "load_settings_in_memory",
]
