"""Configuration adapter - loading, validation, display, and overrides.

Contents:
    * :mod:`.loader` - Layered configuration loading with caching
    * :mod:`.settings` - Pydantic validation of the application sections
    * :mod:`.display` - Configuration display in human/JSON formats
    * :mod:`.overrides` - CLI ``--set`` override parsing and application
"""

from __future__ import annotations

from .display import display_config
from .loader import get_config, get_default_config_path
from .overrides import apply_overrides
from .settings import AppSettings, load_settings

__all__ = [
    "AppSettings",
    "apply_overrides",
    "display_config",
    "get_config",
    "get_default_config_path",
    "load_settings",
]
