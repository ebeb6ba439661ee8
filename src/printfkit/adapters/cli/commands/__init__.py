"""CLI command implementations.

Collects all subcommand functions and re-exports them for registration
with the root CLI group.

Contents:
    * Info command from :mod:`.info`
    * Config command from :mod:`.config`
    * Format and parse commands from :mod:`.format_cmd`
    * Demonstration group from :mod:`.demo_cmd`
"""

from __future__ import annotations

from .config import cli_config
from .demo_cmd import cli_demo
from .format_cmd import cli_format, cli_parse
from .info import cli_info

__all__ = [
    "cli_config",
    "cli_demo",
    "cli_format",
    "cli_info",
    "cli_parse",
]
