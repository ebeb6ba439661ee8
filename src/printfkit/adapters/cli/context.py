"""Click context helpers for CLI state management."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import lib_cli_exit_tools
import rich_click as click
from lib_layered_config import Config

from printfkit.adapters.config.loader import validate_profile
from printfkit.domain.errors import ConfigurationError

from .exit_codes import ExitCode

if TYPE_CHECKING:
    from printfkit.adapters.config.settings import AppSettings
    from printfkit.composition import AppServices

logger = logging.getLogger(__name__)

TracebackState = tuple[bool, bool]
"""Captured traceback configuration: (traceback_enabled, force_color)."""


@dataclass(slots=True)
class CLIContext:
    """Typed CLI context for Click subcommand access."""

    traceback: bool
    config: Config
    services: AppServices
    profile: str | None = None
    set_overrides: tuple[str, ...] = ()
    _settings: AppSettings | None = field(default=None, repr=False)

    def settings(self) -> AppSettings:
        """Validated application settings, loaded on first use.

        Exits with ``EX_CONFIG`` when the ``[printf]`` or ``[coffee]``
        sections are invalid, so ``config`` stays usable to inspect them.
        """
        if self._settings is None:
            try:
                self._settings = self.services.load_settings(self.config)
            except ConfigurationError as exc:
                logger.error("Invalid configuration", extra={"error": str(exc)})
                click.echo(f"Error: {exc}", err=True)
                raise SystemExit(ExitCode.CONFIG_ERROR) from exc
        return self._settings


def store_cli_context(
    ctx: click.Context,
    *,
    traceback: bool,
    config: Config,
    services: AppServices,
    profile: str | None = None,
    set_overrides: tuple[str, ...] = (),
) -> None:
    """Store CLI state in the Click context for subcommand access.

    Args:
        ctx: Click context associated with the current invocation.
        traceback: Whether verbose tracebacks were requested.
        config: Loaded configuration with ``--set`` overrides applied.
        services: Application services from the composition layer.
        profile: Optional configuration profile name.
        set_overrides: Raw ``--set`` strings, reapplied when a subcommand
            reloads configuration for another profile.

    Example:
        >>> from unittest.mock import MagicMock
        >>> from printfkit.composition import build_testing
        >>> ctx = MagicMock()
        >>> store_cli_context(ctx, traceback=True, config=Config({}, {}), services=build_testing())
        >>> ctx.obj.traceback
        True
    """
    ctx.obj = CLIContext(
        traceback=traceback,
        config=config,
        services=services,
        profile=profile,
        set_overrides=set_overrides,
    )


def get_cli_context(ctx: click.Context) -> CLIContext:
    """Retrieve typed CLI state from Click context.

    Raises:
        RuntimeError: If CLI context was not properly initialized.
    """
    if not isinstance(ctx.obj, CLIContext):
        raise RuntimeError("CLI context not initialized. Call store_cli_context first.")
    return ctx.obj


def check_profile_option(_ctx: click.Context, _param: click.Parameter, value: str | None) -> str | None:
    """Click callback rejecting profile names unusable as a configuration directory.

    Example:
        >>> check_profile_option(None, None, "eu")  # type: ignore[arg-type]
        'eu'
    """
    if value is None:
        return None
    try:
        validate_profile(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    return value


def apply_traceback_preferences(enabled: bool) -> None:
    """Mirror the ``--traceback`` preference into ``lib_cli_exit_tools.config``.

    Example:
        >>> apply_traceback_preferences(True)
        >>> bool(lib_cli_exit_tools.config.traceback)
        True
    """
    lib_cli_exit_tools.config.traceback = bool(enabled)
    lib_cli_exit_tools.config.traceback_force_color = bool(enabled)


def snapshot_traceback_state() -> TracebackState:
    """Capture the current traceback configuration for later restoration."""
    return (
        bool(getattr(lib_cli_exit_tools.config, "traceback", False)),
        bool(getattr(lib_cli_exit_tools.config, "traceback_force_color", False)),
    )


def restore_traceback_state(state: TracebackState) -> None:
    """Reapply a configuration captured by :func:`snapshot_traceback_state`.

    Example:
        >>> original = snapshot_traceback_state()
        >>> apply_traceback_preferences(True)
        >>> restore_traceback_state(original)
        >>> lib_cli_exit_tools.config.traceback == original[0]
        True
    """
    lib_cli_exit_tools.config.traceback = state[0]
    lib_cli_exit_tools.config.traceback_force_color = state[1]


__all__ = [
    "CLIContext",
    "TracebackState",
    "apply_traceback_preferences",
    "check_profile_option",
    "get_cli_context",
    "restore_traceback_state",
    "snapshot_traceback_state",
    "store_cli_context",
]
