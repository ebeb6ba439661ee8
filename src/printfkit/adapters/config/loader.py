"""Layered configuration loading with profile validation and caching."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Protocol, cast

from lib_layered_config import (
    DEFAULT_MAX_PROFILE_LENGTH,
    Config,
    read_config,
    validate_profile_name,
)

from printfkit import __init__conf__


class ConfigLoaderProtocol(Protocol):
    """Config loader callable that also exposes ``cache_clear``."""

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config: ...
    def cache_clear(self) -> None: ...


def validate_profile(profile: str, max_length: int | None = None) -> None:
    """Reject profile names that are unsafe as directory components.

    Delegates to ``lib_layered_config.validate_profile_name`` (length limit,
    allowed characters, reserved names, path traversal).

    Raises:
        ValueError: If the profile name is invalid.

    Examples:
        >>> validate_profile("tables")

        >>> try:
        ...     validate_profile("../etc")
        ... except ValueError:
        ...     print("rejected")
        rejected
    """
    validate_profile_name(profile, max_length=max_length if max_length is not None else DEFAULT_MAX_PROFILE_LENGTH)


@lru_cache(maxsize=1)
def get_default_config_path() -> Path:
    """Return the ``defaultconfig.toml`` shipped next to this module.

    Example:
        >>> get_default_config_path().name
        'defaultconfig.toml'
    """
    return Path(__file__).parent / "defaultconfig.toml"


# One entry per (profile, start_dir); the CLI process is short-lived.
@lru_cache(maxsize=4)
def _read_layers(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    return read_config(
        vendor=__init__conf__.LAYEREDCONF_VENDOR,
        app=__init__conf__.LAYEREDCONF_APP,
        slug=__init__conf__.LAYEREDCONF_SLUG,
        profile=profile,
        default_file=get_default_config_path(),
        start_dir=start_dir,
    )


def _get_config(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    """Load the merged configuration: defaults -> app -> host -> user -> dotenv -> env.

    The bundled ``defaultconfig.toml`` provides the ``[printf]``, ``[coffee]``
    and ``[lib_log_rich]`` defaults. A *profile* inserts a ``profile/<name>/``
    directory into every layer path so alternative setups (for example a
    ``eu`` profile with ``coffee.currency = "€"``) live side by side.

    Args:
        profile: Optional profile name, validated before use.
        start_dir: Directory that seeds ``.env`` discovery (defaults to cwd).

    Returns:
        Immutable configuration with provenance tracking.

    Example:
        >>> get_config().get("printf.escapes", default=None)
        True
    """
    if profile is not None:
        validate_profile(profile)
    return _read_layers(profile=profile, start_dir=start_dir)


def _cache_clear() -> None:
    """Forget cached configuration so the next call re-reads every layer."""
    _read_layers.cache_clear()


# lru_cache's cache_clear is invisible once the function is cast to the Protocol.
_get_config.cache_clear = _cache_clear  # type: ignore[attr-defined]
get_config: ConfigLoaderProtocol = cast(ConfigLoaderProtocol, _get_config)


__all__ = [
    "get_config",
    "get_default_config_path",
    "validate_profile",
]
