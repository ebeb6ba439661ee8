"""Typed settings for the ``[printf]`` and ``[coffee]`` configuration sections.

Configuration values arrive as loosely typed dictionaries from
lib_layered_config (TOML files, environment, ``--set``). They are validated
once at this boundary with Pydantic so commands work with typed values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, cast

from lib_layered_config import Config
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from printfkit.domain.behaviors import DEFAULT_COFFEE_PRICES
from printfkit.domain.errors import ConfigurationError
from printfkit.domain.formatter import FormatOptions, check_thousands_separator


class PrintfSettingsModel(BaseModel):
    """Validated ``[printf]`` section.

    Example:
        >>> settings = PrintfSettingsModel.model_validate({"strict": True})
        >>> settings.strict, settings.default_int_bits
        (True, 32)
        >>> settings.to_options(cycle=True).cycle
        True
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    strict: bool = False
    cycle: bool = False
    escapes: bool = True
    default_int_bits: Literal[8, 16, 32, 64] = 32
    thousands_separator: str = Field(default=",", min_length=1, max_length=4)

    @field_validator("thousands_separator")
    @classmethod
    def _unambiguous_separator(cls, value: str) -> str:
        return check_thousands_separator(value)

    def to_options(self, *, strict: bool | None = None, cycle: bool | None = None) -> FormatOptions:
        """Build FormatOptions, letting explicit CLI flags win over configuration."""
        return FormatOptions(
            strict=self.strict if strict is None else strict,
            cycle=self.cycle if cycle is None else cycle,
            default_int_bits=self.default_int_bits,
            thousands_separator=self.thousands_separator,
        )


def _default_prices() -> dict[str, float]:
    return dict(DEFAULT_COFFEE_PRICES)


class CoffeeSettingsModel(BaseModel):
    """Validated ``[coffee]`` section.

    Example:
        >>> CoffeeSettingsModel.model_validate({"prices": {"Small": 2}}).prices
        {'small': 2.0}
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    currency: str = "$"
    prices: dict[str, float] = Field(default_factory=_default_prices)

    @field_validator("prices")
    @classmethod
    def _normalise_prices(cls, value: dict[str, float]) -> dict[str, float]:
        normalised: dict[str, float] = {}
        for size, price in value.items():
            if price < 0:
                raise ValueError(f"price for {size!r} must not be negative")
            normalised[size.strip().lower()] = price
        return normalised


@dataclass(frozen=True, slots=True)
class AppSettings:
    """All validated application sections."""

    printf: PrintfSettingsModel
    coffee: CoffeeSettingsModel


def _describe(exc: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors())


def _section(config: Config, name: str) -> Mapping[str, Any]:
    raw: object = config.get(name, default={})
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"[{name}] must be a table, got {type(raw).__name__}")
    return cast("Mapping[str, Any]", raw)


def load_settings(config: Config) -> AppSettings:
    """Validate the application sections of *config*.

    Args:
        config: Already-loaded layered configuration.

    Returns:
        Typed settings; absent sections fall back to defaults.

    Raises:
        ConfigurationError: If a section holds unknown keys or invalid values.

    Example:
        >>> settings = load_settings(Config({"printf": {"cycle": True}}, {}))
        >>> settings.printf.cycle, settings.coffee.currency
        (True, '$')
    """
    try:
        printf = PrintfSettingsModel.model_validate(dict(_section(config, "printf")))
    except ValidationError as exc:
        raise ConfigurationError(f"invalid [printf] configuration: {_describe(exc)}") from exc
    try:
        coffee = CoffeeSettingsModel.model_validate(dict(_section(config, "coffee")))
    except ValidationError as exc:
        raise ConfigurationError(f"invalid [coffee] configuration: {_describe(exc)}") from exc
    return AppSettings(printf=printf, coffee=coffee)


__all__ = [
    "AppSettings",
    "CoffeeSettingsModel",
    "PrintfSettingsModel",
    "load_settings",
]
