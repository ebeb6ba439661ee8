"""``--set SECTION.KEY=VALUE`` parsing and merging into a Config."""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import orjson
from lib_layered_config import Config

CoercedValue = str | int | float | bool | None | list[object] | dict[str, object]
"""Types :func:`coerce_value` can produce."""


@dataclass(frozen=True, slots=True)
class ConfigOverride:
    """One ``--set`` assignment split into section, key path and value."""

    section: str
    key_path: tuple[str, ...]
    value: CoercedValue


def parse_override(raw: str) -> ConfigOverride:
    """Parse ``SECTION.KEY[.SUBKEY...]=VALUE``.

    The first ``=`` ends the dotted path; the first dot ends the section.

    Raises:
        ValueError: Missing ``=``, no dot in the path, or an empty component.

    Examples:
        >>> parse_override("printf.default_int_bits=16")
        ConfigOverride(section='printf', key_path=('default_int_bits',), value=16)
        >>> parse_override("coffee.prices.venti=4.25").key_path
        ('prices', 'venti')
    """
    path, sep, value_text = raw.partition("=")
    if not sep:
        raise ValueError(f"Invalid override {raw!r}: must contain '='")
    section, dot, key_text = path.partition(".")
    if not dot:
        raise ValueError(f"Invalid override {raw!r}: key must contain at least one dot (SECTION.KEY)")
    if not section:
        raise ValueError(f"Invalid override {raw!r}: section name is empty")
    key_path = tuple(key_text.split("."))
    if not all(key_path):
        raise ValueError(f"Invalid override {raw!r}: key path contains empty component")
    return ConfigOverride(section=section, key_path=key_path, value=coerce_value(value_text))


def coerce_value(raw: str) -> CoercedValue:
    """Read *raw* as JSON when possible, otherwise keep it as a string.

    Examples:
        >>> coerce_value("false"), coerce_value("64"), coerce_value("0.5")
        (False, 64, 0.5)
        >>> coerce_value("€")
        '€'
        >>> coerce_value("")
        ''
    """
    if not raw:
        return ""
    try:
        return orjson.loads(raw)
    except ValueError:
        return raw


def _merge_into(tree: dict[str, dict[str, object]], override: ConfigOverride) -> None:
    """Place *override* into the nested *tree* passed to ``Config.with_overrides``."""
    node: dict[str, object] = tree.setdefault(override.section, {})
    *parents, leaf = override.key_path
    for part in parents:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            raise ValueError(f"Invalid override: {part!r} is already set to a scalar value")
        node = cast("dict[str, object]", child)
    node[leaf] = override.value


def apply_overrides(config: Config, raw_overrides: tuple[str, ...]) -> Config:
    """Return *config* with every ``--set`` assignment deep-merged on top.

    Raises:
        ValueError: If an assignment is malformed.

    Examples:
        >>> cfg = Config({"printf": {"strict": False}}, {})
        >>> apply_overrides(cfg, ("printf.strict=true",))["printf"]["strict"]
        True
        >>> apply_overrides(cfg, ()) is cfg
        True
    """
    if not raw_overrides:
        return config
    tree: dict[str, dict[str, object]] = {}
    for raw in raw_overrides:
        _merge_into(tree, parse_override(raw))
    return config.with_overrides(tree)


__all__ = [
    "CoercedValue",
    "ConfigOverride",
    "apply_overrides",
    "coerce_value",
    "parse_override",
]
