"""Type-safe domain enums for output formats, conversions and length modifiers."""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Output format options for configuration and template display.

    Inherits from str to allow direct string comparison and Click integration.

    Attributes:
        HUMAN: Human-readable output (TOML-like or a table).
        JSON: Machine-readable JSON output format.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


class ConversionType(str, Enum):
    """Conversion letters accepted at the end of a placeholder.

    Example:
        >>> ConversionType("x").is_integer
        True
        >>> ConversionType.GENERAL_UPPER.is_upper
        True
    """

    SIGNED_D = "d"
    SIGNED_I = "i"
    UNSIGNED = "u"
    OCTAL = "o"
    HEX_LOWER = "x"
    HEX_UPPER = "X"
    FIXED_LOWER = "f"
    FIXED_UPPER = "F"
    EXPONENT_LOWER = "e"
    EXPONENT_UPPER = "E"
    GENERAL_LOWER = "g"
    GENERAL_UPPER = "G"
    HEXFLOAT_LOWER = "a"
    HEXFLOAT_UPPER = "A"
    CHARACTER = "c"
    STRING = "s"

    @property
    def is_integer(self) -> bool:
        return self.value in "diuoxX"

    @property
    def is_signed(self) -> bool:
        return self.value in "di"

    @property
    def is_float(self) -> bool:
        return self.value in "fFeEgGaA"

    @property
    def is_upper(self) -> bool:
        return self.value in "XFEGA"


class LengthModifier(str, Enum):
    """C length modifiers and the integer width they select.

    ``L`` only applies to floating conversions and has no integer width.

    Example:
        >>> LengthModifier.CHAR.bits
        8
        >>> LengthModifier.LONG_DOUBLE.bits is None
        True
    """

    CHAR = "hh"
    SHORT = "h"
    LONG = "l"
    LONG_LONG = "ll"
    QUAD = "q"
    INTMAX = "j"
    SIZE = "z"
    PTRDIFF = "t"
    LONG_DOUBLE = "L"

    @property
    def bits(self) -> int | None:
        return _LENGTH_BITS[self]


_LENGTH_BITS: dict[LengthModifier, int | None] = {
    LengthModifier.CHAR: 8,
    LengthModifier.SHORT: 16,
    LengthModifier.LONG: 64,
    LengthModifier.LONG_LONG: 64,
    LengthModifier.QUAD: 64,
    LengthModifier.INTMAX: 64,
    LengthModifier.SIZE: 64,
    LengthModifier.PTRDIFF: 64,
    LengthModifier.LONG_DOUBLE: None,
}


__all__ = [
    "ConversionType",
    "LengthModifier",
    "OutputFormat",
]
