"""Domain-specific exceptions for typed error handling at boundaries."""

from __future__ import annotations

from collections.abc import Sequence


class FormatError(ValueError):
    """Base class for everything the formatter rejects.

    Inherits from ValueError so callers treating a bad template like any
    other bad value keep working.

    Example:
        >>> issubclass(TemplateSyntaxError, FormatError)
        True
    """


class TemplateSyntaxError(FormatError):
    """Malformed placeholder in a template string.

    Attributes:
        position: Zero-based column of the offending ``%`` (``None`` when the
            problem concerns the template as a whole).

    Example:
        >>> err = TemplateSyntaxError("unknown conversion 'y'", position=3)
        >>> str(err)
        "unknown conversion 'y' (at column 3)"
        >>> err.position
        3
    """

    def __init__(self, message: str, *, position: int | None = None) -> None:
        self.position = position
        if position is not None:
            message = f"{message} (at column {position})"
        super().__init__(message)


class ArgumentError(FormatError):
    """Arguments do not fit the placeholders of a template."""


class MissingArgumentError(ArgumentError):
    """A placeholder references an argument that was not supplied.

    Example:
        >>> str(MissingArgumentError(2))
        'missing argument 2'
    """

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"missing argument {index}")


class UnusedArgumentError(ArgumentError):
    """Strict mode found arguments no placeholder consumed.

    Example:
        >>> str(UnusedArgumentError([3, 4]))
        'unused arguments: 3, 4'
    """

    def __init__(self, indices: Sequence[int]) -> None:
        self.indices = tuple(indices)
        listed = ", ".join(str(i) for i in self.indices)
        super().__init__(f"unused arguments: {listed}")


class ArgumentTypeError(ArgumentError):
    """An argument cannot be rendered by the conversion it feeds.

    Example:
        >>> str(ArgumentTypeError("%d expects an integer, got str"))
        '%d expects an integer, got str'
    """


class CategoryMismatchError(TypeError):
    """A record carries the wrong category tag for the requested display.

    Example:
        >>> str(CategoryMismatchError("expected a 'car' record, got 'truck'"))
        "expected a 'car' record, got 'truck'"
    """


class InvalidMeasurementError(ValueError):
    """A physical measurement is out of range (e.g. zero fuel)."""


class ConfigurationError(Exception):
    """Missing, invalid, or incomplete configuration.

    Raised when a configuration section fails validation. Typically caught
    at CLI boundaries to provide user-friendly error messages.

    Example:
        >>> err = ConfigurationError("printf.default_int_bits must be 8, 16, 32 or 64")
        >>> str(err)
        'printf.default_int_bits must be 8, 16, 32 or 64'
    """


__all__ = [
    "ArgumentError",
    "ArgumentTypeError",
    "CategoryMismatchError",
    "ConfigurationError",
    "FormatError",
    "InvalidMeasurementError",
    "MissingArgumentError",
    "TemplateSyntaxError",
    "UnusedArgumentError",
]
