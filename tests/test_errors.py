"""Domain error types: hierarchy, attributes and message rendering."""

from __future__ import annotations

import pytest

from printfkit.domain.errors import (
    ArgumentError,
    ArgumentTypeError,
    CategoryMismatchError,
    ConfigurationError,
    FormatError,
    InvalidMeasurementError,
    MissingArgumentError,
    TemplateSyntaxError,
    UnusedArgumentError,
)


@pytest.mark.os_agnostic
def test_configuration_error_preserves_message() -> None:
    """Instantiation stores the message for display."""
    exc = ConfigurationError("invalid [printf] configuration")
    assert str(exc) == "invalid [printf] configuration"


@pytest.mark.os_agnostic
def test_template_syntax_error_names_the_column() -> None:
    """A position is appended to the message and kept as an attribute."""
    exc = TemplateSyntaxError("unknown conversion 'y'", position=4)
    assert str(exc) == "unknown conversion 'y' (at column 4)"
    assert exc.position == 4


@pytest.mark.os_agnostic
def test_template_syntax_error_without_position_keeps_plain_message() -> None:
    exc = TemplateSyntaxError("cannot cycle a template with numbered arguments")
    assert str(exc) == "cannot cycle a template with numbered arguments"
    assert exc.position is None


@pytest.mark.os_agnostic
def test_missing_argument_error_reports_the_index() -> None:
    exc = MissingArgumentError(3)
    assert exc.index == 3
    assert str(exc) == "missing argument 3"


@pytest.mark.os_agnostic
def test_unused_argument_error_lists_indices() -> None:
    exc = UnusedArgumentError([2, 5])
    assert exc.indices == (2, 5)
    assert str(exc) == "unused arguments: 2, 5"


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    "error_type",
    [TemplateSyntaxError, ArgumentError, MissingArgumentError, UnusedArgumentError, ArgumentTypeError],
)
def test_formatter_errors_share_the_format_error_base(error_type: type[Exception]) -> None:
    """Every formatter error is a FormatError and therefore a ValueError."""
    assert issubclass(error_type, FormatError)
    assert issubclass(error_type, ValueError)


@pytest.mark.os_agnostic
def test_category_mismatch_error_is_type_error() -> None:
    with pytest.raises(TypeError, match="truck"):
        raise CategoryMismatchError("expected a 'car' record, got 'truck'")


@pytest.mark.os_agnostic
def test_invalid_measurement_error_is_value_error_but_not_format_error() -> None:
    assert issubclass(InvalidMeasurementError, ValueError)
    assert not issubclass(InvalidMeasurementError, FormatError)
