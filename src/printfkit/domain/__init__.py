"""Domain layer - pure formatting logic with no I/O or framework dependencies.

Contents:
    * :mod:`.template` - Placeholder grammar and cached template parser
    * :mod:`.formatter` - The printf-style formatting routine
    * :mod:`.coercion` - Conversion of command-line strings to argument types
    * :mod:`.behaviors` - Demonstrations built on the formatter
    * :mod:`.enums` - Domain enumerations (OutputFormat, ConversionType, LengthModifier)
    * :mod:`.errors` - Domain exception types
"""

from __future__ import annotations

from .behaviors import (
    Car,
    build_file_names,
    describe_car,
    ensure_car,
    format_mileage,
    format_price_list,
    temperature_table,
)
from .coercion import coerce_arguments
from .enums import ConversionType, LengthModifier, OutputFormat
from .errors import (
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
from .formatter import FormatOptions, sprintf, vsprintf
from .template import ConversionSpec, Template, decode_escapes, parse_template

__all__ = [
    # Formatting
    "FormatOptions",
    "sprintf",
    "vsprintf",
    "ConversionSpec",
    "Template",
    "coerce_arguments",
    "decode_escapes",
    "parse_template",
    # Demonstrations
    "Car",
    "build_file_names",
    "describe_car",
    "ensure_car",
    "format_mileage",
    "format_price_list",
    "temperature_table",
    # Enums
    "ConversionType",
    "LengthModifier",
    "OutputFormat",
    # Errors
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
