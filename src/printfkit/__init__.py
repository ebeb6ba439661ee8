"""Public package surface: the formatter, the demos, metadata and configuration.

- Domain exports: ``sprintf``/``vsprintf``, the template parser and the demos
- Composition exports: wired configuration loader
- Metadata: package information
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Composition exports (wired adapters)
from .composition import get_config

# Domain exports
from .domain.behaviors import (
    Car,
    build_file_names,
    describe_car,
    format_mileage,
    format_price_list,
    temperature_table,
)
from .domain.errors import FormatError, TemplateSyntaxError
from .domain.formatter import FormatOptions, sprintf, vsprintf
from .domain.template import parse_template

__all__ = [
    "Car",
    "FormatError",
    "FormatOptions",
    "TemplateSyntaxError",
    "build_file_names",
    "describe_car",
    "format_mileage",
    "format_price_list",
    "get_config",
    "parse_template",
    "print_info",
    "sprintf",
    "temperature_table",
    "vsprintf",
]
