"""The printf-style formatting routine.

Substitutes argument values into a parsed :class:`~.template.Template`
following the C99 ``printf`` convention: flags, width, precision, numbered
arguments and numeric radix/notation conversions.

Contents:
    * :class:`FormatOptions` - behaviour switches (strict, cycle, integer width).
    * :func:`sprintf` / :func:`vsprintf` - public formatting entry points.
    * :func:`render_template` - render an already parsed template.
"""

from __future__ import annotations

import math
import numbers
import operator
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from .enums import ConversionType
from .errors import ArgumentTypeError, MissingArgumentError, TemplateSyntaxError, UnusedArgumentError
from .template import MAX_FIELD_SIZE, ConversionSpec, Literal, StarArgument, Template, parse_template

SUPPORTED_INT_BITS = (8, 16, 32, 64)


def check_thousands_separator(separator: str) -> str:
    """Return *separator* if grouped output stays unambiguous.

    Example:
        >>> check_thousands_separator(" ")
        ' '
        >>> check_thousands_separator(".")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: thousands_separator must differ from the decimal point
    """
    if not separator:
        raise ValueError("thousands_separator must not be empty")
    if "." in separator:
        raise ValueError("thousands_separator must differ from the decimal point")
    if any(char.isdigit() for char in separator):
        raise ValueError("thousands_separator must not contain digits")
    return separator


# float.hex() always prints 13 hex digits (52 bits) after the point
_HEX_MANTISSA_DIGITS = 13


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """Behaviour switches for a formatting call.

    Attributes:
        strict: Reject arguments that no placeholder consumed.
        cycle: Reapply a sequential template while arguments remain.
        default_int_bits: Width used to wrap negative values passed to
            unsigned conversions without a length modifier.
        thousands_separator: Separator inserted by the ``'`` flag.

    Example:
        >>> FormatOptions().default_int_bits
        32
        >>> FormatOptions(default_int_bits=12)  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: default_int_bits must be one of (8, 16, 32, 64)
    """

    strict: bool = False
    cycle: bool = False
    default_int_bits: int = 32
    thousands_separator: str = ","

    def __post_init__(self) -> None:
        if self.default_int_bits not in SUPPORTED_INT_BITS:
            raise ValueError(f"default_int_bits must be one of {SUPPORTED_INT_BITS}")
        check_thousands_separator(self.thousands_separator)


@dataclass(slots=True)
class _Arguments:
    """Argument list plus the set of 1-based indices consumed so far."""

    values: Sequence[object]
    used: set[int] = field(default_factory=set)

    def available(self, index: int) -> bool:
        return index <= len(self.values)

    def take(self, index: int) -> object:
        if not self.available(index):
            raise MissingArgumentError(index)
        self.used.add(index)
        return self.values[index - 1]


class _Exhausted(Exception):
    """Raised inside a cycling pass when the arguments run out."""


def _as_integer(value: object, spec: ConversionSpec, what: str = "an integer") -> int:
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ArgumentTypeError(f"{spec.source} expects {what}, got non-integral float {value!r}")
    try:
        return operator.index(value)  # type: ignore[arg-type]
    except TypeError as exc:
        raise ArgumentTypeError(f"{spec.source} expects {what}, got {type(value).__name__}") from exc


def _as_real(value: object, spec: ConversionSpec) -> float:
    if not isinstance(value, (numbers.Real, Decimal)):
        raise ArgumentTypeError(f"{spec.source} expects a number, got {type(value).__name__}")
    try:
        return float(value)
    except OverflowError as exc:
        raise ArgumentTypeError(f"{spec.source}: {value!r} is too large for a float") from exc


def _group_digits(digits: str, separator: str) -> str:
    """Insert *separator* every three digits from the right.

    >>> _group_digits("1234567", ",")
    '1,234,567'
    """
    head = len(digits) % 3 or 3
    groups = [digits[:head]] + [digits[i : i + 3] for i in range(head, len(digits), 3)]
    return separator.join(groups)


def _justify(sign: str, prefix: str, body: str, width: int | None, *, left: bool, zero: bool) -> str:
    """Pad to *width*: spaces on the left/right, or zeros between prefix and body."""
    content = len(sign) + len(prefix) + len(body)
    if width is None or content >= width:
        return sign + prefix + body
    fill = width - content
    if left:
        return sign + prefix + body + " " * fill
    if zero:
        return sign + prefix + "0" * fill + body
    return " " * fill + sign + prefix + body


def _sign_for(negative: bool, flags: frozenset[str]) -> str:
    if negative:
        return "-"
    if "+" in flags:
        return "+"
    if " " in flags:
        return " "
    return ""


def _format_integer(
    value: object,
    spec: ConversionSpec,
    width: int | None,
    precision: int | None,
    flags: frozenset[str],
    options: FormatOptions,
) -> str:
    number = _as_integer(value, spec)
    conversion = spec.conversion
    bits = spec.length.bits if spec.length is not None else None

    if conversion.is_signed:
        if bits is not None:
            number = (number + (1 << (bits - 1))) % (1 << bits) - (1 << (bits - 1))
        sign = _sign_for(number < 0, flags)
    else:
        if bits is not None:
            number %= 1 << bits
        elif number < 0:
            number %= 1 << options.default_int_bits
        sign = ""
    magnitude = abs(number)

    if conversion is ConversionType.OCTAL:
        digits = format(magnitude, "o")
    elif conversion is ConversionType.HEX_LOWER:
        digits = format(magnitude, "x")
    elif conversion is ConversionType.HEX_UPPER:
        digits = format(magnitude, "X")
    else:
        digits = str(magnitude)

    if precision is not None:
        digits = "" if precision == 0 and magnitude == 0 else digits.zfill(precision)

    if "'" in flags and conversion.value in "diu" and digits:
        digits = _group_digits(digits, options.thousands_separator)

    prefix = ""
    if "#" in flags:
        if conversion is ConversionType.OCTAL and not digits.startswith("0"):
            digits = "0" + digits
        elif conversion in (ConversionType.HEX_LOWER, ConversionType.HEX_UPPER) and magnitude:
            prefix = "0X" if conversion.is_upper else "0x"

    zero = "0" in flags and precision is None
    return _justify(sign, prefix, digits, width, left="-" in flags, zero=zero)


def _hex_float_body(magnitude: float, precision: int | None, alternate: bool) -> str:
    """Hexadecimal mantissa and binary exponent of a finite non-negative float.

    >>> _hex_float_body(1.5, None, False)
    '1.8p+0'
    >>> _hex_float_body(1.0, 3, False)
    '1.000p+0'
    >>> _hex_float_body(0.0, None, True)
    '0.p+0'
    """
    if magnitude == 0:
        lead, fraction_digits, exponent = 0, "", 0
        if precision:
            fraction_digits = "0" * precision
    else:
        head, exponent_text = magnitude.hex()[2:].split("p")
        lead_text, fraction_text = head.split(".")
        lead, exponent = int(lead_text), int(exponent_text)
        if precision is None:
            fraction_digits = fraction_text.rstrip("0")
        elif precision >= _HEX_MANTISSA_DIGITS:
            fraction_digits = fraction_text + "0" * (precision - _HEX_MANTISSA_DIGITS)
        else:
            shift = 4 * (_HEX_MANTISSA_DIGITS - precision)
            kept, rest = divmod(int(fraction_text, 16), 1 << shift)
            half = 1 << (shift - 1)
            odd = kept & 1 if precision else lead & 1
            if rest > half or (rest == half and odd):
                kept += 1
            if kept >> (4 * precision):
                kept = 0
                lead += 1
                if lead == 2:
                    lead, exponent = 1, exponent + 1
            fraction_digits = format(kept, f"0{precision}x") if precision else ""

    point = "." if fraction_digits or alternate else ""
    return f"{lead}{point}{fraction_digits}p{exponent:+d}"


def _format_float(
    value: object,
    spec: ConversionSpec,
    width: int | None,
    precision: int | None,
    flags: frozenset[str],
    options: FormatOptions,
) -> str:
    number = _as_real(value, spec)
    conversion = spec.conversion
    negative = math.copysign(1.0, number) < 0
    sign = _sign_for(negative, flags)
    left = "-" in flags

    if not math.isfinite(number):
        body = "nan" if math.isnan(number) else "inf"
        if conversion.is_upper:
            body = body.upper()
        return _justify(sign, "", body, width, left=left, zero=False)

    magnitude = abs(number)
    alternate = "#" in flags
    prefix = ""
    if conversion in (ConversionType.HEXFLOAT_LOWER, ConversionType.HEXFLOAT_UPPER):
        body = _hex_float_body(magnitude, precision, alternate)
        prefix = "0x"
        if conversion.is_upper:
            body, prefix = body.upper(), "0X"
    else:
        grouping = "," if "'" in flags and conversion.value in "fFgG" else ""
        digits = 6 if precision is None else precision
        body = format(magnitude, f"{'#' if alternate else ''}{grouping}.{digits}{conversion.value}")
        if grouping and options.thousands_separator != ",":
            body = body.replace(",", options.thousands_separator)

    return _justify(sign, prefix, body, width, left=left, zero="0" in flags)


def _format_character(value: object, spec: ConversionSpec, width: int | None, flags: frozenset[str]) -> str:
    if isinstance(value, str):
        if len(value) != 1:
            raise ArgumentTypeError(f"{spec.source} expects a single character, got a string of length {len(value)}")
        char = value
    else:
        code = _as_integer(value, spec, "a character or code point")
        try:
            char = chr(code)
        except (ValueError, OverflowError) as exc:
            raise ArgumentTypeError(f"{spec.source}: {code} is not a valid code point") from exc
    return _justify("", "", char, width, left="-" in flags, zero=False)


def _format_string(value: object, width: int | None, precision: int | None, flags: frozenset[str]) -> str:
    text = str(value)
    if precision is not None:
        text = text[:precision]
    return _justify("", "", text, width, left="-" in flags, zero=False)


def format_value(
    spec: ConversionSpec,
    value: object,
    *,
    width: int | None = None,
    precision: int | None = None,
    options: FormatOptions | None = None,
) -> str:
    """Render a single value for *spec* with width and precision already resolved.

    ``width`` and ``precision`` override the literal values in *spec*; pass
    ``None`` to fall back to them. A negative width left-justifies and a
    negative precision counts as absent.

    Raises:
        ArgumentTypeError: *value* does not suit the conversion, or the width
            or precision exceeds :data:`~.template.MAX_FIELD_SIZE`.

    Examples:
        >>> spec = parse_template("%+.2e").placeholders[0]
        >>> format_value(spec, 1234.5)
        '+1.23e+03'
        >>> format_value(spec, 1234.5, width=-12)
        '+1.23e+03   '
        >>> format_value(spec, 1.0, width=10**9)  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        printfkit.domain.errors.ArgumentTypeError: %+.2e: width exceeds the maximum of 1000000
    """
    options = options or FormatOptions()
    flags = spec.flags
    if width is None and isinstance(spec.width, int):
        width = spec.width
    if width is not None and width < 0:
        flags = flags | {"-"}
        width = -width
    if precision is None and isinstance(spec.precision, int):
        precision = spec.precision
    if precision is not None and precision < 0:
        precision = None
    for what, size in (("width", width), ("precision", precision)):
        if size is not None and size > MAX_FIELD_SIZE:
            raise ArgumentTypeError(f"{spec.source}: {what} exceeds the maximum of {MAX_FIELD_SIZE}")

    conversion = spec.conversion
    if conversion.is_integer:
        return _format_integer(value, spec, width, precision, flags, options)
    if conversion.is_float:
        return _format_float(value, spec, width, precision, flags, options)
    if conversion is ConversionType.CHARACTER:
        return _format_character(value, spec, width, flags)
    return _format_string(value, width, precision, flags)


def _resolve_star(
    part: int | StarArgument | None,
    spec: ConversionSpec,
    arguments: _Arguments,
    cursor: list[int],
    *,
    stop_when_exhausted: bool,
) -> int | None:
    if not isinstance(part, StarArgument):
        return part
    index = _next_index(part.index, cursor, arguments, stop_when_exhausted=stop_when_exhausted)
    return _as_integer(arguments.take(index), spec, "an integer width or precision")


def _next_index(explicit: int | None, cursor: list[int], arguments: _Arguments, *, stop_when_exhausted: bool) -> int:
    if explicit is not None:
        index = explicit
    else:
        cursor[0] += 1
        index = cursor[0]
    if stop_when_exhausted and not arguments.available(index):
        raise _Exhausted
    return index


def _render_pass(
    template: Template,
    arguments: _Arguments,
    offset: int,
    options: FormatOptions,
    *,
    stop_when_exhausted: bool = False,
) -> str:
    parts: list[str] = []
    cursor = [offset]
    try:
        for segment in template.segments:
            if isinstance(segment, Literal):
                parts.append(segment.text)
                continue
            width = _resolve_star(segment.width, segment, arguments, cursor, stop_when_exhausted=stop_when_exhausted)
            precision = _resolve_star(
                segment.precision, segment, arguments, cursor, stop_when_exhausted=stop_when_exhausted
            )
            index = _next_index(segment.argument, cursor, arguments, stop_when_exhausted=stop_when_exhausted)
            parts.append(
                format_value(
                    segment,
                    arguments.take(index),
                    width=width,
                    precision=precision,
                    options=options,
                )
            )
    except _Exhausted:
        pass
    return "".join(parts)


def render_template(template: Template, args: Sequence[object], options: FormatOptions | None = None) -> str:
    """Render a parsed template with *args*.

    Raises:
        MissingArgumentError: A placeholder needs an argument that is absent.
        UnusedArgumentError: ``strict`` is set and arguments were left over.
        ArgumentTypeError: A value does not suit its conversion.
        TemplateSyntaxError: ``cycle`` was requested for a numbered template.
    """
    options = options or FormatOptions()
    arguments = _Arguments(tuple(args))

    if options.cycle and template.uses_positional:
        raise TemplateSyntaxError("cycling needs sequential placeholders, not numbered (n$) ones")

    output = [_render_pass(template, arguments, 0, options)]
    per_pass = template.argument_count
    if options.cycle and not template.uses_positional and per_pass:
        offset = per_pass
        while offset < len(arguments.values):
            output.append(_render_pass(template, arguments, offset, options, stop_when_exhausted=True))
            offset += per_pass

    if options.strict:
        unused = [i for i in range(1, len(arguments.values) + 1) if i not in arguments.used]
        if unused:
            raise UnusedArgumentError(unused)
    return "".join(output)


def vsprintf(template: str | Template, args: Sequence[object], options: FormatOptions | None = None) -> str:
    """Format *args* into *template*, taking the arguments as one sequence.

    Examples:
        >>> vsprintf("%s is %d", ["x", 3])
        'x is 3'
        >>> vsprintf("%d,", [1, 2, 3], FormatOptions(cycle=True))
        '1,2,3,'
    """
    parsed = template if isinstance(template, Template) else parse_template(template)
    return render_template(parsed, args, options)


def sprintf(template: str, *args: object, strict: bool = False, cycle: bool = False) -> str:
    """Return *template* with each placeholder replaced by its formatted argument.

    Args:
        template: printf-style template.
        *args: Values substituted into the placeholders.
        strict: Raise :class:`UnusedArgumentError` for leftover arguments.
        cycle: Reapply the template while arguments remain.

    Examples:
        >>> sprintf("%02d", 7)
        '07'
        >>> sprintf("%.3f", 1 / 6)
        '0.167'
        >>> sprintf("%2$s %1$s, %2$s", "Bond", "James")
        'James Bond, James'
        >>> sprintf("[%-6s|%6.2f]", "tea", 2.5)
        '[tea   |  2.50]'
    """
    return vsprintf(template, args, FormatOptions(strict=strict, cycle=cycle))


__all__ = [
    "SUPPORTED_INT_BITS",
    "FormatOptions",
    "check_thousands_separator",
    "format_value",
    "render_template",
    "sprintf",
    "vsprintf",
]
