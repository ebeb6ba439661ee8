"""Placeholder grammar: parse printf-style templates into immutable segments.

A template is split into :class:`Literal` runs and :class:`ConversionSpec`
placeholders following ``%[argument$][flags][width][.precision][length]type``.
Parsing is pure and cached; rendering lives in :mod:`.formatter`.

Contents:
    * :func:`parse_template` - cached parser returning a :class:`Template`.
    * :func:`decode_escapes` - shell-printf style backslash processing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal as TypingLiteral

from .enums import ConversionType, LengthModifier
from .errors import TemplateSyntaxError

if TYPE_CHECKING:
    from .formatter import FormatOptions

logger = logging.getLogger(__name__)

FLAG_CHARACTERS = "-+ 0#'"

#: Largest width or precision a placeholder may request.
MAX_FIELD_SIZE = 1_000_000

_PLACEHOLDER = re.compile(
    r"""
    %
    (?:(?P<argument>\d+)\$)?
    (?P<flags>[-+\ 0\#']*)
    (?P<width>\*(?:\d+\$)?|\d+)?
    (?:\.(?P<precision>\*(?:\d+\$)?|\d*))?
    (?P<length>hh|ll|[hlqjztL])?
    (?P<conversion>.)?
    """,
    re.VERBOSE | re.DOTALL,
)

_SIMPLE_ESCAPES = {
    "\\": "\\",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    '"': '"',
    "'": "'",
}

_ESCAPE = re.compile(
    r"\\(?:x(?P<hex>[0-9A-Fa-f]{1,2})|0(?P<oct0>[0-7]{0,3})|(?P<oct>[1-7][0-7]{0,2})|(?P<char>.))",
    re.DOTALL,
)

SlotRole = TypingLiteral["value", "width", "precision"]


@dataclass(frozen=True, slots=True)
class StarArgument:
    """Width or precision taken from the argument list (``*`` or ``*m$``)."""

    index: int | None = None


@dataclass(frozen=True, slots=True)
class Literal:
    """A run of literal text, with ``%%`` already collapsed to ``%``."""

    text: str


@dataclass(frozen=True, slots=True)
class ConversionSpec:
    """One parsed placeholder.

    Attributes:
        source: Placeholder exactly as written in the template.
        position: Zero-based column of the leading ``%``.
        argument: Explicit 1-based argument index (``n$``) or None.
        flags: Flag characters present (``- + space 0 # '``).
        width: Minimum field width, a :class:`StarArgument`, or None.
        precision: Precision, a :class:`StarArgument`, or None when absent.
        length: Length modifier, if any.
        conversion: Conversion letter.

    Example:
        >>> spec = parse_template("%-08.3lf").placeholders[0]
        >>> sorted(spec.flags), spec.width, spec.precision, spec.length.value, spec.conversion.value
        (['-', '0'], 8, 3, 'l', 'f')
    """

    source: str
    position: int
    argument: int | None
    flags: frozenset[str]
    width: int | StarArgument | None
    precision: int | StarArgument | None
    length: LengthModifier | None
    conversion: ConversionType

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    @property
    def is_positional(self) -> bool:
        """True when any argument reference in this placeholder is numbered."""
        return self.argument is not None or any(
            isinstance(part, StarArgument) and part.index is not None for part in (self.width, self.precision)
        )

    @property
    def is_sequential(self) -> bool:
        """True when any argument reference in this placeholder is implicit."""
        return self.argument is None or any(
            isinstance(part, StarArgument) and part.index is None for part in (self.width, self.precision)
        )


Segment = Literal | ConversionSpec


@dataclass(frozen=True, slots=True)
class Template:
    """Immutable parsed template.

    Example:
        >>> template = parse_template("%s scored %d%%")
        >>> template.argument_count
        2
        >>> template.render(("Ada", 97))
        'Ada scored 97%'
    """

    source: str
    segments: tuple[Segment, ...]

    @property
    def placeholders(self) -> tuple[ConversionSpec, ...]:
        return tuple(seg for seg in self.segments if isinstance(seg, ConversionSpec))

    @property
    def uses_positional(self) -> bool:
        return any(spec.is_positional for spec in self.placeholders)

    @property
    def argument_count(self) -> int:
        """Arguments one pass over the template consumes (highest index when numbered)."""
        indices = [index for index, _spec, _role in self.iter_argument_slots()]
        return max(indices, default=0)

    def iter_argument_slots(self) -> Iterator[tuple[int, ConversionSpec, SlotRole]]:
        """Yield ``(index, placeholder, role)`` for every argument reference of one pass.

        Sequential templates number references in consumption order
        (width, then precision, then value). Numbered templates report their
        explicit indices, repeated references included.

        Example:
            >>> [(i, role) for i, _s, role in parse_template("%*.*f").iter_argument_slots()]
            [(1, 'width'), (2, 'precision'), (3, 'value')]
        """
        cursor = 0
        for spec in self.placeholders:
            for role, part in (("width", spec.width), ("precision", spec.precision)):
                if isinstance(part, StarArgument):
                    if part.index is None:
                        cursor += 1
                        yield cursor, spec, role  # type: ignore[misc]
                    else:
                        yield part.index, spec, role  # type: ignore[misc]
            if spec.argument is None:
                cursor += 1
                yield cursor, spec, "value"
            else:
                yield spec.argument, spec, "value"

    def render(self, args: Sequence[object], options: FormatOptions | None = None) -> str:
        """Render this template with *args*; see :func:`printfkit.domain.formatter.vsprintf`."""
        from .formatter import render_template

        return render_template(self, args, options)


def _bounded_int(raw: str, *, what: str, position: int) -> int:
    """Read a run of digits, rejecting values above :data:`MAX_FIELD_SIZE`.

    The length is checked first since ``int()`` refuses very long digit strings.
    """
    digits = raw.lstrip("0") or "0"
    if len(digits) > len(str(MAX_FIELD_SIZE)) or int(digits) > MAX_FIELD_SIZE:
        raise TemplateSyntaxError(f"{what} exceeds the maximum of {MAX_FIELD_SIZE}", position=position)
    return int(digits)


def _parse_star(raw: str, *, position: int) -> StarArgument:
    if raw == "*":
        return StarArgument()
    index = _bounded_int(raw[1:-1], what="argument index", position=position)
    if index == 0:
        raise TemplateSyntaxError("argument index must be 1 or greater", position=position)
    return StarArgument(index)


def _parse_size(raw: str | None, *, what: str, position: int) -> int | StarArgument | None:
    if raw is None:
        return None
    if raw.startswith("*"):
        return _parse_star(raw, position=position)
    return _bounded_int(raw, what=what, position=position) if raw else 0


def _parse_placeholder(source: str, start: int) -> tuple[ConversionSpec, int]:
    match = _PLACEHOLDER.match(source, start)
    if match is None:  # pragma: no cover - the pattern always matches at '%'
        raise TemplateSyntaxError("invalid placeholder", position=start)

    conversion_char = match.group("conversion")
    if conversion_char is None:
        raise TemplateSyntaxError("incomplete placeholder at end of template", position=start)
    if conversion_char in "np":
        raise TemplateSyntaxError(f"conversion %{conversion_char} is not supported", position=start)
    try:
        conversion = ConversionType(conversion_char)
    except ValueError as exc:
        raise TemplateSyntaxError(f"unknown conversion {conversion_char!r}", position=start) from exc

    argument_raw = match.group("argument")
    argument = None if argument_raw is None else _bounded_int(argument_raw, what="argument index", position=start)
    if argument == 0:
        raise TemplateSyntaxError("argument index must be 1 or greater", position=start)

    length_raw = match.group("length")
    spec = ConversionSpec(
        source=match.group(0),
        position=start,
        argument=argument,
        flags=frozenset(match.group("flags")),
        width=_parse_size(match.group("width"), what="width", position=start),
        precision=_parse_size(match.group("precision"), what="precision", position=start),
        length=LengthModifier(length_raw) if length_raw else None,
        conversion=conversion,
    )
    return spec, match.end()


def _check_argument_style(segments: Sequence[Segment]) -> None:
    specs = [seg for seg in segments if isinstance(seg, ConversionSpec)]
    positional = [spec for spec in specs if spec.is_positional]
    if positional and any(spec.is_sequential for spec in specs):
        raise TemplateSyntaxError(
            "cannot mix numbered (n$) and sequential argument references",
            position=positional[0].position,
        )


@lru_cache(maxsize=256)
def parse_template(source: str) -> Template:
    """Parse *source* into a :class:`Template`.

    Templates are immutable, so parsed results are cached per source string.

    Args:
        source: Template text containing placeholders.

    Returns:
        Parsed template.

    Raises:
        TemplateSyntaxError: On malformed or unsupported placeholders, or
            when numbered and sequential references are mixed.

    Examples:
        >>> [type(s).__name__ for s in parse_template("T=%d%%").segments]
        ['Literal', 'ConversionSpec', 'Literal']
        >>> parse_template("%1$s and %d")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        printfkit.domain.errors.TemplateSyntaxError: cannot mix numbered ...
    """
    logger.debug("Parsing template", extra={"template": source})
    segments: list[Segment] = []
    text: list[str] = []
    pos = 0
    while True:
        found = source.find("%", pos)
        if found < 0:
            text.append(source[pos:])
            break
        text.append(source[pos:found])
        if source.startswith("%%", found):
            text.append("%")
            pos = found + 2
            continue
        spec, pos = _parse_placeholder(source, found)
        if any(text):
            segments.append(Literal("".join(text)))
        text = []
        segments.append(spec)

    if any(text):
        segments.append(Literal("".join(text)))

    _check_argument_style(segments)
    return Template(source=source, segments=tuple(segments))


def _replace_escape(match: re.Match[str]) -> str:
    if match.group("hex") is not None:
        return chr(int(match.group("hex"), 16))
    if match.group("oct0") is not None:
        return chr(int(match.group("oct0") or "0", 8))
    if match.group("oct") is not None:
        return chr(int(match.group("oct"), 8))
    char = match.group("char")
    return _SIMPLE_ESCAPES.get(char, match.group(0))


def _replace_template_escape(match: re.Match[str]) -> str:
    decoded = _replace_escape(match)
    return "%%" if decoded == "%" else decoded


def decode_escapes(text: str, *, for_template: bool = False) -> str:
    r"""Interpret backslash escapes the way shell ``printf`` does for its format.

    Unknown escapes and a trailing lone backslash are kept verbatim. With
    *for_template*, an escape that yields ``%`` is emitted as ``%%`` so it
    stays literal text once the result is parsed as a template.

    Examples:
        >>> decode_escapes(r"a\tb\n")
        'a\tb\n'
        >>> decode_escapes(r"\x41\101\0102")
        'AAB'
        >>> decode_escapes(r"keep \q")
        'keep \\q'
        >>> decode_escapes(r"\045d", for_template=True)
        '%%d'
    """
    return _ESCAPE.sub(_replace_template_escape if for_template else _replace_escape, text)


__all__ = [
    "FLAG_CHARACTERS",
    "MAX_FIELD_SIZE",
    "ConversionSpec",
    "Literal",
    "Segment",
    "SlotRole",
    "StarArgument",
    "Template",
    "decode_escapes",
    "parse_template",
]
