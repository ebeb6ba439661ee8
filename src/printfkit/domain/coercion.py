"""Convert command-line strings to the types their placeholders expect."""

from __future__ import annotations

from collections.abc import Sequence

from .errors import ArgumentTypeError
from .template import ConversionSpec, SlotRole, Template, parse_template


def parse_integer(raw: str) -> int:
    """Parse an integer argument using Python literal rules.

    Accepts an optional sign, ``0x``/``0o``/``0b`` prefixes, underscores, and
    a leading quote followed by a character (``'A`` is 65, as in shell
    ``printf``). Unlike shell ``printf``, a bare leading zero does not select
    octal: ``"010"`` is ten; write ``"0o10"`` for eight.

    Examples:
        >>> parse_integer("0x1F"), parse_integer("-12"), parse_integer("'A")
        (31, -12, 65)
        >>> parse_integer("1_000")
        1000
        >>> parse_integer("010"), parse_integer("0o10")
        (10, 8)
    """
    text = raw.strip()
    if len(text) >= 2 and text[0] in "'\"":
        return ord(text[1])
    try:
        return int(text, 0)
    except ValueError:
        pass
    # int(..., 0) rejects leading zeros such as "007"
    try:
        return int(text, 10)
    except ValueError as exc:
        raise ArgumentTypeError(f"{raw!r} is not an integer") from exc


def parse_real(raw: str) -> float:
    """Parse a floating literal, including hex floats and ``inf``/``nan``.

    Examples:
        >>> parse_real("2.5e3")
        2500.0
        >>> parse_real("0x1.8p1")
        3.0
    """
    text = raw.strip()
    try:
        return float(text)
    except ValueError:
        pass
    try:
        return float.fromhex(text)
    except ValueError:
        pass
    try:
        return float(parse_integer(text))
    except ArgumentTypeError as exc:
        raise ArgumentTypeError(f"{raw!r} is not a number") from exc


_RANK = {"text": 0, "real": 1, "integer": 2}


def _kind(spec: ConversionSpec, role: SlotRole) -> str:
    if role != "value" or spec.conversion.is_integer:
        return "integer"
    if spec.conversion.is_float:
        return "real"
    return "text"


def _coerce_one(raw: object, spec: ConversionSpec, role: SlotRole) -> object:
    if not isinstance(raw, str):
        return raw
    kind = _kind(spec, role)
    if kind == "integer":
        return parse_integer(raw)
    if kind == "real":
        return parse_real(raw)
    return raw


def coerce_arguments(template: str | Template, raw_args: Sequence[object]) -> tuple[object, ...]:
    """Return *raw_args* converted to the type each argument slot consumes.

    Strings feeding integer conversions or ``*`` widths become ``int``,
    strings feeding floating conversions become ``float``; ``%s`` and ``%c``
    arguments stay as given. Arguments beyond one pass over the template keep
    the role of the slot they land on when the template is cycled. Non-string
    values pass through untouched.

    A numbered argument referenced by several placeholders is converted for
    the most demanding of them (integer, then real, then text).

    Raises:
        ArgumentTypeError: A string cannot be parsed as the required number.

    Examples:
        >>> coerce_arguments("%s=%d (%.1f)", ["x", "42", "2.25"])
        ('x', 42, 2.25)
        >>> coerce_arguments("%d;", ["1", "2", "3"])
        (1, 2, 3)
    """
    parsed = template if isinstance(template, Template) else parse_template(template)
    slots = list(parsed.iter_argument_slots())
    if not slots:
        return tuple(raw_args)

    by_index: dict[int, tuple[ConversionSpec, SlotRole]] = {}
    for index, spec, role in slots:
        previous = by_index.get(index)
        if previous is None or _RANK[_kind(spec, role)] > _RANK[_kind(*previous)]:
            by_index[index] = (spec, role)

    per_pass = parsed.argument_count
    coerced: list[object] = []
    for position, raw in enumerate(raw_args, start=1):
        slot_index = position if parsed.uses_positional else (position - 1) % per_pass + 1
        slot = by_index.get(slot_index)
        coerced.append(raw if slot is None else _coerce_one(raw, *slot))
    return tuple(coerced)


__all__ = [
    "coerce_arguments",
    "parse_integer",
    "parse_real",
]
