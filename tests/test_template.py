"""Template grammar stories: placeholders, literals, argument styles and escapes."""

from __future__ import annotations

import pytest

from printfkit.domain.enums import ConversionType, LengthModifier
from printfkit.domain.errors import TemplateSyntaxError
from printfkit.domain.template import (
    MAX_FIELD_SIZE,
    ConversionSpec,
    Literal,
    StarArgument,
    decode_escapes,
    parse_template,
)


def _only_placeholder(source: str) -> ConversionSpec:
    placeholders = parse_template(source).placeholders
    assert len(placeholders) == 1
    return placeholders[0]


# ======================== placeholder fields ========================


@pytest.mark.os_agnostic
def test_when_every_field_is_present_each_is_parsed() -> None:
    spec = _only_placeholder("%2$-+08.3lf")

    assert spec.source == "%2$-+08.3lf"
    assert spec.argument == 2
    assert spec.flags == frozenset("-+0")
    assert spec.width == 8
    assert spec.precision == 3
    assert spec.length is LengthModifier.LONG
    assert spec.conversion is ConversionType.FIXED_LOWER


@pytest.mark.os_agnostic
def test_when_placeholder_is_bare_optional_fields_are_absent() -> None:
    spec = _only_placeholder("%s")

    assert spec.argument is None
    assert spec.flags == frozenset()
    assert spec.width is None
    assert spec.precision is None
    assert spec.length is None


@pytest.mark.os_agnostic
def test_a_lone_dot_means_precision_zero() -> None:
    assert _only_placeholder("%.d").precision == 0


@pytest.mark.os_agnostic
def test_leading_zero_is_a_flag_not_an_argument_index() -> None:
    spec = _only_placeholder("%05d")

    assert spec.argument is None
    assert spec.flags == frozenset("0")
    assert spec.width == 5


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("source", "length"),
    [
        ("%hhd", LengthModifier.CHAR),
        ("%hd", LengthModifier.SHORT),
        ("%ld", LengthModifier.LONG),
        ("%lld", LengthModifier.LONG_LONG),
        ("%qd", LengthModifier.QUAD),
        ("%jd", LengthModifier.INTMAX),
        ("%zu", LengthModifier.SIZE),
        ("%td", LengthModifier.PTRDIFF),
        ("%Lf", LengthModifier.LONG_DOUBLE),
    ],
)
def test_every_length_modifier_is_recognised(source: str, length: LengthModifier) -> None:
    assert _only_placeholder(source).length is length


@pytest.mark.os_agnostic
def test_star_width_and_precision_become_star_arguments() -> None:
    spec = _only_placeholder("%*.*f")

    assert spec.width == StarArgument()
    assert spec.precision == StarArgument()


@pytest.mark.os_agnostic
def test_numbered_star_arguments_keep_their_index() -> None:
    spec = _only_placeholder("%1$*2$.*3$f")

    assert spec.width == StarArgument(2)
    assert spec.precision == StarArgument(3)
    assert spec.is_positional
    assert not spec.is_sequential


@pytest.mark.os_agnostic
def test_duplicate_flags_are_accepted() -> None:
    assert _only_placeholder("%--5d").flags == frozenset("-")


@pytest.mark.os_agnostic
def test_position_is_the_column_of_the_percent_sign() -> None:
    assert _only_placeholder("abc%d").position == 3


# ======================== literals ========================


@pytest.mark.os_agnostic
def test_double_percent_collapses_into_the_surrounding_literal() -> None:
    template = parse_template("100%% of %s%%")

    assert template.segments[0] == Literal("100% of ")
    assert isinstance(template.segments[1], ConversionSpec)
    assert template.segments[2] == Literal("%")


@pytest.mark.os_agnostic
def test_template_without_placeholders_is_a_single_literal() -> None:
    template = parse_template("plain text")

    assert template.segments == (Literal("plain text"),)
    assert template.argument_count == 0


@pytest.mark.os_agnostic
def test_empty_template_has_no_segments() -> None:
    assert parse_template("").segments == ()


# ======================== argument accounting ========================


@pytest.mark.os_agnostic
def test_sequential_argument_count_includes_star_slots() -> None:
    assert parse_template("%*d %.*s %d").argument_count == 5


@pytest.mark.os_agnostic
def test_numbered_argument_count_is_the_highest_index() -> None:
    template = parse_template("%3$s %1$s %1$s")

    assert template.uses_positional
    assert template.argument_count == 3


@pytest.mark.os_agnostic
def test_argument_slots_name_the_role_of_each_reference() -> None:
    slots = [(index, role) for index, _spec, role in parse_template("%*d|%s").iter_argument_slots()]

    assert slots == [(1, "width"), (2, "value"), (3, "value")]


@pytest.mark.os_agnostic
def test_parsed_templates_are_cached() -> None:
    assert parse_template("%s and %d") is parse_template("%s and %d")


# ======================== syntax errors ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("source", "fragment"),
    [
        ("abc%", "incomplete"),
        ("%5", "incomplete"),
        ("%-", "incomplete"),
        ("%y", "unknown conversion"),
        ("%n", "not supported"),
        ("%p", "not supported"),
        ("%0$d", "1 or greater"),
        ("%*0$d", "1 or greater"),
    ],
)
def test_malformed_placeholders_are_rejected(source: str, fragment: str) -> None:
    with pytest.raises(TemplateSyntaxError, match=fragment):
        parse_template(source)


@pytest.mark.os_agnostic
def test_syntax_error_reports_the_column() -> None:
    with pytest.raises(TemplateSyntaxError) as exc_info:
        parse_template("ok %d then %y")

    assert exc_info.value.position == 11
    assert "(at column 11)" in str(exc_info.value)


@pytest.mark.os_agnostic
@pytest.mark.parametrize("source", ["%1$s %s", "%s %2$s", "%1$*d", "%*2$d"])
def test_mixing_numbered_and_sequential_references_is_rejected(source: str) -> None:
    with pytest.raises(TemplateSyntaxError, match="cannot mix"):
        parse_template(source)


# ======================== escapes ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("raw", "decoded"),
    [
        (r"a\nb", "a\nb"),
        (r"\t", "\t"),
        (r"\\", "\\"),
        (r"\"q\"", '"q"'),
        (r"\x41", "A"),
        (r"\101", "A"),
        (r"\0101", "A"),
        (r"\0", "\0"),
        (r"\a\b\f\v\r", "\a\b\f\v\r"),
    ],
)
def test_decode_escapes_handles_shell_printf_sequences(raw: str, decoded: str) -> None:
    assert decode_escapes(raw) == decoded


@pytest.mark.os_agnostic
def test_decode_escapes_keeps_unknown_sequences_verbatim() -> None:
    assert decode_escapes(r"\q and \z") == r"\q and \z"


@pytest.mark.os_agnostic
def test_decode_escapes_keeps_a_trailing_backslash() -> None:
    assert decode_escapes("end\\") == "end\\"


@pytest.mark.os_agnostic
def test_decode_escapes_leaves_percent_signs_alone() -> None:
    assert decode_escapes(r"%d%%\n") == "%d%%\n"


@pytest.mark.os_agnostic
@pytest.mark.parametrize("raw", [r"\045d", r"\x25d", r"\45d"])
def test_escaped_percent_stays_literal_when_decoding_a_template(raw: str) -> None:
    decoded = decode_escapes(raw, for_template=True)

    assert decoded == "%%d"
    assert parse_template(decoded).placeholders == ()


@pytest.mark.os_agnostic
def test_escaped_percent_decodes_to_a_bare_percent_outside_templates() -> None:
    assert decode_escapes(r"\045d") == "%d"


# ======================== field size limits ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("source", "what"),
    [
        ("%.9999999999f", "precision"),
        ("%9999999999999999999s", "width"),
        ("%.9999999999d", "precision"),
        ("%99999999999$s", "argument index"),
        ("%*99999999999$d", "argument index"),
        ("%" + "9" * 5000 + "d", "width"),
    ],
)
def test_oversized_numbers_are_rejected_as_syntax_errors(source: str, what: str) -> None:
    with pytest.raises(TemplateSyntaxError, match=f"{what} exceeds the maximum") as exc:
        parse_template(source)

    assert exc.value.position == 0


@pytest.mark.os_agnostic
def test_the_largest_allowed_width_is_accepted() -> None:
    assert _only_placeholder(f"%{MAX_FIELD_SIZE}d").width == MAX_FIELD_SIZE


@pytest.mark.os_agnostic
def test_leading_zeros_do_not_count_against_the_limit() -> None:
    spec = _only_placeholder("%.0000000000005f")

    assert spec.precision == 5
