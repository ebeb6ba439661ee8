"""Formatting commands: render a template, or show how it parses.

Contents:
    * :func:`cli_format` - Render TEMPLATE with ARGS like shell ``printf``.
    * :func:`cli_parse` - List the placeholders of TEMPLATE.
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn

import lib_log_rich.runtime
import orjson
import rich_click as click
from rich.console import Console
from rich.table import Table

from printfkit.domain.coercion import coerce_arguments
from printfkit.domain.enums import OutputFormat
from printfkit.domain.errors import FormatError
from printfkit.domain.formatter import vsprintf
from printfkit.domain.template import ConversionSpec, StarArgument, Template, decode_escapes, parse_template

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)

# Negative numbers such as ``-5`` are arguments, not options.
_ARGUMENT_CONTEXT_SETTINGS: dict[str, Any] = {**CLICK_CONTEXT_SETTINGS, "ignore_unknown_options": True}


def _fail(exc: FormatError) -> NoReturn:
    logger.error("Formatting failed", extra={"error": str(exc), "error_type": type(exc).__name__})
    click.echo(f"Error: {exc}", err=True)
    raise SystemExit(ExitCode.INVALID_ARGUMENT) from exc


@click.command("format", context_settings=_ARGUMENT_CONTEXT_SETTINGS)
@click.argument("template")
@click.argument("args", nargs=-1)
@click.option("--strict/--no-strict", default=None, help="Fail when arguments are left over [config: printf.strict]")
@click.option("--cycle/--no-cycle", default=None, help="Reuse the template for surplus arguments [config: printf.cycle]")
@click.option(
    "--escapes/--no-escapes", default=None, help="Interpret backslash escapes in TEMPLATE [config: printf.escapes]"
)
@click.option("--raw", is_flag=True, default=False, help="Pass ARGS through as strings without numeric parsing")
@click.option("-n", "--no-newline", is_flag=True, default=False, help="Do not print a trailing newline")
@click.pass_context
def cli_format(
    ctx: click.Context,
    template: str,
    args: tuple[str, ...],
    strict: bool | None,
    cycle: bool | None,
    escapes: bool | None,
    raw: bool,
    no_newline: bool,
) -> None:
    r"""Render TEMPLATE with ARGS using printf-style placeholders.

    \b
    Examples:
      printfkit format "%05.1f|%-6s|%x" 3.14159 ab 255
      printfkit format --cycle "%s=%d\n" a 1 b 2
      printfkit format '%2$s %1$s' world hello
    """
    cli_ctx = get_cli_context(ctx)
    printf_settings = cli_ctx.settings().printf
    options = printf_settings.to_options(strict=strict, cycle=cycle)
    use_escapes = printf_settings.escapes if escapes is None else escapes
    source = decode_escapes(template, for_template=True) if use_escapes else template

    extra = {"command": "format", "argument_count": len(args), "strict": options.strict, "cycle": options.cycle}
    with lib_log_rich.runtime.bind(job_id="cli-format", extra=extra):
        logger.info("Formatting template", extra={"template": source})
        try:
            values = tuple(args) if raw else coerce_arguments(source, args)
            rendered = vsprintf(source, values, options)
        except FormatError as exc:
            _fail(exc)
        click.echo(rendered, nl=not no_newline)


def _size_label(value: int | StarArgument | None) -> int | str | None:
    if isinstance(value, StarArgument):
        return "*" if value.index is None else f"*{value.index}$"
    return value


def describe_placeholders(template: Template) -> list[dict[str, Any]]:
    """JSON-ready description of each placeholder in *template*.

    Example:
        >>> describe_placeholders(parse_template("%-5.2hd"))[0]["length"]
        'h'
    """
    return [_describe(spec) for spec in template.placeholders]


def _describe(spec: ConversionSpec) -> dict[str, Any]:
    return {
        "source": spec.source,
        "column": spec.position,
        "argument": spec.argument,
        "flags": "".join(sorted(spec.flags)),
        "width": _size_label(spec.width),
        "precision": _size_label(spec.precision),
        "length": spec.length.value if spec.length is not None else None,
        "conversion": spec.conversion.value,
    }


def _render_table(template: Template) -> None:
    table = Table(title=f"Placeholders in {template.source!r}")
    for column in ("#", "source", "column", "argument", "flags", "width", "precision", "length", "conversion"):
        table.add_column(column, no_wrap=True)
    for number, row in enumerate(describe_placeholders(template), start=1):
        table.add_row(str(number), *("" if value is None else str(value) for value in row.values()))
    Console().print(table)


@click.command("parse", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("template")
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="Output format (human-readable table or JSON)",
)
@click.option(
    "--escapes/--no-escapes", default=None, help="Interpret backslash escapes in TEMPLATE [config: printf.escapes]"
)
@click.pass_context
def cli_parse(ctx: click.Context, template: str, output_format: str, escapes: bool | None) -> None:
    """Show the placeholders TEMPLATE consists of."""
    cli_ctx = get_cli_context(ctx)
    use_escapes = cli_ctx.settings().printf.escapes if escapes is None else escapes
    source = decode_escapes(template, for_template=True) if use_escapes else template
    fmt = OutputFormat(output_format.lower())

    with lib_log_rich.runtime.bind(job_id="cli-parse", extra={"command": "parse", "format": fmt.value}):
        logger.info("Parsing template", extra={"template": source})
        try:
            parsed = parse_template(source)
        except FormatError as exc:
            _fail(exc)
        if fmt is OutputFormat.JSON:
            payload = {
                "template": parsed.source,
                "positional": parsed.uses_positional,
                "argument_count": parsed.argument_count,
                "placeholders": describe_placeholders(parsed),
            }
            click.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
        else:
            _render_table(parsed)


__all__ = ["cli_format", "cli_parse", "describe_placeholders"]
