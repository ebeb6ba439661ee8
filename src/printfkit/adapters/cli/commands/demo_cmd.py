"""Demonstration commands built on the formatter.

Contents:
    * :func:`cli_demo` - Group holding the demonstrations.
    * ``temperature``, ``filenames``, ``car``, ``mileage``, ``coffee`` subcommands.
"""

from __future__ import annotations

import logging
from typing import Any

import lib_log_rich.runtime
import rich_click as click

from printfkit.domain.behaviors import (
    CAR_CATEGORY,
    Car,
    build_file_names,
    describe_car,
    format_mileage,
    format_price_list,
    temperature_table,
)
from printfkit.domain.errors import CategoryMismatchError, InvalidMeasurementError

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)

_NUMERIC_CONTEXT_SETTINGS: dict[str, Any] = {**CLICK_CONTEXT_SETTINGS, "ignore_unknown_options": True}


def _echo_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


@click.group("demo", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_demo() -> None:
    """Small programs that format their output with printf templates."""


@cli_demo.command("temperature", context_settings=_NUMERIC_CONTEXT_SETTINGS)
@click.option("--start", type=float, default=0.0, show_default=True, help="First Celsius value")
@click.option("--stop", type=float, default=100.0, show_default=True, help="Last Celsius value (inclusive)")
@click.option("--step", type=float, default=10.0, show_default=True, help="Increment between rows")
def cli_demo_temperature(start: float, stop: float, step: float) -> None:
    """Print a Celsius to Fahrenheit conversion table."""
    extra = {"command": "demo temperature", "start": start, "stop": stop, "step": step}
    with lib_log_rich.runtime.bind(job_id="cli-demo-temperature", extra=extra):
        logger.info("Building temperature table")
        try:
            lines = temperature_table(start, stop, step)
        except ValueError as exc:
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(ExitCode.INVALID_ARGUMENT) from exc
        _echo_lines(lines)


@cli_demo.command("filenames", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("stem")
@click.option("--count", type=click.IntRange(min=0), default=3, show_default=True, help="Number of names")
@click.option("--extension", default="png", show_default=True, help="File extension without the dot")
@click.option("--start", type=int, default=1, show_default=True, help="First counter value")
@click.option("--width", type=click.IntRange(min=0), default=2, show_default=True, help="Zero-padded counter width")
def cli_demo_filenames(stem: str, count: int, extension: str, start: int, width: int) -> None:
    """Generate numbered file names such as image01.png."""
    extra = {"command": "demo filenames", "stem": stem, "count": count}
    with lib_log_rich.runtime.bind(job_id="cli-demo-filenames", extra=extra):
        logger.info("Generating file names")
        _echo_lines(build_file_names(stem, count, extension, start=start, width=width))


@cli_demo.command("car", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--make", default="Volvo", show_default=True)
@click.option("--model", default="240", show_default=True)
@click.option("--year", type=int, default=1988, show_default=True)
@click.option("--mileage", type=click.FloatRange(min=0), default=312456.4, show_default=True, help="Odometer in km")
@click.option("--category", default=CAR_CATEGORY, show_default=True, help="Record category tag")
def cli_demo_car(make: str, model: str, year: int, mileage: float, category: str) -> None:
    """Display a car record; records of any other category are rejected."""
    record = Car(make=make, model=model, year=year, mileage_km=mileage, category=category)
    with lib_log_rich.runtime.bind(job_id="cli-demo-car", extra={"command": "demo car", "category": category}):
        logger.info("Describing car record")
        try:
            text = describe_car(record)
        except CategoryMismatchError as exc:
            logger.error("Rejected record", extra={"error": str(exc)})
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(ExitCode.DATA_ERROR) from exc
        click.echo(text)


@cli_demo.command("mileage", context_settings=_NUMERIC_CONTEXT_SETTINGS)
@click.argument("distance_km", type=float)
@click.argument("fuel_litres", type=float)
def cli_demo_mileage(distance_km: float, fuel_litres: float) -> None:
    """Compute fuel consumption for DISTANCE_KM driven on FUEL_LITRES."""
    extra = {"command": "demo mileage", "distance_km": distance_km, "fuel_litres": fuel_litres}
    with lib_log_rich.runtime.bind(job_id="cli-demo-mileage", extra=extra):
        logger.info("Computing fuel consumption")
        try:
            line = format_mileage(distance_km, fuel_litres)
        except InvalidMeasurementError as exc:
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(ExitCode.INVALID_ARGUMENT) from exc
        click.echo(line)


@cli_demo.command("coffee", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("sizes", nargs=-1)
@click.pass_context
def cli_demo_coffee(ctx: click.Context, sizes: tuple[str, ...]) -> None:
    """List coffee prices from the [coffee] configuration section.

    Without SIZES every configured size is listed; unknown sizes get a
    fallback line instead of a price.
    """
    coffee = get_cli_context(ctx).settings().coffee
    with lib_log_rich.runtime.bind(job_id="cli-demo-coffee", extra={"command": "demo coffee", "sizes": list(sizes)}):
        logger.info("Listing coffee prices")
        _echo_lines(format_price_list(coffee.prices, sizes or None, currency=coffee.currency))


__all__ = [
    "cli_demo",
    "cli_demo_car",
    "cli_demo_coffee",
    "cli_demo_filenames",
    "cli_demo_mileage",
    "cli_demo_temperature",
]
