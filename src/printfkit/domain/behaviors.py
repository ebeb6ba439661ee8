"""Small demonstrations built on :func:`~.formatter.sprintf`.

Each function is pure: it computes values and returns formatted text,
leaving printing to the CLI.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .errors import CategoryMismatchError, InvalidMeasurementError
from .formatter import sprintf

CAR_CATEGORY = "car"

KM_PER_MILE = 1.609344
LITRES_PER_US_GALLON = 3.785411784

DEFAULT_COFFEE_PRICES: Mapping[str, float] = {
    "small": 2.50,
    "medium": 3.00,
    "large": 3.50,
}


# ---------------------------------------------------------------- temperature


def celsius_to_fahrenheit(celsius: float) -> float:
    """Convert degrees Celsius to Fahrenheit.

    >>> celsius_to_fahrenheit(100)
    212.0
    """
    return celsius * 9 / 5 + 32


def format_temperature(celsius: float) -> str:
    """Render one conversion line.

    >>> format_temperature(21.5)
    '  21.5°C =   70.7°F'
    """
    return sprintf("%6.1f°C = %6.1f°F", celsius, celsius_to_fahrenheit(celsius))


def temperature_table(start: float, stop: float, step: float) -> list[str]:
    """Conversion lines from *start* to *stop* inclusive.

    Raises:
        ValueError: If *step* is zero.

    Example:
        >>> temperature_table(0, 20, 10)
        ['   0.0°C =   32.0°F', '  10.0°C =   50.0°F', '  20.0°C =   68.0°F']
    """
    if step == 0:
        raise ValueError("step must not be zero")
    count = math.floor((stop - start) / step + 1e-9) + 1
    return [format_temperature(start + i * step) for i in range(max(count, 0))]


# ---------------------------------------------------------------- file names


def build_file_names(stem: str, count: int, extension: str, *, start: int = 1, width: int = 2) -> list[str]:
    """Generate numbered file names with a zero-padded counter.

    Example:
        >>> build_file_names("image", 3, "png", start=7)
        ['image07.png', 'image08.png', 'image09.png']
    """
    if count < 0:
        raise ValueError("count must not be negative")
    template = "%s%0*d.%s" if extension else "%s%0*d"
    extra = (extension,) if extension else ()
    return [sprintf(template, stem, width, number, *extra) for number in range(start, start + count)]


# ---------------------------------------------------------------- car record


@dataclass(frozen=True, slots=True)
class Car:
    """Descriptive record of a car; ``category`` tags what kind of vehicle it is."""

    make: str
    model: str
    year: int
    mileage_km: float
    category: str = CAR_CATEGORY


def ensure_car(record: object) -> Car:
    """Return *record* when it is a car, halting with an error otherwise.

    Raises:
        CategoryMismatchError: If *record* is not a :class:`Car` or its
            category tag is not ``"car"``.

    Example:
        >>> ensure_car(Car("VW", "Golf", 2019, 1000.0, category="truck"))  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        printfkit.domain.errors.CategoryMismatchError: expected a 'car' record, got 'truck'
    """
    if not isinstance(record, Car):
        raise CategoryMismatchError(f"expected a {CAR_CATEGORY!r} record, got {type(record).__name__}")
    if record.category != CAR_CATEGORY:
        raise CategoryMismatchError(f"expected a {CAR_CATEGORY!r} record, got {record.category!r}")
    return record


def describe_car(record: object) -> str:
    """Custom multi-line display of a car record.

    Example:
        >>> print(describe_car(Car("Volvo", "240", 1988, 312456.4)))
        Volvo 240 (1988)
          category: car
          mileage:  312,456 km
    """
    car = ensure_car(record)
    return "\n".join(
        [
            sprintf("%s %s (%d)", car.make, car.model, car.year),
            sprintf("  category: %s", car.category),
            sprintf("  mileage:  %'.0f km", car.mileage_km),
        ]
    )


# ---------------------------------------------------------------- mileage


@dataclass(frozen=True, slots=True)
class FuelConsumption:
    litres_per_100km: float
    miles_per_gallon: float


def fuel_consumption(distance_km: float, fuel_litres: float) -> FuelConsumption:
    """Compute consumption in l/100 km and US miles per gallon.

    Raises:
        InvalidMeasurementError: If distance or fuel is not positive.

    Example:
        >>> fuel_consumption(500, 40).litres_per_100km
        8.0
    """
    if distance_km <= 0:
        raise InvalidMeasurementError(f"distance must be positive, got {distance_km}")
    if fuel_litres <= 0:
        raise InvalidMeasurementError(f"fuel must be positive, got {fuel_litres}")
    miles = distance_km / KM_PER_MILE
    gallons = fuel_litres / LITRES_PER_US_GALLON
    return FuelConsumption(
        litres_per_100km=fuel_litres * 100 / distance_km,
        miles_per_gallon=miles / gallons,
    )


def format_mileage(distance_km: float, fuel_litres: float) -> str:
    """Render a consumption summary line.

    >>> format_mileage(500, 40)
    '500.0 km on 40.00 l: 8.00 l/100 km (29.4 mpg)'
    """
    result = fuel_consumption(distance_km, fuel_litres)
    return sprintf(
        "%.1f km on %.2f l: %.2f l/100 km (%.1f mpg)",
        distance_km,
        fuel_litres,
        result.litres_per_100km,
        result.miles_per_gallon,
    )


# ---------------------------------------------------------------- coffee


def coffee_price(size: str, prices: Mapping[str, float]) -> float | None:
    """Look up the price of *size*; ``None`` when it is not on the menu.

    >>> coffee_price(" Large", DEFAULT_COFFEE_PRICES)
    3.5
    >>> coffee_price("venti", DEFAULT_COFFEE_PRICES) is None
    True
    """
    return prices.get(size.strip().lower())


def format_price_list(
    prices: Mapping[str, float],
    sizes: Iterable[str] | None = None,
    *,
    currency: str = "$",
) -> list[str]:
    """One line per requested size, with a fallback line for unknown sizes.

    Example:
        >>> format_price_list(DEFAULT_COFFEE_PRICES, ["small", "venti"])
        ['small    $ 2.50', 'venti    not on the menu']
    """
    lines: list[str] = []
    for size in sizes if sizes is not None else prices:
        price = coffee_price(size, prices)
        if price is None:
            lines.append(sprintf("%-8s not on the menu", size))
        else:
            lines.append(sprintf("%-8s %s%5.2f", size, currency, price))
    return lines


__all__ = [
    "CAR_CATEGORY",
    "DEFAULT_COFFEE_PRICES",
    "Car",
    "FuelConsumption",
    "build_file_names",
    "celsius_to_fahrenheit",
    "coffee_price",
    "describe_car",
    "ensure_car",
    "format_mileage",
    "format_price_list",
    "format_temperature",
    "fuel_consumption",
    "temperature_table",
]
