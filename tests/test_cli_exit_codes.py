"""Exit code integration tests: every error path maps to its documented code."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from click.testing import CliRunner, Result
from lib_layered_config import Config

from printfkit.adapters import cli as cli_mod
from printfkit.adapters.cli.exit_codes import ExitCode
from printfkit.composition import build_testing


@pytest.mark.os_agnostic
def test_when_config_section_is_invalid_it_exits_with_code_22(
    cli_runner: CliRunner,
    production_factory: Callable[[], Any],
) -> None:
    result: Result = cli_runner.invoke(
        cli_mod.cli, ["config", "--section", "nonexistent_section_that_does_not_exist"], obj=production_factory
    )

    assert result.exit_code == 22
    assert "not found" in result.stderr


@pytest.mark.os_agnostic
def test_when_template_is_malformed_it_exits_with_code_22(
    cli_runner: CliRunner,
    testing_factory: Callable[[], Any],
) -> None:
    result: Result = cli_runner.invoke(cli_mod.cli, ["format", "%k"], obj=testing_factory)

    assert result.exit_code == 22
    assert "Error: unknown conversion 'k'" in result.stderr


@pytest.mark.os_agnostic
def test_when_measurement_is_invalid_it_exits_with_code_22(
    cli_runner: CliRunner,
    testing_factory: Callable[[], Any],
) -> None:
    result: Result = cli_runner.invoke(cli_mod.cli, ["demo", "mileage", "0", "40"], obj=testing_factory)

    assert result.exit_code == 22


@pytest.mark.os_agnostic
def test_when_record_is_not_a_car_it_exits_with_code_65(
    cli_runner: CliRunner,
    testing_factory: Callable[[], Any],
) -> None:
    result: Result = cli_runner.invoke(cli_mod.cli, ["demo", "car", "--category", "bicycle"], obj=testing_factory)

    assert result.exit_code == 65
    assert "got 'bicycle'" in result.stderr


@pytest.mark.os_agnostic
def test_when_printf_settings_are_invalid_it_exits_with_code_78(
    cli_runner: CliRunner,
    config_factory: Callable[[dict[str, Any]], Config],
    inject_config: Callable[[Config], Callable[[], Any]],
) -> None:
    factory = inject_config(config_factory({"printf": {"strict": "sometimes"}}))

    result: Result = cli_runner.invoke(cli_mod.cli, ["parse", "%d"], obj=factory)

    assert result.exit_code == 78
    assert "invalid [printf] configuration" in result.stderr


@pytest.mark.os_agnostic
def test_when_override_is_malformed_it_exits_with_usage_code_2(
    cli_runner: CliRunner,
    testing_factory: Callable[[], Any],
) -> None:
    result: Result = cli_runner.invoke(cli_mod.cli, ["--set", "printf=1", "format", "x"], obj=testing_factory)

    assert result.exit_code == 2


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("argv", "expected"),
    [
        (["format", "%s", "ok"], ExitCode.SUCCESS),
        (["format", "%d"], ExitCode.INVALID_ARGUMENT),
        (["demo", "car", "--category", "truck"], ExitCode.DATA_ERROR),
        (["--set", "coffee.prices.small=-1", "demo", "coffee"], ExitCode.CONFIG_ERROR),
    ],
)
def test_main_returns_the_documented_exit_code(
    managed_traceback_state: None,
    argv: list[str],
    expected: ExitCode,
) -> None:
    assert cli_mod.main(argv, services_factory=build_testing) == expected
