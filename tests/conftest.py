"""Shared pytest fixtures for CLI and module-entry tests.

Centralizes test infrastructure following clean architecture principles:
- All shared fixtures live here
- Tests import fixtures implicitly via pytest's conftest discovery
- Fixtures use descriptive names that read as plain English
"""

from __future__ import annotations

import contextlib
import os
import re
import tempfile
from collections.abc import Callable, Iterator
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import lib_log_rich.runtime
import pytest
from click.testing import CliRunner
from lib_layered_config import Config
from lib_layered_config.domain.config import SourceInfo

if TYPE_CHECKING:
    from printfkit.composition import AppServices

_COVERAGE_BASENAME = ".coverage.printfkit"


def _purge_stale_coverage_files(cov_path: Path) -> None:
    """Delete leftover SQLite database and journal files from crashed runs.

    A prior crash can leave ``-journal``, ``-wal``, or ``-shm`` sidecar
    files next to the coverage database. SQLite interprets those as an
    incomplete transaction and may raise ``database is locked`` on the
    next open.
    """
    for suffix in ("", "-journal", "-wal", "-shm"):
        with contextlib.suppress(FileNotFoundError):
            Path(str(cov_path) + suffix).unlink()


def pytest_configure(config: pytest.Config) -> None:
    """Redirect the coverage database to a **local** temp directory.

    coverage.py stores trace data in a SQLite database, which needs POSIX
    file locking that network mounts do not reliably provide. This hook
    runs before ``pytest-cov`` creates its ``Coverage()`` object, so the
    ``COVERAGE_FILE`` value is picked up however pytest is invoked.
    """
    if "COVERAGE_FILE" not in os.environ:
        cov_path = Path(tempfile.gettempdir()) / _COVERAGE_BASENAME
        _purge_stale_coverage_files(cov_path)
        os.environ["COVERAGE_FILE"] = str(cov_path)


ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


def _services_with(config_loader: Callable[..., Config]) -> AppServices:
    """Production services with the configuration loader replaced."""
    from printfkit.composition import AppServices, build_production

    prod = build_production()
    return AppServices(
        get_config=config_loader,
        get_default_config_path=prod.get_default_config_path,
        display_config=prod.display_config,
        load_settings=prod.load_settings,
        init_logging=prod.init_logging,
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test.

    Click 8.x provides separate result.stdout and result.stderr attributes.
    Use result.stdout for clean output (e.g., JSON parsing) to avoid
    log messages on stderr contaminating the output.

    Example:
        def test_help(cli_runner: CliRunner) -> None:
            result = cli_runner.invoke(cli, ["--help"])
            assert result.exit_code == 0
    """
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_logging_runtime() -> Iterator[None]:
    """Shut down any lib_log_rich runtime a test started.

    Commands start the runtime inside CliRunner's captured streams; a runtime
    left behind would keep writing to those closed streams in later tests.
    """
    yield
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.shutdown()


@pytest.fixture
def production_factory() -> Callable[[], AppServices]:
    """Provide the production services factory for tests.

    Use this when invoking CLI commands that don't need custom injection.

    Example:
        def test_info(cli_runner: CliRunner, production_factory: Callable[[], AppServices]) -> None:
            result = cli_runner.invoke(cli, ["info"], obj=production_factory)
            assert result.exit_code == 0
    """
    from printfkit.composition import build_production

    return build_production


@pytest.fixture
def testing_factory() -> Callable[[], AppServices]:
    """Provide the in-memory services factory: empty config, default settings."""
    from printfkit.composition import build_testing

    return build_testing


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string.

    Useful for comparing rich table output against expected plain text.
    """

    def _strip(value: str) -> str:
        return _remove_ansi_codes(value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test.

    Use this whenever a test reads or mutates the global
    ``lib_cli_exit_tools.config`` traceback flags.

    Example:
        def test_traceback_flag(managed_traceback_state: None) -> None:
            lib_cli_exit_tools.config.traceback = True
            # State automatically restored after test
    """
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config cache before each test.

    Note: Only clears before, not after, to avoid errors when the function
    has been monkeypatched during the test (losing cache_clear method).
    """
    from printfkit.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts.

    Builds actual ``lib_layered_config.Config`` objects without filesystem I/O.
    The second argument (empty dict) represents no source provenance info.

    Example:
        def test_printf_section(config_factory: Callable[[dict[str, Any]], Config]) -> None:
            config = config_factory({"printf": {"strict": True}})
            assert config.get("printf.strict") is True
    """

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def source_info_factory() -> Callable[[str, str, str | None], SourceInfo]:
    """Create SourceInfo dicts for provenance-tracking tests.

    If ``lib_layered_config`` renames SourceInfo keys, only this factory
    needs updating.

    Example:
        def test_provenance(source_info_factory: Callable[..., SourceInfo]) -> None:
            info = source_info_factory("printf.strict", "user", "/home/user/.config/...")
            assert info["layer"] == "user"
    """

    def _factory(key: str, layer: str, path: str | None = None) -> SourceInfo:
        return {"layer": layer, "path": path, "key": key}

    return _factory


@pytest.fixture
def inject_config(
    clear_config_cache: None,
) -> Callable[[Config], Callable[[], AppServices]]:
    """Return a factory that provides test services with injected Config.

    Only replaces the I/O boundary (``get_config``), not the Config object
    itself, so settings validation and display run for real.

    Example:
        def test_strict_from_config(
            cli_runner: CliRunner,
            config_factory: Callable[[dict[str, Any]], Config],
            inject_config: Callable[[Config], Callable[[], AppServices]],
        ) -> None:
            factory = inject_config(config_factory({"printf": {"strict": True}}))
            result = cli_runner.invoke(cli, ["format", "%d", "1", "2"], obj=factory)
            assert result.exit_code == 22
    """

    def _inject(config: Config) -> Callable[[], AppServices]:
        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        test_services = _services_with(_fake_get_config)
        return lambda: test_services

    return _inject


@pytest.fixture
def inject_config_with_profile_capture(
    clear_config_cache: None,
) -> Callable[[Config, list[str | None]], Callable[[], AppServices]]:
    """Return a factory that captures profile arguments during get_config.

    Profile values passed to get_config are appended to the capture list,
    for tests verifying ``--profile`` propagation.

    Example:
        def test_profile_passed(cli_runner, config_factory, inject_config_with_profile_capture) -> None:
            captured: list[str | None] = []
            factory = inject_config_with_profile_capture(config_factory({}), captured)
            cli_runner.invoke(cli, ["--profile", "staging", "config"], obj=factory)
            assert captured == ["staging"]
    """

    def _inject(config: Config, captured_profiles: list[str | None]) -> Callable[[], AppServices]:
        def _capturing_get_config(*, profile: str | None = None, **_kwargs: Any) -> Config:
            captured_profiles.append(profile)
            return config

        test_services = _services_with(_capturing_get_config)
        return lambda: test_services

    return _inject


@pytest.fixture
def config_cli_context(
    config_factory: Callable[[dict[str, Any]], Config],
    inject_config: Callable[[Config], Callable[[], AppServices]],
) -> Callable[[dict[str, Any]], Callable[[], AppServices]]:
    """Create a services factory straight from a config dict.

    Simpler than ``inject_config`` when you don't need the Config object.

    Example:
        def test_coffee_currency(cli_runner, config_cli_context) -> None:
            factory = config_cli_context({"coffee": {"currency": "€"}})
            result = cli_runner.invoke(cli, ["demo", "coffee"], obj=factory)
            assert "€" in result.stdout
    """

    def _create(config_data: dict[str, Any]) -> Callable[[], AppServices]:
        return inject_config(config_factory(config_data))

    return _create
