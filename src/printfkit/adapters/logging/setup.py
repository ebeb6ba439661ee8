"""lib_log_rich runtime setup shared by every entry point.

The console script, ``python -m printfkit`` and the tests all call
:func:`init_logging`; the runtime is created on the first call only.
Standard ``logging`` records (the domain modules log through
``logging.getLogger``) are bridged into the lib_log_rich pipeline.
"""

from __future__ import annotations

from typing import cast

import lib_log_rich.config
import lib_log_rich.runtime
from lib_layered_config import Config
from pydantic import BaseModel, ConfigDict

from printfkit import __init__conf__


class LoggingConfigModel(BaseModel):
    """The ``[lib_log_rich]`` section.

    Only ``service`` and ``environment`` are interpreted here; every other
    key is handed to ``lib_log_rich.runtime.RuntimeConfig`` unchanged.

    Example:
        >>> LoggingConfigModel(console_level="DEBUG").model_dump(exclude_none=True)
        {'environment': 'prod', 'console_level': 'DEBUG'}
    """

    service: str | None = None
    environment: str = "prod"

    model_config = ConfigDict(extra="allow")


def _build_runtime_config(config: Config) -> lib_log_rich.runtime.RuntimeConfig:
    """Map the ``[lib_log_rich]`` section onto a RuntimeConfig.

    ``service`` defaults to the distribution name when not configured.
    """
    section: object = config.get("lib_log_rich", default={})
    parsed = LoggingConfigModel.model_validate(cast("dict[str, object]", section) if section else {})
    passthrough = parsed.model_dump(exclude={"service", "environment"}, exclude_none=True)
    return lib_log_rich.runtime.RuntimeConfig(
        service=parsed.service or __init__conf__.name,
        environment=parsed.environment,
        **passthrough,
    )


def init_logging(config: Config) -> None:
    """Start the lib_log_rich runtime once per process.

    Enables ``.env`` loading so ``LOG_*`` variables apply, builds the runtime
    from *config* and attaches the standard ``logging`` bridge. Later calls
    return immediately.

    Args:
        config: Loaded configuration holding the ``[lib_log_rich]`` section.
    """
    if lib_log_rich.runtime.is_initialised():
        return
    lib_log_rich.config.enable_dotenv()
    lib_log_rich.runtime.init(_build_runtime_config(config))
    lib_log_rich.runtime.attach_std_logging()


__all__ = [
    "LoggingConfigModel",
    "init_logging",
]
