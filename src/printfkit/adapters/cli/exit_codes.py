"""POSIX-conventional exit codes for CLI error paths.

Signal codes (130, 141, 143) are informational only; ``lib_cli_exit_tools``
translates signals itself.

Contents:
    * :class:`ExitCode` - IntEnum of all exit codes used by this application.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes following errno and sysexits.h where they apply.

    * 0, 1: generic success and failure
    * 22: EINVAL, a template or argument the formatter rejects
    * 65: EX_DATAERR, input data of the wrong kind (e.g. a non-car record)
    * 78: EX_CONFIG, invalid configuration values
    * 128+N: signal N (informational only)

    Example:
        >>> int(ExitCode.INVALID_ARGUMENT)
        22
        >>> ExitCode.CONFIG_ERROR
        <ExitCode.CONFIG_ERROR: 78>
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    INVALID_ARGUMENT = 22
    DATA_ERROR = 65
    CONFIG_ERROR = 78
    SIGNAL_INT = 130
    BROKEN_PIPE = 141
    SIGNAL_TERM = 143


__all__ = ["ExitCode"]
