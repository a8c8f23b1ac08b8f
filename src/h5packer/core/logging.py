"""Console logging for h5packer.

Lines look like ``[info] Writing to disk ...``. Errors go to stderr, all
other levels to stdout. A record is printed when its level is at or below
the global verbosity:

    QUIET    errors and warnings
    NORMAL   + progress notices (the default)
    VERBOSE  + per-operation detail
    DEBUG    + per-entry detail

Usage:
    from h5packer.core.logging import get_logger

    log = get_logger(__name__)
    log.verbose(f"Packing {n} files")
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO

from h5packer.core.config import LoggingPolicy
from h5packer.core.log_bus import LogRecord, get_log_bus


class VerbosityLevel(IntEnum):
    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3


# level name -> (lowest verbosity that shows it, ANSI color)
_LEVELS: dict[str, tuple[VerbosityLevel, str]] = {
    "DEBUG": (VerbosityLevel.DEBUG, "\033[36m"),
    "VERBOSE": (VerbosityLevel.VERBOSE, "\033[34m"),
    "INFO": (VerbosityLevel.NORMAL, "\033[32m"),
    "WARNING": (VerbosityLevel.QUIET, "\033[33m"),
    "ERROR": (VerbosityLevel.QUIET, "\033[31m"),
}
_RESET = "\033[0m"

_verbosity: VerbosityLevel = VerbosityLevel.NORMAL
_use_colors: bool = True


def set_verbosity(level: int | VerbosityLevel) -> None:
    global _verbosity
    _verbosity = VerbosityLevel(level)


def get_verbosity() -> VerbosityLevel:
    return _verbosity


def set_colors(enabled: bool) -> None:
    """Allow ANSI colors; they are still only used when the stream is a tty."""
    global _use_colors
    _use_colors = enabled


def apply_logging_policy(policy: LoggingPolicy) -> None:
    set_verbosity(VerbosityLevel[policy.level_name.upper()])
    set_colors(policy.color)


class H5PackerLogger:
    """Named logger bound to the global verbosity and the log bus."""

    def __init__(self, name: str) -> None:
        self.name = name

    @staticmethod
    def _stream(level_name: str) -> TextIO:
        return sys.stderr if level_name == "ERROR" else sys.stdout

    def _emit(self, level_name: str, message: str) -> None:
        threshold, color = _LEVELS[level_name]
        if threshold > get_verbosity():
            return

        tag = f"[{level_name.lower()}]"
        get_log_bus().publish(
            LogRecord(level_name=level_name, plain=f"{tag} {message}", logger_name=self.name)
        )

        stream = self._stream(level_name)
        if _use_colors and stream.isatty():
            tag = f"{color}{tag}{_RESET}"
        print(f"{tag} {message}", file=stream)

    def debug(self, message: str) -> None:
        self._emit("DEBUG", message)

    def verbose(self, message: str) -> None:
        self._emit("VERBOSE", message)

    def info(self, message: str) -> None:
        self._emit("INFO", message)

    def warning(self, message: str) -> None:
        self._emit("WARNING", message)

    def error(self, message: str) -> None:
        """Shown at every verbosity, quiet included."""
        self._emit("ERROR", message)


_LOGGERS: dict[str, H5PackerLogger] = {}


def get_logger(name: str = __name__) -> H5PackerLogger:
    """Return the shared logger for ``name``, creating it on first use."""
    return _LOGGERS.setdefault(name, H5PackerLogger(name))
