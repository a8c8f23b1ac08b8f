"""Error handling with friendly messages.

Every error carries an :class:`ErrorKind` so library callers can tell the
failure modes apart without parsing message text.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    ARGUMENT = "argument"
    SOURCE_NOT_FOUND = "source_not_found"
    CONTAINER_OPEN = "container_open"
    CONTAINER_CLOSE = "container_close"
    EXTRACTION = "extraction"
    FILESYSTEM = "filesystem"
    CONFIG = "config"
    INTERNAL = "internal"


class H5PackerError(Exception):
    """Base exception for all h5packer errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ArgumentError(H5PackerError):
    """Wrong number or shape of command-line arguments."""

    kind = ErrorKind.ARGUMENT


class SourceNotFoundError(H5PackerError):
    """Pack source directory or unpack archive does not exist."""

    kind = ErrorKind.SOURCE_NOT_FOUND


class ContainerOpenError(H5PackerError):
    """Container cannot be opened for reading or writing."""

    kind = ErrorKind.CONTAINER_OPEN

    def __init__(self, path: str, reason: str, *, for_write: bool) -> None:
        action = "writing" if for_write else "extraction"
        super().__init__(f"Cannot open <{path}> for {action}: {reason}")
        self.path = path


class ContainerCloseError(H5PackerError):
    """Container could not be finalized after entries were written."""

    kind = ErrorKind.CONTAINER_CLOSE

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Could not close the archive <{path}>: {reason}",
            "Do not use the file at this path; it may be incomplete",
        )
        self.path = path


class ExtractionError(H5PackerError):
    """One or more entries could not be materialized."""

    kind = ErrorKind.EXTRACTION


class FilesystemError(H5PackerError):
    """A filesystem operation outside the container failed."""

    kind = ErrorKind.FILESYSTEM


class ConfigError(H5PackerError):
    """Configuration error."""

    kind = ErrorKind.CONFIG
