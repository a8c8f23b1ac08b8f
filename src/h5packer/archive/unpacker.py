"""Unpacker: H5P container -> directory tree.

The destination is emptied before anything is extracted, so files from an
earlier extraction never survive next to fresh ones. A failure during
extraction is not rolled back; the destination may be partially populated.
"""

from __future__ import annotations

import os
from pathlib import Path

from h5packer.core.config import ConfigResolver
from h5packer.core.errors import ConfigError, FilesystemError, SourceNotFoundError
from h5packer.core.logging import get_logger

from .container import ContainerReader
from .types import OpEvent, OpPhase, UnpackResult
from .walk import clear_directory

log = get_logger(__name__)


def prepare_destination(destination: Path, *, dir_mode: int = 0o755) -> bool:
    """Create ``destination`` or empty it if it already exists.

    Returns:
        True if existing content was cleaned up.

    Raises:
        FilesystemError: If the path exists but is not a directory, cannot be
            created, or cannot be fully cleared.
    """
    if destination.is_dir():
        clear_directory(destination)
        log.info(f"Cleaned up destination directory: {destination}")
        return True

    if destination.exists() or destination.is_symlink():
        raise FilesystemError(f"Destination exists and is not a directory: {destination}")

    try:
        destination.mkdir(mode=dir_mode, parents=True)
    except OSError as e:
        raise FilesystemError(
            f"Cannot create destination directory {destination}: {e.strerror or e}"
        ) from e
    log.verbose(f"Created destination directory: {destination}")
    return False


def unpack(
    archive_file: str | os.PathLike[str],
    destination_dir: str | os.PathLike[str],
    *,
    resolver: ConfigResolver | None = None,
    debug_trace: bool | None = None,
) -> UnpackResult:
    """Extract the H5P container ``archive_file`` into ``destination_dir``.

    The archive is checked and opened before the destination is touched.

    Raises:
        SourceNotFoundError: Archive does not exist.
        ConfigError: unpack.dir_mode is not a valid directory mode.
        ContainerOpenError: Archive is not a readable zip container.
        FilesystemError: Destination cannot be created or cleared.
        ExtractionError: One or more entries could not be written.
    """
    _resolver = resolver or ConfigResolver()
    _debug_trace = debug_trace
    if _debug_trace is None:
        _debug_trace = _resolver.resolve_bool("debug.include_trace", False)
    dir_mode = _resolver.resolve_int("unpack.dir_mode", 0o755, base=8, valid=range(0o10000))
    if dir_mode is None:
        raise ConfigError("Config key 'unpack.dir_mode' must be set to a directory mode")

    archive = Path(archive_file)
    destination = Path(destination_dir)

    if not archive.exists():
        raise SourceNotFoundError(f"Archive file does not exist: {archive_file}")

    trace: list[OpEvent] = [
        OpEvent(op="unpack", phase=OpPhase.PLANNED, details={"archive": str(archive)})
    ]

    with ContainerReader.open(archive) as reader:
        entries = reader.list_entries()
        cleaned = prepare_destination(destination, dir_mode=dir_mode)
        log.verbose(f"Extracting {len(entries)} entries to {destination}")
        reader.extract_all(destination)

    trace.append(OpEvent(op="unpack", phase=OpPhase.OK, details={"files": len(entries)}))
    return UnpackResult(
        archive=archive,
        destination=destination,
        entries=entries,
        files_unpacked=len(entries),
        cleaned=cleaned,
        trace=trace if _debug_trace else [],
    )
