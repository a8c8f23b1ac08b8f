"""Packer: directory tree -> H5P container.

Every entry is stored with deflate, including empty and already-compressed
files, so the compression method of a container never depends on its content.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from h5packer.core.config import ConfigResolver
from h5packer.core.errors import FilesystemError, SourceNotFoundError
from h5packer.core.logging import get_logger

from .container import ContainerWriter
from .types import ArchiveEntry, OpEvent, OpPhase, PackResult, ProgressState
from .walk import iter_source_files

log = get_logger(__name__)

ProgressCallback = Callable[[ProgressState], None]


def canonical_source_root(source_dir: str | os.PathLike[str]) -> Path:
    """Resolve ``source_dir`` to an absolute, symlink-free directory path.

    Raises:
        SourceNotFoundError: If the path does not exist or is not a directory.
    """
    try:
        root = Path(source_dir).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise SourceNotFoundError(f"Source directory does not exist: {source_dir}") from e
    if not root.is_dir():
        raise SourceNotFoundError(f"Source path is not a directory: {source_dir}")
    return root


def entry_name(root: Path, path: Path) -> str:
    """Map a file under ``root`` to its archive entry name."""
    return path.relative_to(root).as_posix()


def collect_entries(root: Path, *, exclude: Path | None = None) -> list[ArchiveEntry]:
    """Enumerate the source tree once; the length of the result is the progress total."""
    entries: list[ArchiveEntry] = []
    try:
        for path in iter_source_files(root):
            if exclude is not None and path == exclude:
                log.verbose(f"Skipping the archive being written: {path}")
                continue
            name = entry_name(root, path)
            try:
                name.encode("utf-8")
            except UnicodeEncodeError as e:
                raise FilesystemError(
                    f"File name is not valid UTF-8: {os.fsencode(path)!r}",
                    "Rename the file; container entry names are stored as UTF-8",
                ) from e
            entries.append(ArchiveEntry(name=name, source=path))
    except OSError as e:
        raise FilesystemError(
            f"Cannot read source directory {e.filename or root}: {e.strerror or e}"
        ) from e
    return entries


def pack(
    source_dir: str | os.PathLike[str],
    destination_file: str | os.PathLike[str],
    *,
    on_progress: ProgressCallback | None = None,
    resolver: ConfigResolver | None = None,
    debug_trace: bool | None = None,
) -> PackResult:
    """Create an H5P container at ``destination_file`` from ``source_dir``.

    The source is validated before the destination is opened, so a missing
    source never creates or truncates the destination. Any error after the
    container was opened removes the partial file; only a finalize failure
    can leave a (possibly invalid) file behind.

    Raises:
        SourceNotFoundError: Source missing or not a directory.
        ConfigError: A pack.* setting is invalid, e.g. compresslevel outside 0-9.
        ContainerOpenError: Destination cannot be opened for writing.
        FilesystemError: Source tree or one of its files cannot be read.
        ContainerCloseError: The container could not be finalized.
    """
    _resolver = resolver or ConfigResolver()
    _debug_trace = debug_trace
    if _debug_trace is None:
        _debug_trace = _resolver.resolve_bool("debug.include_trace", False)
    compresslevel = _resolver.resolve_int("pack.compresslevel", valid=range(10))
    reproducible = _resolver.resolve_bool("pack.reproducible", False)

    root = canonical_source_root(source_dir)
    destination = Path(destination_file)

    trace: list[OpEvent] = [
        OpEvent(op="pack", phase=OpPhase.PLANNED, details={"source": str(root)})
    ]

    writer = ContainerWriter.open(
        destination, compresslevel=compresslevel, reproducible=reproducible
    )
    try:
        entries = collect_entries(root, exclude=destination.resolve())
        progress = ProgressState(total=len(entries))
        log.verbose(f"Packing {progress.total} files from {root}")

        total_bytes = 0
        for entry in entries:
            total_bytes += writer.add_entry(entry)
            progress.processed += 1
            log.debug(f"Added {entry.name}")
            if on_progress is not None:
                on_progress(progress)
    except Exception:
        writer.discard()
        raise

    log.info("Writing to disk ...")
    writer.close()

    trace.append(
        OpEvent(
            op="pack",
            phase=OpPhase.OK,
            details={"files": len(entries), "bytes": total_bytes},
        )
    )
    return PackResult(
        source=root,
        destination=destination,
        entries=[e.name for e in entries],
        files_packed=len(entries),
        total_bytes=total_bytes,
        trace=trace if _debug_trace else [],
    )
