"""Directory traversal for packing and cleanup.

Two orders are provided and they are not interchangeable:

* :func:`iter_source_files` walks pre-order and yields only regular files;
  the packer uses it to enumerate entries.
* :func:`iter_post_order` yields every descendant with each directory
  following all of its contents; :func:`clear_directory` relies on that to
  never call ``rmdir`` on a non-empty directory.

``os.scandir`` never reports the ``.`` and ``..`` pseudo-entries, and siblings
are sorted by name so one run over an unchanged tree is stable.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from h5packer.core.errors import FilesystemError
from h5packer.core.logging import get_logger

log = get_logger(__name__)


def _sorted_entries(directory: Path) -> list[os.DirEntry[str]]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda e: e.name)


def iter_source_files(root: Path) -> Iterator[Path]:
    """Yield every regular file under ``root``, parents before children.

    Links to files are yielded (their target is what gets read). Links to
    directories are not descended into, and broken links, sockets and other
    special files are skipped.
    """
    for entry in _sorted_entries(root):
        path = root / entry.name
        if entry.is_dir(follow_symlinks=False):
            yield from iter_source_files(path)
        elif entry.is_file():
            yield path
        else:
            log.debug(f"Skipping non-regular entry: {path}")


def iter_post_order(root: Path) -> Iterator[tuple[Path, bool]]:
    """Yield ``(path, is_dir)`` for all descendants of ``root``, children first.

    ``is_dir`` is true only for real directories; a symbolic link to a
    directory is reported as a non-directory and is never followed.
    """
    for entry in _sorted_entries(root):
        path = root / entry.name
        if entry.is_dir(follow_symlinks=False):
            yield from iter_post_order(path)
            yield path, True
        else:
            yield path, False


def clear_directory(path: Path) -> None:
    """Delete everything inside ``path`` and keep ``path`` itself.

    Raises:
        FilesystemError: If any single deletion fails. Entries removed before
            the failure stay removed.
    """
    try:
        for item, is_dir in iter_post_order(path):
            if is_dir:
                item.rmdir()
            else:
                item.unlink()
            log.debug(f"Removed {item}")
    except OSError as e:
        target = e.filename or path
        raise FilesystemError(
            f"Failed to clean up destination directory {path}: cannot remove {target}: "
            f"{e.strerror or e}",
            "Check permissions on the destination and try again",
        ) from e
