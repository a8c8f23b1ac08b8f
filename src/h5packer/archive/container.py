"""Container capability bound to :mod:`zipfile`.

The packer and unpacker only talk to :class:`ContainerWriter` and
:class:`ContainerReader`; all zipfile-specific failure modes are translated
into h5packer errors here.
"""

from __future__ import annotations

import contextlib
import zipfile
import zlib
from pathlib import Path
from types import TracebackType

from h5packer.core.errors import (
    ContainerCloseError,
    ContainerOpenError,
    ExtractionError,
    FilesystemError,
)
from h5packer.core.logging import get_logger

from .types import ArchiveEntry

log = get_logger(__name__)

# Fixed timestamp used by reproducible packs (earliest date zip can store).
_REPRODUCIBLE_DATE_TIME = (1980, 1, 1, 0, 0, 0)
_REPRODUCIBLE_MODE = 0o644

_EXTRACT_ERRORS = (
    OSError,
    EOFError,
    zipfile.BadZipFile,
    zlib.error,
    RuntimeError,
    NotImplementedError,
)


class ContainerWriter:
    """A container opened for writing; existing content at the path is discarded."""

    def __init__(
        self,
        path: Path,
        zf: zipfile.ZipFile,
        *,
        compresslevel: int | None = None,
        reproducible: bool = False,
    ) -> None:
        self.path = path
        self._zf = zf
        self._compresslevel = compresslevel
        self._reproducible = reproducible

    @classmethod
    def open(
        cls,
        path: Path,
        *,
        compresslevel: int | None = None,
        reproducible: bool = False,
    ) -> ContainerWriter:
        try:
            zf = zipfile.ZipFile(
                path,
                "w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=compresslevel,
                strict_timestamps=False,
            )
        except (OSError, RuntimeError, ValueError) as e:
            raise ContainerOpenError(str(path), str(e), for_write=True) from e
        log.debug(f"Opened {path} for writing")
        return cls(path, zf, compresslevel=compresslevel, reproducible=reproducible)

    def add_entry(self, entry: ArchiveEntry) -> int:
        """Add one file under ``entry.name``; returns the uncompressed size."""
        try:
            if self._reproducible:
                zi = zipfile.ZipInfo(filename=entry.name, date_time=_REPRODUCIBLE_DATE_TIME)
                zi.compress_type = entry.compress_type
                zi.external_attr = _REPRODUCIBLE_MODE << 16
                data = entry.source.read_bytes()
                self._zf.writestr(
                    zi, data, compress_type=entry.compress_type, compresslevel=self._compresslevel
                )
                return len(data)

            self._zf.write(
                entry.source,
                arcname=entry.name,
                compress_type=entry.compress_type,
                compresslevel=self._compresslevel,
            )
            return self._zf.getinfo(entry.name).file_size
        except OSError as e:
            raise FilesystemError(f"Cannot read {entry.source}: {e.strerror or e}") from e
        except (ValueError, zlib.error) as e:
            raise FilesystemError(f"Cannot add {entry.name!r} to {self.path}: {e}") from e

    def close(self) -> None:
        try:
            self._zf.close()
        except (OSError, zlib.error) as e:
            raise ContainerCloseError(str(self.path), str(e)) from e

    def discard(self) -> None:
        """Close without reporting errors and remove the partial file."""
        try:
            self._zf.close()
        except Exception:
            # zipfile refuses to close while an entry is half written; drop the
            # handle ourselves so ZipFile.__del__ has nothing left to close.
            fp, self._zf.fp = self._zf.fp, None
            if fp is not None:
                with contextlib.suppress(OSError):
                    fp.close()
        with contextlib.suppress(OSError):
            self.path.unlink()


class ContainerReader:
    """A container opened for reading."""

    def __init__(self, path: Path, zf: zipfile.ZipFile) -> None:
        self.path = path
        self._zf = zf

    @classmethod
    def open(cls, path: Path) -> ContainerReader:
        try:
            zf = zipfile.ZipFile(path, "r")
        except (OSError, zipfile.BadZipFile, EOFError, ValueError) as e:
            raise ContainerOpenError(str(path), str(e), for_write=False) from e
        log.debug(f"Opened {path} for reading")
        return cls(path, zf)

    def list_entries(self) -> list[str]:
        return [info.filename for info in self._zf.infolist() if not info.is_dir()]

    def extract_all(self, destination: Path) -> None:
        """Materialize every entry under ``destination``.

        zipfile creates the intermediate directories implied by entry names and
        drops absolute prefixes and ``..`` components.
        """
        try:
            self._zf.extractall(destination)
        except _EXTRACT_ERRORS as e:
            raise ExtractionError(f"Extraction failed: {e}") from e

    def close(self) -> None:
        self._zf.close()

    def __enter__(self) -> ContainerReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
