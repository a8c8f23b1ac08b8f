"""h5packer - pack directories into H5P containers and extract them again."""

from h5packer.archive import PackResult, UnpackResult, pack, unpack
from h5packer.core.errors import (
    ArgumentError,
    ConfigError,
    ContainerCloseError,
    ContainerOpenError,
    ErrorKind,
    ExtractionError,
    FilesystemError,
    H5PackerError,
    SourceNotFoundError,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Operations
    "pack",
    "unpack",
    "PackResult",
    "UnpackResult",
    # Errors
    "H5PackerError",
    "ErrorKind",
    "ArgumentError",
    "SourceNotFoundError",
    "ContainerOpenError",
    "ContainerCloseError",
    "ExtractionError",
    "FilesystemError",
    "ConfigError",
]
