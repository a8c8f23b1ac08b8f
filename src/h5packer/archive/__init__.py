"""Archive packer and unpacker."""

from .packer import pack
from .types import ArchiveEntry, PackResult, ProgressState, UnpackResult
from .unpacker import unpack
from .walk import clear_directory

__all__ = [
    "ArchiveEntry",
    "PackResult",
    "ProgressState",
    "UnpackResult",
    "clear_directory",
    "pack",
    "unpack",
]
