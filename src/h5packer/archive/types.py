"""Archive types for the packer and unpacker."""

from __future__ import annotations

import zipfile
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any


class OpPhase(StrEnum):
    PLANNED = "planned"
    OK = "ok"
    ERROR = "error"


@dataclass(frozen=True)
class OpEvent:
    op: str
    phase: OpPhase
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ArchiveEntry:
    """One file on its way into a container."""

    name: str  # relative, '/'-separated, no leading slash
    source: Path
    compress_type: int = zipfile.ZIP_DEFLATED


@dataclass
class ProgressState:
    """Counters for one pack run; never persisted."""

    total: int
    processed: int = 0

    @property
    def percent(self) -> int:
        if self.total <= 0:
            return 100
        # Round half up in integer arithmetic.
        return (self.processed * 200 + self.total) // (2 * self.total)


@dataclass(frozen=True)
class PackResult:
    source: Path
    destination: Path
    entries: list[str]
    files_packed: int
    total_bytes: int
    trace: list[OpEvent]


@dataclass(frozen=True)
class UnpackResult:
    archive: Path
    destination: Path
    entries: list[str]
    files_unpacked: int
    cleaned: bool
    trace: list[OpEvent]
