"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src to path so tests run without an editable install.
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))


@pytest.fixture(autouse=True)
def _isolate_config_and_logging(tmp_path_factory, monkeypatch):
    """Keep user config files, H5PACKER_* env vars and global log state out of tests."""
    from h5packer.core.log_bus import get_log_bus
    from h5packer.core.logging import VerbosityLevel, set_colors, set_verbosity

    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    for name in [k for k in os.environ if k.startswith("H5PACKER_")]:
        monkeypatch.delenv(name, raising=False)

    get_log_bus().clear()
    set_verbosity(VerbosityLevel.NORMAL)
    set_colors(False)
    yield
    get_log_bus().clear()
    set_verbosity(VerbosityLevel.NORMAL)
    set_colors(True)


@pytest.fixture
def config_resolver(tmp_path):
    """ConfigResolver that ignores any real user/system config files."""
    from h5packer.core.config import ConfigResolver

    return ConfigResolver(
        cli_args={},
        user_config_path=tmp_path / "no-user.yaml",
        system_config_path=tmp_path / "no-system.yaml",
    )


@pytest.fixture
def make_tree() -> Callable[[Path, dict[str, bytes]], Path]:
    """Write a {relative/path: bytes} mapping below a root directory."""

    def _make(root: Path, files: dict[str, bytes]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for rel, data in files.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data)
        return root

    return _make


@pytest.fixture
def read_tree() -> Callable[[Path], dict[str, bytes]]:
    """Collect {relative/path: bytes} for every file below a root directory."""

    def _read(root: Path) -> dict[str, bytes]:
        return {
            p.relative_to(root).as_posix(): p.read_bytes()
            for p in sorted(root.rglob("*"))
            if p.is_file()
        }

    return _read
