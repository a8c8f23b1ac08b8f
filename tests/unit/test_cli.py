"""Tests for the h5packer command line."""

from __future__ import annotations

import os
import sys
import zipfile
from pathlib import Path

import pytest

from h5packer.cli import CLI, PACK_USAGE, UNPACK_USAGE, main
from h5packer.core.logging import VerbosityLevel, get_verbosity


@pytest.fixture
def source(tmp_path: Path, make_tree) -> Path:
    return make_tree(tmp_path / "src", {"h5p.json": b"{}", "content/content.json": b"[]"})


@pytest.mark.parametrize("argv", [[], ["help"], ["--help"], ["-h"]])
def test_usage_exits_1(argv, capsys):
    assert main(argv) == 1

    out = capsys.readouterr().out
    assert "unpack <archiveFile> <destinationDir>" in out
    assert "pack <sourceDir> <destinationFile>" in out


def test_invalid_command(capsys):
    assert main(["explode", "a", "b"]) == 1

    out = capsys.readouterr().out
    assert out.startswith("Invalid command.\n")
    assert "Usage: h5packer [pack|unpack] args..." in out


@pytest.mark.parametrize(
    ("argv", "usage"),
    [
        (["pack", "only-one"], PACK_USAGE),
        (["pack", "a", "b", "c"], PACK_USAGE),
        (["unpack"], UNPACK_USAGE),
        (["unpack", "a", "b", "c"], UNPACK_USAGE),
    ],
)
def test_wrong_argument_count(argv, usage, capsys):
    assert main(argv) == 1
    assert capsys.readouterr().out == usage + "\n"


def test_pack_then_unpack(tmp_path: Path, source: Path, capsys, read_tree):
    archive = tmp_path / "out.h5p"
    out_dir = tmp_path / "out"

    assert main(["pack", str(source), str(archive), "--no-progress"]) == 0
    out = capsys.readouterr().out
    assert "[info] Writing to disk ..." in out
    assert f"H5P archive created successfully: {archive}" in out

    assert main(["unpack", str(archive), str(out_dir)]) == 0
    out = capsys.readouterr().out
    assert f"Archive extracted successfully to: {out_dir}" in out
    assert read_tree(out_dir) == read_tree(source)


def test_repack_alias(tmp_path: Path, source: Path, capsys):
    archive = tmp_path / "alias.h5p"

    assert main(["repack", str(source), str(archive), "--no-progress"]) == 0

    with zipfile.ZipFile(archive) as zf:
        assert sorted(zf.namelist()) == ["content/content.json", "h5p.json"]


def test_progress_bar_is_drawn(tmp_path: Path, source: Path, capsys):
    assert main(["pack", str(source), str(tmp_path / "p.h5p")]) == 0

    assert "Progress:" in capsys.readouterr().out


def test_unpack_cleans_destination(tmp_path: Path, source: Path, make_tree, capsys):
    archive = tmp_path / "out.h5p"
    main(["pack", str(source), str(archive), "--no-progress"])
    dest = make_tree(tmp_path / "dest", {"old.txt": b"old"})

    assert main(["unpack", str(archive), str(dest)]) == 0

    assert f"[info] Cleaned up destination directory: {dest}" in capsys.readouterr().out
    assert not (dest / "old.txt").exists()


def test_quiet_flag_anywhere(tmp_path: Path, source: Path, capsys):
    archive = tmp_path / "q.h5p"

    assert main(["pack", "-q", str(source), str(archive)]) == 0

    out = capsys.readouterr().out
    assert "[info]" not in out
    assert "Progress:" not in out
    assert f"H5P archive created successfully: {archive}" in out
    assert get_verbosity() == VerbosityLevel.QUIET


def test_missing_source_reports_error(tmp_path: Path, capsys):
    archive = tmp_path / "out.h5p"

    assert main(["pack", str(tmp_path / "missing"), str(archive)]) == 1

    captured = capsys.readouterr()
    assert "[error] Source directory does not exist:" in captured.err
    assert "successfully" not in captured.out
    assert not archive.exists()


def test_corrupt_archive_reports_error(tmp_path: Path, capsys):
    archive = tmp_path / "bad.h5p"
    archive.write_bytes(b"garbage")

    assert main(["unpack", str(archive), str(tmp_path / "out")]) == 1

    assert f"Cannot open <{archive}> for extraction" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


def test_invalid_logging_level_from_env(monkeypatch, capsys):
    monkeypatch.setenv("H5PACKER_LOGGING_LEVEL", "chatty")

    assert main(["help"]) == 1

    assert "Invalid 'logging.level'" in capsys.readouterr().err


def test_split_options():
    positional, cli_args = CLI()._split_options(
        ["-v", "pack", "--no-progress", "a", "--no-color", "b"]
    )

    assert positional == ["pack", "a", "b"]
    assert cli_args == {
        "logging": {"level": "verbose", "color": False},
        "progress": {"enabled": False},
    }


def test_invalid_compresslevel_reports_error(tmp_path: Path, source: Path, monkeypatch, capsys):
    monkeypatch.setenv("H5PACKER_PACK_COMPRESSLEVEL", "12")
    archive = tmp_path / "out.h5p"

    assert main(["pack", str(source), str(archive), "--no-progress"]) == 1

    err = capsys.readouterr().err
    assert "[error] Config key 'pack.compresslevel' must be between 0 and 9" in err
    assert not archive.exists()


def test_non_utf8_file_name_reports_error(tmp_path: Path, source: Path, capsys):
    if os.name != "posix" or sys.getfilesystemencoding().lower() != "utf-8":
        pytest.skip("needs a POSIX filesystem with utf-8 path decoding")
    try:
        (source / os.fsdecode(b"caf\xe9.txt")).write_bytes(b"x")
    except OSError:
        pytest.skip("filesystem rejects names that are not valid UTF-8")
    archive = tmp_path / "out.h5p"

    assert main(["pack", str(source), str(archive), "--no-progress"]) == 1

    assert "[error] File name is not valid UTF-8" in capsys.readouterr().err
    assert not archive.exists()
