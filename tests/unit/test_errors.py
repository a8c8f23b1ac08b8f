"""Unit tests for core.errors module."""

import pytest

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


@pytest.mark.parametrize(
    ("cls", "kind"),
    [
        (ArgumentError, ErrorKind.ARGUMENT),
        (SourceNotFoundError, ErrorKind.SOURCE_NOT_FOUND),
        (ExtractionError, ErrorKind.EXTRACTION),
        (FilesystemError, ErrorKind.FILESYSTEM),
        (ConfigError, ErrorKind.CONFIG),
        (H5PackerError, ErrorKind.INTERNAL),
    ],
)
def test_error_kinds(cls, kind):
    err = cls("msg")
    assert err.kind == kind
    assert isinstance(err, H5PackerError)
    assert str(err) == "msg"


def test_suggestion_is_appended():
    err = FilesystemError("Cannot create x", "Check permissions")
    assert str(err) == "Cannot create x\nSuggestion: Check permissions"
    assert err.message == "Cannot create x"


def test_container_open_messages():
    write = ContainerOpenError("out.h5p", "Permission denied", for_write=True)
    read = ContainerOpenError("in.h5p", "File is not a zip file", for_write=False)

    assert str(write) == "Cannot open <out.h5p> for writing: Permission denied"
    assert str(read) == "Cannot open <in.h5p> for extraction: File is not a zip file"
    assert write.kind == read.kind == ErrorKind.CONTAINER_OPEN
    assert read.path == "in.h5p"


def test_container_close_message():
    err = ContainerCloseError("out.h5p", "disk full")

    assert err.kind == ErrorKind.CONTAINER_CLOSE
    assert err.message == "Could not close the archive <out.h5p>: disk full"
    assert "Suggestion:" in str(err)
