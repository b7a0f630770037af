"""Unit tests for textid/identifier/files.py — file access capability."""

from __future__ import annotations

from pathlib import Path

import pytest

from textid.identifier.files import (
    FileScanError,
    LocalFileAccess,
    MemoryFileAccess,
    read_file,
)


class TestLocalFileAccess:
    def test_is_file_true_for_regular_file(self, tmp_path: Path) -> None:
        path = tmp_path / "f.bin"
        path.write_bytes(b"data")
        assert LocalFileAccess().is_file(str(path))

    def test_is_file_false_for_directory(self, tmp_path: Path) -> None:
        assert not LocalFileAccess().is_file(str(tmp_path))

    def test_is_file_false_for_missing(self, tmp_path: Path) -> None:
        assert not LocalFileAccess().is_file(str(tmp_path / "missing"))

    def test_is_file_false_for_embedded_nul(self) -> None:
        assert not LocalFileAccess().is_file("bad\x00path")

    def test_read_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "f.bin"
        path.write_bytes(b"\x00\x01abc")
        assert LocalFileAccess().read_bytes(str(path)) == b"\x00\x01abc"


class TestMemoryFileAccess:
    def test_lookup(self) -> None:
        access = MemoryFileAccess({"/a": b"abc"})
        assert access.is_file("/a")
        assert not access.is_file("/b")
        assert access.read_bytes("/a") == b"abc"

    def test_missing_raises_file_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            MemoryFileAccess({}).read_bytes("/missing")


class TestReadFile:
    def test_returns_contents(self) -> None:
        assert read_file(MemoryFileAccess({"/a": b"abc"}), "/a") == b"abc"

    def test_missing_file_raises_file_scan_error(self, tmp_path: Path) -> None:
        path = str(tmp_path / "missing")
        with pytest.raises(FileScanError) as exc_info:
            read_file(LocalFileAccess(), path)
        assert exc_info.value.path == path
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert str(exc_info.value).startswith(f"Could not read {path}: ")

    def test_directory_raises_file_scan_error(self, tmp_path: Path) -> None:
        with pytest.raises(FileScanError):
            read_file(LocalFileAccess(), str(tmp_path))

    def test_reason_falls_back_to_exception_name(self) -> None:
        with pytest.raises(FileScanError) as exc_info:
            read_file(MemoryFileAccess({}), "/missing")
        assert exc_info.value.reason == "FileNotFoundError"
