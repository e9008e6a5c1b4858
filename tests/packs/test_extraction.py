"""Tests for archive extraction."""

import shutil
import stat
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

from packvault.errors import InvalidArchiveError, UnsafeArchiveEntryError
from packvault.extraction import extract_archive, resolve_entry_path
from packvault.models import FailureKind


def _zip(path: Path, entries: dict[str, bytes], modes: dict[str, int] | None = None) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in entries.items():
            info = zipfile.ZipInfo(name)
            if modes and name in modes:
                info.external_attr = modes[name] << 16
            archive.writestr(info, content)
    return path


class TestResolveEntryPath:
    """Test the traversal guard."""

    def test_nested_entry_inside_root(self, tmp_path: Path):
        root = tmp_path.resolve()
        assert resolve_entry_path(root, "a/b/c.json") == root / "a" / "b" / "c.json"

    @pytest.mark.parametrize("name", ["../evil.txt", "../../etc/passwd", "a/../../evil", "/etc/passwd"])
    def test_escaping_entries_rejected(self, tmp_path: Path, name):
        with pytest.raises(UnsafeArchiveEntryError):
            resolve_entry_path(tmp_path.resolve(), name)

    def test_backslash_separators(self, tmp_path: Path):
        """Test that Windows-style separators cannot be used to escape."""
        with pytest.raises(UnsafeArchiveEntryError):
            resolve_entry_path(tmp_path.resolve(), "..\\..\\evil.txt")


class TestExtractArchive:
    """Test extract_archive function."""

    def test_extracts_structure(self, tmp_path: Path):
        """Test that directories and files are recreated."""
        archive = _zip(
            tmp_path / "pack.zip",
            {"manifest.json": b"{}", "textures/blocks/stone.png": b"png", "empty/": b""},
        )
        target = tmp_path / "out"

        report = extract_archive(archive, target)

        assert (target / "manifest.json").read_bytes() == b"{}"
        assert (target / "textures" / "blocks" / "stone.png").read_bytes() == b"png"
        assert (target / "empty").is_dir()
        assert sorted(report.extracted) == ["manifest.json", "textures/blocks/stone.png"]
        assert report.skipped == []

    def test_preserves_file_mode(self, tmp_path: Path):
        """Test that permission bits stored in the archive are applied."""
        archive = _zip(tmp_path / "pack.zip", {"run.sh": b"#!/bin/sh\n"}, modes={"run.sh": 0o755})
        target = tmp_path / "out"

        extract_archive(archive, target)

        mode = stat.S_IMODE((target / "run.sh").stat().st_mode)
        assert mode == 0o755

    def test_zip_slip_entry_skipped(self, tmp_path: Path):
        """Test that a traversal entry is skipped while the rest is extracted."""
        archive = _zip(
            tmp_path / "evil.zip",
            {"../../etc/passwd": b"root:x:0:0", "manifest.json": b"{}"},
        )
        target = tmp_path / "deep" / "out"

        report = extract_archive(archive, target)

        assert (target / "manifest.json").exists()
        assert not (tmp_path / "etc" / "passwd").exists()
        assert report.extracted == ["manifest.json"]
        assert len(report.security_violations) == 1
        assert report.security_violations[0].name == "../../etc/passwd"
        assert report.security_violations[0].failure is FailureKind.SECURITY_VIOLATION

    def test_only_unsafe_entries(self, tmp_path: Path):
        archive = _zip(tmp_path / "evil.zip", {"../evil.txt": b"x"})

        report = extract_archive(archive, tmp_path / "out")

        assert not report.has_files
        assert not (tmp_path / "evil.txt").exists()

    def test_missing_archive(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            extract_archive(tmp_path / "missing.zip", tmp_path / "out")

    def test_invalid_archive(self, tmp_path: Path):
        """Test that a non-zip file raises InvalidArchiveError."""
        bogus = tmp_path / "bogus.mcaddon"
        bogus.write_text("not a zip")

        with pytest.raises(InvalidArchiveError):
            extract_archive(bogus, tmp_path / "out")

    def test_io_failure_on_one_entry(self, tmp_path: Path):
        """Test that a write failure skips only the failing entry."""
        archive = _zip(tmp_path / "pack.zip", {"broken.txt": b"x", "manifest.json": b"{}", "ok/file.txt": b"y"})
        target = tmp_path / "out"
        real_copy = shutil.copyfileobj

        def failing_copy(src, dst, *args, **kwargs):
            if src.name == "broken.txt":
                raise OSError("No space left on device")
            return real_copy(src, dst, *args, **kwargs)

        with patch("packvault.extraction.shutil.copyfileobj", side_effect=failing_copy):
            report = extract_archive(archive, target)

        assert sorted(report.extracted) == ["manifest.json", "ok/file.txt"]
        assert (target / "ok" / "file.txt").read_bytes() == b"y"
        assert [s.name for s in report.skipped] == ["broken.txt"]
        assert report.skipped[0].failure is FailureKind.IO_FAILURE
        assert report.security_violations == []
