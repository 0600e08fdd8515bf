"""Tests for ZIP extraction."""

import itertools
import zipfile
from unittest.mock import patch

import pytest

from code_sync.exceptions import ExtractionFailedError
from code_sync.extractor import extract_archive, safe_member_path


class TestExtractArchive:
    """Tests for extract_archive."""

    def test_round_trip(self, tmp_path, sample_zip):
        """Test files and directories are reproduced byte for byte."""
        dest = tmp_path / "out"

        result = extract_archive(sample_zip, dest)

        assert (dest / "README.txt").read_bytes() == b"hello from the archive\n"
        assert (dest / "pkg" / "main.bin").read_bytes() == bytes(range(256)) * 4
        assert (dest / "pkg").is_dir()
        assert result.files_written == 2
        assert result.dirs_created == 1
        assert result.destination == dest

    def test_creates_nested_destination(self, tmp_path, sample_zip):
        """Test missing destination parents are created."""
        dest = tmp_path / "a" / "b" / "c"
        extract_archive(sample_zip, dest)
        assert (dest / "README.txt").exists()

    def test_parent_dirs_without_dir_entries(self, tmp_path, make_zip):
        """Test file entries create their parents when no directory entry exists."""
        archive = make_zip({"deep/er/file.txt": b"x"})
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert (dest / "deep" / "er" / "file.txt").read_bytes() == b"x"

    def test_empty_directory_entry(self, tmp_path, make_zip):
        """Test empty directories in the archive are created."""
        archive = make_zip({"empty/": b""})
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert (dest / "empty").is_dir()

    def test_merge_keeps_unrelated_files(self, tmp_path, sample_zip):
        """Test files not in the archive survive extraction."""
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "local.cfg").write_text("keep me")

        extract_archive(sample_zip, dest)

        assert (dest / "local.cfg").read_text() == "keep me"
        assert (dest / "README.txt").exists()

    def test_overwrites_existing_files(self, tmp_path, sample_zip):
        """Test files in the archive replace existing ones."""
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "README.txt").write_text("stale content that is longer than the new one")

        extract_archive(sample_zip, dest)

        assert (dest / "README.txt").read_bytes() == b"hello from the archive\n"

    def test_not_a_zip(self, tmp_path):
        """Test garbage input raises ExtractionFailedError."""
        bogus = tmp_path / "bogus.zip"
        bogus.write_text("<html>login page</html>")

        with pytest.raises(ExtractionFailedError) as exc_info:
            extract_archive(bogus, tmp_path / "out")

        assert exc_info.value.archive == bogus
        assert isinstance(exc_info.value.cause, zipfile.BadZipFile)

    def test_missing_archive(self, tmp_path):
        """Test missing archive file raises ExtractionFailedError."""
        with pytest.raises(ExtractionFailedError):
            extract_archive(tmp_path / "missing.zip", tmp_path / "out")

    def test_write_error(self, tmp_path, sample_zip):
        """Test write failures are wrapped."""
        with patch("code_sync.extractor.shutil.copyfileobj", side_effect=OSError("disk full")):
            with pytest.raises(ExtractionFailedError) as exc_info:
                extract_archive(sample_zip, tmp_path / "out")

        assert "disk full" in str(exc_info.value)

    def test_traversal_rejected_before_writing(self, tmp_path):
        """Test ../ entries abort extraction and nothing is written."""
        archive = tmp_path / "evil.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("ok.txt", b"fine")
            zf.writestr("../escape.txt", b"bad")
        dest = tmp_path / "out"

        with pytest.raises(ExtractionFailedError, match="Unsafe"):
            extract_archive(archive, dest)

        assert not (tmp_path / "escape.txt").exists()
        assert not (dest / "ok.txt").exists()

    def test_deadline_exceeded(self, tmp_path, sample_zip):
        """Test extraction stops once the deadline passes."""
        clock = itertools.count(0.0, 100.0)
        with patch("code_sync.extractor.time.monotonic", side_effect=clock):
            with pytest.raises(ExtractionFailedError, match="deadline"):
                extract_archive(sample_zip, tmp_path / "out", timeout=1)


class TestSafeMemberPath:
    """Tests for archive entry path validation."""

    def test_plain_path(self, tmp_path):
        """Test normal entries map inside dest."""
        assert safe_member_path(tmp_path, "a/b.txt") == tmp_path / "a" / "b.txt"

    def test_backslashes_normalized(self, tmp_path):
        """Test Windows separators are treated as directories."""
        assert safe_member_path(tmp_path, "a\\b.txt") == tmp_path / "a" / "b.txt"

    def test_dot_segments_dropped(self, tmp_path):
        """Test ./ segments are ignored."""
        assert safe_member_path(tmp_path, "./a/./b.txt") == tmp_path / "a" / "b.txt"

    @pytest.mark.parametrize("name", ["../x", "a/../../x", "/etc/passwd", "C:/x", "a/.."])
    def test_unsafe(self, tmp_path, name):
        """Test absolute and parent-relative entries are rejected."""
        with pytest.raises(ExtractionFailedError):
            safe_member_path(tmp_path, name)
