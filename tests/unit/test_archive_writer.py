"""
Tests for the Archive Container Writer.

Tests cover:
- Entries written in order with a fixed timestamp
- Atomic finalize (no partial file at the target on failure)
- Duplicate entries, unopenable paths and the per-path guard
- Streaming file copies and concurrent puts
"""

import threading
import zipfile

import pytest

from bar_archive.services.archive_writer import ArchiveWriter
from bar_archive.services.exceptions import ArchiveWriteError, ContainerCreateError


def leftover_files(directory):
    return sorted(path.name for path in directory.iterdir())


class TestArchiveWriter:
    """Tests for ArchiveWriter lifecycle and writes."""

    def test_put_and_finalize(self, tmp_path):
        target = tmp_path / "out.zip"

        with ArchiveWriter(target) as writer:
            writer.put_bytes("cocktails/a.yaml", b"_id: a\n")
            writer.put_bytes("_meta.json", b"{}")
            assert not target.exists()
            final_path = writer.finalize()

        assert final_path == target
        assert writer.finalized
        assert leftover_files(tmp_path) == ["out.zip"]
        with zipfile.ZipFile(target) as zf:
            assert zf.namelist() == ["cocktails/a.yaml", "_meta.json"]
            assert zf.read("cocktails/a.yaml") == b"_id: a\n"
            assert zf.getinfo("_meta.json").date_time == (1980, 1, 1, 0, 0, 0)

    def test_exit_without_finalize_finalizes(self, tmp_path):
        target = tmp_path / "out.zip"
        with ArchiveWriter(target) as writer:
            writer.put_bytes("a.json", b"{}")

        assert zipfile.ZipFile(target).namelist() == ["a.json"]

    def test_exception_discards_archive(self, tmp_path):
        target = tmp_path / "out.zip"

        with pytest.raises(RuntimeError):
            with ArchiveWriter(target) as writer:
                writer.put_bytes("a.json", b"{}")
                raise RuntimeError("boom")

        assert leftover_files(tmp_path) == []

    def test_failed_run_keeps_existing_target(self, tmp_path):
        target = tmp_path / "out.zip"
        target.write_bytes(b"previous archive")

        with pytest.raises(RuntimeError):
            with ArchiveWriter(target) as writer:
                writer.put_bytes("a.json", b"{}")
                raise RuntimeError("boom")

        assert target.read_bytes() == b"previous archive"
        assert leftover_files(tmp_path) == ["out.zip"]

    def test_duplicate_entry_rejected(self, tmp_path):
        with ArchiveWriter(tmp_path / "out.zip") as writer:
            writer.put_bytes("a.json", b"{}")
            with pytest.raises(ArchiveWriteError) as exc_info:
                writer.put_bytes("a.json", b"[]")
            assert exc_info.value.entry_name == "a.json"
            assert writer.entries == ["a.json"]

    def test_put_before_open(self, tmp_path):
        writer = ArchiveWriter(tmp_path / "out.zip")
        with pytest.raises(ArchiveWriteError):
            writer.put_bytes("a.json", b"{}")

    def test_put_file_copies_source(self, tmp_path):
        source = tmp_path / "photo.jpg"
        source.write_bytes(b"\xff\xd8" + b"x" * 100_000)
        target = tmp_path / "out.zip"

        with ArchiveWriter(target) as writer:
            writer.put_file(source, "cocktails/images/a-1.jpg")

        with zipfile.ZipFile(target) as zf:
            assert zf.read("cocktails/images/a-1.jpg") == source.read_bytes()
            assert zf.getinfo("cocktails/images/a-1.jpg").date_time == (1980, 1, 1, 0, 0, 0)

    def test_put_file_from_open_handle(self, tmp_path):
        """Test an already opened source is copied even after it is deleted."""
        source = tmp_path / "photo.jpg"
        source.write_bytes(b"\xff\xd8 payload")
        target = tmp_path / "out.zip"

        with open(source, "rb") as handle:
            source.unlink()
            with ArchiveWriter(target) as writer:
                writer.put_file(handle, "cocktails/images/a-1.jpg")
            assert not handle.closed

        with zipfile.ZipFile(target) as zf:
            assert zf.read("cocktails/images/a-1.jpg") == b"\xff\xd8 payload"

    def test_put_file_missing_source(self, tmp_path):
        with ArchiveWriter(tmp_path / "out.zip") as writer:
            with pytest.raises(ArchiveWriteError):
                writer.put_file(tmp_path / "missing.jpg", "cocktails/images/a-1.jpg")

    def test_concurrent_puts(self, tmp_path):
        target = tmp_path / "out.zip"

        with ArchiveWriter(target) as writer:
            def worker(prefix):
                for n in range(20):
                    writer.put_bytes(f"{prefix}/{n}.json", b"{}")

            threads = [threading.Thread(target=worker, args=(p,)) for p in "abcd"]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        with zipfile.ZipFile(target) as zf:
            assert len(zf.namelist()) == 80
            assert zf.testzip() is None


class TestContainerCreate:
    """Tests for ContainerCreateError conditions."""

    def test_missing_parent_directory(self, tmp_path):
        target = tmp_path / "missing" / "out.zip"
        with pytest.raises(ContainerCreateError) as exc_info:
            ArchiveWriter(target).open()
        assert exc_info.value.path == target

    def test_target_is_directory(self, tmp_path):
        (tmp_path / "out.zip").mkdir()
        with pytest.raises(ContainerCreateError):
            ArchiveWriter(tmp_path / "out.zip").open()

    def test_same_path_cannot_be_opened_twice(self, tmp_path):
        target = tmp_path / "out.zip"
        first = ArchiveWriter(target).open()
        try:
            with pytest.raises(ContainerCreateError):
                ArchiveWriter(target).open()
        finally:
            first.discard()

        # Released after discard
        second = ArchiveWriter(target).open()
        second.finalize()
        assert target.exists()
