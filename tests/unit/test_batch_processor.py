"""Unit tests for BatchProcessor."""

import logging
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from heic2jpeg.batch_processor import BatchProcessor
from heic2jpeg.converter import ImageConverter
from heic2jpeg.errors import FileSystemError, SourceDirectoryError
from heic2jpeg.filesystem import FileSystemHandler
from heic2jpeg.models import Config, ConversionStatus
from helpers import write_files


def make_processor(fake_codec, recursive=False, quality=90, progress_callback=None):
    config = Config(quality=quality, recursive=recursive)
    return BatchProcessor(
        config,
        converter=ImageConverter(codec=fake_codec),
        progress_callback=progress_callback,
    )


class TestDiscovery:
    """Tests for file discovery and filtering."""

    def test_converts_only_heic_files(self, fake_codec, tmp_path):
        write_files(tmp_path, ["a.heic", "b.HEIC", "c.heif", "notes.txt", "photo.png"])
        processor = make_processor(fake_codec)

        results = processor.process_directory(tmp_path)

        assert results.total_files == 3
        assert results.successful == 3
        assert results.failed == 0
        assert len(fake_codec.calls) == 3
        assert sorted(p.name for p in tmp_path.glob("*.jpg")) == ["a.jpg", "b.jpg", "c.jpg"]

    def test_files_processed_in_name_order(self, fake_codec, tmp_path):
        write_files(tmp_path, ["c.heic", "a.heic", "b.heic"])
        processor = make_processor(fake_codec)

        results = processor.process_directory(tmp_path)

        assert [r.input_path.name for r in results.results] == ["a.heic", "b.heic", "c.heic"]

    def test_empty_directory_is_reported_not_failed(self, fake_codec, tmp_path, caplog):
        write_files(tmp_path, ["readme.md"])
        processor = make_processor(fake_codec)

        with caplog.at_level(logging.INFO, logger="heic2jpeg"):
            results = processor.process_directory(tmp_path)

        assert results.total_files == 0
        assert results.all_succeeded
        assert any("No HEIC/HEIF files found" in r.message for r in caplog.records)

    def test_quality_is_passed_to_codec(self, fake_codec, tmp_path):
        write_files(tmp_path, ["a.heic"])
        make_processor(fake_codec, quality=42).process_directory(tmp_path)
        assert fake_codec.calls[0][1] == 42


class TestDestination:
    """Tests for destination handling."""

    def test_defaults_to_source_directory(self, fake_codec, tmp_path):
        write_files(tmp_path, ["a.heic"])
        results = make_processor(fake_codec).process_directory(tmp_path)

        assert results.destination == tmp_path
        assert (tmp_path / "a.jpg").exists()

    def test_creates_missing_destination(self, fake_codec, tmp_path):
        source = tmp_path / "src"
        write_files(source, ["a.heic"])
        destination = tmp_path / "out" / "nested"

        make_processor(fake_codec).process_directory(source, destination)

        assert (destination / "a.jpg").read_bytes() == b"JPEG:heic-data"
        assert not (source / "a.jpg").exists()

    def test_existing_destination_is_fine(self, fake_codec, tmp_path):
        source = tmp_path / "src"
        write_files(source, ["a.heic"])
        destination = tmp_path / "out"
        destination.mkdir()

        results = make_processor(fake_codec).process_directory(source, destination)
        assert results.successful == 1

    def test_uncreatable_destination_raises(self, fake_codec, tmp_path):
        source = tmp_path / "src"
        write_files(source, ["a.heic"])
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"file")

        with pytest.raises(FileSystemError):
            make_processor(fake_codec).process_directory(source, blocker / "out")
        assert fake_codec.calls == []


class TestPreconditions:
    """Tests for directory-level failures."""

    def test_missing_source_raises(self, fake_codec, tmp_path):
        with pytest.raises(SourceDirectoryError, match="not found"):
            make_processor(fake_codec).process_directory(tmp_path / "missing")

    def test_file_source_raises(self, fake_codec, tmp_path):
        (source,) = write_files(tmp_path, ["a.heic"])
        with pytest.raises(SourceDirectoryError, match="Not a directory"):
            make_processor(fake_codec).process_directory(source)
        assert fake_codec.calls == []

    def test_missing_source_does_not_create_destination(self, fake_codec, tmp_path):
        with pytest.raises(SourceDirectoryError):
            make_processor(fake_codec).process_directory(tmp_path / "missing", tmp_path / "out")
        assert not (tmp_path / "out").exists()

    def test_enumeration_error_propagates(self, fake_codec, tmp_path):
        write_files(tmp_path, ["a.heic"])
        with patch.object(
            FileSystemHandler, "list_directory", side_effect=FileSystemError("cannot list")
        ):
            with pytest.raises(FileSystemError, match="cannot list"):
                make_processor(fake_codec).process_directory(tmp_path)


class TestContinueOnError:
    """Tests for per-file error isolation."""

    def test_failure_does_not_abort_batch(self, fake_codec, tmp_path):
        names = ["1.heic", "2.heic", "3.heic", "4.heic", "5.heic"]
        write_files(tmp_path, names)
        (tmp_path / "2.heic").write_bytes(b"corrupt data")

        results = make_processor(fake_codec).process_directory(tmp_path)

        assert results.total_files == 5
        assert results.successful == 4
        assert results.failed == 1
        assert [r.status for r in results.results] == [
            ConversionStatus.SUCCESS,
            ConversionStatus.FAILED,
            ConversionStatus.SUCCESS,
            ConversionStatus.SUCCESS,
            ConversionStatus.SUCCESS,
        ]
        for name in ["1", "3", "4", "5"]:
            assert (tmp_path / f"{name}.jpg").exists()
        assert not (tmp_path / "2.jpg").exists()

    def test_failure_message_names_the_file(self, fake_codec, tmp_path, caplog):
        write_files(tmp_path, ["bad.heic"], content=b"corrupt")

        with caplog.at_level(logging.INFO, logger="heic2jpeg"):
            results = make_processor(fake_codec).process_directory(tmp_path)

        failed = results.results[0]
        assert failed.status == ConversionStatus.FAILED
        assert "bad.heic" in failed.error_message
        assert any(r.levelno == logging.ERROR and "bad.heic" in r.message for r in caplog.records)

    def test_unexpected_exception_is_counted(self, tmp_path):
        write_files(tmp_path, ["a.heic", "b.heic"])
        codec = Mock()
        codec.convert.side_effect = [RuntimeError("segfault-ish"), b"jpeg"]
        processor = BatchProcessor(Config(), converter=ImageConverter(codec=codec))

        results = processor.process_directory(tmp_path)

        assert results.failed == 1
        assert results.successful == 1


class TestProgressAndSummary:
    """Tests for progress reporting and summaries."""

    def test_progress_callback_called_after_each_attempt(self, fake_codec, tmp_path):
        write_files(tmp_path, ["a.heic", "b.heic", "c.heic"])
        (tmp_path / "b.heic").write_bytes(b"corrupt")
        callback = Mock()

        make_processor(fake_codec, progress_callback=callback).process_directory(tmp_path)

        assert [c.args for c in callback.call_args_list] == [
            (tmp_path, 1, 3, "a.heic"),
            (tmp_path, 2, 3, "b.heic"),
            (tmp_path, 3, 3, "c.heic"),
        ]

    def test_failing_callback_does_not_abort_batch(self, fake_codec, tmp_path, caplog):
        write_files(tmp_path, ["a.heic", "b.heic", "c.heic"])
        callback = Mock(side_effect=RuntimeError("display gone"))

        with caplog.at_level(logging.WARNING, logger="heic2jpeg"):
            results = make_processor(fake_codec, progress_callback=callback).process_directory(
                tmp_path
            )

        assert callback.call_count == 3
        assert results.successful == 3
        assert results.failed == 0
        assert (tmp_path / "c.jpg").exists()
        assert "Progress callback failed for a.heic: display gone" in caplog.text

    def test_progress_is_logged_with_percentage(self, fake_codec, tmp_path, caplog):
        write_files(tmp_path, ["a.heic", "b.heic", "c.heic", "d.heic"])

        with caplog.at_level(logging.INFO, logger="heic2jpeg"):
            make_processor(fake_codec).process_directory(tmp_path)

        progress = [r.message for r in caplog.records if r.message.startswith("Progress:")]
        assert progress[0].startswith("Progress: 1/4 (25.0%)")
        assert progress[-1].startswith("Progress: 4/4 (100.0%)")

    def test_all_success_summary(self, fake_codec, tmp_path, caplog):
        write_files(tmp_path, ["a.heic", "b.heic"])

        with caplog.at_level(logging.INFO, logger="heic2jpeg"):
            make_processor(fake_codec).process_directory(tmp_path)

        assert any("All 2 file(s) converted successfully" in r.message for r in caplog.records)

    def test_partial_failure_summary(self, fake_codec, tmp_path, caplog):
        write_files(tmp_path, ["a.heic", "b.heic"])
        (tmp_path / "a.heic").write_bytes(b"corrupt")

        with caplog.at_level(logging.INFO, logger="heic2jpeg"):
            make_processor(fake_codec).process_directory(tmp_path)

        summary = [r for r in caplog.records if "Converted 1 of 2 file(s)" in r.message]
        assert len(summary) == 1
        assert "1 failed" in summary[0].message
        assert summary[0].levelno == logging.WARNING


class TestRecursion:
    """Tests for recursive processing."""

    def test_subdirectories_ignored_without_recursive(self, fake_codec, tmp_path):
        write_files(tmp_path, ["a.heic"])
        write_files(tmp_path / "sub", ["b.heic"])

        results = make_processor(fake_codec).process_directory(tmp_path)

        assert results.subdirectories == []
        assert len(fake_codec.calls) == 1
        assert not (tmp_path / "sub" / "b.jpg").exists()

    def test_mirrors_structure_into_destination(self, fake_codec, tmp_path):
        source = tmp_path / "src"
        write_files(source, ["top.heic"])
        write_files(source / "trip", ["x.heic", "y.HEIF"])
        destination = tmp_path / "out"

        results = make_processor(fake_codec, recursive=True).process_directory(
            source, destination
        )

        assert (destination / "top.jpg").exists()
        assert sorted(p.name for p in (destination / "trip").iterdir()) == ["x.jpg", "y.jpg"]
        assert results.total_files == 1
        assert results.successful == 1
        (child,) = results.subdirectories
        assert child.directory == source / "trip"
        assert child.destination == destination / "trip"
        assert child.total_files == 2
        assert child.successful == 2

    def test_subdirectories_processed_before_own_files(self, fake_codec, tmp_path):
        write_files(tmp_path, ["a.heic"], content=b"parent")
        write_files(tmp_path / "sub", ["b.heic"], content=b"child")

        make_processor(fake_codec, recursive=True).process_directory(tmp_path)

        assert [data for data, _ in fake_codec.calls] == [b"child", b"parent"]

    def test_nested_depth_first(self, fake_codec, tmp_path):
        write_files(tmp_path / "a" / "deep", ["1.heic"], content=b"a/deep")
        write_files(tmp_path / "a", ["2.heic"], content=b"a")
        write_files(tmp_path / "b", ["3.heic"], content=b"b")

        results = make_processor(fake_codec, recursive=True).process_directory(tmp_path)

        assert [data for data, _ in fake_codec.calls] == [b"a/deep", b"a", b"b"]
        assert [r.directory for r in results.iter_all()] == [
            tmp_path / "a" / "deep",
            tmp_path / "a",
            tmp_path / "b",
            tmp_path,
        ]

    def test_default_destination_writes_beside_sources(self, fake_codec, tmp_path):
        write_files(tmp_path / "sub", ["b.heic"])

        make_processor(fake_codec, recursive=True).process_directory(tmp_path)

        assert (tmp_path / "sub" / "b.jpg").exists()

    def test_destination_inside_source_is_not_rescanned(self, fake_codec, tmp_path):
        write_files(tmp_path, ["a.heic"])
        destination = tmp_path / "converted"
        write_files(destination, ["stale.heic"])

        results = make_processor(fake_codec, recursive=True).process_directory(
            tmp_path, destination
        )

        assert results.subdirectories == []
        assert len(fake_codec.calls) == 1

    def test_symlinked_directories_are_skipped(self, fake_codec, tmp_path):
        write_files(tmp_path / "real", ["a.heic"])
        try:
            (tmp_path / "loop").symlink_to(tmp_path, target_is_directory=True)
        except OSError:
            pytest.skip("symlinks not supported")

        results = make_processor(fake_codec, recursive=True).process_directory(tmp_path)

        assert [r.directory.name for r in results.subdirectories] == ["real"]

    def test_subdirectory_failure_does_not_change_parent_tally(self, fake_codec, tmp_path):
        write_files(tmp_path, ["a.heic"])
        write_files(tmp_path / "sub", ["b.heic"], content=b"corrupt")

        results = make_processor(fake_codec, recursive=True).process_directory(tmp_path)

        assert (results.successful, results.failed) == (1, 0)
        assert (results.subdirectories[0].successful, results.subdirectories[0].failed) == (0, 1)


def test_default_converter_is_created():
    processor = BatchProcessor(Config())
    assert isinstance(processor.converter, ImageConverter)
    assert processor.filesystem is processor.converter.filesystem


def test_paths_are_pathlib(fake_codec, tmp_path):
    write_files(tmp_path, ["a.heic"])
    results = make_processor(fake_codec).process_directory(tmp_path)
    assert isinstance(results.results[0].output_path, Path)
