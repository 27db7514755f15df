"""Sequential directory batch processing for the HEIC to JPEG converter."""

from __future__ import annotations

from time import perf_counter
from typing import TYPE_CHECKING

from heic2jpeg.converter import ImageConverter
from heic2jpeg.errors import ErrorHandler, SourceDirectoryError
from heic2jpeg.logging_config import get_logger
from heic2jpeg.models import BatchResults, Config, ConversionRequest

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable
    from pathlib import Path


class BatchProcessor:
    """Convert every HEIC/HEIF file in a directory, one at a time.

    This class implements directory batch processing with:
    - Case-insensitive .heic/.heif discovery
    - Optional depth-first recursion mirroring the source tree
    - Error isolation (one file failure doesn't stop the batch)
    - Per-file progress and a per-directory summary
    """

    def __init__(
        self,
        config: Config,
        converter: ImageConverter | None = None,
        logger: logging.Logger | None = None,
        progress_callback: Callable[[Path, int, int, str], None] | None = None,
    ):
        """Initialize with configuration.

        Args:
            config: Configuration for conversion (quality, recursion)
            converter: Single file converter (a default one is created if None)
            logger: Optional logger instance
            progress_callback: Optional callback for progress updates
                (directory, current, total, filename)
        """
        self.config = config
        self.logger = logger or get_logger(__name__)
        self.converter = converter or ImageConverter(logger=self.logger)
        self.filesystem = self.converter.filesystem
        self.error_handler = ErrorHandler(self.logger)
        self.progress_callback = progress_callback

    def process_directory(self, source: Path, destination: Path | None = None) -> BatchResults:
        """Convert the HEIC/HEIF files of a directory.

        Args:
            source: Directory to scan
            destination: Directory for the JPEG files (defaults to source)

        Returns:
            BatchResults for source, with subdirectory results nested when recursive

        Raises:
            SourceDirectoryError: If source is missing or not a directory
            FileSystemError: If destination cannot be created or a directory cannot be listed
        """
        validation = self.filesystem.validate_source_directory(source)
        if not validation.valid:
            raise SourceDirectoryError(validation.error_message)

        target = destination if destination is not None else source

        # Output written inside the source tree must not be scanned again
        excluded = target.resolve() if target.resolve() != source.resolve() else None

        return self._process(source, target, excluded)

    def _process(self, source: Path, destination: Path, excluded: Path | None) -> BatchResults:
        start_time = perf_counter()

        self.filesystem.ensure_directory(destination)
        listing = self.filesystem.list_directory(source)

        results = BatchResults(
            directory=source,
            destination=destination,
            total_files=len(listing.heic_files),
        )

        if self.config.recursive:
            for subdirectory in listing.subdirectories:
                if subdirectory.is_symlink():
                    self.logger.debug(f"Skipping symlinked directory {subdirectory}")
                    continue
                if excluded is not None and subdirectory.resolve() == excluded:
                    self.logger.debug(f"Skipping output directory {subdirectory}")
                    continue
                results.subdirectories.append(
                    self._process(subdirectory, destination / subdirectory.name, excluded)
                )

        if listing.other_files:
            self.logger.debug(f"Ignoring {len(listing.other_files)} non-HEIC file(s) in {source}")

        if not listing.heic_files:
            self.logger.info(f"No HEIC/HEIF files found in {source}")
            results.total_time = perf_counter() - start_time
            return results

        total = results.total_files
        self.logger.info(f"Found {total} HEIC/HEIF file(s) in {source}. Starting conversion...")

        for index, file_path in enumerate(listing.heic_files, start=1):
            file_start = perf_counter()
            try:
                request = ConversionRequest(
                    input_path=file_path,
                    output_path=self.filesystem.get_output_path(file_path, destination),
                    quality=self.config.quality,
                )
                result = self.converter.convert(request)
            except Exception as e:
                result = self.error_handler.handle_error(
                    e,
                    {
                        "input_path": file_path,
                        "operation": "batch_conversion",
                        "processing_time": perf_counter() - file_start,
                    },
                )
            results.record(result)
            self._report_progress(source, index, total, file_path.name)

        results.total_time = perf_counter() - start_time
        self._log_summary(results)
        return results

    def _report_progress(self, directory: Path, current: int, total: int, filename: str) -> None:
        percent = current / total * 100.0
        self.logger.info(f"Progress: {current}/{total} ({percent:.1f}%) - {filename}")
        if self.progress_callback:
            try:
                self.progress_callback(directory, current, total, filename)
            except Exception as e:
                # Callbacks never abort the batch
                self.logger.warning(f"Progress callback failed for {filename}: {e}")

    def _log_summary(self, results: BatchResults) -> None:
        if results.all_succeeded:
            self.logger.info(
                f"All {results.total_files} file(s) converted successfully in {results.directory}"
            )
        else:
            self.logger.warning(
                f"Converted {results.successful} of {results.total_files} file(s) in "
                f"{results.directory}; {results.failed} failed"
            )
