"""Conversion orchestrator for the HEIC to JPEG converter.

This module wires the components together for the command line:
- FileSystemHandler for file operations
- PillowHeifCodec (or any Codec) for the actual transcoding
- ImageConverter for single files
- BatchProcessor for directories
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from heic2jpeg.batch_processor import BatchProcessor
from heic2jpeg.converter import ImageConverter
from heic2jpeg.filesystem import FileSystemHandler
from heic2jpeg.logging_config import get_logger
from heic2jpeg.models import BatchResults, Config, ConversionRequest, ConversionResult

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable
    from pathlib import Path

    from heic2jpeg.codec import Codec


class ConversionOrchestrator:
    """Entry point for single file and directory conversions."""

    def __init__(
        self,
        config: Config,
        logger: logging.Logger | None = None,
        codec: Codec | None = None,
        progress_callback: Callable[[Path, int, int, str], None] | None = None,
    ):
        """Initialize orchestrator with configuration.

        Args:
            config: Configuration for conversions
            logger: Optional logger instance
            codec: Codec to transcode with (Pillow + pillow-heif if None)
            progress_callback: Optional callback for batch progress
                (directory, current, total, filename)
        """
        self.config = config
        self.logger = logger or get_logger(__name__)

        self.filesystem = FileSystemHandler()
        self.converter = ImageConverter(codec, self.filesystem, self.logger)
        self.batch_processor = BatchProcessor(
            config, self.converter, self.logger, progress_callback
        )

        self.logger.debug("ConversionOrchestrator initialized")

    @property
    def progress_callback(self) -> Callable[[Path, int, int, str], None] | None:
        return self.batch_processor.progress_callback

    @progress_callback.setter
    def progress_callback(self, callback: Callable[[Path, int, int, str], None] | None) -> None:
        self.batch_processor.progress_callback = callback

    def convert_single(
        self, input_path: Path, output_path: Path | None = None
    ) -> ConversionResult:
        """Convert a single HEIC file to JPEG.

        Args:
            input_path: Path to the input HEIC file
            output_path: Target path; falls back to config.output_dir, then to
                the input path with a .jpg extension

        Returns:
            ConversionResult with SUCCESS status

        Raises:
            ConversionError: If the conversion fails
        """
        request = ConversionRequest(
            input_path=input_path,
            output_path=output_path or self.config.output_dir,
            quality=self.config.quality,
        )
        return self.converter.convert(request)

    def convert_directory(self, source: Path, destination: Path | None = None) -> BatchResults:
        """Convert all HEIC files in a directory.

        Args:
            source: Directory to scan
            destination: Output directory; falls back to config.output_dir, then source

        Returns:
            BatchResults for the directory (subdirectory results nested when recursive)

        Raises:
            SourceDirectoryError: If source is missing or not a directory
            FileSystemError: If an output directory cannot be created or listing fails
        """
        self.logger.info(
            f"Starting directory conversion of {source} "
            f"(quality={self.config.quality}, recursive={self.config.recursive})"
        )
        results = self.batch_processor.process_directory(
            source, destination or self.config.output_dir
        )

        overall = list(results.iter_all())
        self.logger.info(
            f"Directory conversion complete: {sum(r.successful for r in overall)} successful, "
            f"{sum(r.failed for r in overall)} failed across {len(overall)} "
            f"director{'y' if len(overall) == 1 else 'ies'} in {results.total_time:.2f}s"
        )
        return results
