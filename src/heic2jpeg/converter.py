"""Single file HEIC to JPEG conversion."""

from __future__ import annotations

from time import perf_counter
from typing import TYPE_CHECKING

from heic2jpeg.codec import PillowHeifCodec
from heic2jpeg.errors import InputNotFoundError
from heic2jpeg.filesystem import FileSystemHandler
from heic2jpeg.logging_config import get_logger
from heic2jpeg.models import ConversionRequest, ConversionResult, ConversionStatus

if TYPE_CHECKING:
    import logging

    from heic2jpeg.codec import Codec


class ImageConverter:
    """Convert one HEIC/HEIF file into one JPEG file."""

    def __init__(
        self,
        codec: Codec | None = None,
        filesystem: FileSystemHandler | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize with collaborators.

        Args:
            codec: Codec performing the HEIC to JPEG transcoding
            filesystem: File system handler (a default one is created if None)
            logger: Optional logger instance
        """
        self.codec = codec or PillowHeifCodec()
        self.filesystem = filesystem or FileSystemHandler()
        self.logger = logger or get_logger(__name__)

    def convert(self, request: ConversionRequest) -> ConversionResult:
        """Convert the request's input file to JPEG.

        The steps are: check the input, resolve the output path, read,
        transcode, write, then copy the input's timestamps to the output.
        An existing output file is overwritten after a warning. Failing to
        copy timestamps is logged as a warning and does not fail the call.

        Args:
            request: What to convert, where, and at which quality

        Returns:
            ConversionResult with SUCCESS status

        Raises:
            InputNotFoundError: If the input file does not exist
            CodecError: If the codec rejects the input
            FileSystemError: If reading, writing or directory creation fails
        """
        start_time = perf_counter()
        input_path = request.input_path

        if not input_path.is_file():
            raise InputNotFoundError(f"File not found: {input_path}")

        output_path = request.output_path or self.filesystem.get_output_path(input_path)

        overwritten = output_path.exists()
        if overwritten:
            self.logger.warning(f"Output file already exists and will be overwritten: {output_path}")

        # Taken before reading, which may bump the access time
        source_times: tuple[int, int] | None
        try:
            source_times = self.filesystem.get_timestamps(input_path)
        except OSError as e:
            source_times = None
            self.logger.warning(f"Could not read timestamps of {input_path}: {e}")

        self.logger.debug(f"Reading {input_path}")
        data = self.filesystem.read_file(input_path)

        self.logger.debug(f"Converting {input_path.name} at quality {request.quality}")
        jpeg_data = self.codec.convert(data, request.quality)

        self.filesystem.write_file(output_path, jpeg_data)

        timestamps_preserved = False
        if source_times is not None:
            try:
                self.filesystem.set_timestamps(output_path, source_times)
                timestamps_preserved = True
            except OSError as e:
                self.logger.warning(f"Could not preserve timestamps on {output_path}: {e}")

        processing_time = perf_counter() - start_time
        self.logger.info(
            f"Successfully converted {input_path} -> {output_path} ({processing_time:.2f}s)"
        )

        return ConversionResult(
            input_path=input_path,
            output_path=output_path,
            status=ConversionStatus.SUCCESS,
            overwritten=overwritten,
            timestamps_preserved=timestamps_preserved,
            processing_time=processing_time,
        )
