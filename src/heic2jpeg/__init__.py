"""HEIC to JPEG Converter.

A command-line tool that converts HEIC/HEIF photos to JPEG, one file at a
time or over a whole directory tree.
"""

__version__ = "0.1.0"

from heic2jpeg.batch_processor import BatchProcessor
from heic2jpeg.codec import Codec, PillowHeifCodec
from heic2jpeg.config import create_config, get_quality_from_env, parse_quality
from heic2jpeg.converter import ImageConverter
from heic2jpeg.errors import (
    CodecError,
    ConversionError,
    FileSystemError,
    InputNotFoundError,
    InvalidOptionError,
    SourceDirectoryError,
)
from heic2jpeg.logging_config import get_logger, setup_logging
from heic2jpeg.models import (
    BatchResults,
    Config,
    ConversionRequest,
    ConversionResult,
    ConversionStatus,
)
from heic2jpeg.orchestrator import ConversionOrchestrator

__all__ = [
    "BatchProcessor",
    "BatchResults",
    "Codec",
    "CodecError",
    "Config",
    "ConversionError",
    "ConversionOrchestrator",
    "ConversionRequest",
    "ConversionResult",
    "ConversionStatus",
    "FileSystemError",
    "ImageConverter",
    "InputNotFoundError",
    "InvalidOptionError",
    "PillowHeifCodec",
    "SourceDirectoryError",
    "create_config",
    "get_logger",
    "get_quality_from_env",
    "parse_quality",
    "setup_logging",
]
