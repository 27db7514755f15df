"""Error definitions for the HEIC to JPEG converter."""

import logging
import traceback
from enum import Enum
from pathlib import Path
from typing import Any

from .logging_config import get_logger
from .models import ConversionResult, ConversionStatus


class ConversionError(Exception):
    """Base exception for conversion errors."""

    pass


class InputNotFoundError(ConversionError, FileNotFoundError):
    """Raised when an input file does not exist or is not a regular file."""

    pass


class SourceDirectoryError(ConversionError, NotADirectoryError):
    """Raised when a batch source is missing or is not a directory."""

    pass


class CodecError(ConversionError):
    """Raised when the codec cannot decode or encode an image buffer."""

    pass


class FileSystemError(ConversionError, OSError):
    """Raised when reading, writing or creating directories fails."""

    pass


class InvalidOptionError(ConversionError, ValueError):
    """Raised when a command-line or configuration option is invalid."""

    pass


class ErrorCategory(Enum):
    """Categories of errors for classification."""

    INPUT = "input"
    CODEC = "codec"
    FILESYSTEM = "filesystem"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ErrorHandler:
    """Turn per-file exceptions into failed conversion results.

    Batch runs use this to keep going after a file fails: the error is
    classified, logged with the offending path, and folded into a
    ConversionResult with FAILED status instead of propagating.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize the error handler.

        Args:
            logger: Optional logger instance. If None, creates a default logger.
        """
        self.logger = logger or get_logger(__name__)

    def handle_error(self, error: Exception, context: dict[str, Any]) -> ConversionResult:
        """Log an error and return a FAILED result for it.

        Args:
            error: The exception that occurred
            context: Context information (input_path, operation, processing_time)

        Returns:
            ConversionResult with FAILED status and a user-facing message
        """
        category = self.classify_error(error)
        user_message = self.generate_user_message(error, category, context)
        self._log_error(error, category, context)

        input_path = context.get("input_path")
        if input_path is None:
            input_path = Path("unknown")
        elif not isinstance(input_path, Path):
            input_path = Path(str(input_path))

        return ConversionResult(
            input_path=input_path,
            output_path=None,
            status=ConversionStatus.FAILED,
            error_message=user_message,
            processing_time=context.get("processing_time", 0.0),
        )

    def classify_error(self, error: Exception) -> ErrorCategory:
        """Classify error into category for appropriate handling.

        Args:
            error: The exception to classify

        Returns:
            ErrorCategory indicating the type of error
        """
        if isinstance(error, (InputNotFoundError, SourceDirectoryError)):
            return ErrorCategory.INPUT
        elif isinstance(error, CodecError):
            return ErrorCategory.CODEC
        elif isinstance(error, InvalidOptionError):
            return ErrorCategory.CONFIGURATION
        elif isinstance(error, FileSystemError):
            return ErrorCategory.FILESYSTEM
        elif isinstance(error, FileNotFoundError):
            return ErrorCategory.INPUT
        elif isinstance(error, OSError):
            return ErrorCategory.FILESYSTEM
        elif isinstance(error, (ValueError, TypeError)):
            return ErrorCategory.CONFIGURATION
        else:
            return ErrorCategory.UNKNOWN

    def generate_user_message(
        self, error: Exception, category: ErrorCategory, context: dict[str, Any]
    ) -> str:
        """Generate a human-readable message naming the offending file.

        Args:
            error: The exception that occurred
            category: The error category
            context: Context information

        Returns:
            User-facing error message
        """
        input_path = context.get("input_path")
        filename = Path(str(input_path)).name if input_path else "unknown file"
        base_message = str(error)

        if category == ErrorCategory.INPUT:
            return f"Input error for {filename}: {base_message}"
        elif category == ErrorCategory.CODEC:
            return f"Cannot decode {filename}: {base_message}"
        elif category == ErrorCategory.FILESYSTEM:
            return f"File system error for {filename}: {base_message}"
        elif category == ErrorCategory.CONFIGURATION:
            return f"Configuration error: {base_message}"
        else:
            return f"Unexpected error processing {filename}: {base_message}"

    def _log_error(
        self, error: Exception, category: ErrorCategory, context: dict[str, Any]
    ) -> None:
        """Log error with full context and stack trace.

        Args:
            error: The exception that occurred
            category: The error category
            context: Context information
        """
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())

        self.logger.error(
            f"Error [{category.value}]: {type(error).__name__}: {error} ({context_str})"
        )

        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"Stack trace for error in {context.get('input_path', 'unknown')}:\n"
                f"{''.join(traceback.format_exception(type(error), error, error.__traceback__))}"
            )
