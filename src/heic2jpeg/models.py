"""Core data models for the HEIC to JPEG converter."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

MIN_QUALITY = 1
MAX_QUALITY = 100
DEFAULT_QUALITY = 90


def validate_quality(quality: int) -> int:
    """Return quality unchanged if it lies in [1, 100].

    Raises:
        InvalidOptionError: If quality is not an integer or is out of range
    """
    # errors imports this module
    from heic2jpeg.errors import InvalidOptionError

    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidOptionError(f"Quality must be an integer, got {quality!r}")
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidOptionError(
            f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}"
        )
    return quality


class ConversionStatus(Enum):
    """Status of a conversion operation."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class Config:
    """Configuration for the HEIC converter.

    Attributes:
        quality: JPEG quality level (1-100, default 90)
        output_dir: Optional output path (file in single mode, directory in batch mode)
        recursive: Descend into subdirectories in directory mode
        verbose: Enable verbose logging
        log_file: Optional file that receives a copy of the log
    """

    quality: int = DEFAULT_QUALITY
    output_dir: Path | None = None
    recursive: bool = False
    verbose: bool = False
    log_file: Path | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        validate_quality(self.quality)


@dataclass
class ConversionRequest:
    """A single file conversion to perform.

    Attributes:
        input_path: Path to the HEIC/HEIF source file
        output_path: Target JPEG path, derived from input_path when None
        quality: JPEG quality level (1-100)
    """

    input_path: Path
    output_path: Path | None = None
    quality: int = DEFAULT_QUALITY

    def __post_init__(self) -> None:
        validate_quality(self.quality)


@dataclass
class ConversionResult:
    """Result of a single conversion operation.

    Attributes:
        input_path: Path to the input HEIC file
        output_path: Path to the output JPEG file (None if failed)
        status: Conversion status
        error_message: Error message if conversion failed
        overwritten: Whether an existing output file was replaced
        timestamps_preserved: Whether source atime/mtime were copied to the output
        processing_time: Time taken to process in seconds
    """

    input_path: Path
    output_path: Path | None
    status: ConversionStatus
    error_message: str | None = None
    overwritten: bool = False
    timestamps_preserved: bool = False
    processing_time: float = 0.0


@dataclass
class BatchResults:
    """Results of converting one directory.

    Counters cover the files found directly in ``directory`` only. When the
    run is recursive, each subdirectory carries its own BatchResults in
    ``subdirectories``.

    Attributes:
        directory: Source directory that was scanned
        destination: Directory the JPEG files were written to
        total_files: Number of HEIC/HEIF files discovered
        successful: Number of successful conversions
        failed: Number of failed conversions
        results: Individual conversion results, in processing order
        subdirectories: Results for subdirectories (recursive runs only)
        total_time: Total time taken in seconds, subdirectories included
    """

    directory: Path
    destination: Path
    total_files: int = 0
    successful: int = 0
    failed: int = 0
    results: list[ConversionResult] = field(default_factory=list)
    subdirectories: list["BatchResults"] = field(default_factory=list)
    total_time: float = 0.0

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    def success_rate(self) -> float:
        """Calculate success rate as percentage.

        Returns:
            Success rate as a percentage (0.0 to 100.0)
        """
        if self.total_files == 0:
            return 0.0
        return (self.successful / self.total_files) * 100.0

    def record(self, result: ConversionResult) -> None:
        """Add a conversion outcome to this directory's tally."""
        self.results.append(result)
        if result.status == ConversionStatus.SUCCESS:
            self.successful += 1
        else:
            self.failed += 1

    def iter_all(self) -> Iterator["BatchResults"]:
        """Yield this result and every nested subdirectory result, depth-first."""
        for child in self.subdirectories:
            yield from child.iter_all()
        yield self


@dataclass
class ValidationResult:
    """Result of a validation operation.

    Attributes:
        valid: Whether the validation passed
        error_message: Error message if validation failed
    """

    valid: bool
    error_message: str | None = None
