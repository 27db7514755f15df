"""File system operations for the HEIC converter."""

from __future__ import annotations

import contextlib
import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from .errors import FileSystemError, InputNotFoundError, SourceDirectoryError
from .models import ValidationResult

JPEG_SUFFIX = ".jpg"


@dataclass
class DirectoryListing:
    """Immediate entries of a directory, sorted by name.

    Attributes:
        heic_files: Regular files with a .heic/.heif extension (any case)
        other_files: Every other regular file
        subdirectories: Child directories
    """

    heic_files: list[Path] = field(default_factory=list)
    other_files: list[Path] = field(default_factory=list)
    subdirectories: list[Path] = field(default_factory=list)


class FileSystemHandler:
    """Handle file system operations for conversions.

    This class provides:
    - HEIC/HEIF extension detection
    - Output path derivation
    - Byte-level reads and atomic writes
    - Directory creation and listing
    - Timestamp preservation
    """

    # Valid HEIC file extensions
    VALID_EXTENSIONS = {".heic", ".heif"}

    def is_heic_file(self, path: Path) -> bool:
        """Return True if path has a .heic/.heif extension, ignoring case."""
        return path.suffix.lower() in self.VALID_EXTENSIONS

    def validate_input_file(self, path: Path) -> ValidationResult:
        """Validate that an input file exists and is readable.

        Args:
            path: Path to the input file

        Returns:
            ValidationResult indicating whether the file is usable
        """
        if not path.exists():
            return ValidationResult(valid=False, error_message=f"File not found: {path}")

        if not path.is_file():
            return ValidationResult(valid=False, error_message=f"Path is not a file: {path}")

        if not os.access(path, os.R_OK):
            return ValidationResult(valid=False, error_message=f"File is not readable: {path}")

        return ValidationResult(valid=True)

    def validate_source_directory(self, path: Path) -> ValidationResult:
        """Validate that a batch source exists and is a directory."""
        if not path.exists():
            return ValidationResult(valid=False, error_message=f"Directory not found: {path}")

        if not path.is_dir():
            return ValidationResult(valid=False, error_message=f"Not a directory: {path}")

        return ValidationResult(valid=True)

    def get_output_path(self, input_path: Path, output_dir: Path | None = None) -> Path:
        """Generate output path from input path.

        A .heic/.heif extension (any case) is replaced with .jpg; any other
        name gets .jpg appended so the source is never overwritten. The base
        name keeps its case.

        Args:
            input_path: Path to the input HEIC file
            output_dir: Optional output directory (if None, use input directory)

        Returns:
            Path to the output JPEG file
        """
        if self.is_heic_file(input_path):
            output_filename = input_path.stem + JPEG_SUFFIX
        else:
            output_filename = input_path.name + JPEG_SUFFIX

        if output_dir is not None:
            return output_dir / output_filename
        else:
            return input_path.parent / output_filename

    def read_file(self, path: Path) -> bytes:
        """Read a file as bytes.

        Raises:
            InputNotFoundError: If the file is missing or not a regular file
            FileSystemError: If reading fails
        """
        validation = self.validate_input_file(path)
        if not validation.valid:
            error_msg = validation.error_message or f"Cannot read {path}"
            if "not readable" in error_msg:
                raise FileSystemError(error_msg)
            raise InputNotFoundError(error_msg)

        try:
            return path.read_bytes()
        except OSError as e:
            raise FileSystemError(f"Failed to read file {path}: {e}") from e

    def write_file(self, path: Path, data: bytes) -> None:
        """Write bytes to path, creating the parent directory if needed.

        The data goes to a uniquely named hidden sibling first and is moved
        into place with an atomic replace. Existing files other than path
        are never touched.

        Raises:
            FileSystemError: If directory creation or the write fails
        """
        self.ensure_directory(path.parent)

        temp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        created = False
        try:
            with open(temp_path, "xb") as f:
                created = True
                f.write(data)
            os.replace(temp_path, path)
        except OSError as e:
            if created:
                with contextlib.suppress(OSError):
                    temp_path.unlink()
            raise FileSystemError(f"Failed to write file {path}: {e}") from e

    def ensure_directory(self, path: Path) -> None:
        """Create directory (with parents) if it doesn't exist.

        Raises:
            FileSystemError: If directory creation fails
        """
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError(f"Failed to create directory {path}: {e}") from e

    def list_directory(self, path: Path) -> DirectoryListing:
        """List the immediate entries of a directory.

        Args:
            path: Directory to list

        Returns:
            DirectoryListing with entries sorted by name

        Raises:
            SourceDirectoryError: If path is missing or not a directory
            FileSystemError: If the directory cannot be read
        """
        validation = self.validate_source_directory(path)
        if not validation.valid:
            raise SourceDirectoryError(validation.error_message)

        try:
            entries = sorted(path.iterdir(), key=lambda entry: entry.name)
        except OSError as e:
            raise FileSystemError(f"Failed to list directory {path}: {e}") from e

        listing = DirectoryListing()
        for entry in entries:
            if entry.is_dir():
                listing.subdirectories.append(entry)
            elif entry.is_file():
                if self.is_heic_file(entry):
                    listing.heic_files.append(entry)
                else:
                    listing.other_files.append(entry)
        return listing

    def get_timestamps(self, path: Path) -> tuple[int, int]:
        """Return (atime_ns, mtime_ns) of path.

        Raises:
            OSError: If path cannot be stat'ed
        """
        stat = path.stat()
        return stat.st_atime_ns, stat.st_mtime_ns

    def set_timestamps(self, path: Path, times: tuple[int, int]) -> None:
        """Apply (atime_ns, mtime_ns) to path.

        Raises:
            OSError: If the times cannot be updated
        """
        os.utime(path, ns=times)
