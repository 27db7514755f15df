"""Configuration handling for the HEIC to JPEG converter."""

import os
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

from .errors import InvalidOptionError
from .models import DEFAULT_QUALITY, MAX_QUALITY, MIN_QUALITY, Config

QUALITY_ENV_VAR = "HEIC_QUALITY"

# ASCII digits only, no digit-group underscores
_QUALITY_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_quality(value: int | str) -> int:
    """Parse and validate a quality value.

    Args:
        value: Quality as an integer or its string form (e.g. from the command line)

    Returns:
        Quality value in the range 1-100

    Raises:
        InvalidOptionError: If the value is not an integer or is out of range
    """
    if isinstance(value, bool):
        raise InvalidOptionError(f"Invalid quality value: {value!r}")

    if isinstance(value, str):
        text = value.strip()
        if not _QUALITY_PATTERN.fullmatch(text):
            raise InvalidOptionError(
                f"Invalid quality value: {value!r}. Must be an integer "
                f"between {MIN_QUALITY} and {MAX_QUALITY}."
            )
        quality = int(text)
    elif isinstance(value, int):
        quality = value
    else:
        raise InvalidOptionError(f"Invalid quality value: {value!r}")

    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidOptionError(
            f"Invalid quality value: {quality}. Must be between {MIN_QUALITY} and {MAX_QUALITY}."
        )
    return quality


def get_quality_from_env() -> int | None:
    """Get quality setting from environment variable.

    Reads the HEIC_QUALITY environment variable and validates it.
    Returns None if the variable is not set or contains an invalid value.

    Returns:
        Quality value (1-100) if valid, None otherwise
    """
    quality_str = os.getenv(QUALITY_ENV_VAR)
    if quality_str is None:
        return None

    try:
        return parse_quality(quality_str)
    except InvalidOptionError:
        # Fall back to the default
        return None


def create_config(
    quality: int | str | None = None,
    output_dir: "Path | None" = None,
    recursive: bool = False,
    verbose: bool = False,
    log_file: "Path | None" = None,
) -> Config:
    """Create a Config object with quality from environment variable fallback.

    Quality is resolved in this order:
    1. Explicit quality parameter (rejected if invalid)
    2. HEIC_QUALITY environment variable (ignored if invalid)
    3. Default quality (90)

    Args:
        quality: Explicit quality value, or None to use environment/default
        output_dir: Optional output file or directory
        recursive: Process subdirectories in directory mode
        verbose: Enable verbose logging
        log_file: Optional log file path

    Returns:
        Config object with quality set according to priority

    Raises:
        InvalidOptionError: If an explicit quality value is invalid
    """
    if quality is not None:
        final_quality = parse_quality(quality)
    else:
        env_quality = get_quality_from_env()
        final_quality = env_quality if env_quality is not None else DEFAULT_QUALITY

    return Config(
        quality=final_quality,
        output_dir=output_dir,
        recursive=recursive,
        verbose=verbose,
        log_file=log_file,
    )
