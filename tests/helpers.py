"""Shared test doubles and file helpers."""

import io
from pathlib import Path

from PIL import Image

from heic2jpeg.errors import CodecError


class FakeCodec:
    """In-memory codec: prefixes the input, rejects buffers starting with b"corrupt"."""

    def __init__(self):
        self.calls: list[tuple[bytes, int]] = []

    def convert(self, data: bytes, quality: int) -> bytes:
        self.calls.append((data, quality))
        if data.startswith(b"corrupt"):
            raise CodecError("Failed to decode image: not a HEIF file")
        return b"JPEG:" + data


def make_image_bytes(size=(64, 48), color=(128, 64, 32)) -> bytes:
    """Encode a small RGB image as JPEG.

    Pillow identifies images by content, so these bytes stand in for HEIC
    input when saved under a .heic name.
    """
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


def write_files(directory: Path, names: list[str], content: bytes = b"heic-data") -> list[Path]:
    """Create files with the given names and content, returning their paths."""
    directory.mkdir(parents=True, exist_ok=True)
    paths = []
    for name in names:
        path = directory / name
        path.write_bytes(content)
        paths.append(path)
    return paths
