"""HEIC decode / JPEG encode capability backed by Pillow and pillow-heif."""

from __future__ import annotations

import contextlib
import io
from typing import Any, Protocol

import piexif
import pillow_heif
from PIL import Image

from heic2jpeg.errors import CodecError

ExifDict = dict[str, Any]


class Codec(Protocol):
    """Convert an encoded image buffer into JPEG bytes."""

    def convert(self, data: bytes, quality: int) -> bytes: ...


class PillowHeifCodec:
    """Decode HEIC/HEIF with pillow-heif and re-encode as JPEG with Pillow.

    The source EXIF block and ICC profile are carried over when present.
    """

    EXIF_IFD_KEYS = frozenset({"0th", "Exif", "GPS", "Interop", "1st", "thumbnail"})

    def __init__(self) -> None:
        # Register HEIF opener with Pillow
        pillow_heif.register_heif_opener()

    def convert(self, data: bytes, quality: int) -> bytes:
        """Convert an encoded HEIC/HEIF buffer to JPEG.

        Args:
            data: Raw bytes of the source image
            quality: JPEG quality (1-100)

        Returns:
            Raw JPEG bytes

        Raises:
            CodecError: If the buffer cannot be decoded or encoded
        """
        if not data:
            raise CodecError("Input buffer is empty")

        try:
            with Image.open(io.BytesIO(data)) as img:
                exif_dict = self._load_exif(img.info.get("exif"))
                icc_profile = img.info.get("icc_profile")
                # convert() always returns a detached copy, usable after close
                rgb_img: Image.Image = img.convert("RGB")
        except Exception as e:
            raise CodecError(f"Failed to decode image: {str(e)}") from e

        return self._encode_jpeg(rgb_img, quality, exif_dict, icc_profile)

    def _load_exif(self, exif_blob: Any) -> ExifDict:
        """Parse the raw EXIF block, returning an empty dict when unusable."""
        if not exif_blob:
            return {}
        exif_dict: ExifDict = {}
        with contextlib.suppress(Exception):
            loaded_exif = piexif.load(exif_blob)
            if isinstance(loaded_exif, dict):
                exif_dict = {
                    key: value for key, value in loaded_exif.items() if key in self.EXIF_IFD_KEYS
                }
        return exif_dict

    def _encode_jpeg(
        self,
        image: Image.Image,
        quality: int,
        exif: ExifDict,
        icc_profile: bytes | None,
    ) -> bytes:
        """Encode image as JPEG bytes.

        Raises:
            CodecError: If encoding fails
        """
        exif_bytes = None
        if exif:
            with contextlib.suppress(Exception):
                exif_bytes = piexif.dump(exif)

        save_kwargs: dict[str, Any] = {
            "format": "JPEG",
            "quality": quality,
            "optimize": True,
        }
        if exif_bytes:
            save_kwargs["exif"] = exif_bytes
        if isinstance(icc_profile, bytes) and icc_profile:
            save_kwargs["icc_profile"] = icc_profile

        buffer = io.BytesIO()
        try:
            image.save(buffer, **save_kwargs)
        except Exception as e:
            raise CodecError(f"Failed to encode JPEG: {str(e)}") from e
        return buffer.getvalue()
