"""Pillow-backed decode/encode building blocks shared by built-in codecs."""

from __future__ import annotations

import io
from collections.abc import Mapping
from pathlib import Path
from typing import ClassVar

import numpy as np
from PIL import Image, UnidentifiedImageError

from image_converter.errors import DecodeError, EncodeError
from image_converter.types import Raster

MIN_QUALITY = 1
MAX_QUALITY = 100


def decode_rgba(source_path: Path) -> Raster:
    """Fully decode an image file into an RGBA8 raster.

    Parameters
    ----------
    source_path : Path
        JPEG, PNG or WebP source file.

    Returns
    -------
    Raster
        ``uint8`` array of shape ``(height, width, 4)``.

    Raises
    ------
    DecodeError
        If Pillow cannot open or decode the file.
    """
    try:
        with Image.open(source_path) as image:
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Failed to open image {source_path}: {exc}") from exc
    return np.asarray(rgba, dtype=np.uint8)


class PillowCodec:
    """Encode RGBA rasters through a Pillow save plugin.

    Subclasses set ``name``, ``extension`` and ``pillow_format`` and may add
    format-specific ``save_options``.
    """

    name: ClassVar[str] = ""
    extension: ClassVar[str] = ""
    pillow_format: ClassVar[str] = ""
    save_options: ClassVar[Mapping[str, object]] = {}

    def decode(self, source_path: Path) -> Raster:
        """Decode ``source_path`` into an RGBA8 raster."""
        return decode_rgba(source_path)

    def encode(self, raster: Raster, quality: int) -> bytes:
        """Encode ``raster`` with the codec's native quality scale.

        Parameters
        ----------
        raster : Raster
            ``uint8`` RGBA array of shape ``(height, width, 4)``.
        quality : int
            Quality in ``[1, 100]``, passed through unchanged.

        Returns
        -------
        bytes
            Encoded file content.

        Raises
        ------
        EncodeError
            If the raster is malformed or the Pillow plugin fails.
        """
        if raster.ndim != 3 or raster.shape[2] != 4 or raster.dtype != np.uint8:
            raise EncodeError(
                f"{self.name} encoder expects a uint8 RGBA raster, got "
                f"shape={raster.shape} dtype={raster.dtype}"
            )
        if not MIN_QUALITY <= quality <= MAX_QUALITY:
            raise EncodeError(f"quality must be between 1 and 100, got {quality}")

        image = Image.fromarray(raster)
        buffer = io.BytesIO()
        try:
            image.save(
                buffer,
                format=self.pillow_format,
                quality=quality,
                **self.save_options,
            )
        except (KeyError, OSError, ValueError) as exc:
            raise EncodeError(f"{self.name} encoding failed: {exc}") from exc

        data = buffer.getvalue()
        if not data:
            raise EncodeError(f"{self.name} encoder produced no output")
        return data
