"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from image_converter.types import Raster


class ProgressSink(Protocol):
    """Receive discovery totals and per-item ticks."""

    def total(self, count: int) -> None:
        """Announce the number of items discovery is about to filter."""

    def tick(self) -> None:
        """Record one processed item. Called from worker threads."""


class ImageCodec(Protocol):
    """Decode source images and encode RGBA rasters into a target format."""

    name: str
    extension: str

    def decode(self, source_path: Path) -> Raster:
        """Decode ``source_path`` into an RGBA8 raster.

        Raises
        ------
        DecodeError
            If the file cannot be parsed as a raster image.
        """

    def encode(self, raster: Raster, quality: int) -> bytes:
        """Encode ``raster`` at ``quality`` (1-100).

        Raises
        ------
        EncodeError
            If the codec fails to produce output bytes.
        """
