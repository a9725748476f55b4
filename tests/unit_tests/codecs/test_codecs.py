"""Unit tests for Pillow-backed codecs."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest
from PIL import Image, features

from image_converter.codecs import AvifCodec, WebpCodec, decode_rgba
from image_converter.errors import DecodeError, EncodeError


def _raster(height: int = 6, width: int = 8) -> np.ndarray:
    raster = np.zeros((height, width, 4), dtype=np.uint8)
    raster[..., 0] = np.arange(width, dtype=np.uint8) * 20
    raster[..., 3] = 255
    return raster


@pytest.mark.parametrize(("fmt", "name"), [("JPEG", "a.jpg"), ("PNG", "b.png")])
def test_decode_produces_rgba8(
    tmp_path: Path, make_image: Callable[..., Path], fmt: str, name: str
) -> None:
    """Every accepted input decodes into a (height, width, 4) uint8 raster."""
    raster = decode_rgba(make_image(tmp_path / name, fmt, size=(8, 6)))
    assert raster.shape == (6, 8, 4)
    assert raster.dtype == np.uint8


def test_decode_rejects_corrupt_content(tmp_path: Path) -> None:
    """Unparseable files raise ``DecodeError``."""
    path = tmp_path / "broken.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 16)
    with pytest.raises(DecodeError, match="broken.png"):
        decode_rgba(path)


def test_webp_encode_round_trips_dimensions() -> None:
    """Encoded WebP bytes decode back to the source dimensions."""
    data = WebpCodec().encode(_raster(), 80)
    assert data[:4] == b"RIFF" and data[8:12] == b"WEBP"
    with Image.open(io.BytesIO(data)) as image:
        assert image.size == (8, 6)


def test_lower_quality_does_not_grow_output() -> None:
    """Quality is forwarded to the encoder."""
    rng = np.random.default_rng(0)
    raster = rng.integers(0, 256, size=(64, 64, 4), dtype=np.uint8)
    raster[..., 3] = 255
    codec = WebpCodec()
    assert len(codec.encode(raster, 10)) <= len(codec.encode(raster, 95))


@pytest.mark.skipif(not features.check("avif"), reason="Pillow built without AVIF")
def test_avif_encode_produces_isobmff() -> None:
    """AVIF output starts with an ISO-BMFF ``ftyp`` box."""
    data = AvifCodec().encode(_raster(), 60)
    assert data[4:8] == b"ftyp"


@pytest.mark.parametrize(
    "raster",
    [
        np.zeros((4, 4, 3), dtype=np.uint8),
        np.zeros((4, 4), dtype=np.uint8),
        np.zeros((4, 4, 4), dtype=np.float32),
    ],
)
def test_encode_rejects_malformed_rasters(raster: np.ndarray) -> None:
    """Only uint8 RGBA rasters are accepted."""
    with pytest.raises(EncodeError, match="uint8 RGBA"):
        WebpCodec().encode(raster, 80)


@pytest.mark.parametrize("quality", [0, 101])
def test_encode_rejects_out_of_range_quality(quality: int) -> None:
    """Quality outside 1..100 is an encode failure."""
    with pytest.raises(EncodeError, match="quality"):
        WebpCodec().encode(_raster(), quality)
