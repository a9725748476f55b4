"""Shared type aliases for discovery and conversion modules."""

from __future__ import annotations

from typing import Literal

import numpy as np
import numpy.typing as npt

type TargetFormat = Literal["webp", "avif"]
type ImageMimeType = Literal["image/jpeg", "image/png", "image/webp"]
type Identity = str

# Fully materialised RGBA8 raster, shape (height, width, 4).
type Raster = npt.NDArray[np.uint8]

SUPPORTED_FORMATS: tuple[str, ...] = ("webp", "avif")
