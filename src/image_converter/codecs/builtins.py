"""Built-in WebP and AVIF codecs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import ClassVar

from image_converter.codecs.base import PillowCodec


class WebpCodec(PillowCodec):
    """Lossy WebP encoder."""

    name: ClassVar[str] = "webp"
    extension: ClassVar[str] = "webp"
    pillow_format: ClassVar[str] = "WEBP"
    save_options: ClassVar[Mapping[str, object]] = {"method": 4}


class AvifCodec(PillowCodec):
    """AVIF encoder; requires a Pillow build with libavif."""

    name: ClassVar[str] = "avif"
    extension: ClassVar[str] = "avif"
    pillow_format: ClassVar[str] = "AVIF"
    save_options: ClassVar[Mapping[str, object]] = {"speed": 6}
