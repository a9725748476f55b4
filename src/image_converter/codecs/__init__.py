"""Target-format codecs and their registry."""

from .base import PillowCodec, decode_rgba
from .builtins import AvifCodec, WebpCodec
from .registry import CodecRegistry, create_default_registry

__all__ = [
    "AvifCodec",
    "CodecRegistry",
    "PillowCodec",
    "WebpCodec",
    "create_default_registry",
    "decode_rgba",
]
