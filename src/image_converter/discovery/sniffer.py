"""Content-signature image type detection."""

from __future__ import annotations

import logging
from pathlib import Path

from image_converter.types import ImageMimeType

logger = logging.getLogger(__name__)

JPEG_SIGNATURE = b"\xff\xd8\xff"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
SNIFF_LENGTH = 12


def sniff_header(header: bytes) -> ImageMimeType | None:
    """Map leading file bytes to a supported image MIME type."""
    if header.startswith(JPEG_SIGNATURE):
        return "image/jpeg"
    if header.startswith(PNG_SIGNATURE):
        return "image/png"
    if len(header) >= 12 and header[:4] == b"RIFF" and header[8:12] == b"WEBP":
        return "image/webp"
    return None


def detect_mime(path: Path) -> ImageMimeType | None:
    """Detect the image type of ``path`` from its content.

    Parameters
    ----------
    path : Path
        File to inspect. The extension is ignored.

    Returns
    -------
    ImageMimeType | None
        ``image/jpeg``, ``image/png`` or ``image/webp``; ``None`` for any other
        content or when the file cannot be read.
    """
    try:
        with path.open("rb") as handle:
            header = handle.read(SNIFF_LENGTH)
    except OSError as exc:
        logger.debug("Cannot sniff %s: %s", path, exc)
        return None
    return sniff_header(header)
