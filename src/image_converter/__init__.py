"""Top-level API for batch WebP/AVIF image conversion."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from image_converter.api import ConversionItem
    from image_converter.application.ports import ProgressSink
    from image_converter.application.results import ConversionResult, ImageRecord

__version__ = "0.1.0"


def discover(
    paths: Sequence[str | Path],
    *,
    progress: ProgressSink | None = None,
    strict: bool = True,
) -> list[ImageRecord]:
    """Discover convertible images under files and directories.

    Parameters
    ----------
    paths : Sequence[str | Path]
        Files and directories to scan. Directories are walked recursively,
        skipping hidden ones.
    progress : ProgressSink | None, optional
        Receives one ``total`` and one ``tick`` per candidate file.
    strict : bool, default=True
        Abort on the first unreadable directory.

    Returns
    -------
    list[ImageRecord]
        Images whose content is JPEG, PNG or WebP.
    """
    from .api import discover as _impl

    return _impl(paths, progress=progress, strict=strict)


def convert(
    items: Iterable[ConversionItem],
    *,
    format: str,
    quality: int,
    output_root: Path | str,
    skip_existing: bool = False,
    progress: ProgressSink | None = None,
) -> list[ConversionResult]:
    """Convert discovered images into WebP or AVIF.

    Parameters
    ----------
    items : Iterable[ConversionItem]
        Records from :func:`discover` or equivalent client rows.
    format : {"webp", "avif"}
        Target format.
    quality : int
        Encoder quality in ``[1, 100]``.
    output_root : Path | str
        Root of the mirrored output tree; created if missing.
    skip_existing : bool, default=False
        Report existing outputs instead of re-encoding them.
    progress : ProgressSink | None, optional
        Receives one ``tick`` per processed item.

    Returns
    -------
    list[ConversionResult]
        Successful conversions only; failed identities are absent.
    """
    from .api import convert as _impl

    return _impl(
        items,
        format=format,
        quality=quality,
        output_root=output_root,
        skip_existing=skip_existing,
        progress=progress,
    )


def check_existing(
    items: Iterable[ConversionItem],
    output_root: Path | str,
    format: str,
) -> list[ConversionResult]:
    """Report items whose converted output already exists under ``output_root``."""
    from .api import check_existing as _impl

    return _impl(items, output_root, format)


def reveal_in_file_manager(path: str | Path) -> None:
    """Open ``path`` in the host file manager."""
    from .api import reveal_in_file_manager as _impl

    _impl(path)


__all__ = [
    "check_existing",
    "convert",
    "discover",
    "reveal_in_file_manager",
]
