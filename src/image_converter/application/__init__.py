"""Application-layer use-cases and option objects."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from pathlib import Path

from image_converter.application.options import ConversionOptions
from image_converter.application.ports import ImageCodec, ProgressSink
from image_converter.application.results import (
    BatchConversionResult,
    ConversionRequest,
    ConversionResult,
    DiscoveryReport,
    ImageRecord,
    ItemFailure,
)


def build_conversion_options(
    *,
    format: str,
    quality: int,
    output_root: Path | str,
    skip_existing: bool = False,
    max_workers: int | None = None,
) -> ConversionOptions:
    """Build typed conversion options via lazy use-case import."""
    from image_converter.application.use_cases import build_conversion_options as _impl

    return _impl(
        format=format,
        quality=quality,
        output_root=output_root,
        skip_existing=skip_existing,
        max_workers=max_workers,
    )


def discover_images(
    paths: Iterable[str | Path],
    *,
    progress: ProgressSink | None = None,
    strict: bool = True,
    known_identities: Collection[str] = (),
    max_workers: int | None = None,
) -> DiscoveryReport:
    """Discover images under ``paths`` via lazy use-case import."""
    from image_converter.application.use_cases import discover_images as _impl

    return _impl(
        paths,
        progress=progress,
        strict=strict,
        known_identities=known_identities,
        max_workers=max_workers,
    )


def convert_images(
    requests: Sequence[ConversionRequest],
    options: ConversionOptions,
    *,
    progress: ProgressSink | None = None,
) -> BatchConversionResult:
    """Convert a batch of requests via lazy use-case import."""
    from image_converter.application.use_cases import convert_images as _impl

    return _impl(requests, options, progress=progress)


def check_existing(
    requests: Iterable[ConversionRequest],
    output_root: Path | str,
    format: str,
) -> list[ConversionResult]:
    """Report already-converted requests via lazy use-case import."""
    from image_converter.application.use_cases import check_existing as _impl

    return _impl(requests, output_root, format)


__all__ = [
    "BatchConversionResult",
    "ConversionOptions",
    "ConversionRequest",
    "ConversionResult",
    "DiscoveryReport",
    "ImageCodec",
    "ImageRecord",
    "ItemFailure",
    "ProgressSink",
    "build_conversion_options",
    "check_existing",
    "convert_images",
    "discover_images",
]
