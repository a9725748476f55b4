"""Public command surface (delegates to application use-cases)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError as SchemaValidationError

from image_converter.application.ports import ProgressSink
from image_converter.application.results import (
    BatchConversionResult,
    ConversionRequest,
    ConversionResult,
    DiscoveryReport,
    ImageRecord,
)
from image_converter.application.use_cases import build_conversion_options
from image_converter.application.use_cases import build_conversion_request
from image_converter.application.use_cases import check_existing as _check_existing
from image_converter.application.use_cases import convert_images
from image_converter.application.use_cases import discover_images
from image_converter.application.use_cases import output_file_stem
from image_converter.errors import ValidationError
from image_converter.infrastructure.reveal import (
    reveal_in_file_manager as _reveal_in_file_manager,
)
from image_converter.schemas import ConversionItemPayload

ConversionItem = Union[
    ImageRecord,
    ConversionRequest,
    ConversionItemPayload,
    Mapping[str, object],
]


def to_conversion_request(item: ConversionItem) -> ConversionRequest:
    """Normalize a record, request, payload or raw mapping into a request.

    Raises
    ------
    ValidationError
        If a raw mapping does not match the conversion item schema.
    """
    if isinstance(item, ConversionRequest):
        return item
    if isinstance(item, ImageRecord):
        return build_conversion_request(item)
    if not isinstance(item, ConversionItemPayload):
        try:
            item = ConversionItemPayload.model_validate(dict(item))
        except SchemaValidationError as exc:
            raise ValidationError(f"Invalid conversion item: {exc}") from exc
    return ConversionRequest(
        identity=item.identity,
        source_path=item.source_path,
        output_file_name=output_file_stem(item.file_name),
        relative_dir_segments=tuple(item.relative_dir_segments),
    )


def discover_report(
    paths: Sequence[str | Path],
    *,
    progress: Optional[ProgressSink] = None,
    strict: bool = True,
    known_identities: Iterable[str] = (),
    max_workers: Optional[int] = None,
) -> DiscoveryReport:
    """Discover images and return records plus user-facing notices."""
    return discover_images(
        paths,
        progress=progress,
        strict=strict,
        known_identities=frozenset(known_identities),
        max_workers=max_workers,
    )


def discover(
    paths: Sequence[str | Path],
    *,
    progress: Optional[ProgressSink] = None,
    strict: bool = True,
) -> list[ImageRecord]:
    """Discover JPEG/PNG/WebP images under files and directories in ``paths``."""
    report = discover_report(paths, progress=progress, strict=strict)
    return list(report.records)


def convert_batch(
    items: Iterable[ConversionItem],
    *,
    format: str,
    quality: int,
    output_root: Path | str,
    skip_existing: bool = False,
    max_workers: Optional[int] = None,
    progress: Optional[ProgressSink] = None,
) -> BatchConversionResult:
    """Convert items and return both successes and item-level failures."""
    options = build_conversion_options(
        format=format,
        quality=quality,
        output_root=output_root,
        skip_existing=skip_existing,
        max_workers=max_workers,
    )
    requests = [to_conversion_request(item) for item in items]
    return convert_images(requests, options, progress=progress)


def convert(
    items: Iterable[ConversionItem],
    *,
    format: str,
    quality: int,
    output_root: Path | str,
    skip_existing: bool = False,
    max_workers: Optional[int] = None,
    progress: Optional[ProgressSink] = None,
) -> list[ConversionResult]:
    """Convert items; failed identities are simply absent from the result."""
    batch = convert_batch(
        items,
        format=format,
        quality=quality,
        output_root=output_root,
        skip_existing=skip_existing,
        max_workers=max_workers,
        progress=progress,
    )
    return list(batch.results)


def check_existing(
    items: Iterable[ConversionItem],
    output_root: Path | str,
    format: str,
) -> list[ConversionResult]:
    """Report items whose converted output already exists."""
    requests = [to_conversion_request(item) for item in items]
    return _check_existing(requests, output_root, format)


def reveal_in_file_manager(path: str | Path) -> None:
    """Reveal ``path`` in the host file manager."""
    _reveal_in_file_manager(path)
