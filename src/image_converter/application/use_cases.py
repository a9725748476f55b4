"""Application use-cases orchestrating discovery, conversion and resume."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Collection, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pydantic import ValidationError as SchemaValidationError

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
from image_converter.codecs.registry import CodecRegistry, create_default_registry
from image_converter.discovery.collector import PathCollector, PathEntry
from image_converter.discovery.identity import identity_of
from image_converter.discovery.sniffer import detect_mime
from image_converter.errors import (
    ConversionError,
    OutputCollisionError,
    OutputRootError,
    ValidationError,
)
from image_converter.infrastructure.filesystem import (
    ensure_directory,
    file_size,
    write_bytes_atomic,
)
from image_converter.infrastructure.progress import NullProgressSink
from image_converter.schemas import ConversionOptionsConfig, ExistenceCheckConfig
from image_converter.settings import get_settings

logger = logging.getLogger(__name__)


def output_file_stem(file_name: str) -> str:
    """Strip the last extension from ``file_name``; the target one replaces it."""
    return Path(file_name).stem or file_name


def output_path_for(
    request: ConversionRequest,
    output_root: Path,
    format: str,
) -> Path:
    """Compute the deterministic output location for ``request``.

    ``output_root / *relative_dir_segments / f"{output_file_name}.{format}"``.
    Conversion and the existence check both resolve paths through here.
    """
    return output_root.joinpath(
        *request.relative_dir_segments,
        f"{request.output_file_name}.{format}",
    )


def build_conversion_request(record: ImageRecord) -> ConversionRequest:
    """Join a discovered record into a conversion work item."""
    return ConversionRequest(
        identity=record.identity,
        source_path=record.absolute_path,
        output_file_name=output_file_stem(record.file_name),
        relative_dir_segments=record.relative_dir_segments,
    )


def build_conversion_options(
    *,
    format: str,
    quality: int,
    output_root: Path | str,
    skip_existing: bool = False,
    max_workers: int | None = None,
) -> ConversionOptions:
    """Build typed option object from command/API params.

    Raises
    ------
    ValidationError
        If the format is unsupported or a numeric option is out of range.
    """
    config = _validate_options(
        format=format,
        quality=quality,
        output_root=output_root,
        skip_existing=skip_existing,
        max_workers=max_workers,
    )
    return ConversionOptions(
        format=config.format,
        quality=config.quality,
        output_root=config.output_root,
        skip_existing=config.skip_existing,
        max_workers=config.max_workers,
    )


def discover_images(
    paths: Iterable[str | Path],
    *,
    progress: ProgressSink | None = None,
    strict: bool = True,
    known_identities: Collection[str] = (),
    max_workers: int | None = None,
) -> DiscoveryReport:
    """Use-case: collect, identify and content-check images under ``paths``.

    Parameters
    ----------
    paths : Iterable[str | Path]
        Files and directories selected by the user.
    progress : ProgressSink | None, default=None
        Receives one ``total`` with the number of collected candidates, then
        one ``tick`` per candidate (kept, duplicate or unsupported).
    strict : bool, default=True
        Abort on the first unreadable directory when ``True``; otherwise skip
        it and list it in ``skipped_directories``.
    known_identities : Collection[str], default=()
        Identities the caller already holds; matching files count as
        duplicates and are not returned again.
    max_workers : int | None, default=None
        Pool size for content sniffing.

    Raises
    ------
    DiscoveryError
        If a directory cannot be read and ``strict`` is ``True``.
    """
    sink = progress or NullProgressSink()
    worker_limit = _worker_limit(max_workers)
    collector = PathCollector(strict=strict)
    entries = collector.collect(paths)
    sink.total(len(entries))

    seen = set(known_identities)
    unique: list[tuple[str, PathEntry]] = []
    duplicates = 0
    for entry in entries:
        identity = identity_of(entry.absolute_path)
        if identity in seen:
            duplicates += 1
            sink.tick()
            continue
        seen.add(identity)
        unique.append((identity, entry))

    def inspect(item: tuple[str, PathEntry]) -> ImageRecord | None:
        try:
            return _inspect_entry(*item)
        finally:
            sink.tick()

    workers = _pool_size(worker_limit, len(unique))
    with ThreadPoolExecutor(
        max_workers=workers, thread_name_prefix="image-discover"
    ) as executor:
        inspected = list(executor.map(inspect, unique))

    records = tuple(record for record in inspected if record is not None)
    unsupported = len(inspected) - len(records)
    if unsupported:
        logger.info("Ignored %d file(s) with unsupported content", unsupported)
    return DiscoveryReport(
        records=records,
        duplicates=duplicates,
        unsupported=unsupported,
        skipped_directories=collector.skipped_directories,
    )


def convert_images(
    requests: Sequence[ConversionRequest],
    options: ConversionOptions,
    *,
    progress: ProgressSink | None = None,
    registry: CodecRegistry | None = None,
) -> BatchConversionResult:
    """Use-case: transcode ``requests`` in parallel into ``options.output_root``.

    Item-level failures never abort the batch; they are returned as
    ``ItemFailure`` entries and excluded from ``results``. One progress tick
    is emitted per request after it completes.

    Raises
    ------
    ValidationError
        If the options or the configured pool size are invalid; raised
        before touching the filesystem.
    OutputRootError
        If the output root cannot be created.
    """
    config = _validate_options(
        format=options.format,
        quality=options.quality,
        output_root=options.output_root,
        skip_existing=options.skip_existing,
        max_workers=options.max_workers,
    )
    codec = (registry or create_default_registry()).get(config.format)
    worker_limit = _worker_limit(config.max_workers)
    output_root = config.output_root.expanduser()
    _ensure_output_root(output_root)

    sink = progress or NullProgressSink()
    batch = _BatchAccumulator()
    planned = _plan_outputs(requests, output_root, config.format, batch, sink)

    def run(item: tuple[ConversionRequest, Path]) -> None:
        request, output_path = item
        try:
            result = _convert_one(
                request, output_path, codec, config.quality, config.skip_existing
            )
        except ConversionError as exc:
            logger.warning("Conversion failed for %s: %s", request.source_path, exc)
            batch.fail(request, exc)
        except Exception as exc:  # noqa: BLE001 - third-party codec failure stays item-level
            logger.exception("Unexpected error converting %s", request.source_path)
            batch.fail(request, exc)
        else:
            logger.debug("Converted %s -> %s", request.source_path, result.output_path)
            batch.succeed(result)
        finally:
            sink.tick()

    workers = _pool_size(worker_limit, len(planned))
    with ThreadPoolExecutor(
        max_workers=workers, thread_name_prefix="image-convert"
    ) as executor:
        list(executor.map(run, planned))

    outcome = batch.snapshot()
    logger.info(
        "Converted %d of %d item(s) to %s (%d failed)",
        len(outcome.results),
        len(requests),
        config.format,
        len(outcome.failures),
    )
    return outcome


def check_existing(
    requests: Iterable[ConversionRequest],
    output_root: Path | str,
    format: str,
) -> list[ConversionResult]:
    """Use-case: report requests whose output already exists as a regular file.

    Never invokes a codec and never mutates the filesystem.

    Raises
    ------
    ValidationError
        If ``format`` is unsupported.
    """
    try:
        config = ExistenceCheckConfig(format=format, output_root=Path(output_root))
    except SchemaValidationError as exc:
        raise ValidationError(f"Invalid existence check parameters: {exc}") from exc

    root = config.output_root.expanduser()
    found: list[ConversionResult] = []
    for request in requests:
        path = output_path_for(request, root, config.format)
        if path.is_file():
            found.append(
                ConversionResult(
                    identity=request.identity,
                    output_path=path,
                    output_file_size=file_size(path),
                    reused=True,
                )
            )
    return found


class _BatchAccumulator:
    """Lock-protected append-only result collection."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._results: list[ConversionResult] = []
        self._failures: list[ItemFailure] = []

    def succeed(self, result: ConversionResult) -> None:
        with self._lock:
            self._results.append(result)

    def fail(self, request: ConversionRequest, exc: Exception) -> None:
        failure = ItemFailure(
            identity=request.identity,
            source_path=request.source_path,
            kind=type(exc).__name__,
            message=str(exc),
        )
        with self._lock:
            self._failures.append(failure)

    def snapshot(self) -> BatchConversionResult:
        with self._lock:
            return BatchConversionResult(
                results=tuple(self._results),
                failures=tuple(self._failures),
            )


def _validate_options(
    *,
    format: str,
    quality: int,
    output_root: Path | str,
    skip_existing: bool,
    max_workers: int | None,
) -> ConversionOptionsConfig:
    try:
        return ConversionOptionsConfig(
            format=format,
            quality=quality,
            output_root=Path(output_root),
            skip_existing=skip_existing,
            max_workers=max_workers,
        )
    except SchemaValidationError as exc:
        raise ValidationError(f"Invalid conversion options: {exc}") from exc


def _ensure_output_root(output_root: Path) -> None:
    try:
        output_root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputRootError(
            f"Failed to create directory {output_root}: {exc}"
        ) from exc


def _plan_outputs(
    requests: Sequence[ConversionRequest],
    output_root: Path,
    format: str,
    batch: _BatchAccumulator,
    sink: ProgressSink,
) -> list[tuple[ConversionRequest, Path]]:
    """Assign output paths; later requests targeting a claimed path fail."""
    claimed: dict[str, ConversionRequest] = {}
    planned: list[tuple[ConversionRequest, Path]] = []
    for request in requests:
        output_path = output_path_for(request, output_root, format)
        key = os.path.normcase(str(output_path))
        owner = claimed.get(key)
        if owner is not None:
            exc = OutputCollisionError(
                f"Output path {output_path} already claimed by {owner.source_path}"
            )
            logger.warning("Skipping %s: %s", request.source_path, exc)
            batch.fail(request, exc)
            sink.tick()
            continue
        claimed[key] = request
        planned.append((request, output_path))
    return planned


def _convert_one(
    request: ConversionRequest,
    output_path: Path,
    codec: ImageCodec,
    quality: int,
    skip_existing: bool,
) -> ConversionResult:
    ensure_directory(output_path.parent)
    if skip_existing and output_path.is_file():
        return ConversionResult(
            identity=request.identity,
            output_path=output_path,
            output_file_size=file_size(output_path),
            reused=True,
        )
    raster = codec.decode(request.source_path)
    data = codec.encode(raster, quality)
    size = write_bytes_atomic(output_path, data)
    return ConversionResult(
        identity=request.identity,
        output_path=output_path,
        output_file_size=size,
    )


def _inspect_entry(identity: str, entry: PathEntry) -> ImageRecord | None:
    mime_type = detect_mime(entry.absolute_path)
    if mime_type is None:
        logger.debug("Unsupported image content: %s", entry.absolute_path)
        return None
    return ImageRecord(
        identity=identity,
        absolute_path=entry.absolute_path,
        file_name=entry.absolute_path.name,
        file_size=file_size(entry.absolute_path),
        mime_type=mime_type,
        relative_dir_segments=entry.relative_dir_segments,
    )


def _worker_limit(requested: int | None) -> int:
    return requested or get_settings().max_workers


def _pool_size(limit: int, item_count: int) -> int:
    return max(1, min(limit, item_count))
