#!/usr/bin/env python3
"""
image_converter.cli.cli

Typer-based CLI for discovering images and converting them to WebP or AVIF.

The output tree mirrors the input directories: converting ``photos/`` into
``out/`` writes ``photos/trip/a.jpg`` to ``out/photos/trip/a.webp``.

Examples
--------
List convertible images:

    convert-images discover ~/Pictures/photos

Convert to AVIF at quality 60, reusing outputs from an earlier run:

    convert-images convert ~/Pictures/photos -f avif -q 60 -o ~/converted --skip-existing

Install with the HTTP transport:

    uv pip install -e ".[server]"
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from collections.abc import Sequence
from dataclasses import asdict
from pathlib import Path

import typer

from image_converter.application.results import (
    BatchConversionResult,
    DiscoveryReport,
)
from image_converter.errors import ConverterError
from image_converter.infrastructure.progress import TqdmProgressSink
from image_converter.schemas import ImageRecordPayload
from image_converter.settings import get_settings
from image_converter.types import SUPPORTED_FORMATS

app = typer.Typer(
    name="convert-images",
    help="Convert JPEG/PNG/WebP images to WebP or AVIF, keeping folder structure.",
    no_args_is_help=True,
)

PATHS_HELP = "Image files and/or directories (directories are scanned recursively)."
LENIENT_HELP = "Skip unreadable directories instead of aborting the scan."
FORMAT_HELP = "Target format: webp or avif."
OUTPUT_HELP = "Output root; the input folder structure is recreated below it."
BYTE_UNITS = ("bytes", "KB", "MB", "GB", "TB")


# -----------------------------
# Output helpers
# -----------------------------
def format_bytes(size: int) -> str:
    """Render a byte count with binary units (``1536`` -> ``1.5 KB``)."""
    if size <= 0:
        return "0 byte"
    value = float(size)
    index = 0
    while value > 999 and index < len(BYTE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{value:.{min(index, 2)}f} {BYTE_UNITS[index]}"


def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly error and return the process exit code.

    Parameters
    ----------
    exc : Exception
        Exception raised by a command.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"✗ {type(exc).__name__}: {exc}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _print_notices(report: DiscoveryReport) -> None:
    """Echo the discovery notices the user should know about."""
    if report.duplicates:
        typer.echo(f"! {report.duplicates} duplicate file(s) ignored.", err=True)
    if report.unsupported:
        typer.echo(
            f"! {report.unsupported} file(s) skipped: content is not JPEG, PNG or WebP.",
            err=True,
        )
    for directory in report.skipped_directories:
        typer.echo(f"! Unreadable directory skipped: {directory}", err=True)


def _print_failures(batch: BatchConversionResult) -> None:
    for failure in batch.failures:
        typer.echo(
            f"✗ {failure.source_path}: {failure.kind}: {failure.message}", err=True
        )


def _discover(
    paths: Sequence[Path], lenient: bool, show_progress: bool
) -> DiscoveryReport:
    from image_converter.api import discover_report

    with TqdmProgressSink("Scanning", disable=not show_progress) as sink:
        report = discover_report(paths, progress=sink, strict=not lenient)
    _print_notices(report)
    return report


def _resolve_format(format_name: str | None) -> str:
    return (format_name or get_settings().default_format).strip().lower()


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks and debug logs."),
    progress: bool = typer.Option(
        True, "--progress/--no-progress", help="Show progress bars on stderr."
    ),
) -> None:
    """Initialize shared CLI state and logging.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug error output.
    progress : bool, default=True
        Whether to render progress bars.
    """
    try:
        settings = get_settings()
    except ConverterError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    logging.basicConfig(
        level=logging.DEBUG if debug else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"debug": debug, "progress": progress}


# -----------------------------
# Commands
# -----------------------------
@app.command("discover")
def discover_cmd(
    ctx: typer.Context,
    paths: list[Path] = typer.Argument(..., help=PATHS_HELP),
    lenient: bool = typer.Option(False, "--lenient", help=LENIENT_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON."),
) -> None:
    """List convertible images found under PATHS."""
    debug: bool = bool(ctx.obj.get("debug", False))
    try:
        report = _discover(paths, lenient, bool(ctx.obj.get("progress", True)))
    except ConverterError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if as_json:
        payload = [
            ImageRecordPayload.model_validate(asdict(record)).model_dump(mode="json")
            for record in report.records
        ]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for record in report.records:
        relative = "/".join((*record.relative_dir_segments, record.file_name))
        typer.echo(f"{record.identity}  {record.mime_type:<10}  {format_bytes(record.file_size):>10}  {relative}")
    total = sum(record.file_size for record in report.records)
    typer.echo(f"{len(report.records)} image(s), {format_bytes(total)}")


@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    paths: list[Path] = typer.Argument(..., help=PATHS_HELP),
    output: Path = typer.Option(..., "--output", "-o", help=OUTPUT_HELP),
    format_name: str | None = typer.Option(None, "--format", "-f", help=FORMAT_HELP),
    quality: int | None = typer.Option(
        None, "--quality", "-q", min=1, max=100, help="Encoder quality (1-100)."
    ),
    skip_existing: bool = typer.Option(
        False, "--skip-existing", help="Keep outputs from earlier runs instead of re-encoding."
    ),
    workers: int | None = typer.Option(
        None, "--workers", min=1, help="Worker threads (default: CPU count)."
    ),
    lenient: bool = typer.Option(False, "--lenient", help=LENIENT_HELP),
) -> None:
    """Convert images under PATHS into OUTPUT.

    Parameters
    ----------
    ctx : typer.Context
        Typer context containing global options.
    paths : list[Path]
        Files and directories to convert.
    output : Path
        Output root directory.
    format_name : str | None
        Target format; defaults to the configured format.
    quality : int | None
        Encoder quality; defaults to the configured quality.

    Notes
    -----
    - A failed item does not stop the batch; failures are listed at the end
      and the command exits non-zero.
    """
    debug: bool = bool(ctx.obj.get("debug", False))
    show_progress: bool = bool(ctx.obj.get("progress", True))

    try:
        from image_converter.api import convert_batch

        settings = get_settings()

        report = _discover(paths, lenient, show_progress)
        if not report.records:
            typer.echo("No convertible images found.")
            return

        with TqdmProgressSink("Converting", disable=not show_progress) as sink:
            sink.total(len(report.records))
            batch = convert_batch(
                report.records,
                format=_resolve_format(format_name),
                quality=quality or settings.default_quality,
                output_root=output,
                skip_existing=skip_existing,
                max_workers=workers,
                progress=sink,
            )
    except ConverterError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    except Exception as exc:
        # Unexpected crash: still show a clean message; debug prints traceback.
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    sizes = {record.identity: record.file_size for record in report.records}
    before = sum(sizes[result.identity] for result in batch.results)
    after = sum(result.output_file_size for result in batch.results)
    reused = sum(1 for result in batch.results if result.reused)
    typer.echo(
        f"✓ Saved: {len(batch.results)} of {len(report.records)} image(s) in {output}"
        + (f" ({reused} already present)" if reused else "")
    )
    typer.echo(f"  {format_bytes(before)} -> {format_bytes(after)}")

    if batch.failures:
        _print_failures(batch)
        raise typer.Exit(code=1)


@app.command("check")
def check_cmd(
    ctx: typer.Context,
    paths: list[Path] = typer.Argument(..., help=PATHS_HELP),
    output: Path = typer.Option(..., "--output", "-o", help=OUTPUT_HELP),
    format_name: str | None = typer.Option(None, "--format", "-f", help=FORMAT_HELP),
    lenient: bool = typer.Option(False, "--lenient", help=LENIENT_HELP),
) -> None:
    """Report which images under PATHS already have a converted output."""
    debug: bool = bool(ctx.obj.get("debug", False))
    try:
        from image_converter.api import check_existing

        report = _discover(paths, lenient, bool(ctx.obj.get("progress", True)))
        found = check_existing(report.records, output, _resolve_format(format_name))
    except ConverterError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    for result in found:
        typer.echo(f"{result.output_path}  {format_bytes(result.output_file_size)}")
    typer.echo(f"{len(found)} of {len(report.records)} image(s) already converted")


@app.command("reveal")
def reveal_cmd(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="File or directory to open."),
) -> None:
    """Open PATH in the system file manager."""
    debug: bool = bool(ctx.obj.get("debug", False))
    try:
        from image_converter.api import reveal_in_file_manager

        reveal_in_file_manager(path)
    except ConverterError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))


@app.command("doctor")
def doctor_cmd() -> None:
    """Print installed toolchain versions and codec availability."""
    import importlib.metadata as metadata

    from PIL import features

    modules = [
        "pillow",
        "numpy",
        "pydantic",
        "typer",
        "tqdm",
        "fastapi",
        "uvicorn",
    ]

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in modules:
        try:
            version = metadata.version(module)
            typer.echo(f"{module}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    for codec in SUPPORTED_FORMATS:
        status = "available" if features.check(codec) else "<unavailable>"
        typer.echo(f"codec {codec}: {status}")

    if not features.check("avif"):
        typer.echo(
            "Note: AVIF output needs a Pillow build with libavif (Pillow >= 11.3 wheels)."
        )


if __name__ == "__main__":
    app()
