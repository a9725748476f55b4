"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from image_converter.types import TargetFormat


@dataclass(frozen=True)
class ConversionOptions:
    """Batch conversion options.

    ``format`` and ``quality`` are validated by the use-case before any work
    starts; ``max_workers`` of ``None`` falls back to the configured pool size.
    """

    format: TargetFormat
    quality: int
    output_root: Path
    skip_existing: bool = False
    max_workers: int | None = None
