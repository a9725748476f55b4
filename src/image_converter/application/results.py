"""Application-layer record and result objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from image_converter.types import Identity, ImageMimeType


@dataclass(frozen=True)
class ImageRecord:
    """Discovered image confirmed by content sniffing."""

    identity: Identity
    absolute_path: Path
    file_name: str
    file_size: int
    mime_type: ImageMimeType
    relative_dir_segments: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConversionRequest:
    """Single conversion work item.

    ``output_file_name`` is the output base name without the target
    extension; the use-case appends ``.{format}``.
    """

    identity: Identity
    source_path: Path
    output_file_name: str
    relative_dir_segments: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConversionResult:
    """Successful (or already present) conversion output."""

    identity: Identity
    output_path: Path
    output_file_size: int
    reused: bool = False


@dataclass(frozen=True)
class ItemFailure:
    """Item-level failure absorbed by the orchestrator."""

    identity: Identity
    source_path: Path
    kind: str
    message: str


@dataclass(frozen=True)
class BatchConversionResult:
    """Explicit per-item outcome of a conversion call."""

    results: tuple[ConversionResult, ...] = ()
    failures: tuple[ItemFailure, ...] = ()

    @property
    def succeeded_identities(self) -> frozenset[str]:
        return frozenset(result.identity for result in self.results)

    @property
    def failed_identities(self) -> frozenset[str]:
        return frozenset(failure.identity for failure in self.failures)


@dataclass(frozen=True)
class DiscoveryReport:
    """Discovered records plus the notices surfaced to the user."""

    records: tuple[ImageRecord, ...] = ()
    duplicates: int = 0
    unsupported: int = 0
    skipped_directories: tuple[Path, ...] = field(default_factory=tuple)
