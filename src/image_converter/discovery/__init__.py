"""Path collection, classification, identity and content sniffing."""

from __future__ import annotations

from image_converter.discovery.classifier import (
    is_candidate_image,
    is_descendable_directory,
)
from image_converter.discovery.collector import PathCollector, PathEntry, collect_paths
from image_converter.discovery.identity import identity_of
from image_converter.discovery.sniffer import detect_mime

__all__ = [
    "PathCollector",
    "PathEntry",
    "collect_paths",
    "detect_mime",
    "identity_of",
    "is_candidate_image",
    "is_descendable_directory",
]
