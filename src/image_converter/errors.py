"""Error taxonomy for discovery, conversion, and shell passthrough operations."""

from __future__ import annotations


class ConverterError(Exception):
    """Base class for all image-converter errors.

    Attributes
    ----------
    exit_code : int
        Process exit code used by the CLI when the error reaches it.
    """

    exit_code: int = 1


class DiscoveryError(ConverterError):
    """A directory could not be read during traversal."""

    exit_code = 3


class ValidationError(ConverterError):
    """Conversion options were rejected before any item was processed."""

    exit_code = 2


class ConversionError(ConverterError):
    """Item-level conversion failure.

    Raised inside a worker for a single request; the orchestrator absorbs it
    into an ``ItemFailure`` instead of aborting the batch.
    """


class DecodeError(ConversionError):
    """Source file could not be parsed as a raster image."""


class EncodeError(ConversionError):
    """Codec failed to produce output bytes."""


class IoError(ConversionError):
    """Output directory creation or file write failed."""


class OutputCollisionError(IoError):
    """Another request in the same batch already claimed the output path."""


class OutputRootError(IoError):
    """Output root could not be created; aborts the whole conversion call."""

    exit_code = 4


class RevealError(ConverterError):
    """Path could not be revealed in the host file manager."""


__all__ = [
    "ConverterError",
    "DiscoveryError",
    "ValidationError",
    "ConversionError",
    "DecodeError",
    "EncodeError",
    "IoError",
    "OutputCollisionError",
    "OutputRootError",
    "RevealError",
]
