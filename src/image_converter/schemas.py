"""Pydantic schemas for runtime validation of conversion inputs and payloads."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from image_converter.types import TargetFormat


def _normalize_format(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class ConversionOptionsConfig(BaseModel):
    """Validated batch conversion options."""

    model_config = ConfigDict(extra="forbid")

    format: TargetFormat
    quality: int = Field(ge=1, le=100)
    output_root: Path
    skip_existing: bool = False
    max_workers: int | None = Field(default=None, ge=1)

    @field_validator("format", mode="before")
    @classmethod
    def _validate_format(cls, value: object) -> object:
        return _normalize_format(value)


class ExistenceCheckConfig(BaseModel):
    """Validated existence-check parameters."""

    model_config = ConfigDict(extra="forbid")

    format: TargetFormat
    output_root: Path

    @field_validator("format", mode="before")
    @classmethod
    def _validate_format(cls, value: object) -> object:
        return _normalize_format(value)


class ConversionItemPayload(BaseModel):
    """Client-supplied conversion row."""

    model_config = ConfigDict(extra="forbid")

    identity: str = Field(min_length=1)
    source_path: Path
    file_name: str = Field(min_length=1)
    relative_dir_segments: list[str] = Field(default_factory=list)

    @field_validator("file_name")
    @classmethod
    def _validate_file_name(cls, value: str) -> str:
        normalized = value.replace("\\", "/")
        if "/" in normalized or normalized in {".", ".."}:
            raise ValueError("file_name must be a bare file name.")
        return value

    @field_validator("relative_dir_segments")
    @classmethod
    def _validate_segments(cls, value: list[str]) -> list[str]:
        for segment in value:
            normalized = segment.replace("\\", "/")
            if not segment or "/" in normalized or segment in {".", ".."}:
                raise ValueError(
                    "relative_dir_segments entries must be single directory names."
                )
        return value


class DiscoverPayload(BaseModel):
    """Discovery request body."""

    model_config = ConfigDict(extra="forbid")

    paths: list[str] = Field(min_length=1)
    strict: bool = True


class ImageRecordPayload(BaseModel):
    """Discovered image as returned to clients."""

    model_config = ConfigDict(extra="forbid")

    identity: str
    absolute_path: Path
    file_name: str
    file_size: int
    mime_type: str
    relative_dir_segments: list[str]


class ConversionOptionsPayload(BaseModel):
    """Options block of a conversion request body.

    ``format`` stays a plain string here so an unsupported value reaches the
    use-case and is rejected as a call-level validation error.
    """

    model_config = ConfigDict(extra="forbid")

    format: str
    quality: int
    output_root: str
    skip_existing: bool = False


class ConvertPayload(BaseModel):
    """Conversion request body."""

    model_config = ConfigDict(extra="forbid")

    items: list[ConversionItemPayload]
    options: ConversionOptionsPayload


class CheckExistingPayload(BaseModel):
    """Existence-check request body."""

    model_config = ConfigDict(extra="forbid")

    items: list[ConversionItemPayload]
    output_root: str
    format: str


class ConversionResultPayload(BaseModel):
    """Successful conversion as returned to clients."""

    model_config = ConfigDict(extra="forbid")

    identity: str
    output_path: Path
    output_file_size: int
    reused: bool = False


class RevealPayload(BaseModel):
    """Reveal-in-file-manager request body."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(min_length=1)


class StatusResponse(BaseModel):
    """Health/readiness response payload."""

    model_config = ConfigDict(extra="forbid")

    status: str


class DiscoverResponse(BaseModel):
    """Discovery response: records plus the notice counters."""

    model_config = ConfigDict(extra="forbid")

    total: int
    duplicates: int
    unsupported: int
    skipped_directories: list[str]
    records: list[ImageRecordPayload]
