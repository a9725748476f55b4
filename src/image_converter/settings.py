"""Typed runtime configuration."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaValidationError

from image_converter.errors import ValidationError
from image_converter.types import TargetFormat

ENV_PREFIX = "IMAGE_CONVERTER_"


def _default_workers() -> int:
    return os.cpu_count() or 1


class AppSettings(BaseModel):
    """Settings shared by the CLI, the HTTP transport and the public API."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_workers: int = Field(
        default_factory=_default_workers,
        ge=1,
        description="Worker pool size for sniffing and conversion.",
    )
    default_format: TargetFormat = Field(
        default="webp", description="Target format when none is given."
    )
    default_quality: int = Field(
        default=80, ge=1, le=100, description="Quality when none is given."
    )
    log_level: str = Field(default="WARNING", description="Root logging level.")

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().upper()
            if value not in logging.getLevelNamesMapping():
                raise ValueError(f"unknown log level: {value}")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppSettings:
        """Instantiate settings, overriding defaults from ``IMAGE_CONVERTER_*``.

        Raises
        ------
        ValidationError
            If an environment value is malformed or out of range.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for field_name in cls.model_fields:
            raw = env.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is not None and raw.strip():
                overrides[field_name] = raw.strip()
        try:
            return cls.model_validate(overrides)
        except SchemaValidationError as exc:
            raise ValidationError(f"Invalid {ENV_PREFIX}* setting: {exc}") from exc


def get_settings() -> AppSettings:
    """Return settings resolved from the current environment."""
    return AppSettings.from_env()


__all__ = ["AppSettings", "get_settings"]
