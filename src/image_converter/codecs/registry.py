"""Codec registry keyed by target format name."""

from __future__ import annotations

from image_converter.application.ports import ImageCodec
from image_converter.codecs.builtins import AvifCodec, WebpCodec
from image_converter.errors import ValidationError


class CodecRegistry:
    """Registry for target-format codecs."""

    def __init__(self) -> None:
        self._codecs: dict[str, ImageCodec] = {}

    def register(self, codec: ImageCodec) -> None:
        """Register codec instance by unique format name.

        Parameters
        ----------
        codec : ImageCodec
            Codec instance to register.

        Raises
        ------
        ValidationError
            If the codec does not provide a valid name.
        """
        name = getattr(codec, "name", "").strip().lower()
        if not name:
            raise ValidationError("Codec must define a non-empty 'name'.")
        self._codecs[name] = codec

    def names(self) -> list[str]:
        """Return registered format names, sorted."""
        return sorted(self._codecs.keys())

    def get(self, name: str) -> ImageCodec:
        """Get codec by target format name.

        Parameters
        ----------
        name : str
            Target format, compared case-insensitively.

        Returns
        -------
        ImageCodec
            Registered codec.

        Raises
        ------
        ValidationError
            If the format is not registered.
        """
        try:
            return self._codecs[name.strip().lower()]
        except KeyError as exc:
            raise ValidationError(
                f"Unknown format: {name}. Available formats: {', '.join(self.names())}"
            ) from exc


def create_default_registry() -> CodecRegistry:
    """Create a registry holding the built-in WebP and AVIF codecs."""
    registry = CodecRegistry()
    registry.register(WebpCodec())
    registry.register(AvifCodec())
    return registry
