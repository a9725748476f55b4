"""Shared pytest configuration and marker assignment."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


def write_image(path: Path, fmt: str = "PNG", size: tuple[int, int] = (8, 6)) -> Path:
    """Write a small gradient image with Pillow and return its path."""
    from PIL import Image

    path.parent.mkdir(parents=True, exist_ok=True)
    mode = "RGB" if fmt == "JPEG" else "RGBA"
    image = Image.new(mode, size)
    for x in range(size[0]):
        for y in range(size[1]):
            value = (x * 31 + y * 17) % 256
            pixel = (value, 255 - value, (x * y) % 256)
            image.putpixel((x, y), pixel if mode == "RGB" else (*pixel, 255))
    image.save(path, format=fmt)
    return path


@pytest.fixture
def image_tree(tmp_path: Path) -> Path:
    """Input tree ``in/a.jpg`` + ``in/sub/b.png`` + hidden/unsupported noise."""
    root = tmp_path / "in"
    write_image(root / "a.jpg", "JPEG")
    write_image(root / "sub" / "b.png", "PNG")
    write_image(root / ".cache" / "c.png", "PNG")
    (root / "notes.txt").write_text("not an image", encoding="utf-8")
    return root


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Return the image writer so tests can build ad-hoc fixtures."""
    return write_image
