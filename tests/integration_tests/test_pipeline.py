"""Integration tests for the discover -> convert -> resume pipeline."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image, features

import image_converter
from image_converter.infrastructure.progress import CountingProgressSink


def test_mixed_roots_convert_into_mirrored_tree(
    image_tree: Path, tmp_path: Path
) -> None:
    """``[in/a.jpg, in/sub]`` becomes ``out/a.webp`` and ``out/sub/b.webp``."""
    records = image_converter.discover([image_tree / "a.jpg", image_tree / "sub"])
    lineage = {record.file_name: record.relative_dir_segments for record in records}
    assert lineage == {"a.jpg": (), "b.png": ("sub",)}

    output_root = tmp_path / "out"
    sink = CountingProgressSink()
    results = image_converter.convert(
        records, format="webp", quality=80, output_root=output_root, progress=sink
    )

    assert {result.output_path for result in results} == {
        output_root / "a.webp",
        output_root / "sub" / "b.webp",
    }
    for result in results:
        assert result.output_path.stat().st_size > 0
        with Image.open(result.output_path) as image:
            assert image.format == "WEBP"
            assert image.size == (8, 6)
    assert sink.ticks == 2


def test_resume_skips_already_converted(image_tree: Path, tmp_path: Path) -> None:
    """A second session only converts what the existence check did not find."""
    output_root = tmp_path / "out"
    first = image_converter.discover([image_tree / "a.jpg"])
    image_converter.convert(first, format="webp", quality=80, output_root=output_root)

    records = image_converter.discover([image_tree / "a.jpg", image_tree / "sub"])
    done = {r.identity for r in image_converter.check_existing(records, output_root, "webp")}
    pending = [record for record in records if record.identity not in done]

    assert [record.file_name for record in pending] == ["b.png"]
    results = image_converter.convert(
        pending, format="webp", quality=80, output_root=output_root
    )
    assert [result.output_path for result in results] == [output_root / "sub" / "b.webp"]


def test_identities_are_stable_across_sessions(image_tree: Path) -> None:
    """Rediscovering the same files yields the same identities."""
    first = {r.absolute_path: r.identity for r in image_converter.discover([image_tree])}
    second = {r.absolute_path: r.identity for r in image_converter.discover([image_tree])}
    assert first == second


def test_webp_sources_are_accepted(
    tmp_path: Path, make_image: Callable[..., Path]
) -> None:
    """WebP inputs may be re-encoded as WebP."""
    source = make_image(tmp_path / "in" / "c.webp", "WEBP")
    records = image_converter.discover([source])
    assert records[0].mime_type == "image/webp"
    results = image_converter.convert(
        records, format="webp", quality=50, output_root=tmp_path / "out"
    )
    assert results[0].output_path == tmp_path / "out" / "c.webp"


@pytest.mark.skipif(not features.check("avif"), reason="Pillow built without AVIF")
def test_avif_conversion(image_tree: Path, tmp_path: Path) -> None:
    """AVIF outputs decode back to the source dimensions."""
    records = image_converter.discover([image_tree])
    results = image_converter.convert(
        records, format="avif", quality=60, output_root=tmp_path / "out"
    )
    assert len(results) == 2
    for result in results:
        assert result.output_path.suffix == ".avif"
        with Image.open(result.output_path) as image:
            assert image.size == (8, 6)
