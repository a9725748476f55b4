"""Integration tests for the CLI conversion workflow."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from image_converter.cli import cli as cli_module

runner = CliRunner()


def test_convert_mixed_roots_and_check(image_tree: Path, tmp_path: Path) -> None:
    """File and directory roots are mirrored under the output root."""
    output = tmp_path / "out"
    result = runner.invoke(
        cli_module.app,
        [
            "--no-progress",
            "convert",
            str(image_tree / "a.jpg"),
            str(image_tree / "sub"),
            "--output",
            str(output),
            "--format",
            "WEBP",
            "--workers",
            "2",
        ],
    )

    assert result.exit_code == 0, result.output
    assert (output / "a.webp").is_file()
    assert (output / "sub" / "b.webp").is_file()
    assert " -> " in result.output


def test_default_quality_comes_from_environment(image_tree: Path, tmp_path: Path) -> None:
    """``IMAGE_CONVERTER_DEFAULT_QUALITY`` feeds the convert command."""
    output = tmp_path / "out"
    result = runner.invoke(
        cli_module.app,
        ["--no-progress", "convert", str(image_tree), "-o", str(output)],
        env={"IMAGE_CONVERTER_DEFAULT_QUALITY": "30"},
    )
    assert result.exit_code == 0, result.output
    assert (output / "in" / "a.webp").is_file()


def test_lenient_discovery_keeps_going(image_tree: Path, tmp_path: Path) -> None:
    """``--lenient`` still converts readable images."""
    result = runner.invoke(
        cli_module.app,
        ["--no-progress", "convert", str(image_tree), "-o", str(tmp_path / "o"), "--lenient"],
    )
    assert result.exit_code == 0, result.output
    assert "Saved: 2 of 2" in result.output
