"""Reveal a path in the host operating system's file manager."""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path

from image_converter.errors import RevealError

logger = logging.getLogger(__name__)


def reveal_command(path: Path, platform: str | None = None) -> list[str]:
    """Return the file-manager command for ``platform`` (default: current)."""
    platform = platform or sys.platform
    if platform == "darwin":
        return ["open", str(path)]
    if platform.startswith("win"):
        return ["explorer", str(path)]
    return ["xdg-open", str(path)]


def reveal_in_file_manager(path: str | Path) -> None:
    """Open ``path`` in the host file manager.

    Parameters
    ----------
    path : str | Path
        File or directory to reveal.

    Raises
    ------
    RevealError
        If the path does not exist or the file-manager command cannot start.
    """
    target = Path(path).expanduser()
    if not target.exists():
        raise RevealError(f"Output path does not exist: {target}")

    command = reveal_command(target)
    logger.debug("Revealing %s with %s", target, command[0])
    try:
        subprocess.Popen(  # noqa: S603 - fixed executable, path passed as argument
            command,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as exc:
        raise RevealError(f"Failed to launch {command[0]}: {exc}") from exc
