"""Output-tree filesystem helpers shared by conversion workers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from image_converter.errors import IoError


def ensure_directory(path: Path) -> Path:
    """Create ``path`` and missing ancestors if absent.

    Concurrent callers targeting the same directory all succeed; an existing
    directory is not an error.

    Raises
    ------
    IoError
        If the directory cannot be created or a non-directory is in the way.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IoError(f"Failed to create directory {path}: {exc}") from exc
    return path


def write_bytes_atomic(path: Path, data: bytes) -> int:
    """Write ``data`` to ``path`` through a sibling temp file and rename.

    Readers never observe a half-written output file.

    Returns
    -------
    int
        Size of the written file in bytes.

    Raises
    ------
    IoError
        If the write or rename fails.
    """
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
    except OSError as exc:
        raise IoError(f"Failed to write output file {path}: {exc}") from exc
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise IoError(f"Failed to write output file {path}: {exc}") from exc
    return file_size(path)


def file_size(path: Path) -> int:
    """Return the size of ``path`` in bytes, or ``0`` if it cannot be read."""
    try:
        return path.stat().st_size
    except OSError:
        return 0
