"""Cheap path-level checks deciding what discovery looks at."""

from __future__ import annotations

import stat
from pathlib import Path

CANDIDATE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp"})
HIDDEN_PREFIX = "."


def is_candidate_image(path: Path) -> bool:
    """Return ``True`` if the extension is on the image allow-list.

    Parameters
    ----------
    path : Path
        Filesystem path to classify. Only the name is inspected.

    Returns
    -------
    bool
        ``True`` for ``jpg``, ``jpeg``, ``png`` and ``webp`` (any case).
    """
    return path.suffix.lower().lstrip(".") in CANDIDATE_EXTENSIONS


def _has_hidden_attribute(path: Path) -> bool:
    """Check the Windows hidden attribute where the platform exposes it."""
    try:
        attributes = getattr(path.stat(), "st_file_attributes", 0)
    except OSError:
        return True
    return bool(attributes & getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0))


def is_descendable_directory(path: Path) -> bool:
    """Return ``True`` if discovery should walk into ``path``.

    Parameters
    ----------
    path : Path
        Candidate directory.

    Returns
    -------
    bool
        ``False`` for non-directories, dot-prefixed names, and directories
        flagged hidden by the host filesystem.
    """
    if not path.is_dir():
        return False
    if path.name.startswith(HIDDEN_PREFIX):
        return False
    return not _has_hidden_attribute(path)
