"""Path-derived identities used to correlate records across calls."""

from __future__ import annotations

import uuid
from pathlib import Path


def identity_of(absolute_path: str | Path) -> str:
    """Derive a stable identity from an absolute path.

    The identity is the canonical text form of a name-based UUID (version 5,
    URL namespace) over the path string. It does not depend on file content
    or timestamps, so a resumed session recognises files by path alone.

    Parameters
    ----------
    absolute_path : str | Path
        Absolute path of the source file.

    Returns
    -------
    str
        36-character UUID string.
    """
    return str(uuid.uuid5(uuid.NAMESPACE_URL, str(absolute_path)))
