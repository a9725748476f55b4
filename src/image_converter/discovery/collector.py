"""Walk input roots and collect candidate image paths with directory lineage."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from image_converter.discovery.classifier import (
    is_candidate_image,
    is_descendable_directory,
)
from image_converter.errors import DiscoveryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathEntry:
    """Candidate image path plus the directory names leading to it.

    Parameters
    ----------
    absolute_path : Path
        Absolute path of the candidate file.
    relative_dir_segments : tuple[str, ...]
        Directory names from the traversal root down to the file's parent.
        Empty when the file itself was passed as a root.
    """

    absolute_path: Path
    relative_dir_segments: tuple[str, ...] = ()


@dataclass(frozen=True)
class _FileItem:
    path: Path
    segments: tuple[str, ...]


@dataclass(frozen=True)
class _DirItem:
    path: Path
    segments: tuple[str, ...]
    ancestors: frozenset[Path] = frozenset()


class PathCollector:
    """Depth-first collector driven by an explicit worklist.

    Parameters
    ----------
    strict : bool, default=True
        When ``True`` the first unreadable directory aborts the whole call
        with :class:`DiscoveryError`. When ``False`` the subtree is skipped
        and recorded in :attr:`skipped_directories`.
    """

    def __init__(self, strict: bool = True) -> None:
        self.strict = strict
        self._skipped: list[Path] = []

    @property
    def skipped_directories(self) -> tuple[Path, ...]:
        """Directories that could not be read during the last collection."""
        return tuple(self._skipped)

    def collect(self, roots: Iterable[str | Path]) -> list[PathEntry]:
        """Collect candidate image entries under ``roots``.

        Parameters
        ----------
        roots : Iterable[str | Path]
            Files and directories selected by the user.

        Returns
        -------
        list[PathEntry]
            Entries in depth-first order, following the host filesystem's
            directory enumeration order.

        Raises
        ------
        DiscoveryError
            If a directory cannot be read and the collector is strict.
        """
        self._skipped = []
        entries: list[PathEntry] = []

        for raw_root in roots:
            root = Path(raw_root).expanduser().absolute()
            if root.is_file():
                if is_candidate_image(root):
                    entries.append(PathEntry(root, ()))
                continue
            if is_descendable_directory(root):
                segments = (root.name,) if root.name else ()
                self._walk(_DirItem(root, segments), entries)
                continue
            if not root.exists():
                logger.warning("Skipping missing input path: %s", root)
            else:
                logger.debug("Skipping input path that is not eligible: %s", root)

        return entries

    def _walk(
        self,
        start: _DirItem,
        entries: list[PathEntry],
    ) -> None:
        stack: list[_FileItem | _DirItem] = [start]
        while stack:
            item = stack.pop()
            if isinstance(item, _FileItem):
                entries.append(PathEntry(item.path, item.segments))
                continue

            key = _visit_key(item.path)
            if key in item.ancestors:
                logger.debug("Directory links back to an ancestor, skipping: %s", item.path)
                continue
            lineage = item.ancestors | {key}

            children = self._read_directory(item.path)
            if children is None:
                continue

            pending: list[_FileItem | _DirItem] = []
            for child in children:
                if child.is_file():
                    if is_candidate_image(child):
                        pending.append(_FileItem(child, item.segments))
                elif is_descendable_directory(child):
                    pending.append(
                        _DirItem(child, item.segments + (child.name,), lineage)
                    )
            # Reversed so pops follow enumeration order.
            stack.extend(reversed(pending))

    def _read_directory(self, directory: Path) -> list[Path] | None:
        try:
            with os.scandir(directory) as iterator:
                return [Path(entry.path) for entry in iterator]
        except OSError as exc:
            if self.strict:
                raise DiscoveryError(
                    f"Cannot read directory {directory}: {exc}"
                ) from exc
            logger.warning("Skipping unreadable directory %s: %s", directory, exc)
            self._skipped.append(directory)
            return None


def _visit_key(directory: Path) -> Path:
    try:
        return directory.resolve()
    except OSError:
        return directory


def collect_paths(
    roots: Iterable[str | Path],
    *,
    strict: bool = True,
) -> list[PathEntry]:
    """Collect candidate image entries under ``roots``.

    Convenience wrapper around :class:`PathCollector`.
    """
    return PathCollector(strict=strict).collect(roots)


__all__ = ["PathEntry", "PathCollector", "collect_paths"]
