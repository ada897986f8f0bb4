"""Filesystem traversal for TypeScript sources."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Sequence

from pathspec import PathSpec

from .imports import is_source_file

__all__ = ["SourceWalker", "iter_source_files"]


class SourceWalker:
    """Enumerate source files below a root while honoring ignore patterns."""

    def __init__(
        self,
        *,
        ignore_patterns: Sequence[str] = (),
        follow_symlinks: bool = False,
    ) -> None:
        self._spec = (
            PathSpec.from_lines("gitwildmatch", ignore_patterns)
            if ignore_patterns
            else None
        )
        self._follow_symlinks = follow_symlinks

    def iter_files(self, root: Path) -> Iterator[Path]:
        """Yield source files under ``root`` depth-first in name order.

        A file passed as ``root`` is yielded on its own when it is a source
        file.

        Raises:
            FileNotFoundError: If ``root`` does not exist.
        """

        root = Path(root)
        if root.is_file():
            if is_source_file(root):
                yield root
            return
        if not root.is_dir():
            raise FileNotFoundError(f"Source root not found: {root}")
        yield from self._walk(root, root)

    def _walk(self, root: Path, directory: Path) -> Iterator[Path]:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_symlink() and not self._follow_symlinks:
                continue
            is_dir = entry.is_dir()
            if self._is_ignored(root, entry, is_dir):
                continue
            if is_dir:
                yield from self._walk(root, entry)
            elif entry.is_file() and is_source_file(entry):
                yield entry

    def _is_ignored(self, root: Path, entry: Path, is_dir: bool) -> bool:
        if self._spec is None:
            return False
        candidate = entry.relative_to(root).as_posix()
        if is_dir:
            candidate += "/"
        return self._spec.match_file(candidate)


def iter_source_files(
    roots: Iterable[Path],
    ignore_patterns: Sequence[str] = ("node_modules/", "dist/"),
) -> Iterator[Path]:
    """Yield every source file below ``roots`` in walk order."""

    walker = SourceWalker(ignore_patterns=ignore_patterns)
    for root in roots:
        yield from walker.iter_files(root)
