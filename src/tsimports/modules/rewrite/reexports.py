"""Drop ``export ... from`` statements outside barrel files."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Sequence

from tsimports.core.logging import get_logger
from tsimports.modules.parser import (
    Import,
    Part,
    Parts,
    iter_source_files,
    parse_file,
    write_parts,
)

__all__ = [
    "BARREL_FILENAMES",
    "is_barrel_file",
    "remove_re_exports",
    "strip_re_exports",
]

logger = get_logger(__name__)

BARREL_FILENAMES = frozenset({"index.ts", "index.tsx"})


def is_barrel_file(path: Path) -> bool:
    return path.name in BARREL_FILENAMES


def strip_re_exports(parts: Sequence[Part]) -> Parts | None:
    """Return ``parts`` without re-export records, or ``None`` if none."""

    kept = tuple(
        part
        for part in parts
        if not (isinstance(part, Import) and part.kind == "export")
    )
    if len(kept) == len(parts):
        return None
    return kept


def remove_re_exports(
    source_paths: Iterable[Path],
    *,
    ignore_patterns: Sequence[str] = ("node_modules/", "dist/"),
    formatter: Callable[[Path], None] | None = None,
) -> list[Path]:
    """Remove re-exports from every non-barrel source file.

    Files left blank are deleted.

    Returns:
        The files that were rewritten or deleted.
    """

    touched: list[Path] = []
    for path in iter_source_files(source_paths, ignore_patterns):
        if is_barrel_file(path):
            continue
        updated = strip_re_exports(parse_file(path).parts)
        if updated is None:
            continue
        kept = write_parts(updated, path, formatter)
        logger.info(
            "re-exports-removed",
            path=str(path),
            deleted=not kept,
        )
        touched.append(path)
    return touched
