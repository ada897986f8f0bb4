"""Move one named import from one module specifier to another."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from tsimports.core.logging import get_logger
from tsimports.modules.parser import (
    Import,
    Part,
    Parts,
    Text,
    iter_source_files,
    parse_file,
    write_parts,
)

__all__ = ["move_import", "rewrite_imports"]

logger = get_logger(__name__)


def move_import(
    parts: Sequence[Part],
    name: str,
    from_path: str,
    to_path: str,
) -> Parts | None:
    """Split ``name`` out of every import from ``from_path``.

    The moved entry keeps its alias and type marker; the remaining names
    stay in the original statement, followed by the new one.

    Returns:
        The rewritten parts, or ``None`` when no statement imports ``name``.
    """

    changed = False
    result: list[Part] = []
    for part in parts:
        if (
            not isinstance(part, Import)
            or part.kind != "import"
            or part.path != from_path
            or part.has_wildcard
        ):
            result.append(part)
            continue

        moved = [entry for entry in part.names if entry.name == name]
        if not moved:
            result.append(part)
            continue

        rest = [entry for entry in part.names if entry.name != name]
        if rest:
            result.append(part.with_names(rest))
            result.append(Text("\n"))
        result.append(Import(kind=part.kind, path=to_path, names=tuple(moved)))
        changed = True

    return tuple(result) if changed else None


def rewrite_imports(
    name: str,
    from_path: str,
    to_path: str,
    source_paths: Iterable[Path],
    *,
    ignore_patterns: Sequence[str] = ("node_modules/", "dist/"),
) -> list[Path]:
    """Apply :func:`move_import` to every source file below ``source_paths``.

    Returns:
        The files that were rewritten.
    """

    written: list[Path] = []
    for path in iter_source_files(source_paths, ignore_patterns):
        updated = move_import(parse_file(path).parts, name, from_path, to_path)
        if updated is None:
            continue
        write_parts(updated, path)
        logger.info(
            "import-moved",
            path=str(path),
            name=name,
            source=from_path,
            target=to_path,
        )
        written.append(path)
    return written
