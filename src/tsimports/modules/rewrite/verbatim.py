"""Give relative module specifiers an explicit ``.js`` extension."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from tsimports.core.logging import get_logger
from tsimports.modules.parser import (
    Import,
    Part,
    Parts,
    iter_source_files,
    parse_file,
    write_parts,
)

__all__ = ["add_js_extensions", "verbatim_imports"]

logger = get_logger(__name__)


def add_js_extensions(parts: Sequence[Part]) -> Parts | None:
    """Append ``.js`` to relative specifiers; ``None`` if all had it."""

    changed = False
    result: list[Part] = []
    for part in parts:
        if (
            isinstance(part, Import)
            and part.path.startswith(".")
            and not part.path.endswith(".js")
        ):
            part = part.with_path(f"{part.path}.js")
            changed = True
        result.append(part)
    return tuple(result) if changed else None


def verbatim_imports(
    source_paths: Iterable[Path],
    *,
    ignore_patterns: Sequence[str] = ("node_modules/", "dist/"),
) -> list[Path]:
    written: list[Path] = []
    for path in iter_source_files(source_paths, ignore_patterns):
        updated = add_js_extensions(parse_file(path).parts)
        if updated is None:
            continue
        write_parts(updated, path)
        logger.info("verbatim-imports-written", path=str(path))
        written.append(path)
    return written
