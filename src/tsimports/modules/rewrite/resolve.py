"""Point imports at the module that actually defines each name."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Sequence

from tsimports.core.logging import get_logger
from tsimports.modules.parser import (
    Import,
    ImportName,
    Part,
    Parts,
    Text,
    iter_source_files,
    parse_file,
    write_parts,
)
from tsimports.modules.resolver import ImportResolver

__all__ = ["resolve_file", "resolve_imports", "resolve_parts"]

logger = get_logger(__name__)


def resolve_parts(
    resolver: ImportResolver,
    path: Path,
    parts: Sequence[Part],
) -> Parts | None:
    """Split every statement of ``parts`` by the origin of each name.

    Names that resolve elsewhere move into new statements (one per resolved
    specifier) placed before what remains of the original statement.

    Returns:
        The rewritten parts, or ``None`` when no name moved.
    """

    settings = resolver.settings
    changed = False
    result: list[Part] = []
    for part in parts:
        if not isinstance(part, Import):
            result.append(part)
            continue

        keep: list[ImportName] = []
        moved: dict[str, list[ImportName]] = {}
        for entry in part.names:
            if not entry.is_named:
                keep.append(entry)
                continue
            name = str(entry.name)
            resolved = resolver.resolve(path, name, part.path)
            if (
                resolved is None
                or resolved.path == part.path
                or not settings.allows_rewrite(part.path, resolved.path)
            ):
                keep.append(entry)
                continue

            local_name = entry.local_name
            moved.setdefault(resolved.path, []).append(
                ImportName(
                    name=resolved.name,
                    alias=None if local_name == resolved.name else local_name,
                    is_type=entry.is_type,
                )
            )

        if not moved:
            result.append(part)
            continue

        changed = True
        statements = [
            Import(kind=part.kind, path=target, names=tuple(names))
            for target, names in moved.items()
        ]
        if keep:
            statements.append(part.with_names(keep))
        for position, statement in enumerate(statements):
            if position:
                result.append(Text("\n"))
            result.append(statement)

    return tuple(result) if changed else None


def resolve_file(
    resolver: ImportResolver,
    path: Path,
    *,
    formatter: Callable[[Path], None] | None = None,
) -> bool:
    """Rewrite the imports of ``path``; return whether it was written."""

    updated = resolve_parts(resolver, path, parse_file(path).parts)
    if updated is None:
        return False
    write_parts(updated, path, formatter)
    resolver.invalidate(path)
    logger.info("resolved-imports", path=str(path))
    return True


def resolve_imports(
    resolver: ImportResolver,
    source_paths: Iterable[Path],
    *,
    ignore_patterns: Sequence[str] = ("node_modules/", "dist/"),
    formatter: Callable[[Path], None] | None = None,
) -> list[Path]:
    """Run :func:`resolve_file` over every source file below ``source_paths``.

    Returns:
        The files that were rewritten.
    """

    written: list[Path] = []
    for path in iter_source_files(source_paths, ignore_patterns):
        if resolve_file(resolver, path, formatter=formatter):
            written.append(path)
    return written
