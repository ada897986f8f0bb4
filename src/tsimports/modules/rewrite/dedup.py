"""Merge repeated imports of the same module into one statement."""

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

__all__ = ["dedup_file", "dedup_imports", "dedup_parts"]

logger = get_logger(__name__)

_GroupKey = tuple[str, bool]


def _group_key(record: Import) -> _GroupKey | None:
    if record.kind != "import" or record.has_wildcard:
        return None
    try:
        return record.path, record.is_type
    except ValueError:
        # Mixed type and value names stay in their own statement.
        return None


def _default_alias(names: Iterable[ImportName]) -> str | None:
    for entry in names:
        if entry.is_default:
            return entry.alias
    return None


def dedup_parts(parts: Sequence[Part]) -> Parts | None:
    """Return ``parts`` with duplicate imports merged, or ``None``.

    The first statement of every ``(path, type-only)`` group receives the
    union of the group's names; later statements are removed together with
    one adjacent newline. ``None`` means nothing had to be merged.
    """

    groups: dict[_GroupKey, list[int]] = {}
    for index, part in enumerate(parts):
        if isinstance(part, Import):
            key = _group_key(part)
            if key is not None:
                groups.setdefault(key, []).append(index)

    merged: dict[int, Import] = {}
    dropped: set[int] = set()
    for indexes in groups.values():
        if len(indexes) < 2:
            continue
        first, *rest = indexes
        target = parts[first]
        assert isinstance(target, Import)
        names = list(target.names)
        seen = {(entry.name, entry.alias) for entry in names}
        default_alias = _default_alias(names)
        for index in rest:
            record = parts[index]
            assert isinstance(record, Import)
            incoming_default = _default_alias(record.names)
            if (
                incoming_default is not None
                and default_alias is not None
                and incoming_default != default_alias
            ):
                # Two different default bindings cannot share a statement.
                continue
            for entry in record.names:
                if (entry.name, entry.alias) in seen:
                    continue
                seen.add((entry.name, entry.alias))
                names.append(entry)
            if incoming_default is not None:
                default_alias = incoming_default
            dropped.add(index)
        merged[first] = target.with_names(names)

    if not dropped:
        return None

    result: list[Part] = []
    strip_leading = False
    for index, part in enumerate(parts):
        if index in dropped:
            previous = result[-1] if result else None
            if isinstance(previous, Text) and previous.text.endswith("\n"):
                result[-1] = Text(_strip_trailing_newline(previous.text))
            else:
                strip_leading = True
            continue
        if isinstance(part, Text):
            text = part.text
            if strip_leading and text.startswith("\n"):
                text = text[1:]
            strip_leading = False
            result.append(Text(text))
            continue
        strip_leading = False
        result.append(merged.get(index, part))

    return tuple(
        part for part in result if not isinstance(part, Text) or part.text
    )


def _strip_trailing_newline(text: str) -> str:
    if text.endswith("\r\n"):
        return text[:-2]
    return text[:-1]


def dedup_file(
    path: Path,
    *,
    formatter: Callable[[Path], None] | None = None,
) -> bool:
    """Deduplicate the imports of one file; return whether it was written."""

    updated = dedup_parts(parse_file(path).parts)
    if updated is None:
        return False
    write_parts(updated, path, formatter)
    logger.info("dedup-file-written", path=str(path))
    return True


def dedup_imports(
    source_paths: Iterable[Path],
    *,
    ignore_patterns: Sequence[str] = ("node_modules/", "dist/"),
    formatter: Callable[[Path], None] | None = None,
) -> list[Path]:
    """Run :func:`dedup_file` over every source file below ``source_paths``.

    Returns:
        The files that were rewritten.
    """

    written: list[Path] = []
    for path in iter_source_files(source_paths, ignore_patterns):
        if dedup_file(path, formatter=formatter):
            written.append(path)
    return written
