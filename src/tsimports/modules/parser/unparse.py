"""Render Part sequences back into source text."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

from tsimports.core.logging import get_logger

from .files import write_source
from .models import Import, Part, Text

__all__ = ["render_import", "unparse_imports", "write_parts"]

logger = get_logger(__name__)


def render_import(record: Import) -> str:
    """Render one record, reusing its source text when it is unchanged.

    Example:
        >>> from tsimports.modules.parser.models import ImportName
        >>> render_import(
        ...     Import("import", "x", (ImportName("a"), ImportName("b", "c")))
        ... )
        'import { a, b as c } from "x";'
    """

    original = record.original_text
    if original is not None:
        return original

    if not record.names:
        raise ValueError(f"Cannot render {record.kind} without names")

    braced_is_type = not record.has_full_imports and all(
        entry.is_type for entry in record.names
    )

    plain: list[str] = []
    braced: list[str] = []
    for entry in record.names:
        if entry.is_default:
            if entry.alias is None:
                raise ValueError(
                    f"Default import from {record.path!r} has no name"
                )
            text = entry.alias
        else:
            text = "*" if entry.is_wildcard else str(entry.name)
            if entry.alias is not None:
                text += f" as {entry.alias}"
        if entry.is_type and (not entry.is_named or not braced_is_type):
            text = f"type {text}"
        (braced if entry.is_named else plain).append(text)

    rendered = record.kind
    if plain:
        rendered += " " + ", ".join(plain)
    if braced:
        if plain:
            rendered += ","
        if braced_is_type:
            rendered += " type"
        rendered += " { " + ", ".join(braced) + " }"
    return f'{rendered} from "{record.path}";'


def unparse_imports(parts: Iterable[Part]) -> str:
    """Concatenate the rendering of every part."""

    chunks: list[str] = []
    for part in parts:
        if isinstance(part, Text):
            chunks.append(part.text)
        else:
            chunks.append(render_import(part))
    return "".join(chunks)


def write_parts(
    parts: Iterable[Part],
    path: Path,
    formatter: Callable[[Path], None] | None = None,
) -> bool:
    """Write ``parts`` to ``path``.

    A file that would be left blank is deleted instead.

    Returns:
        ``True`` when the file was written, ``False`` when it was deleted.
    """

    content = unparse_imports(parts)
    if not content.strip():
        logger.info("empty-file-deleted", path=str(path))
        Path(path).unlink()
        return False

    write_source(path, content)
    if formatter is not None:
        formatter(path)
    return True
