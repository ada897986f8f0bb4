"""Byte-faithful reading and writing of source files."""

from __future__ import annotations

from pathlib import Path

__all__ = ["read_source", "write_source"]


def read_source(path: Path) -> str:
    """Return the text of ``path`` with line endings left untouched."""

    return Path(path).read_bytes().decode("utf-8")


def write_source(path: Path, content: str) -> None:
    Path(path).write_bytes(content.encode("utf-8"))
