"""Transitive import resolution across files and packages."""

from __future__ import annotations

from .service import (
    ImportResolver,
    ResolvedImport,
    find_source_file,
    relative_specifier,
)

__all__ = [
    "ImportResolver",
    "ResolvedImport",
    "find_source_file",
    "relative_specifier",
]
