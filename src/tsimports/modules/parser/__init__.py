"""Statement-level parsing and serialization of TypeScript imports."""

from __future__ import annotations

from .files import read_source, write_source
from .imports import SOURCE_SUFFIXES, is_source_file, parse_file, parse_imports
from .models import (
    DEFAULT,
    WILDCARD,
    Import,
    ImportKind,
    ImportName,
    NameMarker,
    ParsedFile,
    Part,
    Parts,
    RawImport,
    Text,
    is_text,
)
from .traversal import SourceWalker, iter_source_files
from .unparse import render_import, unparse_imports, write_parts

__all__ = [
    "DEFAULT",
    "SOURCE_SUFFIXES",
    "WILDCARD",
    "Import",
    "ImportKind",
    "ImportName",
    "NameMarker",
    "ParsedFile",
    "Part",
    "Parts",
    "RawImport",
    "SourceWalker",
    "Text",
    "is_source_file",
    "is_text",
    "iter_source_files",
    "parse_file",
    "parse_imports",
    "read_source",
    "render_import",
    "unparse_imports",
    "write_parts",
    "write_source",
]
