"""Rewrite passes over TypeScript import statements."""

from __future__ import annotations

from .barrel import BarrelEntries, BarrelResult, barrel_export, read_barrel_exports
from .counts import SymbolCount, count_symbol_uses, format_symbol_counts
from .dedup import dedup_file, dedup_imports, dedup_parts
from .formatter import Formatter
from .pipeline import ServiceResult, run_service
from .reexports import is_barrel_file, remove_re_exports, strip_re_exports
from .resolve import resolve_file, resolve_imports, resolve_parts
from .rewrite import move_import, rewrite_imports
from .unused import (
    UnusedExport,
    UnusedExportReport,
    find_unused_exports,
    remove_export,
)
from .verbatim import add_js_extensions, verbatim_imports

__all__ = [
    "BarrelEntries",
    "BarrelResult",
    "Formatter",
    "ServiceResult",
    "SymbolCount",
    "UnusedExport",
    "UnusedExportReport",
    "add_js_extensions",
    "barrel_export",
    "count_symbol_uses",
    "dedup_file",
    "dedup_imports",
    "dedup_parts",
    "find_unused_exports",
    "format_symbol_counts",
    "is_barrel_file",
    "move_import",
    "read_barrel_exports",
    "remove_export",
    "remove_re_exports",
    "resolve_file",
    "resolve_imports",
    "resolve_parts",
    "rewrite_imports",
    "run_service",
    "strip_re_exports",
    "verbatim_imports",
]
