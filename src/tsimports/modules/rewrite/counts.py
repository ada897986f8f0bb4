"""Count how often each exported symbol is imported."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Iterable, Sequence

from tsimports.modules.parser import ImportName, iter_source_files, parse_file

__all__ = ["SymbolCount", "count_symbol_uses", "format_symbol_counts"]


@dataclass(frozen=True, slots=True)
class SymbolCount:
    symbol: str
    count: int
    exported_in: str


def _symbol_name(entry: ImportName) -> str | None:
    # Default and namespace bindings are only known by their local name.
    if entry.is_named:
        return str(entry.name)
    return entry.alias


def count_symbol_uses(
    repo_root: Path,
    source_paths: Sequence[Path],
    *,
    ignore_patterns: Sequence[str] = ("node_modules/", "dist/"),
) -> list[SymbolCount]:
    """Count imports of every symbol exported somewhere below ``source_paths``.

    Returns:
        One row per imported symbol, most used first, then by name.
    """

    exported_in: dict[str, str] = {}
    files = list(iter_source_files(source_paths, ignore_patterns))
    parsed_files = {path: parse_file(path) for path in files}

    for path, parsed in parsed_files.items():
        relative = Path(os.path.relpath(path, repo_root)).as_posix()
        for symbol in parsed.direct_exports:
            exported_in[symbol] = relative
        for record in parsed.imports:
            if record.kind != "export":
                continue
            for entry in record.names:
                symbol = _symbol_name(entry)
                if symbol is not None:
                    exported_in[symbol] = relative

    counts: dict[str, int] = {}
    for parsed in parsed_files.values():
        for record in parsed.imports:
            if record.kind != "import":
                continue
            for entry in record.names:
                symbol = _symbol_name(entry)
                if symbol is not None and symbol in exported_in:
                    counts[symbol] = counts.get(symbol, 0) + 1

    return [
        SymbolCount(symbol=symbol, count=count, exported_in=exported_in[symbol])
        for symbol, count in sorted(
            counts.items(), key=lambda item: (-item[1], item[0])
        )
    ]


def format_symbol_counts(rows: Iterable[SymbolCount]) -> str:
    """Render ``rows`` as ``symbol,count,exported_in`` CSV lines."""

    lines = ["symbol,count,exported_in"]
    lines.extend(f"{row.symbol},{row.count},{row.exported_in}" for row in rows)
    return "\n".join(lines)
