"""Route deep package imports through the package's barrel file.

Imports of ``<package>/dist/js/<subpath>`` are rewritten to ``<package>``
and every name they need is appended to ``src/index.ts`` as an
``export ... from "./<subpath>"`` statement, unless the barrel already
exports it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Sequence

from tsimports.core.logging import get_logger
from tsimports.core.packages import read_package_manifest
from tsimports.errors import TsImportsError
from tsimports.modules.parser import (
    Import,
    ImportName,
    Part,
    iter_source_files,
    parse_file,
    read_source,
    render_import,
    write_parts,
    write_source,
)

__all__ = [
    "BarrelEntries",
    "BarrelResult",
    "barrel_export",
    "read_barrel_exports",
]

logger = get_logger(__name__)


@dataclass(slots=True)
class BarrelEntries:
    """Names exported (or needed) from one subpath of a package."""

    full: dict[str, None] = field(default_factory=dict)
    types: dict[str, None] = field(default_factory=dict)
    all_full: bool = False
    all_types: bool = False

    def add_full(self, name: str) -> None:
        # A value export makes the type reachable as well.
        self.types.pop(name, None)
        self.full.setdefault(name, None)

    def add_type(self, name: str) -> None:
        if name in self.full:
            return
        self.types.setdefault(name, None)

    def covers_full(self, name: str) -> bool:
        return self.all_full or name in self.full

    def covers_type(self, name: str) -> bool:
        return (
            self.all_full
            or self.all_types
            or name in self.full
            or name in self.types
        )


@dataclass(slots=True)
class BarrelResult:
    """What a barrel-export run changed."""

    barrel_path: Path
    rewritten: list[Path] = field(default_factory=list)
    added_lines: list[str] = field(default_factory=list)
    unsupported: int = 0


def read_barrel_exports(barrel_path: Path) -> dict[str, BarrelEntries]:
    """Collect the ``export ... from "./<subpath>"`` statements of a barrel."""

    existing: dict[str, BarrelEntries] = {}
    if not barrel_path.is_file():
        return existing

    for record in parse_file(barrel_path).imports:
        if record.kind != "export" or not record.path.startswith("./"):
            continue
        entries = existing.setdefault(record.path[2:], BarrelEntries())
        wildcard = record.wildcard
        if wildcard is not None:
            if wildcard.alias is not None:
                continue
            if wildcard.is_type:
                entries.all_types = True
            else:
                entries.all_full = True
            continue
        for entry in record.names:
            if entry.alias is not None or not entry.is_named:
                continue
            if entry.is_type:
                entries.types.setdefault(str(entry.name), None)
            else:
                entries.full.setdefault(str(entry.name), None)
    return existing


def _rewrite_file(
    path: Path,
    *,
    package_name: str,
    prefix: str,
    needed: dict[str, BarrelEntries],
) -> tuple[list[Part], bool, int]:
    changed = False
    unsupported = 0
    parts: list[Part] = []
    for part in parse_file(path).parts:
        if (
            not isinstance(part, Import)
            or part.kind != "import"
            or not part.path.startswith(prefix)
        ):
            parts.append(part)
            continue

        if part.has_full_imports:
            logger.error(
                "barrel-unsupported-import",
                path=str(path),
                specifier=part.path,
                reason="wildcard and default imports cannot be re-exported",
            )
            unsupported += 1
            parts.append(part)
            continue

        entries = needed.setdefault(part.path[len(prefix):], BarrelEntries())
        for entry in part.names:
            if entry.is_type:
                entries.add_type(str(entry.name))
            else:
                entries.add_full(str(entry.name))
        parts.append(part.with_path(package_name))
        changed = True
    return parts, changed, unsupported


def _new_export_lines(
    needed: dict[str, BarrelEntries],
    existing: dict[str, BarrelEntries],
) -> list[str]:
    lines: list[str] = []
    for subpath, entries in needed.items():
        present = existing.get(subpath, BarrelEntries())
        specifier = f"./{subpath}"
        full = [name for name in entries.full if not present.covers_full(name)]
        if full:
            lines.append(
                render_import(
                    Import(
                        kind="export",
                        path=specifier,
                        names=tuple(ImportName(name) for name in full),
                    )
                )
            )
        types = [
            name
            for name in entries.types
            if name not in entries.full and not present.covers_type(name)
        ]
        if types:
            lines.append(
                render_import(
                    Import(
                        kind="export",
                        path=specifier,
                        names=tuple(
                            ImportName(name, is_type=True) for name in types
                        ),
                    )
                )
            )
    return lines


def barrel_export(
    package_dir: Path,
    source_paths: Iterable[Path],
    *,
    source_dir: str = "src",
    ignore_patterns: Sequence[str] = ("node_modules/", "dist/"),
    formatter: Callable[[Path], None] | None = None,
) -> BarrelResult:
    """Rewrite deep imports of ``package_dir`` and extend its barrel file.

    Raises:
        ManifestError: If ``package_dir`` has no usable ``package.json``.
        TsImportsError: If no source path is given.
    """

    roots = list(source_paths)
    if not roots:
        raise TsImportsError("barrel-export needs at least one source path")

    package_name = read_package_manifest(package_dir).name
    prefix = f"{package_name}/dist/js/"
    result = BarrelResult(barrel_path=package_dir / source_dir / "index.ts")

    needed: dict[str, BarrelEntries] = {}
    for path in iter_source_files(roots, ignore_patterns):
        parts, changed, unsupported = _rewrite_file(
            path,
            package_name=package_name,
            prefix=prefix,
            needed=needed,
        )
        result.unsupported += unsupported
        if not changed:
            continue
        write_parts(parts, path, formatter)
        result.rewritten.append(path)
        logger.info("barrel-imports-written", path=str(path))

    lines = _new_export_lines(needed, read_barrel_exports(result.barrel_path))
    if not lines:
        logger.info("barrel-up-to-date", path=str(result.barrel_path))
        return result

    block = "\n".join(lines) + "\n"
    if result.barrel_path.is_file():
        content = read_source(result.barrel_path)
        if content and not content.endswith("\n"):
            content += "\n"
        write_source(result.barrel_path, content + block)
    else:
        result.barrel_path.parent.mkdir(parents=True, exist_ok=True)
        write_source(result.barrel_path, block)

    result.added_lines = lines
    logger.info(
        "barrel-exports-written",
        path=str(result.barrel_path),
        lines=len(lines),
    )
    return result
