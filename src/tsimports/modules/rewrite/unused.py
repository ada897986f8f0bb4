"""Find exports nothing imports and drop their ``export`` keyword.

Every import (and re-export) across the scanned roots counts as a use.
Uses from test or story files only keep an export alive when the defining
file also refers to the name itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
import re
from typing import Sequence

from pathspec import PathSpec

from tsimports.core.config import UnusedExportSettings
from tsimports.core.logging import get_logger
from tsimports.modules.parser import (
    ParsedFile,
    iter_source_files,
    parse_file,
    read_source,
    write_source,
)

__all__ = [
    "UnusedExport",
    "UnusedExportReport",
    "find_unused_exports",
    "remove_export",
]

logger = get_logger(__name__)

_DECLARATION_KEYWORDS = (
    r"(?:async\s+)?"
    r"(?:const|let|var|function\*?|type|interface|abstract\s+class|class|enum)"
)


def _name_pattern(name: str) -> str:
    return rf"(?<![\w$]){re.escape(name)}(?![\w$])"


def remove_export(name: str, source: str) -> str:
    """Strip ``export`` from declarations of ``name`` in ``source``.

    Example:
        >>> remove_export("foo", "export async function foo<T>() {}")
        'async function foo<T>() {}'
    """

    pattern = re.compile(
        rf"export\s+(?={_DECLARATION_KEYWORDS}\s+{_name_pattern(name)})"
    )
    return pattern.sub("", source)


def _count_references(name: str, source: str) -> int:
    return len(re.findall(_name_pattern(name), source))


@dataclass(slots=True)
class UnusedExport:
    name: str
    files: list[Path]
    test_only: bool = False
    stripped: list[Path] = field(default_factory=list)


@dataclass(slots=True)
class UnusedExportReport:
    unused: list[UnusedExport] = field(default_factory=list)

    @property
    def stripped_files(self) -> list[Path]:
        files: dict[Path, None] = {}
        for item in self.unused:
            for path in item.stripped:
                files.setdefault(path, None)
        return list(files)


class _FileClassifier:
    def __init__(self, repo_root: Path, settings: UnusedExportSettings) -> None:
        self._root = repo_root
        self._tests = PathSpec.from_lines("gitwildmatch", settings.test_patterns)
        self._stories = PathSpec.from_lines(
            "gitwildmatch", settings.story_patterns
        )
        self._lazy = PathSpec.from_lines("gitwildmatch", settings.lazy_patterns)

    def _relative(self, path: Path) -> str:
        return Path(os.path.relpath(path, self._root)).as_posix()

    def is_story(self, path: Path) -> bool:
        return self._stories.match_file(self._relative(path))

    def is_test(self, path: Path) -> bool:
        return self.is_story(path) or self._tests.match_file(
            self._relative(path)
        )

    def is_lazy(self, path: Path) -> bool:
        return self._lazy.match_file(self._relative(path))


def find_unused_exports(
    repo_root: Path,
    source_paths: Sequence[Path],
    settings: UnusedExportSettings | None = None,
    *,
    ignore_patterns: Sequence[str] = ("node_modules/", "dist/"),
    dry_run: bool = False,
) -> UnusedExportReport:
    """Report unused exports and, unless ``dry_run``, unexport them.

    Returns:
        Every unused name with the files that export it and the files whose
        source was changed.
    """

    settings = settings or UnusedExportSettings()
    classifier = _FileClassifier(repo_root, settings)

    parsed_files: dict[Path, ParsedFile] = {
        path: parse_file(path)
        for path in iter_source_files(source_paths, ignore_patterns)
    }

    used: set[str] = set()
    used_by_tests: set[str] = set()
    exported: dict[str, list[Path]] = {}
    for path, parsed in parsed_files.items():
        uses = used_by_tests if classifier.is_test(path) else used
        for record in parsed.imports:
            for entry in record.names:
                if entry.is_named:
                    uses.add(str(entry.name))
        for name in parsed.direct_exports:
            exported.setdefault(name, []).append(path)

    report = UnusedExportReport()
    for name in sorted(exported):
        if name in used or settings.is_ignored_name(name):
            continue
        test_only = name in used_by_tests
        item = UnusedExport(name=name, files=exported[name], test_only=test_only)
        for path in item.files:
            if classifier.is_story(path) or classifier.is_lazy(path):
                continue
            source = read_source(path)
            if test_only and _count_references(name, source) > 1:
                continue
            updated = remove_export(name, source)
            if updated == source:
                continue
            item.stripped.append(path)
            if not dry_run:
                write_source(path, updated)
                logger.info("export-removed", name=name, path=str(path))

        if test_only and not item.stripped:
            continue
        logger.info(
            "unused-export",
            name=name,
            files=[str(path) for path in item.files],
            test_only=test_only,
        )
        report.unused.append(item)

    return report
