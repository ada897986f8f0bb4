"""The maintenance pipeline run over a whole multi-package repository."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from tsimports.core.config import AppConfig
from tsimports.core.logging import get_logger
from tsimports.core.paths import RepoLayout
from tsimports.modules.resolver import ImportResolver

from .dedup import dedup_file
from .formatter import Formatter
from .reexports import remove_re_exports
from .resolve import resolve_imports

__all__ = ["ServiceResult", "run_service"]

logger = get_logger(__name__)


@dataclass(slots=True)
class ServiceResult:
    resolved: list[Path] = field(default_factory=list)
    re_exports_removed: list[Path] = field(default_factory=list)
    deduplicated: list[Path] = field(default_factory=list)
    formatted: list[Path] = field(default_factory=list)

    @property
    def modified(self) -> list[Path]:
        return list(dict.fromkeys([*self.resolved, *self.re_exports_removed]))


def run_service(
    layout: RepoLayout,
    config: AppConfig,
    *,
    formatter: Formatter | None = None,
) -> ServiceResult:
    """Resolve imports, drop re-exports, dedup and format what changed.

    Args:
        layout: Package layout of the repository.
        config: Application settings.
        formatter: Formatter run over the modified files that still exist;
            formatting is skipped when omitted.
    """

    source_paths = [path for path in layout.source_paths if path.is_dir()]
    ignore = config.layout.ignore_patterns
    result = ServiceResult()

    logger.info("service-step", step="resolve-imports", roots=len(source_paths))
    resolver = ImportResolver(
        layout.packages_dir,
        config.resolver,
        source_dir=layout.source_dir,
    )
    result.resolved = resolve_imports(
        resolver, source_paths, ignore_patterns=ignore
    )

    logger.info("service-step", step="remove-re-exports")
    result.re_exports_removed = remove_re_exports(
        source_paths, ignore_patterns=ignore
    )

    logger.info("service-step", step="dedup-imports")
    for path in result.modified:
        if path.exists() and dedup_file(path):
            result.deduplicated.append(path)

    modified = result.modified
    if not modified:
        logger.info("service-no-changes")
        return result

    if formatter is not None:
        logger.info("service-step", step="format", files=len(modified))
        result.formatted = formatter.format_files(modified)
    return result
