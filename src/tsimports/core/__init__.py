"""Core utilities shared across :mod:`tsimports` modules.

The core namespace provides configuration loading, logging setup, repository
layout resolution and package manifest helpers so the rewrite passes stay
focused on statements.
"""

from __future__ import annotations

from .config import AppConfig, load_config
from .logging import configure_logging, get_logger
from .packages import (
    PackageImportPath,
    PackageManifest,
    parse_package_import_path,
    read_package_manifest,
)
from .paths import RepoLayout, resolve_repo

__all__ = [
    "AppConfig",
    "PackageImportPath",
    "PackageManifest",
    "RepoLayout",
    "configure_logging",
    "get_logger",
    "load_config",
    "parse_package_import_path",
    "read_package_manifest",
    "resolve_repo",
]
