"""Package manifests and scoped package import paths."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
import re

from pydantic import BaseModel, Field, ValidationError

from tsimports.errors import ManifestError

__all__ = [
    "PackageImportPath",
    "PackageManifest",
    "parse_package_import_path",
    "read_package_manifest",
]


class PackageManifest(BaseModel):
    """The parts of ``package.json`` the passes care about."""

    name: str
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(
        default_factory=dict,
        alias="devDependencies",
    )

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


def read_package_manifest(package_dir: Path) -> PackageManifest:
    """Read ``package.json`` from ``package_dir``.

    Raises:
        ManifestError: If the manifest is missing, not JSON, or has no name.
    """

    manifest_path = package_dir / "package.json"
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ManifestError(f"package.json not found in {package_dir}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ManifestError(f"Cannot read {manifest_path}: {exc}") from exc

    try:
        return PackageManifest.model_validate(payload)
    except ValidationError as exc:
        raise ManifestError(f"Invalid {manifest_path}: {exc}") from exc


@dataclass(frozen=True, slots=True)
class PackageImportPath:
    """A specifier pointing into one of the repository's own packages."""

    package_name: str
    subpath: str | None = None


_PATTERN_CACHE: dict[str, re.Pattern[str]] = {}


def _scope_pattern(scope: str) -> re.Pattern[str]:
    pattern = _PATTERN_CACHE.get(scope)
    if pattern is None:
        pattern = re.compile(
            rf"^{re.escape(scope)}/([^/]+)(?:/(?:dist/js/)?(.*))?$"
        )
        _PATTERN_CACHE[scope] = pattern
    return pattern


def parse_package_import_path(
    path: str,
    scope: str,
) -> PackageImportPath | None:
    """Split a scoped specifier into package name and logical subpath.

    A leading ``dist/js/`` build-output prefix is stripped from the subpath.

    Example:
        >>> parse_package_import_path("@glide/common/dist/js/util", "@glide")
        PackageImportPath(package_name='common', subpath='util')
        >>> parse_package_import_path("react", "@glide") is None
        True
    """

    match = _scope_pattern(scope).match(path)
    if match is None:
        return None
    return PackageImportPath(
        package_name=match.group(1),
        subpath=match.group(2) or None,
    )
