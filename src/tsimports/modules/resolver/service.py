"""Follow re-export chains to the module that defines a name."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import re
from typing import NamedTuple

from tsimports.core.config import ResolverSettings
from tsimports.core.logging import get_logger
from tsimports.core.packages import parse_package_import_path
from tsimports.errors import ResolutionCycleError, UnresolvedImportError
from tsimports.modules.parser import ParsedFile, is_source_file, parse_file

__all__ = [
    "ImportResolver",
    "ResolvedImport",
    "find_source_file",
    "relative_specifier",
]

logger = get_logger(__name__)

_PROBE_SUFFIXES = (".ts", ".tsx")
_PROBE_INDEXES = ("index.ts", "index.tsx")
_INDEX_SUFFIX = re.compile(r"(^|/)index\.tsx?$")
_SOURCE_SUFFIX = re.compile(r"\.tsx?$")


@dataclass(frozen=True, slots=True)
class ResolvedImport:
    """Specifier and symbol name at (or closest to) a name's origin."""

    path: str
    name: str


def find_source_file(base: Path) -> Path | None:
    """Map an extensionless module path to the source file it denotes.

    Returns ``None`` for module boundaries the resolver does not follow:
    plain JavaScript, declaration-only modules and non-TypeScript assets.

    Raises:
        UnresolvedImportError: If nothing on disk matches ``base``.
    """

    if base.name.endswith(".js"):
        return None

    for suffix in _PROBE_SUFFIXES:
        candidate = base.with_name(base.name + suffix)
        if candidate.is_file():
            return candidate
    for index in _PROBE_INDEXES:
        candidate = base / index
        if candidate.is_file():
            return candidate

    if base.is_file():
        return base if is_source_file(base) else None
    if base.with_name(base.name + ".js").is_file():
        return None
    if base.with_name(base.name + ".d.ts").is_file():
        return None
    if (base / "index.d.ts").is_file():
        return None

    raise UnresolvedImportError(f"Import target not found: {base}")


def relative_specifier(source_file: Path, target: Path) -> str:
    """Return the specifier that imports ``target`` from ``source_file``.

    Example:
        >>> from pathlib import Path
        >>> relative_specifier(Path("/r/src/c.ts"), Path("/r/src/lib/index.ts"))
        './lib'
        >>> relative_specifier(Path("/r/src/a/c.ts"), Path("/r/src/b.tsx"))
        '../b'
    """

    relative = Path(os.path.relpath(target, source_file.parent)).as_posix()
    for pattern in (_INDEX_SUFFIX, _SOURCE_SUFFIX):
        match = pattern.search(relative)
        if match is not None:
            relative = relative[: match.start()]
            break

    if relative.startswith("."):
        return relative
    if not relative:
        return "."
    return f"./{relative}"


@dataclass(frozen=True, slots=True)
class _LastGood:
    """Fallback answer: a source file, or a package specifier."""

    target: Path | str
    name: str

    @property
    def is_file(self) -> bool:
        return isinstance(self.target, Path)


class _Outcome(NamedTuple):
    last_good: _LastGood | None
    # Whether the chain reached the name's origin rather than running dry.
    conclusive: bool


class ImportResolver:
    """Resolve imported names through re-exports across packages.

    A resolver owns the parse cache for one run; create a new instance per
    run so edits made by earlier runs are picked up.
    """

    def __init__(
        self,
        packages_dir: Path,
        settings: ResolverSettings | None = None,
        *,
        source_dir: str = "src",
    ) -> None:
        self._packages_dir = Path(packages_dir)
        self._settings = settings or ResolverSettings()
        self._source_dir = source_dir
        self._cache: dict[Path, ParsedFile] = {}

    @property
    def settings(self) -> ResolverSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Parse cache
    # ------------------------------------------------------------------
    def parse(self, path: Path) -> ParsedFile:
        """Return the cached parse of ``path``, parsing it on first use."""

        parsed = self._cache.get(path)
        if parsed is None:
            parsed = parse_file(path)
            self._cache[path] = parsed
        return parsed

    def invalidate(self, path: Path) -> None:
        """Forget the cached parse of ``path`` after it was rewritten."""

        self._cache.pop(path, None)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def resolve(
        self,
        source_file: Path,
        name: str,
        import_path: str,
    ) -> ResolvedImport | None:
        """Resolve ``name`` imported from ``import_path`` in ``source_file``.

        Returns:
            The specifier (relative to ``source_file`` for local files) and
            the name under which the origin exports the symbol, or ``None``
            when no hop could be followed.

        Raises:
            UnresolvedImportError: If a relative hop points at nothing.
            ResolutionCycleError: If the re-export chain loops.
        """

        outcome = self._walk(
            current_file=source_file,
            name=name,
            import_path=import_path,
            last_good=None,
            chain=[],
        )
        last_good = outcome.last_good
        if last_good is None:
            return None
        if isinstance(last_good.target, Path):
            path = relative_specifier(source_file, last_good.target)
        else:
            path = last_good.target
        return ResolvedImport(path=path, name=last_good.name)

    def _walk(
        self,
        *,
        current_file: Path,
        name: str,
        import_path: str,
        last_good: _LastGood | None,
        chain: list[tuple[Path, str]],
    ) -> _Outcome:
        next_file: Path | None
        if import_path.startswith("."):
            next_file = find_source_file(
                Path(os.path.normpath(current_file.parent / import_path))
            )
            if next_file is not None and (
                last_good is None or last_good.is_file
            ):
                last_good = _LastGood(next_file, name)
        else:
            package_path = parse_package_import_path(
                import_path, self._settings.package_scope
            )
            package_root = (
                self._packages_dir / package_path.package_name
                if package_path is not None
                else None
            )
            if (
                package_path is None
                or package_root is None
                or not package_root.is_dir()
            ):
                if self._is_leaf(import_path):
                    return _Outcome(_LastGood(import_path, name), True)
                return _Outcome(last_good, False)

            subpath = package_path.subpath or "index"
            next_file = find_source_file(
                Path(os.path.normpath(package_root / self._source_dir / subpath))
            )
            last_good = _LastGood(import_path, name)

        if next_file is None:
            return _Outcome(last_good, False)

        key = (next_file, name)
        if key in chain:
            hops = " -> ".join(f"{path}:{symbol}" for path, symbol in chain)
            raise ResolutionCycleError(
                f"Re-export cycle resolving {name!r}: {hops} -> {next_file}"
            )

        chain.append(key)
        try:
            return self._follow(next_file, name, last_good, chain)
        finally:
            chain.pop()

    def _follow(
        self,
        next_file: Path,
        name: str,
        last_good: _LastGood | None,
        chain: list[tuple[Path, str]],
    ) -> _Outcome:
        parsed = self.parse(next_file)
        if name in parsed.direct_exports:
            return _Outcome(last_good, True)

        for record in parsed.imports:
            if record.kind != "export":
                continue

            wildcard = record.wildcard
            if wildcard is not None:
                if wildcard.alias == name:
                    return _Outcome(last_good, True)
                if wildcard.alias is not None:
                    continue
                outcome = self._walk(
                    current_file=next_file,
                    name=name,
                    import_path=record.path,
                    last_good=last_good,
                    chain=chain,
                )
                if outcome.conclusive:
                    return outcome
                continue

            for entry in record.names:
                if entry.local_name != name:
                    continue
                return self._walk(
                    current_file=next_file,
                    name=str(entry.name),
                    import_path=record.path,
                    last_good=last_good,
                    chain=chain,
                )

        logger.debug(
            "resolution-stopped",
            path=str(next_file),
            name=name,
        )
        return _Outcome(last_good, False)

    def _is_leaf(self, import_path: str) -> bool:
        return any(
            import_path == leaf or import_path.startswith(f"{leaf}/")
            for leaf in self._settings.leaf_packages
        )
