"""Repository layout helpers for :mod:`tsimports`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import LayoutSettings

__all__ = [
    "RepoLayout",
    "read_package_order",
    "resolve_repo",
]


@dataclass(frozen=True, slots=True)
class RepoLayout:
    """Resolved locations for a multi-package repository.

    Example:
        >>> from pathlib import Path
        >>> layout = RepoLayout(
        ...     root=Path("/repo"),
        ...     packages_dir=Path("/repo/packages"),
        ...     package_names=("common", "app"),
        ...     source_dir="src",
        ... )
        >>> [p.as_posix() for p in layout.source_paths]
        ['/repo/packages/common/src', '/repo/packages/app/src']
    """

    root: Path
    packages_dir: Path
    package_names: tuple[str, ...]
    source_dir: str = "src"

    def package_dir(self, name: str) -> Path:
        """Return the directory of package ``name``."""

        return self.packages_dir / name

    @property
    def source_paths(self) -> tuple[Path, ...]:
        """Source roots of every package, in topological order."""

        return tuple(
            self.package_dir(name) / self.source_dir
            for name in self.package_names
        )


def read_package_order(path: Path) -> tuple[str, ...]:
    """Return package names listed in ``path``.

    Blank lines and ``#`` comments are ignored; duplicates keep their first
    position.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """

    names: list[str] = []
    seen: set[str] = set()
    for line in path.read_text(encoding="utf-8").splitlines():
        name = line.split("#", 1)[0].strip()
        if not name or name in seen:
            continue
        seen.add(name)
        names.append(name)
    return tuple(names)


def resolve_repo(root: Path, settings: LayoutSettings) -> RepoLayout:
    """Resolve the package layout of the repository at ``root``.

    Raises:
        NotADirectoryError: If ``root`` is not a directory.
        FileNotFoundError: If the package order file is missing.
    """

    root = Path(root).expanduser().resolve(strict=False)
    if not root.is_dir():
        raise NotADirectoryError(f"Repository root must be a directory: {root}")

    order_file = root / settings.package_order_file
    if not order_file.is_file():
        raise FileNotFoundError(f"Package order file not found: {order_file}")

    return RepoLayout(
        root=root,
        packages_dir=root / settings.packages_dir,
        package_names=read_package_order(order_file),
        source_dir=settings.source_dir,
    )
