"""Tests for :mod:`tsimports.core.paths`."""

from __future__ import annotations

from pathlib import Path

import pytest

from tsimports.core.config import LayoutSettings
from tsimports.core.paths import RepoLayout, read_package_order, resolve_repo


def test_read_package_order_skips_comments_and_duplicates(tmp_path: Path) -> None:
    order = tmp_path / "packages.txt"
    order.write_text(
        "# base first\ncommon\n\napp  # depends on common\ncommon\n",
        encoding="utf-8",
    )

    assert read_package_order(order) == ("common", "app")


def test_resolve_repo_uses_layout_settings(glide_repo: Path) -> None:
    layout = resolve_repo(glide_repo, LayoutSettings())

    root = glide_repo.resolve()
    assert layout.root == root
    assert layout.packages_dir == root / "packages"
    assert layout.package_names == ("common", "app")
    assert layout.source_paths == (
        root / "packages" / "common" / "src",
        root / "packages" / "app" / "src",
    )


def test_resolve_repo_custom_directories(write_tree) -> None:
    root = write_tree({"order.txt": "core\n"})
    settings = LayoutSettings(
        packages_dir="libs",
        package_order_file="order.txt",
        source_dir="lib",
    )

    layout = resolve_repo(root, settings)

    assert layout.source_paths == (root.resolve() / "libs" / "core" / "lib",)


def test_resolve_repo_requires_order_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        resolve_repo(tmp_path, LayoutSettings())


def test_resolve_repo_rejects_file_root(tmp_path: Path) -> None:
    path = tmp_path / "not-a-dir"
    path.write_text("oops", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        resolve_repo(path, LayoutSettings())


def test_repo_layout_package_dir() -> None:
    layout = RepoLayout(
        root=Path("/repo"),
        packages_dir=Path("/repo/packages"),
        package_names=("common",),
    )

    assert layout.package_dir("common") == Path("/repo/packages/common")
