"""Shared pytest fixtures for building small TypeScript trees."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

WriteTree = Callable[[Mapping[str, str]], Path]


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def write_tree(tmp_path: Path) -> WriteTree:
    """Return a helper writing ``{relative path: content}`` under ``tmp_path``."""

    def _write(files: Mapping[str, str]) -> Path:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content.encode("utf-8"))
        return tmp_path

    return _write


@pytest.fixture
def glide_repo(write_tree: WriteTree) -> Path:
    """A two-package repository: ``common`` and an ``app`` using it."""

    return write_tree(
        {
            "packages.txt": "# topological order\ncommon\napp\n",
            "packages/common/package.json": json.dumps(
                {"name": "@glide/common", "dependencies": {}}
            ),
            "packages/common/src/index.ts": 'export * from "./util";\n',
            "packages/common/src/util.ts": "export const shared = 1;\n",
            "packages/app/package.json": json.dumps(
                {
                    "name": "@glide/app",
                    "dependencies": {"@glide/common": "workspace:*"},
                }
            ),
            "packages/app/src/main.ts": (
                'import { shared } from "./reexport";\n\nconsole.log(shared);\n'
            ),
            "packages/app/src/reexport.ts": (
                'export { shared } from "@glide/common";\n'
            ),
        }
    )
