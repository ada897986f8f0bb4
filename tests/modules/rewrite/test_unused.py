"""Tests for :mod:`tsimports.modules.rewrite.unused`."""

from __future__ import annotations

from pathlib import Path

import pytest

from tsimports.core.config import UnusedExportSettings
from tsimports.modules.rewrite import find_unused_exports, remove_export

LIB = (
    "export const used = 1;\n"
    "export const unused = 2;\n"
    "export function testOnly() {}\n"
    "export const testShared = 3;\n"
    "const keep = testShared;\n"
    "export const stepRoutine = 4;\n"
)


@pytest.fixture
def unused_repo(write_tree) -> Path:
    return write_tree(
        {
            "src/lib.ts": LIB,
            "src/main.ts": 'import { used } from "./lib";\n',
            "src/lib.test.ts": (
                'import { testOnly, testShared } from "./lib";\n'
            ),
        }
    )


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("export const foo = 1;", "const foo = 1;"),
        ("export async function foo() {}", "async function foo() {}"),
        ("export function* foo() {}", "function* foo() {}"),
        ("export abstract class foo {}", "abstract class foo {}"),
        ("export interface foo {}", "interface foo {}"),
        ("export const fooBar = 1;", "export const fooBar = 1;"),
        ("export { foo };", "export { foo };"),
    ],
)
def test_remove_export(source: str, expected: str) -> None:
    assert remove_export("foo", source) == expected


def test_unused_exports_are_unexported(unused_repo: Path) -> None:
    lib = unused_repo / "src" / "lib.ts"

    report = find_unused_exports(unused_repo, [unused_repo / "src"])

    assert [item.name for item in report.unused] == ["testOnly", "unused"]
    assert report.stripped_files == [lib]
    content = lib.read_text(encoding="utf-8")
    assert "\nconst unused = 2;\n" in content
    assert "\nfunction testOnly() {}\n" in content
    assert "export const testShared = 3;" in content
    assert "export const stepRoutine = 4;" in content
    assert "export const used = 1;" in content


def test_story_exports_are_never_stripped(write_tree) -> None:
    root = write_tree({"src/widget.stories.tsx": "export const Story = 1;\n"})
    story = root / "src" / "widget.stories.tsx"

    report = find_unused_exports(root, [root / "src"])

    assert [item.name for item in report.unused] == ["Story"]
    assert report.stripped_files == []
    assert story.read_text(encoding="utf-8") == "export const Story = 1;\n"


def test_dry_run_leaves_files_untouched(unused_repo: Path) -> None:
    lib = unused_repo / "src" / "lib.ts"

    report = find_unused_exports(
        unused_repo,
        [unused_repo / "src"],
        dry_run=True,
    )

    assert [item.name for item in report.unused] == ["testOnly", "unused"]
    assert report.stripped_files == [lib]
    assert lib.read_text(encoding="utf-8") == LIB


def test_ignored_names_are_kept(unused_repo: Path) -> None:
    settings = UnusedExportSettings(ignore_names=["unused"])

    report = find_unused_exports(
        unused_repo,
        [unused_repo / "src"],
        settings,
        dry_run=True,
    )

    assert [item.name for item in report.unused] == ["testOnly"]


def test_re_exports_count_as_use(write_tree) -> None:
    root = write_tree(
        {
            "src/a.ts": "export const foo = 1;\n",
            "src/index.ts": 'export { foo } from "./a";\n',
        }
    )

    report = find_unused_exports(root, [root / "src"], dry_run=True)

    assert report.unused == []


def test_lazy_files_are_never_stripped(write_tree) -> None:
    root = write_tree(
        {
            "src/lazy/page.ts": "export const Page = 1;\n",
            "src/eager.ts": "export const helper = 2;\n",
        }
    )
    settings = UnusedExportSettings(lazy_patterns=["lazy/"])

    report = find_unused_exports(root, [root / "src"], settings)

    assert [item.name for item in report.unused] == ["Page", "helper"]
    assert report.stripped_files == [root / "src" / "eager.ts"]
    assert (root / "src" / "lazy" / "page.ts").read_text(
        encoding="utf-8"
    ) == "export const Page = 1;\n"
    assert (root / "src" / "eager.ts").read_text(encoding="utf-8") == (
        "const helper = 2;\n"
    )


def test_test_only_name_used_in_own_file_is_kept(write_tree) -> None:
    source = (
        "export const fixture = 1;\n"
        "export const orphan = 2;\n"
        "export const total = fixture + 1;\n"
    )
    root = write_tree(
        {
            "src/data.ts": source,
            "src/main.ts": 'import { total } from "./data";\n',
            "src/data.test.ts": 'import { fixture } from "./data";\n',
        }
    )

    report = find_unused_exports(root, [root / "src"])

    assert [item.name for item in report.unused] == ["orphan"]
    assert (root / "src" / "data.ts").read_text(encoding="utf-8") == (
        "export const fixture = 1;\n"
        "const orphan = 2;\n"
        "export const total = fixture + 1;\n"
    )
