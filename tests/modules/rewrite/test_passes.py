"""Tests for the single-purpose rewrite passes."""

from __future__ import annotations

from pathlib import Path

from tsimports.modules.parser import parse_imports, unparse_imports
from tsimports.modules.rewrite import (
    count_symbol_uses,
    format_symbol_counts,
    move_import,
    remove_re_exports,
    rewrite_imports,
    verbatim_imports,
)


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def test_remove_re_exports_keeps_other_code(write_tree) -> None:
    root = write_tree(
        {
            "src/mod.ts": 'export { x } from "./a";\nexport const y = 1;\n',
            "src/index.ts": 'export { x } from "./a";\n',
            "src/only.ts": 'export * from "./a";\n',
            "src/plain.ts": 'import { x } from "./a";\n',
        }
    )
    src = root / "src"

    touched = remove_re_exports([src])

    assert touched == [src / "mod.ts", src / "only.ts"]
    assert _read(src / "mod.ts") == "\nexport const y = 1;\n"
    assert _read(src / "index.ts") == 'export { x } from "./a";\n'
    assert not (src / "only.ts").exists()


def test_move_import_splits_statement() -> None:
    parts = parse_imports('import { a, b as c } from "x";\n', "a.ts").parts

    moved = move_import(parts, "b", "x", "y")

    assert moved is not None
    assert unparse_imports(moved) == (
        'import { a } from "x";\nimport { b as c } from "y";\n'
    )


def test_move_import_whole_statement() -> None:
    parts = parse_imports('import type { b } from "x";\n', "a.ts").parts

    moved = move_import(parts, "b", "x", "y")

    assert moved is not None
    assert unparse_imports(moved) == 'import type { b } from "y";\n'
    assert move_import(parts, "b", "other", "y") is None


def test_rewrite_imports_walks_tree(write_tree) -> None:
    root = write_tree(
        {
            "src/a.ts": 'import { a, b } from "x";\n',
            "src/b.ts": 'import { a } from "x";\n',
        }
    )

    written = rewrite_imports("b", "x", "y", [root / "src"])

    assert written == [root / "src" / "a.ts"]
    assert _read(root / "src" / "a.ts") == (
        'import { a } from "x";\nimport { b } from "y";\n'
    )


def test_verbatim_imports_add_js_extension(write_tree) -> None:
    root = write_tree(
        {
            "src/a.ts": (
                'import { a } from "./a";\n'
                'import { b } from "b";\n'
                'export * from "../c.js";\n'
            ),
        }
    )

    assert verbatim_imports([root / "src"]) == [root / "src" / "a.ts"]
    assert _read(root / "src" / "a.ts") == (
        'import { a } from "./a.js";\n'
        'import { b } from "b";\n'
        'export * from "../c.js";\n'
    )
    assert verbatim_imports([root / "src"]) == []


def test_count_symbol_uses(write_tree) -> None:
    root = write_tree(
        {
            "src/a.ts": "export const foo = 1;\nexport const bar = 2;\n",
            "src/b.ts": 'import { foo, bar } from "./a";\n',
            "src/c.ts": 'import { foo, external } from "./a";\n',
        }
    )

    rows = count_symbol_uses(root, [root / "src"])

    assert [(row.symbol, row.count, row.exported_in) for row in rows] == [
        ("foo", 2, "src/a.ts"),
        ("bar", 1, "src/a.ts"),
    ]
    assert format_symbol_counts(rows) == (
        "symbol,count,exported_in\nfoo,2,src/a.ts\nbar,1,src/a.ts"
    )


def test_move_import_skips_namespace_statements() -> None:
    source = 'import React, * as NS from "x";\nimport { b } from "x";\n'
    parts = parse_imports(source, "a.ts").parts

    moved = move_import(parts, "b", "x", "y")

    assert moved is not None
    assert unparse_imports(moved) == (
        'import React, * as NS from "x";\nimport { b } from "y";\n'
    )
