"""Tests for :mod:`tsimports.modules.rewrite.dedup`."""

from __future__ import annotations

from tsimports.modules.parser import parse_imports, unparse_imports
from tsimports.modules.rewrite import dedup_imports, dedup_parts


def _dedup(source: str) -> str | None:
    updated = dedup_parts(parse_imports(source, "a.ts").parts)
    if updated is None:
        return None
    return unparse_imports(updated)


def test_merges_repeated_imports() -> None:
    source = 'import { a } from "x";\nimport { b } from "x";\n'

    assert _dedup(source) == 'import { a, b } from "x";\n'


def test_second_pass_is_a_no_op() -> None:
    once = _dedup('import { a } from "x";\nimport { b, a } from "x";\n')

    assert once == 'import { a, b } from "x";\n'
    assert _dedup(once) is None


def test_type_only_statements_form_their_own_group() -> None:
    source = (
        'import type { A } from "x";\n'
        'import { c } from "x";\n'
        'import type { B } from "x";\n'
    )

    assert _dedup(source) == (
        'import type { A, B } from "x";\nimport { c } from "x";\n'
    )


def test_wildcards_and_mixed_statements_are_left_alone() -> None:
    source = (
        'import * as NS from "x";\n'
        'import { a } from "x";\n'
        'import { b, type T } from "y";\n'
        'import { c } from "y";\n'
    )

    assert _dedup(source) is None


def test_aliases_are_kept() -> None:
    source = 'import { a as one } from "x";\nimport { a } from "x";\n'

    assert _dedup(source) == 'import { a as one, a } from "x";\n'


def test_default_joins_named_imports() -> None:
    source = 'import Foo from "x";\nimport { a, b } from "x";\n'

    assert _dedup(source) == 'import Foo, { a, b } from "x";\n'


def test_conflicting_defaults_are_not_merged() -> None:
    source = 'import Foo from "x";\nimport Bar from "x";\n'

    assert _dedup(source) is None


def test_text_around_statements_is_preserved() -> None:
    source = (
        "// header\n"
        'import { a } from "x";\n'
        'import { b } from "y";\n'
        'import { c } from "x";\n'
        "\n"
        "run(a, b, c);\n"
    )

    assert _dedup(source) == (
        "// header\n"
        'import { a, c } from "x";\n'
        'import { b } from "y";\n'
        "\n"
        "run(a, b, c);\n"
    )


def test_dedup_imports_writes_changed_files(write_tree) -> None:
    root = write_tree(
        {
            "src/dup.ts": 'import { a } from "x";\nimport { b } from "x";\n',
            "src/clean.ts": 'import { a } from "x";\n',
        }
    )

    written = dedup_imports([root / "src"])

    assert written == [root / "src" / "dup.ts"]
    assert (root / "src" / "dup.ts").read_text(encoding="utf-8") == (
        'import { a, b } from "x";\n'
    )


def test_default_with_namespace_stays_apart() -> None:
    source = (
        'import React, * as NS from "x";\n'
        'import { a } from "x";\n'
        'import { b } from "x";\n'
    )

    assert _dedup(source) == (
        'import React, * as NS from "x";\nimport { a, b } from "x";\n'
    )
