"""Tests for :mod:`tsimports.modules.parser.imports`."""

from __future__ import annotations

from pathlib import Path

import pytest

from tsimports.modules.parser import (
    DEFAULT,
    WILDCARD,
    Import,
    ImportName,
    Text,
    is_source_file,
    parse_file,
    parse_imports,
    unparse_imports,
)


def test_fixture_round_trips_exactly(fixtures_dir: Path) -> None:
    path = fixtures_dir / "basic1.ts"
    content = path.read_bytes().decode("utf-8")

    parsed = parse_file(path)

    assert parsed.content == content
    assert unparse_imports(parsed.parts) == content


def test_fixture_records(fixtures_dir: Path) -> None:
    parsed = parse_file(fixtures_dir / "basic1.ts")
    records = parsed.imports

    assert len(records) == 10
    assert records[0] == Import(
        "export", "foo", (ImportName("Bar", is_type=True),)
    )
    assert records[1] == Import("export", "foo", (ImportName(WILDCARD),))
    assert records[2] == Import(
        "export", "foo", (ImportName(WILDCARD, alias="StarFoo"),)
    )
    assert records[3] == Import(
        "export",
        "foo",
        (ImportName("Bar", alias="Baz"), ImportName("Qux", is_type=True)),
    )
    assert records[4] == Import(
        "import", "foo", (ImportName(WILDCARD, alias="StarFoo"),)
    )
    assert records[5] == Import(
        "import", "foo", (ImportName("Bar", is_type=True),)
    )
    assert records[6] == Import(
        "import",
        "foo",
        (
            ImportName(DEFAULT, alias="Foo"),
            ImportName("Bar", alias="Baz"),
            ImportName("Qux", is_type=True),
        ),
    )
    assert records[7] == Import(
        "import", "foo", (ImportName(DEFAULT, alias="JustFoo"),)
    )
    assert records[8] == Import(
        "import",
        "foo",
        (ImportName(WILDCARD, alias="Typefoo", is_type=True),),
    )
    assert all(record.path == "foo" for record in records)


def test_side_effect_import_stays_text(fixtures_dir: Path) -> None:
    parsed = parse_file(fixtures_dir / "basic1.ts")

    texts = [part.text for part in parsed.parts if isinstance(part, Text)]

    assert any('import "bla";' in text for text in texts)


def test_fixture_direct_exports_and_dynamic_paths(fixtures_dir: Path) -> None:
    parsed = parse_file(fixtures_dir / "basic1.ts")

    assert parsed.direct_exports == {
        "aFunction",
        "aConstant",
        "aLet",
        "aVar",
        "AType",
        "AnInterface",
        "AClass",
        "AnEnum",
        "justAnExport",
        "renamedExport",
    }
    assert parsed.dynamic_import_paths == ("foo",)


def test_destructured_exports_are_collected() -> None:
    source = (
        "export const { a, b: renamed, c = 1, ...rest } = obj;\n"
        "export const [first, , third] = list;\n"
        "export const x = 1, y = 2;\n"
    )

    parsed = parse_imports(source, "exports.ts")

    assert parsed.direct_exports == {
        "a",
        "renamed",
        "c",
        "rest",
        "first",
        "third",
        "x",
        "y",
    }
    assert parsed.imports == ()


def test_import_inside_string_is_not_segmented() -> None:
    source = 'const text = `import { a } from "x";`;\nimport { b } from "y";\n'

    parsed = parse_imports(source, "strings.ts")

    assert [record.path for record in parsed.imports] == ["y"]
    assert unparse_imports(parsed.parts) == source


def test_tsx_files_parse_jsx() -> None:
    source = (
        'import { Button } from "./button";\n'
        "export const View = () => <Button label=\"ok\" />;\n"
    )

    parsed = parse_imports(source, "view.tsx")

    assert parsed.imports[0].names == (ImportName("Button"),)
    assert parsed.direct_exports == {"View"}
    assert unparse_imports(parsed.parts) == source


def test_crlf_and_comments_round_trip() -> None:
    source = (
        "/* header */\r\n"
        'import {a,b as   c} from "./x" // trailing\r\n'
        "// comment\r\n"
        'import type {T} from \'./t\';\r\n'
    )

    parsed = parse_imports(source, "crlf.ts")

    assert unparse_imports(parsed.parts) == source
    assert parsed.imports[0].names == (ImportName("a"), ImportName("b", "c"))
    assert parsed.imports[1].path == "./t"


def test_dynamic_import_with_expression_is_skipped() -> None:
    source = (
        'const a = import("./lazy");\n'
        "const b = import(name);\n"
        'const c = import("./lazy");\n'
    )

    parsed = parse_imports(source, "dynamic.ts")

    assert parsed.dynamic_import_paths == ("./lazy",)


def test_comments_inside_name_lists_are_skipped() -> None:
    source = (
        "export {\n"
        "  a, // first\n"
        "  /* note */ b,\n"
        '} from "./x";\n'
        "import {\n"
        "  c, // third\n"
        '} from "./y";\n'
    )

    parsed = parse_imports(source, "comments.ts")

    assert unparse_imports(parsed.parts) == source
    assert parsed.imports[0].names == (ImportName("a"), ImportName("b"))
    assert parsed.imports[1].names == (ImportName("c"),)


def test_default_with_namespace_import() -> None:
    source = 'import React, * as NS from "react";\n'

    record = parse_imports(source, "a.tsx").imports[0]

    assert record.names == (
        ImportName(DEFAULT, alias="React"),
        ImportName(WILDCARD, alias="NS"),
    )
    assert record.has_wildcard
    assert record.with_path("preact").original_text is None
    assert unparse_imports((record.with_path("preact"),)) == (
        'import React, * as NS from "preact";'
    )


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("a.ts", True),
        ("a.tsx", True),
        ("a.d.ts", False),
        ("a.js", False),
        ("a.json", False),
    ],
)
def test_is_source_file(name: str, expected: bool) -> None:
    assert is_source_file(Path("src") / name) is expected
