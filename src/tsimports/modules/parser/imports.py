"""Import/export statement parser backed by tree-sitter.

The whole file is parsed with the TypeScript (or TSX) grammar so statement
boundaries are exact, but only import and export statements are turned into
structured records. Every other byte becomes a :class:`Text` part and is
reproduced verbatim by :func:`~tsimports.modules.parser.unparse.unparse_imports`.
"""

from __future__ import annotations

from functools import cache
from pathlib import Path
from typing import Any, Iterator

import tree_sitter
import tree_sitter_typescript

from tsimports.core.logging import get_logger
from tsimports.errors import ImportParseError

from .files import read_source
from .models import (
    DEFAULT,
    WILDCARD,
    Import,
    ImportKind,
    ImportName,
    ParsedFile,
    Part,
    RawImport,
    Text,
)

__all__ = [
    "SOURCE_SUFFIXES",
    "is_source_file",
    "parse_file",
    "parse_imports",
]

logger = get_logger(__name__)

SOURCE_SUFFIXES = (".ts", ".tsx")

_STATEMENT_NODES = {"import_statement", "export_statement", "export_clause"}

_NAMED_DECLARATIONS = {
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "abstract_class_declaration",
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
    "internal_module",
    "module",
}

_VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}


def is_source_file(path: str | Path) -> bool:
    """Whether ``path`` is a TypeScript source the passes should touch.

    Declaration files (``.d.ts``) only describe shapes and are skipped.
    """

    name = Path(path).name
    return name.endswith(SOURCE_SUFFIXES) and not name.endswith(".d.ts")


@cache
def _parser_for(grammar: str) -> tree_sitter.Parser:
    if grammar == "tsx":
        language = tree_sitter.Language(tree_sitter_typescript.language_tsx())
    else:
        language = tree_sitter.Language(
            tree_sitter_typescript.language_typescript()
        )
    return tree_sitter.Parser(language)


def _grammar_for_path(path: str | Path) -> str:
    suffix = Path(path).suffix.lower()
    if suffix in {".tsx", ".jsx"}:
        return "tsx"
    return "typescript"


def parse_imports(content: str, path: str | Path) -> ParsedFile:
    """Split ``content`` into text and import parts.

    Args:
        content: Full source text of the file.
        path: File path; selects the grammar and appears in error messages.

    Returns:
        The parts, the names the file exports directly, and the string paths
        passed to dynamic ``import()`` calls.

    Raises:
        ImportParseError: If a statement has a shape the Part model cannot
            represent.
    """

    source_bytes = content.encode("utf-8")
    tree = _parser_for(_grammar_for_path(path)).parse(source_bytes)
    if tree.root_node.has_error:
        logger.warning("syntax-errors-in-source", path=str(path))

    collector = _ImportCollector(
        path=str(path),
        source_bytes=source_bytes,
        root=tree.root_node,
    )
    return ParsedFile(
        parts=collector.collect_parts(),
        direct_exports=frozenset(collector.direct_exports),
        dynamic_import_paths=collector.collect_dynamic_imports(),
        content=content,
    )


def parse_file(path: Path) -> ParsedFile:
    """Read ``path`` and parse its imports."""

    return parse_imports(read_source(path), path)


class _ImportCollector:
    """Collect import parts and export names from a parsed tree."""

    def __init__(self, *, path: str, source_bytes: bytes, root: Any) -> None:
        self._path = path
        self._source_bytes = source_bytes
        self._root = root
        self.direct_exports: set[str] = set()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def collect_parts(self) -> tuple[Part, ...]:
        nodes = sorted(
            self._gather_statements(self._root),
            key=lambda node: node.start_byte,
        )

        parts: list[Part] = []
        current = 0
        for node in nodes:
            if node.start_byte > current:
                parts.append(Text(self._slice(current, node.start_byte)))
            parsed = self._parse_statement(node)
            if parsed is None:
                parts.append(Text(self._slice(node.start_byte, node.end_byte)))
            else:
                parts.append(parsed)
            current = node.end_byte

        if current < len(self._source_bytes):
            parts.append(Text(self._slice(current, len(self._source_bytes))))
        return tuple(parts)

    def collect_dynamic_imports(self) -> tuple[str, ...]:
        paths: dict[str, None] = {}
        for node in self._iterate_nodes(self._root):
            if node.type != "call_expression" or node.child_count < 2:
                continue
            if node.children[0].type != "import":
                continue
            arguments = node.child_by_field_name("arguments") or node.children[1]
            values = [
                child
                for child in arguments.named_children
                if child.type != "comment"
            ]
            # Anything but a single string literal cannot be resolved.
            if len(values) == 1 and values[0].type == "string":
                paths.setdefault(self._string_value(values[0]), None)
        return tuple(paths)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def _gather_statements(self, node: Any) -> Iterator[Any]:
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type in _STATEMENT_NODES:
                yield current
                continue
            stack.extend(reversed(current.children))

    def _iterate_nodes(self, node: Any) -> Iterator[Any]:
        stack = [node]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------
    def _parse_statement(self, node: Any) -> Import | None:
        kind: ImportKind
        if node.type == "import_statement":
            kind = "import"
        elif node.type == "export_statement":
            kind = "export"
        else:
            return None

        if kind == "import" and not self._has_child(node, "import_clause"):
            # `import "x";` only runs the module for its side effects.
            return None

        source = self._source_node(node)
        path = self._string_value(source) if source is not None else None
        gather_exports = kind == "export" and path is None
        statement_is_type = self._has_child(node, "type")

        clause = (
            self._first_child_of_type(node, "import_clause")
            or self._first_child_of_type(node, "export_clause")
            or node
        )

        names: list[ImportName] = []
        for child in clause.children:
            match child.type:
                case "identifier":
                    names.append(
                        ImportName(
                            name=DEFAULT,
                            alias=self._text(child),
                            is_type=statement_is_type,
                        )
                    )
                case "named_imports":
                    for spec in child.named_children:
                        if spec.type == "comment":
                            continue
                        if spec.type != "import_specifier":
                            raise ImportParseError(
                                f"Unexpected import specifier "
                                f"{self._text(spec)!r} in {self._path}"
                            )
                        names.append(
                            self._specifier(
                                spec, statement_is_type, gather_exports
                            )
                        )
                case "export_specifier":
                    names.append(
                        self._specifier(child, statement_is_type, gather_exports)
                    )
                case "*" | "namespace_import" | "namespace_export":
                    alias_node = (
                        child.named_children[-1] if child.named_children else None
                    )
                    names.append(
                        ImportName(
                            name=WILDCARD,
                            alias=(
                                self._text(alias_node)
                                if alias_node is not None
                                else None
                            ),
                            is_type=statement_is_type,
                        )
                    )
                case "comment":
                    continue
                case _:
                    if gather_exports:
                        self._gather_declaration(child)

        if path is None or not names:
            return None
        # Only `import Foo, * as NS` may pair a wildcard with another name.
        if (
            len(names) > 1
            and any(entry.is_wildcard for entry in names)
            and not (
                kind == "import" and len(names) == 2 and names[0].is_default
            )
        ):
            raise ImportParseError(
                f"Unexpected wildcard combination {self._text(node)!r} "
                f"in {self._path}"
            )

        text = self._text(node)
        return Import(
            kind=kind,
            path=path,
            names=tuple(names),
            raw=RawImport(text=text, kind=kind, path=path, names=tuple(names)),
        )

    def _specifier(
        self,
        spec: Any,
        statement_is_type: bool,
        gather_exports: bool,
    ) -> ImportName:
        children = [
            child for child in spec.children if child.type != "comment"
        ]
        index = 0
        is_type = bool(children) and children[0].type == "type"
        if is_type:
            index += 1
        if index >= len(children):
            raise ImportParseError(
                f"Specifier without a name {self._text(spec)!r} in {self._path}"
            )
        name = self._text(children[index])
        index += 1
        alias: str | None = None
        if index < len(children) and children[index].type == "as":
            if index + 1 >= len(children):
                raise ImportParseError(
                    f"Specifier without an alias {self._text(spec)!r} "
                    f"in {self._path}"
                )
            alias = self._text(children[index + 1])
            index += 2
        if index != len(children):
            raise ImportParseError(
                f"Unexpected specifier shape {self._text(spec)!r} in {self._path}"
            )

        if gather_exports:
            self.direct_exports.add(alias or name)

        return ImportName(
            name=name,
            alias=None if alias == name else alias,
            is_type=is_type or statement_is_type,
        )

    # ------------------------------------------------------------------
    # Direct exports
    # ------------------------------------------------------------------
    def _gather_declaration(self, node: Any) -> None:
        if node.type in _NAMED_DECLARATIONS:
            name = node.child_by_field_name("name")
            if name is None:
                raise ImportParseError(
                    f"Exported {node.type} without a name in {self._path}"
                )
            self.direct_exports.add(self._text(name))
        elif node.type in _VARIABLE_DECLARATIONS:
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name = declarator.child_by_field_name("name")
                if name is None:
                    raise ImportParseError(
                        f"Exported variable without a name in {self._path}"
                    )
                self._gather_pattern(name)
        elif node.type == "ambient_declaration":
            for child in node.named_children:
                self._gather_declaration(child)

    def _gather_pattern(self, pattern: Any) -> None:
        match pattern.type:
            case "identifier" | "shorthand_property_identifier_pattern":
                self.direct_exports.add(self._text(pattern))
            case "object_pattern" | "array_pattern":
                for child in pattern.named_children:
                    if child.type != "comment":
                        self._gather_pattern(child)
            case "pair_pattern":
                self._gather_pattern(self._field(pattern, "value"))
            case "object_assignment_pattern" | "assignment_pattern":
                self._gather_pattern(self._field(pattern, "left"))
            case "rest_pattern":
                self._gather_pattern(pattern.named_children[0])
            case _:
                raise ImportParseError(
                    f"Unexpected export {self._text(pattern)!r} in {self._path}"
                )

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------
    def _source_node(self, node: Any) -> Any | None:
        source = node.child_by_field_name("source")
        if source is not None:
            return source
        previous = None
        for child in node.children:
            if child.type == "string" and previous is not None:
                if previous.type == "from":
                    return child
            previous = child
        return None

    def _string_value(self, node: Any) -> str:
        # Drop the surrounding quotes, keep escapes exactly as written.
        return self._slice(node.start_byte + 1, node.end_byte - 1)

    def _field(self, node: Any, name: str) -> Any:
        child = node.child_by_field_name(name)
        if child is None:
            raise ImportParseError(
                f"Missing {name} in {self._text(node)!r} in {self._path}"
            )
        return child

    def _has_child(self, node: Any, type_name: str) -> bool:
        return self._first_child_of_type(node, type_name) is not None

    @staticmethod
    def _first_child_of_type(node: Any, type_name: str) -> Any | None:
        for child in node.children:
            if child.type == type_name:
                return child
        return None

    def _text(self, node: Any) -> str:
        return self._slice(node.start_byte, node.end_byte)

    def _slice(self, start: int, end: int) -> str:
        return self._source_bytes[start:end].decode("utf-8")
