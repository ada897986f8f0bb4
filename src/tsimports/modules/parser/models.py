"""Part model for import/export statements.

A parsed file is a sequence of :data:`Part` values: :class:`Text` spans holding
bytes that are never reinterpreted, and :class:`Import` records for the
statements the passes rewrite. Records are frozen; passes build new sequences
instead of mutating parts in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Literal, Sequence, Union

__all__ = [
    "DEFAULT",
    "WILDCARD",
    "Import",
    "ImportKind",
    "ImportName",
    "NameMarker",
    "ParsedFile",
    "Part",
    "Parts",
    "RawImport",
    "Text",
    "is_text",
]

ImportKind = Literal["import", "export"]


class NameMarker(Enum):
    """Entries that do not name a single exported symbol."""

    WILDCARD = "*"
    DEFAULT = "default"

    def __repr__(self) -> str:
        return self.name


WILDCARD = NameMarker.WILDCARD
DEFAULT = NameMarker.DEFAULT


@dataclass(frozen=True, slots=True)
class ImportName:
    """One binding inside an import/export clause.

    ``name`` is the imported symbol, :data:`WILDCARD` for ``* [as X]`` or
    :data:`DEFAULT` for a bare identifier such as ``import Foo from "x"``, in
    which case ``alias`` holds the local name.
    """

    name: str | NameMarker
    alias: str | None = None
    is_type: bool = False

    @property
    def is_wildcard(self) -> bool:
        return self.name is WILDCARD

    @property
    def is_default(self) -> bool:
        return self.name is DEFAULT

    @property
    def is_named(self) -> bool:
        return isinstance(self.name, str)

    @property
    def local_name(self) -> str | None:
        """The binding name visible in the importing (or exporting) file."""

        if self.alias is not None:
            return self.alias
        if isinstance(self.name, str):
            return self.name
        return None


@dataclass(frozen=True, slots=True)
class RawImport:
    """Original statement text and the record it was parsed into."""

    text: str
    kind: ImportKind
    path: str
    names: tuple[ImportName, ...]


@dataclass(frozen=True, slots=True)
class Import:
    """A structured ``import``/``export ... from`` statement."""

    kind: ImportKind
    path: str
    names: tuple[ImportName, ...]
    raw: RawImport | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.names, tuple):
            object.__setattr__(self, "names", tuple(self.names))

    @property
    def has_wildcard(self) -> bool:
        """Whether any entry is a ``*`` entry.

        Unlike :attr:`wildcard` this also holds for ``import Foo, * as NS``.
        """

        return any(entry.is_wildcard for entry in self.names)

    @property
    def wildcard(self) -> ImportName | None:
        """The wildcard entry when this is a ``*`` statement.

        Raises:
            ValueError: If the wildcard shares the statement with other
                names; use :attr:`has_wildcard` where that is legal.
        """

        for entry in self.names:
            if entry.is_wildcard:
                if len(self.names) != 1:
                    raise ValueError(
                        f"Wildcard import from {self.path!r} has other names"
                    )
                return entry
        return None

    @property
    def has_full_imports(self) -> bool:
        """Whether any entry is a default or wildcard entry."""

        return any(not entry.is_named for entry in self.names)

    @property
    def is_type(self) -> bool:
        """Whether every entry is type-only.

        Raises:
            ValueError: If the statement mixes type and value entries.
        """

        flags = {entry.is_type for entry in self.names}
        if len(flags) > 1:
            raise ValueError(
                f"Statement importing from {self.path!r} mixes type and value "
                "names"
            )
        return flags == {True}

    @property
    def original_text(self) -> str | None:
        """The source text, as long as the record still matches it."""

        raw = self.raw
        if raw is None:
            return None
        if (raw.kind, raw.path, raw.names) != (self.kind, self.path, self.names):
            return None
        return raw.text

    def with_names(self, names: Sequence[ImportName]) -> "Import":
        return replace(self, names=tuple(names))

    def with_path(self, path: str) -> "Import":
        return replace(self, path=path)


@dataclass(frozen=True, slots=True)
class Text:
    """Verbatim source text between (or instead of) import records."""

    text: str


Part = Union[Text, Import]
Parts = tuple[Part, ...]


def is_text(part: Part) -> bool:
    return isinstance(part, Text)


@dataclass(frozen=True, slots=True)
class ParsedFile:
    """Everything a single parse yields for one file."""

    parts: Parts
    direct_exports: frozenset[str] = frozenset()
    dynamic_import_paths: tuple[str, ...] = ()
    content: str = ""

    @property
    def imports(self) -> tuple[Import, ...]:
        return tuple(part for part in self.parts if isinstance(part, Import))
