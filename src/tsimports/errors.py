"""Domain-specific exceptions for :mod:`tsimports`.

Every error raised on purpose by the toolkit derives from
:class:`TsImportsError` so the CLI can report it and exit non-zero. Errors
flagged as fatal stop the whole run: a partially guessed rewrite of import
syntax is worse than stopping for a human to look at the offending file.
"""

from __future__ import annotations


class TsImportsError(RuntimeError):
    """Base error for import rewriting failures."""


class ConfigError(TsImportsError):
    """Raised when a configuration file cannot be read or validated."""


class ManifestError(TsImportsError):
    """Raised when a ``package.json`` manifest is missing or malformed."""


class ImportParseError(TsImportsError):
    """Raised when an import/export statement has an unexpected shape."""


class UnresolvedImportError(TsImportsError):
    """Raised when a relative import does not point at any known file."""


class ResolutionCycleError(TsImportsError):
    """Raised when a re-export chain revisits a file for the same name."""


class FormatterError(TsImportsError):
    """Raised when the external code formatter fails."""


__all__ = [
    "TsImportsError",
    "ConfigError",
    "ManifestError",
    "ImportParseError",
    "UnresolvedImportError",
    "ResolutionCycleError",
    "FormatterError",
]
