"""Top-level package for :mod:`tsimports`.

The package exposes version metadata so downstream tooling can surface the
installed build.

Example:
    >>> from tsimports import __version__
    >>> __version__.split(".")[0]
    '0'
"""

from importlib import metadata

try:
    __version__ = metadata.version("tsimports")
except metadata.PackageNotFoundError:  # pragma: no cover - running from a checkout
    __version__ = "0.0.0"

__all__ = ["__version__"]
