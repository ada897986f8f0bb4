"""Parsing, resolution and rewrite passes for :mod:`tsimports`."""
