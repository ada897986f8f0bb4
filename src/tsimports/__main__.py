"""Console-script entry point for :mod:`tsimports`."""

from __future__ import annotations

from tsimports.cli import create_app


def main() -> None:
    """Execute the CLI application."""

    app = create_app()
    app(prog_name="tsimports")


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()


__all__ = ["main"]
