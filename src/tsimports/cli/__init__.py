"""Command-line interface for :mod:`tsimports`.

Example:
    >>> import typer
    >>> from tsimports.cli import create_app
    >>> app = create_app()
    >>> isinstance(app, typer.Typer)
    True
"""

from __future__ import annotations

from pathlib import Path

import typer

from tsimports.core.config import DEFAULTS_RESOURCE_NAME, render_user_config
from tsimports.errors import TsImportsError

from .context import build_context, require_context
from .passes import register_pass_commands

_app_help = (
    "Rewrite import and export statements across a multi-package "
    "TypeScript repository."
    "\n\n"
    "Run `tsimports service` for the full maintenance pipeline."
)


def create_app() -> "typer.Typer":
    """Return the Typer application powering the ``tsimports`` CLI."""

    app = typer.Typer(
        help=_app_help,
        no_args_is_help=True,
        rich_markup_mode="rich",
        invoke_without_command=False,
        cls=typer.core.TyperGroup,
    )

    @app.callback()
    def main_callback(
        ctx: typer.Context,
        repo: Path = typer.Option(
            Path("."),
            "--repo",
            "-r",
            help="Repository root holding the package order file.",
        ),
        config_path: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help=(
                "Configuration file (defaults to TSIMPORTS_CONFIG or "
                "<repo>/tsimports.toml)."
            ),
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            "-l",
            help="Override the logging level (DEBUG/INFO/WARNING/ERROR).",
        ),
        log_file: Path | None = typer.Option(
            None,
            "--log-file",
            help="Also write JSON log lines to this file.",
        ),
    ) -> None:
        try:
            ctx.obj = build_context(
                repo=repo,
                config_path=config_path,
                log_level=log_level,
                log_file=log_file,
            )
        except TsImportsError as exc:
            typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED)
            raise typer.Exit(code=1) from exc

    register_pass_commands(app)

    @app.command(
        "config",
        help="Print the effective configuration as TOML.",
    )
    def config_command(ctx: typer.Context) -> None:
        context = require_context(ctx)
        source = (
            str(context.config_path)
            if context.config_path is not None
            else f"packaged defaults ({DEFAULTS_RESOURCE_NAME})"
        )
        typer.secho(f"# source: {source}", fg=typer.colors.CYAN)
        typer.echo(render_user_config(context.config), nl=False)

    return app


__all__ = ["create_app"]
