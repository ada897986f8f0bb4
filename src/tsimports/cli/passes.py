"""Commands running the rewrite passes."""

from __future__ import annotations

from pathlib import Path

import typer

from tsimports.modules.resolver import ImportResolver
from tsimports.modules.rewrite import (
    Formatter,
    barrel_export,
    count_symbol_uses,
    dedup_imports,
    find_unused_exports,
    format_symbol_counts,
    remove_re_exports,
    resolve_imports,
    rewrite_imports,
    run_service,
    verbatim_imports,
)

from .context import CLIContext, reporting_errors, require_context

__all__ = ["register_pass_commands"]

_PATHS_HELP = (
    "Files or directories to process (defaults to every package source root)."
)


def _formatter(context: CLIContext, enabled: bool) -> Formatter | None:
    return Formatter(context.config.formatter) if enabled else None


def _report(label: str, paths: list[Path]) -> None:
    typer.secho(f"{label}: {len(paths)} file(s)", fg=typer.colors.GREEN)
    for path in paths:
        typer.echo(f"  {path}")


def register_pass_commands(app: typer.Typer) -> None:
    """Attach the pass commands to ``app``."""

    @app.command("dedup", help="Merge repeated imports of the same module.")
    def dedup_command(
        ctx: typer.Context,
        paths: list[Path] = typer.Argument(None, help=_PATHS_HELP),
        run_formatter: bool = typer.Option(
            False,
            "--format/--no-format",
            help="Run the configured formatter on rewritten files.",
        ),
    ) -> None:
        context = require_context(ctx)
        with reporting_errors():
            written = dedup_imports(
                context.source_paths(paths),
                ignore_patterns=context.config.layout.ignore_patterns,
                formatter=_formatter(context, run_formatter),
            )
        _report("Deduplicated", written)

    @app.command(
        "resolve",
        help="Import every name from the module that defines it.",
    )
    def resolve_command(
        ctx: typer.Context,
        paths: list[Path] = typer.Argument(None, help=_PATHS_HELP),
        run_formatter: bool = typer.Option(
            False,
            "--format/--no-format",
            help="Run the configured formatter on rewritten files.",
        ),
    ) -> None:
        context = require_context(ctx)
        layout = context.layout()
        resolver = ImportResolver(
            layout.packages_dir,
            context.config.resolver,
            source_dir=layout.source_dir,
        )
        with reporting_errors():
            written = resolve_imports(
                resolver,
                context.source_paths(paths),
                ignore_patterns=context.config.layout.ignore_patterns,
                formatter=_formatter(context, run_formatter),
            )
        _report("Resolved", written)

    @app.command(
        "barrel",
        help="Import a package's own modules through its barrel file.",
    )
    def barrel_command(
        ctx: typer.Context,
        package_dir: Path = typer.Argument(
            ...,
            exists=True,
            file_okay=False,
            help="Package directory containing package.json.",
        ),
        paths: list[Path] = typer.Argument(
            None,
            help="Directories to scan (defaults to the package source root).",
        ),
        run_formatter: bool = typer.Option(
            False,
            "--format/--no-format",
            help="Run the configured formatter on rewritten files.",
        ),
    ) -> None:
        context = require_context(ctx)
        source_dir = context.config.layout.source_dir
        roots = list(paths) if paths else [package_dir / source_dir]
        with reporting_errors():
            result = barrel_export(
                package_dir,
                roots,
                source_dir=source_dir,
                ignore_patterns=context.config.layout.ignore_patterns,
                formatter=_formatter(context, run_formatter),
            )
        _report("Rewrote imports", result.rewritten)
        typer.echo(
            f"Added {len(result.added_lines)} export line(s) to "
            f"{result.barrel_path}"
        )
        if result.unsupported:
            typer.secho(
                f"Skipped {result.unsupported} unsupported import(s)",
                fg=typer.colors.YELLOW,
            )

    @app.command(
        "remove-re-exports",
        help="Delete `export ... from` statements outside index files.",
    )
    def remove_re_exports_command(
        ctx: typer.Context,
        paths: list[Path] = typer.Argument(None, help=_PATHS_HELP),
    ) -> None:
        context = require_context(ctx)
        with reporting_errors():
            touched = remove_re_exports(
                context.source_paths(paths),
                ignore_patterns=context.config.layout.ignore_patterns,
            )
        _report("Removed re-exports", touched)

    @app.command(
        "rewrite",
        help="Move one named import from one module to another.",
    )
    def rewrite_command(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Imported name to move."),
        from_path: str = typer.Argument(..., metavar="FROM"),
        to_path: str = typer.Argument(..., metavar="TO"),
        paths: list[Path] = typer.Argument(None, help=_PATHS_HELP),
    ) -> None:
        context = require_context(ctx)
        with reporting_errors():
            written = rewrite_imports(
                name,
                from_path,
                to_path,
                context.source_paths(paths),
                ignore_patterns=context.config.layout.ignore_patterns,
            )
        _report("Rewrote", written)

    @app.command(
        "unused-exports",
        help="Remove `export` from declarations nothing imports.",
    )
    def unused_exports_command(
        ctx: typer.Context,
        paths: list[Path] = typer.Argument(None, help=_PATHS_HELP),
        dry_run: bool = typer.Option(
            False,
            "--dry-run",
            help="Report unused exports without touching files.",
        ),
    ) -> None:
        context = require_context(ctx)
        with reporting_errors():
            report = find_unused_exports(
                context.repo,
                context.source_paths(paths),
                context.config.unused,
                ignore_patterns=context.config.layout.ignore_patterns,
                dry_run=dry_run,
            )
        for item in report.unused:
            marker = " (tests only)" if item.test_only else ""
            typer.echo(f"{item.name}{marker}")
            for path in item.files:
                typer.echo(f"  {path}")
        label = "Would unexport in" if dry_run else "Unexported in"
        _report(label, report.stripped_files)

    @app.command(
        "verbatim",
        help="Append `.js` to relative module specifiers.",
    )
    def verbatim_command(
        ctx: typer.Context,
        paths: list[Path] = typer.Argument(None, help=_PATHS_HELP),
    ) -> None:
        context = require_context(ctx)
        with reporting_errors():
            written = verbatim_imports(
                context.source_paths(paths),
                ignore_patterns=context.config.layout.ignore_patterns,
            )
        _report("Rewrote", written)

    @app.command(
        "count-symbols",
        help="Print how often each exported symbol is imported (CSV).",
    )
    def count_symbols_command(
        ctx: typer.Context,
        paths: list[Path] = typer.Argument(None, help=_PATHS_HELP),
    ) -> None:
        context = require_context(ctx)
        with reporting_errors():
            rows = count_symbol_uses(
                context.repo,
                context.source_paths(paths),
                ignore_patterns=context.config.layout.ignore_patterns,
            )
        typer.echo(format_symbol_counts(rows))

    @app.command(
        "service",
        help="Resolve imports, drop re-exports, dedup and format the repo.",
    )
    def service_command(
        ctx: typer.Context,
        run_formatter: bool = typer.Option(
            True,
            "--format/--no-format",
            help="Run the configured formatter on modified files.",
        ),
    ) -> None:
        context = require_context(ctx)
        layout = context.layout()
        enabled = run_formatter and context.config.formatter.enabled
        with reporting_errors():
            result = run_service(
                layout,
                context.config,
                formatter=_formatter(context, enabled),
            )
        context.logger.info(
            "service-finished",
            modified=len(result.modified),
            formatted=len(result.formatted),
        )
        if not result.modified:
            typer.echo("No TypeScript file was modified.")
            return
        _report("Modified", result.modified)
        if result.formatted:
            typer.echo(f"Formatted {len(result.formatted)} file(s)")
