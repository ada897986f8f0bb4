"""Shared state for ``tsimports`` commands."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Iterator, Sequence

import typer

from tsimports.core.config import (
    USER_CONFIG_FILENAME,
    AppConfig,
    load_config,
    read_user_config,
)
from tsimports.core.logging import Logger, configure_logging, get_logger
from tsimports.core.paths import RepoLayout, resolve_repo
from tsimports.errors import ConfigError, TsImportsError

__all__ = [
    "CLIContext",
    "build_context",
    "reporting_errors",
    "require_context",
]

ENV_LOG_LEVEL = "TSIMPORTS_LOG_LEVEL"
ENV_CONFIG = "TSIMPORTS_CONFIG"


@dataclass(slots=True)
class CLIContext:
    """Settings and logger shared by every subcommand."""

    repo: Path
    config: AppConfig
    config_path: Path | None
    logger: Logger

    def layout(self) -> RepoLayout:
        """Resolve the package layout of :attr:`repo`.

        Raises:
            typer.Exit: If the repository or its package order file is
                missing.
        """

        try:
            return resolve_repo(self.repo, self.config.layout)
        except (FileNotFoundError, NotADirectoryError) as exc:
            typer.secho(f"Repository error: {exc}", fg=typer.colors.RED)
            raise typer.Exit(code=1) from exc

    def source_paths(self, paths: Sequence[Path] | None) -> list[Path]:
        """Return ``paths``, or every package source root when empty."""

        if paths:
            return [Path(path) for path in paths]
        return [path for path in self.layout().source_paths if path.is_dir()]


def _user_config_path(repo: Path, override: Path | None) -> Path | None:
    if override is not None:
        return override
    env_config = os.environ.get(ENV_CONFIG)
    if env_config:
        return Path(env_config).expanduser()
    candidate = repo / USER_CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def build_context(
    *,
    repo: Path,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
) -> CLIContext:
    """Load configuration, configure logging and return the context.

    Raises:
        TsImportsError: If the configuration cannot be loaded.
    """

    repo = repo.expanduser().resolve()
    user_config_path = _user_config_path(repo, config_path)
    user_config = (
        read_user_config(user_config_path)
        if user_config_path is not None
        else None
    )
    env_level = os.environ.get(ENV_LOG_LEVEL)
    config = load_config(
        user_config=user_config,
        env_config={"log_level": env_level} if env_level else None,
        cli_overrides={"log_level": log_level} if log_level else None,
    )

    try:
        configure_logging(level=config.log_level, log_file=log_file)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    return CLIContext(
        repo=repo,
        config=config,
        config_path=user_config_path,
        logger=get_logger("tsimports.cli", repo=str(repo)),
    )


def require_context(ctx: typer.Context) -> CLIContext:
    context = getattr(ctx, "obj", None)
    if not isinstance(context, CLIContext):
        typer.secho(
            "Internal error: CLI context not initialized.",
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)
    return context


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Turn :class:`TsImportsError` into a red message and exit code 1."""

    try:
        yield
    except TsImportsError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
