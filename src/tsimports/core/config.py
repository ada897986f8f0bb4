"""Configuration models and loaders for :mod:`tsimports`."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from pathlib import Path
from typing import Any, Mapping

import tomllib
import tomlkit
from pydantic import BaseModel, Field, ValidationError, field_validator

from tsimports.errors import ConfigError
from tsimports.resources import get_resource

DEFAULTS_RESOURCE_NAME = "tsimports.defaults.toml"
USER_CONFIG_FILENAME = "tsimports.toml"


class LayoutSettings(BaseModel):
    """Where packages and their sources live inside a repository."""

    packages_dir: str = Field(
        default="packages",
        description="Directory (relative to the repo root) holding packages.",
    )
    package_order_file: str = Field(
        default="packages.txt",
        description=(
            "Topologically ordered package list, one name per line, relative "
            "to the repo root."
        ),
    )
    source_dir: str = Field(
        default="src",
        description="Source directory inside each package.",
    )
    ignore_patterns: list[str] = Field(
        default_factory=lambda: ["node_modules/", "dist/"],
        description="gitwildmatch patterns skipped while walking sources.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }


class ResolverSettings(BaseModel):
    """Settings steering how import chains are followed."""

    package_scope: str = Field(
        default="@glide",
        description="npm scope whose packages live in the packages directory.",
    )
    leaf_packages: list[str] = Field(
        default_factory=list,
        description=(
            "External package specifiers treated as already-resolved origins."
        ),
    )
    dont_rewrite: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Import paths that must not be rewritten to these targets.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("package_scope")
    @classmethod
    def _validate_scope(cls, value: str) -> str:
        if not value.startswith("@") or "/" in value:
            raise ValueError(
                f"Package scope must look like '@scope', got {value!r}"
            )
        return value

    def allows_rewrite(self, source: str, target: str) -> bool:
        """Return whether ``source`` may be rewritten to ``target``."""

        return target not in self.dont_rewrite.get(source, ())


class UnusedExportSettings(BaseModel):
    """Allow-lists and file classification for the unused-export scan."""

    ignore_suffixes: list[str] = Field(
        default_factory=lambda: ["Routine"],
        description="Exported names ending with these suffixes are kept.",
    )
    ignore_names: list[str] = Field(
        default_factory=list,
        description="Exported names that are never stripped.",
    )
    test_patterns: list[str] = Field(
        default_factory=lambda: [
            "*.test.ts",
            "*.test.tsx",
            "*.spec.ts",
            "*.spec.tsx",
            "__tests__/",
        ],
        description="Files whose imports only count as test usage.",
    )
    story_patterns: list[str] = Field(
        default_factory=lambda: [
            "*-stories.tsx",
            "*.stories.tsx",
            "*.stories-skip.tsx",
        ],
        description=(
            "Storybook files; their imports count as test usage and their "
            "exports are never stripped."
        ),
    )
    lazy_patterns: list[str] = Field(
        default_factory=list,
        description="Lazily loaded files whose exports are never stripped.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    def is_ignored_name(self, name: str) -> bool:
        return name in self.ignore_names or any(
            name.endswith(suffix) for suffix in self.ignore_suffixes
        )


class FormatterSettings(BaseModel):
    """External formatter invocation."""

    enabled: bool = Field(
        default=True,
        description="Whether rewritten files are passed to the formatter.",
    )
    command: list[str] = Field(
        default_factory=lambda: ["npx", "prettier", "--write"],
        description="Command run in the file's directory with its basename.",
    )
    max_concurrency: int = Field(
        default=10,
        ge=1,
        description="Worker limit when formatting a batch of files.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("command")
    @classmethod
    def _validate_command(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("Formatter command cannot be empty.")
        return value


class AppConfig(BaseModel):
    """Root configuration for the :mod:`tsimports` application."""

    log_level: str = Field(
        default="INFO",
        description="Default logging level for the application runtime.",
    )
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    unused: UnusedExportSettings = Field(default_factory=UnusedExportSettings)
    formatter: FormatterSettings = Field(default_factory=FormatterSettings)

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def read_packaged_defaults_text() -> str:
    """Return the raw packaged defaults TOML content."""

    resource = get_resource(DEFAULTS_RESOURCE_NAME)
    return resource.read_text(encoding="utf-8")


def load_packaged_defaults() -> dict[str, Any]:
    """Load the packaged defaults as a plain dictionary.

    Example:
        >>> defaults = load_packaged_defaults()
        >>> defaults["log_level"]
        'INFO'
    """

    return tomllib.loads(read_packaged_defaults_text())


def read_user_config(path: Path) -> dict[str, Any]:
    """Parse the user TOML file at ``path``.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc


def _deep_merge(
    base: Mapping[str, Any],
    overlay: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge ``overlay`` into ``base`` returning a new dict."""

    merged: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if (
            key in merged
            and isinstance(merged[key], MappingABC)
            and isinstance(value, MappingABC)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    *,
    defaults: Mapping[str, Any] | None = None,
    user_config: Mapping[str, Any] | None = None,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Load configuration according to the precedence stack.

    Args:
        defaults: Packaged defaults; read from the package when omitted.
        user_config: Parsed user ``tsimports.toml`` content.
        env_config: Settings derived from environment variables.
        cli_overrides: Settings supplied via CLI flags.

    Returns:
        A validated :class:`AppConfig` instance.

    Raises:
        ConfigError: If the merged settings fail validation.
    """

    stack = dict(defaults if defaults is not None else load_packaged_defaults())
    for layer in (user_config, env_config, cli_overrides):
        if layer:
            stack = _deep_merge(stack, layer)

    try:
        return AppConfig(**stack)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def render_user_config(config: AppConfig) -> str:
    """Render ``config`` as a ``tsimports.toml`` document."""

    document = tomlkit.document()
    document.add(tomlkit.comment("tsimports configuration"))
    document.add(
        tomlkit.comment(
            "Precedence: CLI flags > env vars > tsimports.toml > defaults"
        )
    )
    document.add(tomlkit.nl())
    document["log_level"] = config.log_level

    for section in ("layout", "resolver", "unused", "formatter"):
        table = tomlkit.table()
        payload = getattr(config, section).model_dump()
        for key, value in payload.items():
            if isinstance(value, dict):
                nested = tomlkit.table()
                for nested_key, nested_value in sorted(value.items()):
                    nested[nested_key] = nested_value
                table.add(key, nested)
            else:
                table[key] = value
        document[section] = table

    return tomlkit.dumps(document)


__all__ = [
    "AppConfig",
    "DEFAULTS_RESOURCE_NAME",
    "FormatterSettings",
    "LayoutSettings",
    "ResolverSettings",
    "USER_CONFIG_FILENAME",
    "UnusedExportSettings",
    "load_config",
    "load_packaged_defaults",
    "read_packaged_defaults_text",
    "read_user_config",
    "render_user_config",
]
