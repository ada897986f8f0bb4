"""Tests for :mod:`tsimports.core.config`."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from tsimports.core.config import (
    AppConfig,
    ResolverSettings,
    UnusedExportSettings,
    load_config,
    load_packaged_defaults,
    read_user_config,
    render_user_config,
)
from tsimports.errors import ConfigError


def test_packaged_defaults_match_model_defaults() -> None:
    defaults = load_packaged_defaults()

    config = load_config(defaults=defaults)

    assert config.log_level == "INFO"
    assert config.layout.packages_dir == "packages"
    assert config.resolver.package_scope == "@glide"
    assert config.resolver.dont_rewrite == {
        "@glide/plugins": ["@glide/plugins-codecs"]
    }
    assert config.formatter.command == ["npx", "prettier", "--write"]


def test_precedence_stack() -> None:
    config = load_config(
        user_config={"log_level": "debug", "layout": {"source_dir": "lib"}},
        env_config={"log_level": "warning"},
        cli_overrides={"log_level": "error"},
    )

    assert config.log_level == "ERROR"
    assert config.layout.source_dir == "lib"
    assert config.layout.packages_dir == "packages"


def test_invalid_settings_raise_config_error() -> None:
    with pytest.raises(ConfigError):
        load_config(user_config={"resolver": {"package_scope": "glide"}})
    with pytest.raises(ConfigError):
        load_config(user_config={"formatter": {"command": []}})


def test_read_user_config_reports_bad_toml(tmp_path: Path) -> None:
    path = tmp_path / "tsimports.toml"
    path.write_text("log_level = [", encoding="utf-8")

    with pytest.raises(ConfigError):
        read_user_config(path)


def test_render_user_config_round_trips() -> None:
    config = load_config(
        user_config={"resolver": {"leaf_packages": ["react"]}},
    )

    rendered = render_user_config(config)
    reloaded = load_config(user_config=tomllib.loads(rendered))

    assert rendered.startswith("# tsimports configuration")
    assert reloaded == config


def test_allows_rewrite() -> None:
    settings = ResolverSettings(dont_rewrite={"@glide/a": ["@glide/b"]})

    assert not settings.allows_rewrite("@glide/a", "@glide/b")
    assert settings.allows_rewrite("@glide/a", "@glide/c")
    assert settings.allows_rewrite("./x", "@glide/b")


def test_is_ignored_name() -> None:
    settings = UnusedExportSettings(ignore_names=["keepMe"])

    assert settings.is_ignored_name("keepMe")
    assert settings.is_ignored_name("loadRoutine")
    assert not settings.is_ignored_name("helper")


def test_app_config_uppercases_level() -> None:
    assert AppConfig(log_level="debug").log_level == "DEBUG"
