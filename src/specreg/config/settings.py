"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SPECREG_*`` prefix
  3. TOML file    — ``specreg.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the config discovery and search-path resolution from
:mod:`specreg.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from specreg.config.discovery import config_root, locate_config, resolve_search_paths
from specreg.config.models import LoaderConfig, PathsConfig, PluginsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``specreg.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class SpecregSettings(BaseSettings):
    """Unified settings for the specreg CLI and workspace.

    Attributes:
        root: Directory relative search paths are resolved against (parent
            of ``specreg.toml``, or CWD if no config found).
        config_path: The config file in use, if any.
        extra_search_paths: ``-I`` paths from the command line, searched
            before the configured ones.
        dummy_types: ``--dummy-types`` flag; forces dummy-type creation on.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SPECREG_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved paths (derived from the config location, not read from TOML) ---
    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    trace_loads: bool = False
    dummy_types: bool = False
    extra_search_paths: list[Path] = Field(default_factory=list)

    # --- TOML sections ---
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @property
    def effective_dummy_types(self) -> bool:
        """Whether unknown types resolve to null placeholders."""
        return self.dummy_types or self.loader.define_dummy_types

    def search_paths(self) -> list[Path]:
        """Command-line paths, then configured ones, then SPECREG_PATH."""
        return resolve_search_paths(self.root, self.extra_search_paths, self.paths.search)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> SpecregSettings:
        """Construct settings from CLI invocation.

        Discovers ``specreg.toml`` via walk-up (or explicit *config_path*),
        resolves *root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.
        """
        toml_path = locate_config(config_path, root)
        resolved_root = root if root is not None else config_root(toml_path)

        _tls.toml_path = toml_path
        try:
            return cls(
                root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
