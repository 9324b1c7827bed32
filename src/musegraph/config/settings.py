"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``MUSEGRAPH_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``musegraph.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from musegraph.config.discovery import find_config
from musegraph.config.models import BuildConfig, DataConfig, McpConfig, QueryConfig


class ConfigError(ValueError):
    """The config file exists but cannot be parsed."""


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``musegraph.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class MuseSettings(BaseSettings):
    """Unified, frozen settings for the CLI and the MCP server.

    Attributes:
        project_root: Directory the data paths are resolved against
            (parent of ``musegraph.toml``, or CWD if none was found).
        config_path: The TOML file in effect, if any.
        data_dir: Explicit ``--data-dir`` override for ``[data] dir``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MUSEGRAPH_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    data_dir: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    data: DataConfig = Field(default_factory=DataConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> MuseSettings:
        """Construct settings from a CLI or server invocation.

        Discovers ``musegraph.toml`` via walk-up from *project_root* (or
        uses the explicit *config_path*), resolves the project root from
        the config file's directory, and applies *cli_flags* last.
        ``None`` flag values are dropped so they never mask lower layers.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        flags = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.toml_path = toml_path
        try:
            return cls(project_root=resolved_root, config_path=toml_path, **flags)
        finally:
            _tls.toml_path = None
