"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SUBSPACECTL_*`` prefix
  3. TOML file    — ``subspacectl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from subspacectl.config.discovery import find_config
from subspacectl.config.models import InstallerConfig, PathsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``subspacectl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class SubspaceSettings(BaseSettings):
    """Unified settings for the subspacectl CLI.

    Attributes:
        monorepo_root: Directory all configured paths are relative to
            (parent of ``subspacectl.toml``, or CWD if no config found).
        config_path: The TOML file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SUBSPACECTL_",
        "env_nested_delimiter": "__",
    }

    monorepo_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    paths: PathsConfig = Field(default_factory=PathsConfig)
    installer: InstallerConfig = Field(default_factory=InstallerConfig)

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

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        monorepo_root: Path | None = None,
        **cli_flags: Any,
    ) -> SubspaceSettings:
        """Construct settings from CLI invocation.

        Discovers ``subspacectl.toml`` via walk-up (or explicit *config_path*),
        resolves *monorepo_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(monorepo_root)

        resolved_root = monorepo_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                monorepo_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    # --- Resolved locations ---

    @property
    def rush_json_path(self) -> Path:
        return self.monorepo_root / self.paths.rush_json

    @property
    def subspace_json_path(self) -> Path:
        return self.monorepo_root / self.paths.subspace_json

    def isolated_root(self, subspace: str) -> Path:
        """Temporary per-subspace install root."""
        return self.monorepo_root / self.paths.temp_folder / subspace

    def canonical_root(self, subspace: str) -> Path:
        """Per-subspace config folder holding ``.npmrc`` and the lockfile."""
        return self.monorepo_root / self.paths.config_folder / subspace
