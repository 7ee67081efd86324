"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, subspacectl.toml only contains
overrides. A standard Rush layout needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- subspacectl.toml sections ---


class PathsConfig(BaseModel):
    """[paths] section. All paths are relative to the monorepo root."""

    model_config = {"frozen": True}

    rush_json: str = "rush.json"
    subspace_json: str = "subspace.json"
    temp_folder: str = "common/temp"
    config_folder: str = "common/config/subspaces"


class InstallerConfig(BaseModel):
    """[installer] section."""

    model_config = {"frozen": True}

    command: list[str] = Field(default_factory=lambda: ["pnpm", "install"], min_length=1)
    workspace_file: str = "pnpm-workspace.yaml"
    lockfile: str = "pnpm-lock.yaml"
    npmrc: str = ".npmrc"
    hook_file: str = ".pnpmfile.cjs"

