"""Monorepo — the single dependency injected into every service.

Owns the resolved settings and knows where every file lives: the two
registry files, each subspace's canonical config folder and each
subspace's isolated install root.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from subspacectl.infrastructure.registry import load_projects, load_subspace_registry

if TYPE_CHECKING:
    from subspacectl.config.settings import SubspaceSettings
    from subspacectl.domain.models import Project, SubspaceRegistry


@dataclass(frozen=True)
class SubspaceLayout:
    """On-disk locations for one subspace."""

    name: str
    isolated_root: Path
    canonical_root: Path
    workspace_file: Path
    hook_file: Path
    isolated_npmrc: Path
    isolated_lockfile: Path
    canonical_npmrc: Path
    canonical_lockfile: Path


class Monorepo:
    """Path resolution and registry access for one monorepo checkout."""

    def __init__(self, settings: SubspaceSettings) -> None:
        self.settings = settings

    @property
    def root(self) -> Path:
        return self.settings.monorepo_root

    def load_subspace_registry(self) -> SubspaceRegistry:
        return load_subspace_registry(self.settings.subspace_json_path)

    def load_projects(self) -> list[Project]:
        return load_projects(self.settings.rush_json_path)

    def layout(self, subspace: str) -> SubspaceLayout:
        """Resolve every artifact path for *subspace*."""
        installer = self.settings.installer
        isolated = self.settings.isolated_root(subspace)
        canonical = self.settings.canonical_root(subspace)
        return SubspaceLayout(
            name=subspace,
            isolated_root=isolated,
            canonical_root=canonical,
            workspace_file=isolated / installer.workspace_file,
            hook_file=isolated / installer.hook_file,
            isolated_npmrc=isolated / installer.npmrc,
            isolated_lockfile=isolated / installer.lockfile,
            canonical_npmrc=canonical / installer.npmrc,
            canonical_lockfile=canonical / installer.lockfile,
        )
