"""Workspace path mapping.

Computes where each member project sits relative to a subspace's isolated
install root, in the POSIX form pnpm expects in ``pnpm-workspace.yaml``.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path, PurePath

from subspacectl.domain.errors import PathError
from subspacectl.domain.models import Project


def relative_path(folder: Path, root: Path) -> str:
    """Relative POSIX path from *root* to *folder*.

    Both paths are normalized lexically; symlinks are not resolved.

    Raises:
        PathError: no relative path exists (e.g. different drives on Windows).
    """
    try:
        rel = os.path.relpath(os.path.normpath(folder), os.path.normpath(root))
    except ValueError as exc:
        raise PathError(folder, root, str(exc)) from exc
    return PurePath(rel).as_posix()


def map_paths(
    members: Iterable[Project],
    isolated_root: Path,
    *,
    monorepo_root: Path,
) -> list[str]:
    """Workspace package paths for *members*, in member order.

    Project folders are taken relative to *monorepo_root*; *isolated_root*
    may be absolute or relative to the same root.
    """
    root = isolated_root if isolated_root.is_absolute() else monorepo_root / isolated_root
    return [relative_path(monorepo_root / p.project_folder, root) for p in members]
