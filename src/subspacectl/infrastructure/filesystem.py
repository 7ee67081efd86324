"""Filesystem operations for isolated subspace workspaces.

INVARIANT: The isolated workspace is disposable. Every run deletes it and
rebuilds it from the canonical config folder. Only the lockfile travels
back, and only after a successful install.
"""

from __future__ import annotations

import shutil
from io import StringIO
from pathlib import Path

from ruamel.yaml import YAML

# ---------------------------------------------------------------------------
# Directory lifecycle
# ---------------------------------------------------------------------------


def clean_dir(path: Path) -> None:
    """Recursively delete *path*. A missing directory is not an error."""
    if path.exists():
        shutil.rmtree(path)


def prepare_dir(path: Path) -> None:
    """Create *path* and its parents."""
    path.mkdir(parents=True, exist_ok=True)


# ---------------------------------------------------------------------------
# Artifact writers
# ---------------------------------------------------------------------------


def render_workspace_manifest(packages: list[str]) -> str:
    """Serialize a ``pnpm-workspace.yaml`` document."""
    y = YAML()
    y.default_flow_style = False
    buf = StringIO()
    y.dump({"packages": list(packages)}, buf)
    return buf.getvalue()


def write_workspace_manifest(path: Path, packages: list[str]) -> None:
    path.write_text(render_workspace_manifest(packages), encoding="utf-8")


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def copy_if_exists(source: Path, target: Path) -> bool:
    """Copy *source* to *target*. Returns False when *source* is absent."""
    if not source.is_file():
        return False
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    return True


def reconcile_lockfile(isolated_lockfile: Path, canonical_lockfile: Path) -> bool:
    """Replace the canonical lockfile with the freshly installed one.

    Returns False (and touches nothing) when the install left no lockfile.
    """
    if not isolated_lockfile.is_file():
        return False
    canonical_lockfile.unlink(missing_ok=True)
    return copy_if_exists(isolated_lockfile, canonical_lockfile)
