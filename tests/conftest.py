"""Shared pytest fixtures for subspacectl tests."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Callable, Generator, Iterable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from subspacectl.config.settings import SubspaceSettings
from subspacectl.infrastructure.monorepo import Monorepo
from subspacectl.services.telemetry import disable_telemetry

OLD_LOCKFILE = "lockfileVersion: '9.0'\n# canonical\n"
NEW_LOCKFILE = "lockfileVersion: '9.0'\n# installed\n"

DEFAULT_PROJECTS: list[dict[str, Any]] = [
    {"packageName": "pkg-a", "projectFolder": "libs/a"},
    {"packageName": "pkg-b", "projectFolder": "libs/b"},
    {"packageName": "pkg-c", "projectFolder": "tools/c", "subspaceName": "tools"},
]


def write_registries(
    root: Path,
    projects: list[dict[str, Any]],
    *,
    enabled: bool = True,
    subspaces: Iterable[str] = ("tools",),
) -> None:
    """Write rush.json (with a comment, as Rush does) and subspace.json."""
    rush = "// Rush monorepo configuration\n" + json.dumps(
        {"rushVersion": "5.120.0", "projects": projects}, indent=2
    )
    (root / "rush.json").write_text(rush, encoding="utf-8")
    registry = {
        "enabled": enabled,
        "availableSubspaces": [{"subspaceName": name} for name in subspaces],
    }
    (root / "subspace.json").write_text(json.dumps(registry), encoding="utf-8")


def write_canonical(root: Path, subspace: str) -> Path:
    """Create the canonical config folder for *subspace*. Returns it."""
    folder = root / "common" / "config" / "subspaces" / subspace
    folder.mkdir(parents=True, exist_ok=True)
    (folder / ".npmrc").write_text("registry=https://registry.npmjs.org/\n", encoding="utf-8")
    (folder / "pnpm-lock.yaml").write_text(OLD_LOCKFILE, encoding="utf-8")
    return folder


@pytest.fixture(autouse=True)
def _reset_cli_state() -> Generator[None]:
    """Undo the logging and telemetry setup a CLI invocation leaves behind."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("subspacectl").setLevel(logging.NOTSET)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def monorepo_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary monorepo with two subspaces: default (pkg-a, pkg-b) and tools (pkg-c).

    This is the single source of truth for the monorepo layout used by
    service and command tests.
    """
    monkeypatch.delenv("SUBSPACECTL_CONFIG", raising=False)
    for project in DEFAULT_PROJECTS:
        (tmp_path / project["projectFolder"]).mkdir(parents=True)
    write_registries(tmp_path, DEFAULT_PROJECTS)
    write_canonical(tmp_path, "default")
    write_canonical(tmp_path, "tools")
    return tmp_path


@pytest.fixture
def settings(monorepo_root: Path) -> SubspaceSettings:
    return SubspaceSettings.from_cli(monorepo_root=monorepo_root)


@pytest.fixture
def monorepo(settings: SubspaceSettings) -> Monorepo:
    return Monorepo(settings)


@pytest.fixture
def _isolated_monorepo(monorepo_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp monorepo so the CLI picks it up.

    Use via ``@pytest.mark.usefixtures("_isolated_monorepo")`` on command
    test classes.
    """
    monkeypatch.chdir(monorepo_root)


@pytest.fixture
def fake_pnpm() -> Callable[..., Callable[..., subprocess.CompletedProcess[str]]]:
    """Factory for a ``subprocess.run`` stand-in that behaves like pnpm.

    Subspaces named in *fail* exit with status 1; the rest write a new
    lockfile into their working directory. Every call is recorded in
    ``calls`` on the returned function.
    """

    def factory(*, fail: Iterable[str] = ()) -> Callable[..., subprocess.CompletedProcess[str]]:
        failing = set(fail)
        calls: list[tuple[list[str], Path]] = []

        def run(cmd: list[str], *, cwd: Path, **_kwargs: Any) -> subprocess.CompletedProcess[str]:
            calls.append((cmd, Path(cwd)))
            if Path(cwd).name in failing:
                raise subprocess.CalledProcessError(
                    1, cmd, output="", stderr="ERR_PNPM_OUTDATED_LOCKFILE"
                )
            (Path(cwd) / "pnpm-lock.yaml").write_text(NEW_LOCKFILE, encoding="utf-8")
            return subprocess.CompletedProcess(cmd, 0, stdout="Done", stderr="")

        run.calls = calls  # type: ignore[attr-defined]
        return run

    return factory


@pytest.fixture
def registry_writer() -> Callable[..., None]:
    """Expose :func:`write_registries` to test modules."""
    return write_registries
