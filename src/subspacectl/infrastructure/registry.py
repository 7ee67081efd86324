"""Registry file loading — ``rush.json`` and ``subspace.json``.

Rush config files are JSON with comments, so both are parsed with json5
and then validated against the pydantic models in
:mod:`subspacectl.domain.models`. Any failure surfaces as
:class:`ConfigMissing`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TypeVar

import json5
from pydantic import BaseModel, ValidationError

from subspacectl.domain.errors import ConfigMissing
from subspacectl.domain.models import Project, ProjectRegistry, SubspaceRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _read_json5(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigMissing(path, "file not found") from exc
    except (OSError, UnicodeError) as exc:
        raise ConfigMissing(path, str(exc)) from exc

    try:
        return json5.loads(raw)
    except ValueError as exc:
        raise ConfigMissing(path, f"invalid JSON5: {exc}") from exc


def _validate(model_cls: type[T], data: Any, path: Path) -> T:
    if not isinstance(data, dict):
        raise ConfigMissing(path, "expected a JSON object at the top level")
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigMissing(path, f"schema mismatch ({errors})") from exc


def load_projects(path: Path) -> list[Project]:
    """Read the project list from the monorepo registry."""
    registry = _validate(ProjectRegistry, _read_json5(path), path)
    logger.debug("Loaded %d projects from %s", len(registry.projects), path)
    return registry.projects


def load_subspace_registry(path: Path) -> SubspaceRegistry:
    """Read the subspace registry, including its ``enabled`` switch."""
    registry = _validate(SubspaceRegistry, _read_json5(path), path)
    logger.debug(
        "Loaded subspace registry from %s (enabled=%s, %d subspaces)",
        path,
        registry.enabled,
        len(registry.available_subspaces),
    )
    return registry
