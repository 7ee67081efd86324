"""The cross-subspace dependency rewrite rule.

pnpm invokes a ``readPackage`` hook once per package before resolving its
dependencies. Inside an isolated subspace workspace, a ``workspace:``
reference to a project that lives in another subspace cannot be resolved,
so the hook turns it into a direct link to a sibling directory::

    {"A": "workspace:*", "C": "workspace:*", "D": "^1.0.0"}   members {A, B}
    {"A": "workspace:*", "C": "link:../C/",  "D": "^1.0.0"}

:func:`rewrite_dependencies` is the rule itself; :class:`HookSpec` carries
the values the generated ``.pnpmfile.cjs`` is rendered from, so both apply
the same prefix and link format.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from typing import Any

from subspacectl.domain.models import Project

WORKSPACE_PREFIX = "workspace:"
LINK_PREFIX = "link:../"
LINK_SUFFIX = "/"


def link_spec(dependency_name: str) -> str:
    """The ``link:`` version spec that replaces a cross-subspace reference."""
    return f"{LINK_PREFIX}{dependency_name}{LINK_SUFFIX}"


def is_workspace_reference(version_spec: Any) -> bool:
    return isinstance(version_spec, str) and version_spec.startswith(WORKSPACE_PREFIX)


def rewrite_dependencies(
    package_json: dict[str, Any],
    member_names: Collection[str],
) -> dict[str, Any]:
    """Rewrite ``workspace:`` dependencies on non-members to ``link:`` specs.

    Mutates and returns *package_json*, mirroring pnpm's hook contract.
    Only the ``dependencies`` map is considered. Applying the rule twice is
    a no-op because a ``link:`` spec never matches the workspace prefix.
    """
    dependencies = package_json.get("dependencies") or {}
    for name, spec in dependencies.items():
        if is_workspace_reference(spec) and name not in member_names:
            dependencies[name] = link_spec(name)
    return package_json


@dataclass(frozen=True)
class HookSpec:
    """Structured descriptor for one subspace's ``readPackage`` hook."""

    members: tuple[str, ...]
    workspace_prefix: str = WORKSPACE_PREFIX
    link_prefix: str = LINK_PREFIX
    link_suffix: str = LINK_SUFFIX


def build_hook_spec(members: Iterable[Project]) -> HookSpec:
    """Hook descriptor closed over the member names of one subspace."""
    return HookSpec(members=tuple(p.package_name for p in members))
