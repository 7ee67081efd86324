"""Subspace partitioning.

Assigns every project to exactly one subspace bucket. Buckets are kept in
first-encounter order and members in registry order, so the same registry
always yields the same partition.

Duplicate package names fail fast with :class:`DuplicateProject`; an
unregistered subspace fails fast with :class:`UnknownSubspace`. Neither
returns a partial result.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from subspacectl.domain.errors import DuplicateProject, UnknownSubspace
from subspacectl.domain.models import DEFAULT_SUBSPACE, Project


@dataclass
class Subspace:
    """A named bucket of member projects."""

    name: str
    members: list[Project] = field(default_factory=list)

    @property
    def member_names(self) -> list[str]:
        return [p.package_name for p in self.members]


class Partition(Mapping[str, Subspace]):
    """Insertion-ordered mapping of subspace name to bucket.

    Only :func:`partition` appends to it; consumers get a read-only view.
    """

    def __init__(self) -> None:
        self._buckets: dict[str, Subspace] = {}

    def _append(self, name: str, project: Project) -> None:
        bucket = self._buckets.get(name)
        if bucket is None:
            bucket = Subspace(name=name)
            self._buckets[name] = bucket
        bucket.members.append(project)

    def __getitem__(self, name: str) -> Subspace:
        return self._buckets[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)


def build_project_index(projects: Iterable[Project]) -> dict[str, Project]:
    """Map package name to project, rejecting duplicates."""
    index: dict[str, Project] = {}
    for project in projects:
        if project.package_name in index:
            raise DuplicateProject(project.package_name)
        index[project.package_name] = project
    return index


def partition(
    projects: Iterable[Project],
    available: Collection[str],
) -> Partition:
    """Assign each project to its subspace bucket.

    Raises:
        UnknownSubspace: a project names a subspace missing from *available*.
        DuplicateProject: a package name appears twice.
    """
    index = build_project_index(projects)
    result = Partition()

    for project in index.values():
        name = project.subspace_name
        if name != DEFAULT_SUBSPACE and name not in available:
            raise UnknownSubspace(name, project=project.package_name)
        result._append(name, project)

    return result
