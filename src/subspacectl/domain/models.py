"""Registry record models.

Field names are snake_case; the camelCase keys used by ``rush.json`` and
``subspace.json`` are accepted through validation aliases. Unknown keys in
project entries are ignored, unknown keys in subspace definitions are kept.

All models use Pydantic with frozen config for immutability.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_SUBSPACE = "default"

# Subspace names become directory names under the temp and config folders.
SUBSPACE_NAME_PATTERN = r"^[a-z0-9][a-z0-9-]*$"


class Project(BaseModel):
    """A project declared in the monorepo registry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    package_name: str = Field(
        min_length=1,
        validation_alias=AliasChoices("packageName", "package_name"),
    )
    project_folder: str = Field(
        min_length=1,
        validation_alias=AliasChoices("projectFolder", "project_folder"),
    )
    subspace: str | None = Field(
        default=None,
        pattern=r"^([a-z0-9][a-z0-9-]*)?$",
        validation_alias=AliasChoices("subspaceName", "subspace"),
    )

    @property
    def subspace_name(self) -> str:
        """Declared subspace, or ``"default"`` when absent or empty."""
        return self.subspace or DEFAULT_SUBSPACE


class SubspaceDefinition(BaseModel):
    """A registered subspace. Extra keys are preserved as opaque config."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    subspace_name: str = Field(
        pattern=SUBSPACE_NAME_PATTERN,
        validation_alias=AliasChoices("subspaceName", "subspace_name"),
    )


class ProjectRegistry(BaseModel):
    """The slice of ``rush.json`` this tool reads."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    projects: list[Project] = Field(default_factory=list)


class SubspaceRegistry(BaseModel):
    """The subspace registry (``subspace.json``)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("enabled", "subspacesEnabled"),
    )
    available_subspaces: list[SubspaceDefinition] = Field(
        default_factory=list,
        validation_alias=AliasChoices("availableSubspaces", "subspaceNames", "available_subspaces"),
    )

    @field_validator("available_subspaces", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> Any:
        # Rush's own format lists plain names.
        if isinstance(value, list):
            return [{"subspaceName": v} if isinstance(v, str) else v for v in value]
        return value

    def names(self) -> set[str]:
        """Registered subspace names (``"default"`` is implicit, not included)."""
        return {s.subspace_name for s in self.available_subspaces}
