"""Domain exceptions for subspace partitioning and installation.

Every exception carries a stable ``code`` that the service layer copies
into :class:`~subspacectl.services.result.ServiceError`.

Validation errors (``ConfigMissing``, ``UnknownSubspace``,
``DuplicateProject``) abort the whole run before any filesystem mutation.
A ``HookTemplateError`` aborts the run when the template does not compile
and fails a single subspace when rendering breaks. ``PathError`` and
``InstallFailure`` are scoped to a single subspace.
"""

from __future__ import annotations

from pathlib import Path


class SubspaceError(Exception):
    """Base class for all subspacectl domain errors."""

    code = "SUBSPACE_ERROR"

    def detail(self) -> dict[str, object]:
        """Structured fields for ``ServiceError.detail``."""
        return {}


class ConfigMissing(SubspaceError):
    """A registry file is absent, unparseable, or fails schema validation."""

    code = "CONFIG_MISSING"

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load {path}: {reason}")

    def detail(self) -> dict[str, object]:
        return {"path": str(self.path), "reason": self.reason}


class UnknownSubspace(SubspaceError):
    """A project (or a caller) references a subspace that is not registered."""

    code = "UNKNOWN_SUBSPACE"

    def __init__(self, name: str, *, project: str | None = None) -> None:
        self.name = name
        self.project = project
        if project is None:
            msg = f"The subspace {name!r} has no member projects"
        else:
            msg = f"The subspace {name!r} of project {project!r} is not defined in the subspace registry"
        super().__init__(msg)

    def detail(self) -> dict[str, object]:
        return {"subspace": self.name, "project": self.project}


class DuplicateProject(SubspaceError):
    """Two registry entries declare the same package name."""

    code = "DUPLICATE_PROJECT"

    def __init__(self, package_name: str) -> None:
        self.package_name = package_name
        super().__init__(f"Package {package_name!r} is declared more than once")

    def detail(self) -> dict[str, object]:
        return {"package_name": self.package_name}


class PathError(SubspaceError):
    """A project folder cannot be expressed relative to the isolated root."""

    code = "PATH_ERROR"

    def __init__(self, folder: Path, root: Path, reason: str) -> None:
        self.folder = folder
        self.root = root
        super().__init__(f"Cannot map {folder} relative to {root}: {reason}")

    def detail(self) -> dict[str, object]:
        return {"folder": str(self.folder), "root": str(self.root)}


class HookTemplateError(SubspaceError):
    """The hook template cannot be loaded or rendered."""

    code = "HOOK_TEMPLATE_INVALID"

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid hook template {template}: {reason}")

    def detail(self) -> dict[str, object]:
        return {"template": self.template, "reason": self.reason}


class InstallFailure(SubspaceError):
    """The external installer exited nonzero or could not be started."""

    code = "INSTALL_FAILED"

    def __init__(self, subspace: str, message: str, *, returncode: int | None = None) -> None:
        self.subspace = subspace
        self.returncode = returncode
        super().__init__(message)

    def detail(self) -> dict[str, object]:
        return {"subspace": self.subspace, "returncode": self.returncode}
