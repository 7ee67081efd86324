"""InstallService — per-subspace isolated workspace generation and install.

Pipeline per subspace: CLEAN → MATERIALIZE → INSTALL → RECONCILE

Validation (registry loading, partitioning, subspace selection and hook
template compilation) runs once, up front, and aborts before anything on
disk changes. After that each subspace is an independent unit of work: a
CLEAN/MATERIALIZE failure marks that subspace failed, an INSTALL failure is
a warning, and in both cases the next subspace is still processed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import structlog
from jinja2 import Template

from subspacectl.domain.errors import (
    HookTemplateError,
    InstallFailure,
    PathError,
    SubspaceError,
    UnknownSubspace,
)
from subspacectl.domain.hooks import build_hook_spec
from subspacectl.domain.partition import Partition, Subspace, partition
from subspacectl.domain.paths import map_paths
from subspacectl.infrastructure.filesystem import (
    clean_dir,
    copy_if_exists,
    prepare_dir,
    reconcile_lockfile,
    write_text,
    write_workspace_manifest,
)
from subspacectl.infrastructure.installer import run_installer
from subspacectl.infrastructure.monorepo import SubspaceLayout
from subspacectl.infrastructure.templates import load_hook_template, render_hook
from subspacectl.services.base import BaseService
from subspacectl.services.result import ServiceError, ServiceResult
from subspacectl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

FEATURE_DISABLED_WARNING = "Subspaces feature not enabled."


class SubspaceStatus(StrEnum):
    INSTALLED = "installed"
    GENERATED = "generated"
    INSTALL_FAILED = "install_failed"
    FAILED = "failed"


@dataclass
class SubspaceReport:
    """Outcome of processing one subspace."""

    name: str
    members: list[str]
    workspace: str
    status: SubspaceStatus = SubspaceStatus.FAILED
    packages: list[str] = field(default_factory=list)
    lockfile_updated: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": str(self.status),
            "members": self.members,
            "packages": self.packages,
            "workspace": self.workspace,
            "lockfile_updated": self.lockfile_updated,
            "error": self.error,
        }


class InstallService(BaseService):
    """Partition the monorepo and build one isolated workspace per subspace."""

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    @traced
    def plan(self) -> ServiceResult:
        """Validate and partition without touching the filesystem."""
        op = "partition"
        try:
            buckets = self._load_partition()
            if buckets is None:
                return self._disabled(op)
            items = []
            for bucket in buckets.values():
                layout = self._monorepo.layout(bucket.name)
                items.append(
                    {
                        "name": bucket.name,
                        "members": bucket.member_names,
                        "packages": self._packages(bucket, layout),
                        "workspace": str(layout.isolated_root),
                    }
                )
        except SubspaceError as exc:
            return self._failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "enabled": True,
                "count": len(items),
                "project_count": sum(len(i["members"]) for i in items),
                "subspaces": items,
            },
        )

    @traced
    def generate(self, subspaces: Iterable[str] | None = None) -> ServiceResult:
        """CLEAN → MATERIALIZE for each selected subspace."""
        return self._run("generate", subspaces, install=False)

    @traced
    def install(self, subspaces: Iterable[str] | None = None) -> ServiceResult:
        """CLEAN → MATERIALIZE → INSTALL → RECONCILE for each selected subspace."""
        return self._run("install", subspaces, install=True)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _load_partition(self) -> Partition | None:
        """Load both registries and partition. None when the feature is off."""
        registry = self._monorepo.load_subspace_registry()
        if not registry.enabled:
            logger.info(FEATURE_DISABLED_WARNING)
            return None
        projects = self._monorepo.load_projects()
        return partition(projects, registry.names())

    @staticmethod
    def _select(buckets: Partition, names: Iterable[str] | None) -> list[Subspace]:
        if names is None:
            return list(buckets.values())
        wanted = list(dict.fromkeys(names))
        for name in wanted:
            if name not in buckets:
                raise UnknownSubspace(name)
        # Keep partition order regardless of the order names were given in.
        return [bucket for name, bucket in buckets.items() if name in wanted]

    def _disabled(self, op: str) -> ServiceResult:
        return ServiceResult(
            ok=True,
            op=op,
            data={"enabled": False, "count": 0, "subspaces": []},
            warnings=[FEATURE_DISABLED_WARNING],
        )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run(self, op: str, names: Iterable[str] | None, *, install: bool) -> ServiceResult:
        try:
            buckets = self._load_partition()
            if buckets is None:
                return self._disabled(op)
            selected = self._select(buckets, names)
            template = load_hook_template(monorepo_root=self._monorepo.root)
        except SubspaceError as exc:
            return self._failure(op, exc)

        warnings: list[str] = []
        reports: list[SubspaceReport] = []
        for bucket in selected:
            with (
                structlog.contextvars.bound_contextvars(subspace=bucket.name),
                trace_span(f"subspace:{bucket.name}") as span,
            ):
                report = self._process(bucket, template, warnings, install=install)
                if span is not None:
                    span.annotate("status", str(report.status))
            reports.append(report)

        failed = [r.name for r in reports if r.status is SubspaceStatus.FAILED]
        data = {
            "enabled": True,
            "count": len(reports),
            "failed_count": len(failed),
            "install_failed_count": sum(
                1 for r in reports if r.status is SubspaceStatus.INSTALL_FAILED
            ),
            "subspaces": [r.to_dict() for r in reports],
        }
        if failed:
            return ServiceResult(
                ok=False,
                op=op,
                data=data,
                warnings=warnings,
                error=ServiceError(
                    code="SUBSPACE_FAILED",
                    message=f"Failed to prepare subspace(s): {', '.join(failed)}",
                    detail={"subspaces": failed},
                ),
            )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def _process(
        self,
        bucket: Subspace,
        template: Template,
        warnings: list[str],
        *,
        install: bool,
    ) -> SubspaceReport:
        layout = self._monorepo.layout(bucket.name)
        report = SubspaceReport(
            name=bucket.name,
            members=bucket.member_names,
            workspace=str(layout.isolated_root),
        )

        # CLEAN + MATERIALIZE
        try:
            with trace_span("materialize", members=len(bucket.members)):
                report.packages = self._materialize(bucket, layout, template, warnings)
        except (OSError, PathError, HookTemplateError) as exc:
            logger.error("Failed to prepare subspace %s: %s", bucket.name, exc)
            report.error = str(exc)
            return report

        if not install:
            report.status = SubspaceStatus.GENERATED
            return report

        # INSTALL
        try:
            with trace_span("install"):
                outcome = run_installer(
                    bucket.name,
                    self._monorepo.settings.installer.command,
                    layout.isolated_root,
                )
        except InstallFailure as exc:
            logger.error("Error installing subspace %s: %s", bucket.name, exc)
            warnings.append(str(exc))
            report.status = SubspaceStatus.INSTALL_FAILED
            report.error = str(exc)
            return report
        logger.debug(
            "Installer for %s exited with %d\n%s%s",
            bucket.name,
            outcome.returncode,
            outcome.stdout,
            outcome.stderr,
        )

        # RECONCILE
        try:
            report.lockfile_updated = reconcile_lockfile(
                layout.isolated_lockfile, layout.canonical_lockfile
            )
        except OSError as exc:
            logger.error("Failed to store lockfile for subspace %s: %s", bucket.name, exc)
            report.error = str(exc)
            return report

        report.status = SubspaceStatus.INSTALLED
        return report

    def _packages(self, bucket: Subspace, layout: SubspaceLayout) -> list[str]:
        return map_paths(
            bucket.members,
            layout.isolated_root,
            monorepo_root=self._monorepo.root,
        )

    def _materialize(
        self,
        bucket: Subspace,
        layout: SubspaceLayout,
        template: Template,
        warnings: list[str],
    ) -> list[str]:
        """Recreate the isolated workspace. Returns the workspace package paths."""
        packages = self._packages(bucket, layout)
        logger.debug("Workspace packages for %s: %s", bucket.name, packages)
        hook_source = render_hook(build_hook_spec(bucket.members), template=template)

        clean_dir(layout.isolated_root)
        prepare_dir(layout.isolated_root)
        write_workspace_manifest(layout.workspace_file, packages)

        for source, target in (
            (layout.canonical_npmrc, layout.isolated_npmrc),
            (layout.canonical_lockfile, layout.isolated_lockfile),
        ):
            if not copy_if_exists(source, target):
                warnings.append(f"Subspace {bucket.name!r}: {source} not found, skipped")

        write_text(layout.hook_file, hook_source)
        return packages
