"""Jinja2 template loading and hook rendering with per-monorepo overrides."""

from __future__ import annotations

from pathlib import Path

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    Template,
    TemplateError,
)

from subspacectl.domain.errors import HookTemplateError
from subspacectl.domain.hooks import HookSpec

OVERRIDE_DIR = Path("common") / "config" / "subspacectl" / "templates"
HOOK_TEMPLATE = "pnpmfile.cjs.j2"


def build_template_environment(group: str, *, monorepo_root: Path | None = None) -> Environment:
    """Build a Jinja2 environment with user overrides before packaged defaults.

    User overrides are loaded from ``common/config/subspacectl/templates/``
    inside the monorepo. Both a namespaced directory (for example
    ``templates/hooks/``) and the shared root are searched.
    """

    loaders: list[BaseLoader] = []
    if monorepo_root is not None:
        template_root = monorepo_root / OVERRIDE_DIR
        loaders.append(FileSystemLoader([str(template_root / group), str(template_root)]))

    loaders.append(PackageLoader("subspacectl", f"templates/{group}"))
    return Environment(loader=ChoiceLoader(loaders), keep_trailing_newline=True)


def load_hook_template(*, monorepo_root: Path | None = None) -> Template:
    """Load and compile the hook template, override first.

    Raises:
        HookTemplateError: the template is missing or does not compile.
    """
    env = build_template_environment("hooks", monorepo_root=monorepo_root)
    try:
        return env.get_template(HOOK_TEMPLATE)
    except TemplateError as exc:
        raise HookTemplateError(HOOK_TEMPLATE, str(exc)) from exc


def render_hook(
    spec: HookSpec,
    *,
    template: Template | None = None,
    monorepo_root: Path | None = None,
) -> str:
    """Render the ``.pnpmfile.cjs`` source for one subspace.

    Member names reach the template only through the ``tojson`` filter.
    Pass a *template* from :func:`load_hook_template` to reuse one compiled
    template across subspaces.
    """
    if template is None:
        template = load_hook_template(monorepo_root=monorepo_root)
    try:
        return template.render(spec=spec, members=list(spec.members))
    except TemplateError as exc:
        raise HookTemplateError(template.name or HOOK_TEMPLATE, str(exc)) from exc
