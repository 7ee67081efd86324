"""Command: regenerate isolated subspace workspaces without installing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from subspacectl.commands._base import SubspaceCommand, subspace_option

if TYPE_CHECKING:
    from subspacectl.commands._context import AppContext


@click.command(
    cls=SubspaceCommand,
    examples="""\
  subspacectl generate
  subspacectl generate -s tools
  subspacectl --json generate -s default -s tools""",
)
@subspace_option()
@click.pass_obj
def generate(app: AppContext, subspaces: tuple[str, ...]) -> None:
    """Write workspace manifest, .npmrc, lockfile and hook for each subspace."""
    from subspacectl.services.install import InstallService

    app.emit(InstallService(app.monorepo).generate(subspaces or None))
