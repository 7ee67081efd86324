"""Command: generate each subspace workspace, install, and store the lockfile."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from subspacectl.commands._base import SubspaceCommand, subspace_option

if TYPE_CHECKING:
    from subspacectl.commands._context import AppContext


@click.command(
    cls=SubspaceCommand,
    examples="""\
  subspacectl install
  subspacectl install -s tools
  subspacectl -v --log-json install""",
)
@subspace_option()
@click.pass_obj
def install(app: AppContext, subspaces: tuple[str, ...]) -> None:
    """Install every subspace in its own isolated pnpm workspace.

    A failed install is reported and the remaining subspaces still run;
    the canonical lockfile of the failed subspace is left unchanged.
    """
    from subspacectl.services.install import InstallService

    app.emit(InstallService(app.monorepo).install(subspaces or None))
