"""Command: show the subspace partition."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from subspacectl.commands._base import SubspaceCommand

if TYPE_CHECKING:
    from subspacectl.commands._context import AppContext


@click.command(
    "list",
    cls=SubspaceCommand,
    examples="""\
  subspacectl list
  subspacectl -v list
  subspacectl --json list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """Validate the registries and list each subspace with its projects."""
    from subspacectl.services.install import InstallService

    app.emit(InstallService(app.monorepo).plan())
