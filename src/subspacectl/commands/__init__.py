"""Subcommand modules for subspacectl.

Provides register_commands() which uses deferred imports to keep
``subspacectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from subspacectl.commands.generate import generate
    from subspacectl.commands.install import install
    from subspacectl.commands.list_cmd import list_cmd

    cli.add_command(list_cmd)
    cli.add_command(generate)
    cli.add_command(install)
