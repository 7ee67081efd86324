"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Monorepo initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from subspacectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from subspacectl.config.settings import SubspaceSettings
    from subspacectl.infrastructure.monorepo import Monorepo
    from subspacectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: SubspaceSettings) -> None:
        self.settings = settings
        self._monorepo: Monorepo | None = None

        from subspacectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from subspacectl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def monorepo(self) -> Monorepo:
        """The monorepo handle (created lazily on first access)."""
        if self._monorepo is None:
            from subspacectl.infrastructure.monorepo import Monorepo

            self._monorepo = Monorepo(self.settings)
        return self._monorepo

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
