"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. The workspace is opened lazily so ``--help`` and
``--version`` never touch the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindspace.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from mindspace.config.settings import MindspaceSettings
    from mindspace.infrastructure.workspace import Workspace
    from mindspace.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: MindspaceSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None

        from mindspace.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def workspace(self) -> Workspace:
        """The workspace (opened and hydrated on first access)."""
        if self._workspace is None:
            from mindspace.infrastructure.workspace import Workspace

            workspace = Workspace(self.settings, hydrate=False)
            # Third-party plugins see the initial load too.
            workspace.plugins.discover_and_load()
            workspace.hydrate()
            self._workspace = workspace
        return self._workspace

    def close(self) -> None:
        if self._workspace is not None:
            self._workspace.close()
            self._workspace = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: written to stdout. Warnings go to stderr so they never
          pollute piped output.
        * Failure: written to stderr, exit code 1.
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
