"""Commands: graph integrity check and statistics."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindspace.commands._base import MindspaceCommand

if TYPE_CHECKING:
    from mindspace.commands._context import AppContext


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace check
  mindspace check --fix
  mindspace --json check""",
)
@click.option("--fix", is_flag=True, help="Repair self, dangling, and one-sided links.")
@click.pass_obj
def check(app: AppContext, fix: bool) -> None:
    """Check graph integrity and optionally repair links."""
    from mindspace.services.check import CheckService

    app.emit(CheckService(app.workspace).check(fix=fix))


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace stats
  mindspace -v stats        # list isolated nodes""",
)
@click.pass_obj
def stats(app: AppContext) -> None:
    """Show node, link, and component counts."""
    from mindspace.services.graph import GraphService

    app.emit(GraphService(app.workspace).stats())
