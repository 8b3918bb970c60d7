"""Commands: connect and disconnect nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindspace.commands._base import MindspaceCommand
from mindspace.services.graph import GraphService

if TYPE_CHECKING:
    from mindspace.commands._context import AppContext


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace link seed-earth seed-mars
  mindspace --json link seed-earth seed-mars""",
)
@click.argument("from_id")
@click.argument("to_id")
@click.pass_obj
def link(app: AppContext, from_id: str, to_id: str) -> None:
    """Link two nodes in both directions."""
    app.emit(GraphService(app.workspace).link(from_id, to_id))


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace unlink seed-earth seed-mars""",
)
@click.argument("from_id")
@click.argument("to_id")
@click.pass_obj
def unlink(app: AppContext, from_id: str, to_id: str) -> None:
    """Remove the link between two nodes."""
    app.emit(GraphService(app.workspace).unlink(from_id, to_id))
