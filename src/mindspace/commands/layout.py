"""Commands: layout mode and undo."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindspace.commands._base import MindspaceCommand
from mindspace.domain.types import SpaceMode
from mindspace.services.graph import GraphService

if TYPE_CHECKING:
    from mindspace.commands._context import AppContext


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace mode solar      # arrange nodes around the oldest one
  mindspace mode galaxy     # restore remembered positions""",
)
@click.argument(
    "target",
    type=click.Choice([m.value for m in SpaceMode if m is not SpaceMode.PATH], case_sensitive=False),
)
@click.pass_obj
def mode(app: AppContext, target: str) -> None:
    """Switch between galaxy and solar layout."""
    app.emit(GraphService(app.workspace).set_mode(target))


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace remove seed-mars undo""",
)
@click.pass_obj
def undo(app: AppContext) -> None:
    """Reverse the most recent deletion.

    Undo history lives in memory, so chain it after the deletion in one
    invocation.
    """
    app.emit(GraphService(app.workspace).undo())
