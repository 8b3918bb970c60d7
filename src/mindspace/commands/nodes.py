"""Commands: create, inspect, edit, move, and delete nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindspace.commands._base import MindspaceCommand
from mindspace.domain.nodes import PLANET_TEXTURES
from mindspace.services.graph import GraphService

if TYPE_CHECKING:
    from mindspace.commands._context import AppContext


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace add
  mindspace add -t "Learn Rust"
  mindspace add -t "Trip ideas" --texture /mars.jpg
  mindspace -q add -t "Captured from a script\"""",
)
@click.option("-t", "--title", default=None, help="Title (defaults to \"New Idea\").")
@click.option(
    "--texture",
    type=click.Choice(PLANET_TEXTURES),
    default=None,
    help="Planet texture (random when omitted).",
)
@click.pass_obj
def add(app: AppContext, title: str | None, texture: str | None) -> None:
    """Add a new idea and select it."""
    app.emit(GraphService(app.workspace).add_node(title, texture))


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace remove 3f2b9c1e-...
  mindspace remove seed-mars undo     # chained: bring it back""",
)
@click.argument("node_id")
@click.pass_obj
def remove(app: AppContext, node_id: str) -> None:
    """Delete a node and sever its links."""
    app.emit(GraphService(app.workspace).remove_node(node_id))


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace edit seed-mars --title "Active Projects"
  mindspace edit 3f2b9c1e-... --body "Details go here\"""",
)
@click.argument("node_id")
@click.option("--title", default=None, help="New title.")
@click.option("--body", default=None, help="New body text.")
@click.pass_obj
def edit(app: AppContext, node_id: str, title: str | None, body: str | None) -> None:
    """Change a node's title or body."""
    app.emit(GraphService(app.workspace).edit_node(node_id, title=title, body=body))


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace move seed-earth 1 2 3
  mindspace move seed-earth -- -4.5 0 2""",
)
@click.argument("node_id")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.argument("z", type=float)
@click.pass_obj
def move(app: AppContext, node_id: str, x: float, y: float, z: float) -> None:
    """Move a node. In galaxy mode its remembered position follows."""
    app.emit(GraphService(app.workspace).move_node(node_id, x, y, z))


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace select seed-venus
  mindspace select seed-venus link seed-venus seed-mars list""",
)
@click.argument("node_id")
@click.pass_obj
def select(app: AppContext, node_id: str) -> None:
    """Select a node. An unknown ID clears the selection.

    Selection is not persisted; it lasts for the rest of a chained invocation.
    """
    app.emit(GraphService(app.workspace).select_node(node_id))


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace show seed-earth
  mindspace --json show seed-earth""",
)
@click.argument("node_id")
@click.pass_obj
def show(app: AppContext, node_id: str) -> None:
    """Show one node in full."""
    app.emit(GraphService(app.workspace).show_node(node_id))


@click.command(
    "list",
    cls=MindspaceCommand,
    examples="""\
  mindspace list
  mindspace -q list         # IDs only
  mindspace -v list         # include seed markers""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all nodes."""
    app.emit(GraphService(app.workspace).list_nodes())
