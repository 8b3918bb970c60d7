"""Commands: backup export/import and reset."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from mindspace.commands._base import MindspaceCommand
from mindspace.services.persistence import PersistenceService

if TYPE_CHECKING:
    from mindspace.commands._context import AppContext


@click.command(
    "export",
    cls=MindspaceCommand,
    examples="""\
  mindspace export
  mindspace export --output backups/ideas.json
  mindspace export --stdout > ideas.json""",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Target file (default: mindspace-backup-<timestamp>.json).",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Write the document to stdout.")
@click.pass_obj
def export_cmd(app: AppContext, output: Path | None, to_stdout: bool) -> None:
    """Write nodes and mode to a JSON backup."""
    svc = PersistenceService(app.workspace)
    if to_stdout:
        click.echo(svc.export_snapshot().decode("utf-8"))
        return
    app.emit(svc.export_to_file(output))


@click.command(
    "import",
    cls=MindspaceCommand,
    examples="""\
  mindspace import ideas.json
  mindspace import - < ideas.json""",
)
@click.argument("source", type=click.Path(dir_okay=False, allow_dash=True, path_type=Path))
@click.pass_obj
def import_cmd(app: AppContext, source: Path) -> None:
    """Replace nodes and mode from a JSON backup."""
    svc = PersistenceService(app.workspace)
    if str(source) == "-":
        app.emit(svc.import_snapshot(click.get_binary_stream("stdin").read()))
    else:
        app.emit(svc.import_from_file(source))


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace reset
  mindspace reset --yes""",
)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def reset(app: AppContext, yes: bool) -> None:
    """Delete every node and preference."""
    if not yes:
        click.confirm("Delete all nodes and preferences?", abort=True)
    app.emit(PersistenceService(app.workspace).reset())
