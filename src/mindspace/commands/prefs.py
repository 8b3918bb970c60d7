"""Command: show or change preferences."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mindspace.commands._base import MindspaceCommand
from mindspace.domain.types import Theme, ViewMode

if TYPE_CHECKING:
    from mindspace.commands._context import AppContext


@click.command(
    cls=MindspaceCommand,
    examples="""\
  mindspace prefs
  mindspace prefs --theme nebula
  mindspace prefs --view-mode solar-system --tutorial-seen""",
)
@click.option("--theme", type=click.Choice([t.value for t in Theme]), default=None)
@click.option("--view-mode", type=click.Choice([v.value for v in ViewMode]), default=None)
@click.option(
    "--tutorial-seen/--tutorial-unseen",
    "has_seen_tutorial",
    default=None,
    help="Mark the tutorial as seen or unseen.",
)
@click.pass_obj
def prefs(
    app: AppContext,
    theme: str | None,
    view_mode: str | None,
    has_seen_tutorial: bool | None,
) -> None:
    """Show preferences, or change the given ones."""
    from mindspace.services.preferences import PreferencesService

    svc = PreferencesService(app.workspace)
    app.emit(svc.update(theme=theme, view_mode=view_mode, has_seen_tutorial=has_seen_tutorial))
