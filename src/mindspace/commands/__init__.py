"""Subcommand modules for mindspace.

:func:`register_commands` uses deferred imports to keep ``mindspace --help``
fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every command on the root CLI group."""
    from mindspace.commands.backup import export_cmd, import_cmd, reset
    from mindspace.commands.check import check, stats
    from mindspace.commands.layout import mode, undo
    from mindspace.commands.links import link, unlink
    from mindspace.commands.nodes import add, edit, list_cmd, move, remove, select, show
    from mindspace.commands.prefs import prefs

    for command in (
        add,
        remove,
        edit,
        move,
        select,
        show,
        list_cmd,
        link,
        unlink,
        mode,
        undo,
        check,
        stats,
        export_cmd,
        import_cmd,
        reset,
        prefs,
    ):
        cli.add_command(command)
