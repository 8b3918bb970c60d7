"""Rich Console factory and theme for mindspace output.

Consoles render into a StringIO buffer so renderers can return plain
strings. Rich drops color codes by itself when no terminal is attached.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MINDSPACE_THEME = Theme(
    {
        "ms.ok": "bold green",
        "ms.error": "bold red",
        "ms.warning": "bold yellow",
        "ms.op": "bold cyan",
        "ms.key": "dim",
        "ms.id": "bold blue",
        "ms.title": "bold",
        "ms.seed": "magenta",
        "ms.mode.galaxy": "blue",
        "ms.mode.solar": "yellow",
        "ms.mode.path": "dim",
    }
)

_MODE_STYLES: dict[str, str] = {
    "GALAXY": "ms.mode.galaxy",
    "SOLAR": "ms.mode.solar",
    "PATH": "ms.mode.path",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=MINDSPACE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_mode(mode: str) -> str:
    return _MODE_STYLES.get(mode, "")
