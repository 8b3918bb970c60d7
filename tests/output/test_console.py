"""Tests for the Rich console factory."""

from __future__ import annotations

from mindspace.output.console import create_console, get_output, style_for_mode


class TestConsole:
    def test_captures_output(self) -> None:
        console = create_console()
        console.print("[ms.ok]OK[/ms.ok] hello")
        assert get_output(console) == "OK hello\n"

    def test_default_width(self) -> None:
        assert create_console().width == 120
        assert create_console(width=60).width == 60

    def test_mode_styles(self) -> None:
        assert style_for_mode("SOLAR") == "ms.mode.solar"
        assert style_for_mode("GALAXY") == "ms.mode.galaxy"
        assert style_for_mode("NOPE") == ""
