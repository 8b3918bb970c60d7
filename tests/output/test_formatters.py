"""Tests for output mode selection."""

from __future__ import annotations

import json

from mindspace.output.formatters import OutputSettings, format_result
from mindspace.services.result import ServiceResult

LISTING = ServiceResult(
    ok=True,
    op="list_nodes",
    data={
        "mode": "GALAXY",
        "active_node_id": None,
        "linking_from_id": None,
        "count": 2,
        "items": [
            {"id": "a", "title": "Alpha", "connections": 1, "orbit_radius": None, "seed": False},
            {"id": "b", "title": "Beta", "connections": 1, "orbit_radius": 20.0, "seed": False},
        ],
    },
)


class TestFormatResult:
    def test_json_mode(self) -> None:
        out = format_result(LISTING, settings=OutputSettings(json_output=True))
        parsed = json.loads(out)
        assert parsed["ok"] is True
        assert parsed["op"] == "list_nodes"
        assert [i["id"] for i in parsed["data"]["items"]] == ["a", "b"]

    def test_quiet_lists_ids(self) -> None:
        assert format_result(LISTING, settings=OutputSettings(quiet=True)) == "a\nb"

    def test_quiet_status_line(self) -> None:
        result = ServiceResult(ok=True, op="set_mode", data={"mode": "SOLAR"})
        assert format_result(result, settings=OutputSettings(quiet=True)) == "OK: set_mode"

    def test_quiet_error(self) -> None:
        result = ServiceResult.failure("show_node", "NOT_FOUND", "No node with id 'x'")
        out = format_result(result, settings=OutputSettings(quiet=True))
        assert out == "ERROR: show_node: No node with id 'x'"

    def test_default_is_rich_table(self) -> None:
        out = format_result(LISTING)
        assert "Alpha" in out
        assert "2 nodes, mode GALAXY" in out
