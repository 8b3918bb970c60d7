"""Tests for GraphService — user-facing graph operations and statistics."""

from __future__ import annotations

import pytest

from mindspace.domain.nodes import PLANET_TEXTURES
from mindspace.infrastructure.workspace import Workspace
from mindspace.services.graph import GraphService


@pytest.fixture
def svc(workspace: Workspace) -> GraphService:
    return GraphService(workspace)


class TestQueries:
    def test_list_nodes(self, svc: GraphService) -> None:
        result = svc.list_nodes()
        assert result.ok
        assert result.data["count"] == 8
        assert result.data["mode"] == "GALAXY"
        assert result.data["items"][0] == {
            "id": "seed-mercury",
            "title": "Quick Notes",
            "connections": 0,
            "orbit_radius": None,
            "seed": True,
        }

    def test_show_node(self, svc: GraphService) -> None:
        result = svc.show_node("seed-earth")
        assert result.ok
        assert result.data["title"] == "Current Work"
        assert result.data["texture_ref"] == "/earth-day.jpg"
        assert result.data["active"] is False

    def test_show_missing(self, svc: GraphService) -> None:
        result = svc.show_node("nope")
        assert not result.ok
        assert result.error is not None and result.error.code == "NOT_FOUND"


class TestMutations:
    def test_add_node(self, svc: GraphService, workspace: Workspace) -> None:
        result = svc.add_node("Learn Rust", "/mars.jpg")
        assert result.ok
        node_id = result.data["id"]
        assert workspace.graph.active_node_id == node_id
        assert result.data["orbit_radius"] == 20.0 + 8 * 7
        assert result.data["texture_ref"] == "/mars.jpg"
        assert result.warnings == []

    def test_add_node_unknown_texture_warns(self, svc: GraphService) -> None:
        result = svc.add_node("Rings", "/saturn-rings.png")
        assert result.ok
        assert result.data["texture_ref"] in PLANET_TEXTURES
        assert any("saturn-rings" in w for w in result.warnings)

    def test_remove_node(self, svc: GraphService, workspace: Workspace) -> None:
        svc.link("seed-earth", "seed-mars")
        result = svc.remove_node("seed-earth")
        assert result.ok
        assert result.data["severed"] == 1
        assert workspace.graph.nodes["seed-mars"].connections == ()

    def test_remove_missing(self, svc: GraphService) -> None:
        assert svc.remove_node("nope").error.code == "NOT_FOUND"  # type: ignore[union-attr]

    def test_edit_node(self, svc: GraphService, workspace: Workspace) -> None:
        result = svc.edit_node("seed-venus", title="Brainstorms", body="")
        assert result.ok
        assert result.data["fields_changed"] == ["body", "title"]
        assert workspace.graph.nodes["seed-venus"].title == "Brainstorms"
        assert workspace.graph.nodes["seed-venus"].body == ""

    def test_edit_without_changes(self, svc: GraphService) -> None:
        result = svc.edit_node("seed-venus")
        assert result.error is not None and result.error.code == "NO_CHANGES"

    def test_move_node(self, svc: GraphService) -> None:
        result = svc.move_node("seed-earth", 1.0, 2.0, 3.0)
        assert result.ok
        assert result.data["position"] == {"x": 1.0, "y": 2.0, "z": 3.0}
        assert result.data["galaxy_position"] == {"x": 1.0, "y": 2.0, "z": 3.0}

    def test_select(self, svc: GraphService) -> None:
        assert svc.select_node("seed-earth").data["active_node_id"] == "seed-earth"
        assert svc.select_node("nope").data["active_node_id"] is None


class TestLinks:
    def test_link_and_unlink(self, svc: GraphService, workspace: Workspace) -> None:
        result = svc.link("seed-earth", "seed-mars")
        assert result.ok and result.data["created"] is True
        assert workspace.graph.linking_from_id is None
        result = svc.unlink("seed-mars", "seed-earth")
        assert result.ok and result.data["removed"] is True
        assert workspace.graph.nodes["seed-earth"].connections == ()

    def test_duplicate_link_warns(self, svc: GraphService) -> None:
        svc.link("seed-earth", "seed-mars")
        result = svc.link("seed-mars", "seed-earth")
        assert result.ok
        assert result.data["created"] is False
        assert "Nodes were already connected" in result.warnings

    def test_self_link_warns(self, svc: GraphService) -> None:
        result = svc.link("seed-earth", "seed-earth")
        assert result.data["created"] is False
        assert "A node cannot be linked to itself" in result.warnings

    def test_link_missing(self, svc: GraphService) -> None:
        assert svc.link("seed-earth", "nope").error.code == "NOT_FOUND"  # type: ignore[union-attr]

    def test_unlink_unconnected(self, svc: GraphService) -> None:
        assert svc.unlink("seed-earth", "seed-mars").data["removed"] is False


class TestModeAndUndo:
    def test_set_mode_case_insensitive(self, svc: GraphService, workspace: Workspace) -> None:
        result = svc.set_mode("solar")
        assert result.ok
        assert result.data == {"mode": "SOLAR", "primary_id": "seed-mercury", "node_count": 8}

    def test_invalid_mode(self, svc: GraphService) -> None:
        result = svc.set_mode("nebula")
        assert result.error is not None and result.error.code == "INVALID_MODE"

    def test_undo(self, svc: GraphService, workspace: Workspace) -> None:
        assert svc.undo().error.code == "NOTHING_TO_UNDO"  # type: ignore[union-attr]
        svc.remove_node("seed-earth")
        result = svc.undo()
        assert result.ok
        assert result.data == {"kind": "DELETE_NODE", "id": "seed-earth", "remaining": 0}
        assert "seed-earth" in workspace.graph


class TestStats:
    def test_seeded_graph(self, svc: GraphService) -> None:
        data = svc.stats().data
        assert data["node_count"] == 8
        assert data["edge_count"] == 0
        assert data["components"] == 8
        assert len(data["isolated"]) == 8

    def test_hub_and_components(self, svc: GraphService) -> None:
        svc.link("seed-earth", "seed-mars")
        svc.link("seed-earth", "seed-venus")
        data = svc.stats().data
        assert data["edge_count"] == 2
        assert data["components"] == 6
        assert data["hub"] == {"id": "seed-earth", "title": "Current Work", "degree": 2}
        assert "seed-earth" not in data["isolated"]

    def test_empty_graph(self, empty_workspace: Workspace) -> None:
        data = GraphService(empty_workspace).stats().data
        assert data["node_count"] == 0
        assert data["components"] == 0
        assert data["hub"] is None

    def test_networkx_view_keeps_one_sided_edge(
        self, svc: GraphService, workspace: Workspace
    ) -> None:
        svc.link("seed-earth", "seed-mars")
        svc.remove_node("seed-earth")
        workspace.graph.undo()
        g = svc.to_networkx()
        assert g.number_of_nodes() == 8
        assert g.number_of_edges() == 1
        assert g.has_edge("seed-mars", "seed-earth")
