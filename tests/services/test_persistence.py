"""Tests for PersistenceService — save, load, export, import, reset."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mindspace.domain.snapshot import CURRENT_SCHEMA_VERSION
from mindspace.domain.types import SpaceMode, Theme
from mindspace.infrastructure.storage import StorageError
from mindspace.infrastructure.workspace import Workspace
from mindspace.services.persistence import PersistenceService


@pytest.fixture
def svc(workspace: Workspace) -> PersistenceService:
    return PersistenceService(workspace)


class TestSaveLoad:
    def test_save(self, svc: PersistenceService, workspace: Workspace) -> None:
        result = svc.save()
        assert result.ok
        assert result.data["key"] == "mindspace-storage"
        assert result.data["node_count"] == 8
        assert result.data["bytes"] > 0

    def test_save_failure(
        self, svc: PersistenceService, workspace: Workspace, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def failing_set(key: str, value: str) -> None:
            raise StorageError("read-only")

        monkeypatch.setattr(workspace.store, "set", failing_set)
        result = svc.save()
        assert result.error is not None and result.error.code == "SAVE_FAILED"

    def test_load_rereads_store(self, svc: PersistenceService, workspace: Workspace) -> None:
        with workspace.autosave_paused():
            workspace.graph.remove_node("seed-earth")
        result = svc.load()
        assert result.ok
        assert result.data["loaded"] is True
        assert "seed-earth" in workspace.graph

    def test_load_without_data_warns(self, empty_workspace: Workspace) -> None:
        result = PersistenceService(empty_workspace).load()
        assert result.ok
        assert result.warnings == ["No usable stored snapshot; started fresh"]


class TestExport:
    def test_document_shape(self, svc: PersistenceService) -> None:
        doc = json.loads(svc.export_snapshot())
        assert set(doc) == {"nodes", "mode", "exportedAt", "schemaVersion"}
        assert doc["schemaVersion"] == str(CURRENT_SCHEMA_VERSION)
        assert doc["mode"] == "GALAXY"
        assert doc["nodes"]["seed-venus"]["title"] == "Ideas"
        assert "hasSeenTutorial" not in doc

    def test_indented(self, svc: PersistenceService) -> None:
        assert svc.export_snapshot().startswith(b'{\n  "nodes"')

    def test_export_to_default_file(self, svc: PersistenceService, workspace: Workspace) -> None:
        result = svc.export_to_file()
        assert result.ok
        path = Path(result.data["path"])
        assert path.parent == workspace.settings.root
        assert path.name.startswith("mindspace-backup-")
        assert path.suffix == ".json"
        assert json.loads(path.read_bytes())["nodes"]

    def test_export_to_unwritable(self, svc: PersistenceService, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        result = svc.export_to_file(blocker / "inside.json")
        assert result.error is not None and result.error.code == "EXPORT_FAILED"


class TestImport:
    def test_round_trip_identity(self, svc: PersistenceService, workspace: Workspace) -> None:
        graph = workspace.graph
        node_id = graph.add_node("Extra")
        graph.start_linking(node_id)
        graph.complete_link("seed-mars")
        graph.set_mode(SpaceMode.SOLAR)
        before_nodes = dict(workspace.graph.nodes)
        before_mode = workspace.graph.mode

        result = svc.import_snapshot(svc.export_snapshot())
        assert result.ok
        assert dict(workspace.graph.nodes) == before_nodes
        assert workspace.graph.mode is before_mode

    def test_round_trip_keeps_explicit_texture(
        self, svc: PersistenceService, workspace: Workspace
    ) -> None:
        node_id = workspace.graph.add_node("Custom", "/mars.jpg")
        before = workspace.graph.nodes[node_id]

        assert svc.import_snapshot(svc.export_snapshot()).ok
        after = workspace.graph.nodes[node_id]
        assert after.texture_ref == "/mars.jpg"
        assert after.color == before.color
        assert after == before

    def test_round_trip_after_off_palette_texture(
        self, svc: PersistenceService, workspace: Workspace
    ) -> None:
        workspace.graph.add_node("Rings", "/saturn-rings.png")
        before_nodes = dict(workspace.graph.nodes)
        assert svc.import_snapshot(svc.export_snapshot()).ok
        assert dict(workspace.graph.nodes) == before_nodes

    def test_node_id_follows_its_key(self, svc: PersistenceService, workspace: Workspace) -> None:
        payload = {
            "nodes": {
                "a": {"id": "b", "title": "A", "createdAt": 1},
                "c": {"id": "c", "title": "C", "createdAt": 2},
            },
            "schemaVersion": str(CURRENT_SCHEMA_VERSION),
        }
        assert svc.import_snapshot(json.dumps(payload)).ok

        graph = workspace.graph
        assert set(graph.nodes) == {"a", "c"}
        assert graph.nodes["a"].id == "a"
        graph.start_linking("c")
        graph.complete_link("a")
        assert set(graph.nodes) == {"a", "c"}
        assert graph.nodes["a"].connections == ("c",)
        assert graph.nodes["c"].connections == ("a",)

    def test_clears_selection_and_linking(self, svc: PersistenceService, workspace: Workspace) -> None:
        payload = svc.export_snapshot()
        workspace.graph.set_active_node("seed-earth")
        workspace.graph.start_linking("seed-earth")
        svc.import_snapshot(payload)
        assert workspace.graph.active_node_id is None
        assert workspace.graph.linking_from_id is None

    def test_missing_mode_is_galaxy(self, svc: PersistenceService, workspace: Workspace) -> None:
        workspace.graph.set_mode(SpaceMode.SOLAR)
        result = svc.import_snapshot(json.dumps({"nodes": {}, "extra": True}))
        assert result.ok
        assert workspace.graph.mode is SpaceMode.GALAXY
        assert len(workspace.graph) == 0

    def test_import_does_not_seed(self, svc: PersistenceService, workspace: Workspace) -> None:
        svc.import_snapshot(b'{"nodes": {}}')
        assert len(workspace.graph) == 0

    def test_preferences_kept(self, svc: PersistenceService, workspace: Workspace) -> None:
        workspace.update_preferences(theme=Theme.NEBULA)
        svc.import_snapshot(b'{"nodes": {}, "theme": "cyberpunk"}')
        assert workspace.preferences.theme is Theme.NEBULA

    def test_legacy_export_is_migrated(self, svc: PersistenceService, workspace: Workspace) -> None:
        legacy = {
            "nodes": {
                "old": {
                    "id": "old",
                    "title": "From 1.2",
                    "position": {"x": 0, "y": 0, "z": 0},
                    "connections": [],
                    "textureUrl": "/neptune.jpg",
                    "createdAt": 1,
                }
            },
            "mode": "GALAXY",
            "exportedAt": "2024-01-01T00:00:00Z",
            "version": "1.2",
        }
        result = svc.import_snapshot(json.dumps(legacy))
        assert result.ok
        assert workspace.graph.nodes["old"].texture_ref == "/neptune.jpg"

    @pytest.mark.parametrize(
        "payload",
        [
            b"{not json",
            b"\xff\xfe",
            b"[]",
            b'{"mode": "SOLAR"}',
            b'{"nodes": []}',
            b'{"nodes": {"a": {"position": "here"}}}',
        ],
    )
    def test_invalid_leaves_graph_untouched(
        self, payload: bytes, svc: PersistenceService, workspace: Workspace
    ) -> None:
        before = dict(workspace.graph.nodes)
        result = svc.import_snapshot(payload)
        assert result.error is not None and result.error.code == "INVALID_IMPORT"
        assert dict(workspace.graph.nodes) == before
        assert workspace.graph.mode is SpaceMode.GALAXY

    def test_import_from_missing_file(self, svc: PersistenceService, tmp_path: Path) -> None:
        result = svc.import_from_file(tmp_path / "nope.json")
        assert result.error is not None and result.error.code == "INVALID_IMPORT"

    def test_file_round_trip(self, svc: PersistenceService, workspace: Workspace, tmp_path: Path) -> None:
        target = tmp_path / "backups" / "b.json"
        assert svc.export_to_file(target).ok
        workspace.graph.remove_node("seed-earth")
        assert svc.import_from_file(target).ok
        assert "seed-earth" in workspace.graph


class TestReset:
    def test_reset(self, svc: PersistenceService, workspace: Workspace) -> None:
        result = svc.reset()
        assert result.ok
        assert result.data["deleted"] is True
        assert len(workspace.graph) == 0
        assert not workspace.gateway.exists()
