"""Tests for Workspace — hydration, autosave, preferences, and reset."""

from __future__ import annotations

import random

import pytest

from mindspace.config.settings import MindspaceSettings
from mindspace.domain.types import SpaceMode, Theme
from mindspace.infrastructure.storage import StorageError
from mindspace.infrastructure.workspace import Workspace
from tests.conftest import FakeClock


def _reopen(settings: MindspaceSettings) -> Workspace:
    return Workspace(settings, clock=FakeClock(), rng=random.Random(0))


def _fail_writes(workspace: Workspace, monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_set(key: str, value: str) -> None:
        raise StorageError("disk full")

    monkeypatch.setattr(workspace.store, "set", failing_set)


class TestHydrate:
    def test_first_run_seeds_and_saves(self, workspace: Workspace) -> None:
        assert len(workspace.graph) == 8
        assert workspace.gateway.exists()

    def test_reopen_does_not_reseed(self, workspace: Workspace, settings: MindspaceSettings) -> None:
        workspace.graph.remove_node("seed-mars")
        workspace.close()
        reopened = _reopen(settings)
        try:
            assert len(reopened.graph) == 7
            assert "seed-mars" not in reopened.graph
        finally:
            reopened.close()

    def test_summary(self, empty_workspace: Workspace) -> None:
        summary = empty_workspace.hydrate()
        assert summary == {"loaded": False, "seeded": True, "node_count": 8}
        assert empty_workspace.hydrate() == {"loaded": True, "seeded": False, "node_count": 8}

    def test_malformed_store_starts_fresh(self, empty_workspace: Workspace) -> None:
        empty_workspace.store.set(empty_workspace.gateway.key, "{broken")
        summary = empty_workspace.hydrate()
        assert summary["loaded"] is False
        assert len(empty_workspace.graph) == 8

    def test_in_memory(self, settings: MindspaceSettings) -> None:
        ws = Workspace(settings, in_memory=True)
        try:
            assert len(ws.graph) == 8
            assert not settings.db_path.exists()
        finally:
            ws.close()


class TestAutosave:
    def test_durable_change_is_saved(self, workspace: Workspace, settings: MindspaceSettings) -> None:
        node_id = workspace.graph.add_node("Persist me")
        workspace.graph.set_mode(SpaceMode.SOLAR)
        workspace.close()
        reopened = _reopen(settings)
        try:
            assert reopened.graph.nodes[node_id].title == "Persist me"
            assert reopened.graph.mode is SpaceMode.SOLAR
        finally:
            reopened.close()

    def test_selection_is_not_saved(self, workspace: Workspace, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[str] = []
        monkeypatch.setattr(workspace.store, "set", lambda key, value: calls.append(key))
        workspace.graph.set_active_node("seed-earth")
        workspace.graph.start_linking("seed-earth")
        workspace.graph.cancel_linking()
        assert calls == []

    def test_paused(self, workspace: Workspace, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[str] = []
        monkeypatch.setattr(workspace.store, "set", lambda key, value: calls.append(key))
        with workspace.autosave_paused():
            workspace.graph.add_node()
        assert calls == []
        workspace.graph.add_node()
        assert calls == [workspace.gateway.key]

    def test_failed_save_keeps_graph_and_records_error(
        self, workspace: Workspace, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _fail_writes(workspace, monkeypatch)
        node_id = workspace.graph.add_node("Unsaved")
        assert node_id in workspace.graph
        assert isinstance(workspace.last_save_error, StorageError)

    def test_next_save_clears_error(self, workspace: Workspace, monkeypatch: pytest.MonkeyPatch) -> None:
        _fail_writes(workspace, monkeypatch)
        workspace.graph.add_node()
        monkeypatch.undo()
        workspace.graph.add_node()
        assert workspace.last_save_error is None


class TestPreferences:
    def test_update_persists(self, workspace: Workspace, settings: MindspaceSettings) -> None:
        workspace.update_preferences(theme=Theme.NEBULA, has_seen_tutorial=True)
        workspace.close()
        reopened = _reopen(settings)
        try:
            assert reopened.preferences.theme is Theme.NEBULA
            assert reopened.preferences.has_seen_tutorial is True
        finally:
            reopened.close()


class TestReset:
    def test_reset_clears_everything(self, workspace: Workspace) -> None:
        workspace.update_preferences(theme=Theme.CYBERPUNK)
        workspace.graph.set_mode(SpaceMode.SOLAR)
        assert workspace.reset() is True
        assert len(workspace.graph) == 0
        assert workspace.graph.mode is SpaceMode.GALAXY
        assert workspace.preferences.theme is Theme.DEEP_SPACE
        assert not workspace.gateway.exists()

    def test_reset_without_stored_data(self, empty_workspace: Workspace) -> None:
        assert empty_workspace.reset() is False
