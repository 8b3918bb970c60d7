"""Tests for SnapshotGateway — serialization under the storage key."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from mindspace.domain.seeds import build_seed_nodes
from mindspace.domain.snapshot import Snapshot
from mindspace.domain.types import SpaceMode, Theme
from mindspace.infrastructure.database import init_database
from mindspace.infrastructure.snapshots import SnapshotGateway, unwrap_persisted
from mindspace.infrastructure.storage import KeyValueStore

KEY = "mindspace-storage"


@pytest.fixture
def store() -> Iterator[KeyValueStore]:
    kv = KeyValueStore(init_database(None))
    try:
        yield kv
    finally:
        kv.close()


@pytest.fixture
def gateway(store: KeyValueStore) -> SnapshotGateway:
    return SnapshotGateway(store, KEY)


class TestUnwrap:
    def test_wrapped(self) -> None:
        assert unwrap_persisted({"state": {"nodes": {}}, "version": 0}) == {"nodes": {}}

    def test_bare(self) -> None:
        assert unwrap_persisted({"nodes": {}, "state": "x"}) == {"nodes": {}, "state": "x"}

    def test_non_object(self) -> None:
        assert unwrap_persisted([1, 2]) is None


class TestSnapshotGateway:
    def test_missing_key_loads_none(self, gateway: SnapshotGateway) -> None:
        assert not gateway.exists()
        assert gateway.load() is None

    def test_save_then_load(self, gateway: SnapshotGateway) -> None:
        snap = Snapshot(nodes=build_seed_nodes({}, now=0), mode=SpaceMode.SOLAR, theme=Theme.NEBULA)
        size = gateway.save(snap)
        assert size > 0
        assert gateway.exists()
        assert gateway.load() == snap

    def test_excludes_transient_state(self, gateway: SnapshotGateway, store: KeyValueStore) -> None:
        gateway.save(Snapshot())
        data = json.loads(store.get(KEY) or "")
        assert "activeNodeId" not in data
        assert "linkingFromId" not in data
        assert "undoLog" not in data

    def test_loads_wrapped_legacy_document(
        self, gateway: SnapshotGateway, store: KeyValueStore
    ) -> None:
        legacy = {
            "state": {
                "nodes": {
                    "a": {
                        "id": "a",
                        "title": "Old",
                        "position": {"x": 1, "y": 1, "z": 1},
                        "connections": [],
                        "textureUrl": "/moon.jpg",
                        "createdAt": 3,
                    }
                },
                "mode": "PATH",
            },
            "version": 0,
        }
        store.set(KEY, json.dumps(legacy))
        snap = gateway.load()
        assert snap is not None
        assert snap.nodes["a"].texture_ref == "/moon.jpg"
        assert snap.mode is SpaceMode.PATH

    @pytest.mark.parametrize("payload", ["{not json", "[1, 2]", '{"nodes": ["x"]}'])
    def test_malformed_reads_as_absent(
        self,
        payload: str,
        gateway: SnapshotGateway,
        store: KeyValueStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        store.set(KEY, payload)
        with caplog.at_level(logging.WARNING, logger="mindspace"):
            assert gateway.load() is None
        assert "Ignoring" in caplog.text

    def test_delete(self, gateway: SnapshotGateway) -> None:
        gateway.save(Snapshot())
        assert gateway.delete() is True
        assert gateway.delete() is False
