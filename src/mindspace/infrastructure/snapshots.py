"""SnapshotGateway — the durable subset in and out of the key-value store.

One JSON document per storage key. Reading is forgiving: a missing key,
undecodable JSON, or a document that cannot be migrated all come back as
``None`` so startup always reaches a usable (empty) graph. Writing is not:
storage failures propagate as :class:`StorageError`.

Snapshots written by the original release are wrapped as
``{"state": {...}, "version": n}``; the wrapper is unpacked transparently.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from mindspace.domain.migrations import MigrationContext, SnapshotError, migrate_snapshot

if TYPE_CHECKING:
    from mindspace.domain.snapshot import Snapshot
    from mindspace.infrastructure.storage import KeyValueStore

logger = logging.getLogger(__name__)


def unwrap_persisted(data: Any) -> dict[str, Any] | None:
    """Return the snapshot object inside *data*, or None if there is none."""
    if not isinstance(data, dict):
        return None
    state = data.get("state")
    if isinstance(state, dict) and "nodes" not in data:
        return state
    return data


class SnapshotGateway:
    """Serialize and deserialize snapshots under a fixed storage key."""

    def __init__(self, store: KeyValueStore, key: str) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def exists(self) -> bool:
        return self._store.get(self._key) is not None

    def save(self, snapshot: Snapshot) -> int:
        """Write *snapshot*. Returns the serialized size in characters."""
        payload = json.dumps(snapshot.to_json_dict(), separators=(",", ":"))
        self._store.set(self._key, payload)
        return len(payload)

    def load_raw(self) -> dict[str, Any] | None:
        """Decode the stored document without migrating it."""
        text = self._store.get(self._key)
        if text is None:
            return None
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring undecodable snapshot under %s: %s", self._key, exc)
            return None
        raw = unwrap_persisted(data)
        if raw is None:
            logger.warning("Ignoring non-object snapshot under %s", self._key)
        return raw

    def load(self, ctx: MigrationContext | None = None) -> Snapshot | None:
        """Load and migrate the stored snapshot; malformed data reads as absent."""
        raw = self.load_raw()
        if raw is None:
            return None
        try:
            return migrate_snapshot(raw, ctx)
        except SnapshotError as exc:
            logger.warning("Ignoring malformed snapshot under %s: %s", self._key, exc)
            return None

    def delete(self) -> bool:
        return self._store.delete(self._key)
