"""Workspace — the single object every service and command works through.

The Workspace owns the SQLite store, the snapshot gateway, the live
:class:`GraphStore`, the durable preferences, and the plugin manager. It
replaces an ambient global store: callers construct one and pass it on.

Persistence is driven by explicit notification. The workspace subscribes to
the graph store and relays every change to the ``post_graph_change`` hook.
The built-in :class:`AutosavePlugin` answers durable changes with
:meth:`Workspace.save`. A failed save leaves the in-memory graph intact and
is kept in :attr:`Workspace.last_save_error` until a later save succeeds.
"""

from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from mindspace.domain.graph import GraphChange, GraphStore
from mindspace.domain.migrations import MigrationContext, seed_snapshot
from mindspace.domain.nodes import now_ms
from mindspace.domain.seeds import has_seed_nodes
from mindspace.domain.snapshot import Preferences, Snapshot
from mindspace.infrastructure.database.engine import init_database
from mindspace.infrastructure.snapshots import SnapshotGateway
from mindspace.infrastructure.storage import KeyValueStore, StorageError
from mindspace.plugins.builtins.autosave import AutosavePlugin
from mindspace.plugins.manager import PluginManager

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from mindspace.config.settings import MindspaceSettings

logger = logging.getLogger(__name__)


class Workspace:
    """Owns storage, the graph store, and preferences for one session.

    Parameters:
        settings: Resolved settings (storage path and key, layout radii).
        clock: Epoch-millisecond clock shared by the graph and migrations.
        rng: Random source shared by the graph and migrations.
        db_path: Override the configured database location.
        in_memory: Use a throwaway in-memory store instead of a file.
        hydrate: Load the persisted snapshot immediately.
    """

    def __init__(
        self,
        settings: MindspaceSettings,
        *,
        clock: Callable[[], int] = now_ms,
        rng: random.Random | None = None,
        db_path: Path | None = None,
        in_memory: bool = False,
        hydrate: bool = True,
    ) -> None:
        self._settings = settings
        rng = rng or random.Random()
        self._ctx = MigrationContext(clock=clock, rng=rng)

        path = None if in_memory else (db_path or settings.db_path)
        self._store = KeyValueStore(init_database(path))
        self._gateway = SnapshotGateway(self._store, settings.storage.key)

        self._graph = GraphStore(
            clock=clock,
            rng=rng,
            galaxy_radius=settings.layout.galaxy_radius,
            solar_radius=settings.layout.solar_radius,
        )
        self.preferences = Preferences()
        self.last_save_error: Exception | None = None

        self._plugins = PluginManager()
        self._autosave = AutosavePlugin(self)
        self._plugins.register_plugin(self._autosave, name="autosave")
        self._unsubscribe = self._graph.subscribe(self._on_graph_change)

        if hydrate:
            self.hydrate()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def settings(self) -> MindspaceSettings:
        return self._settings

    @property
    def graph(self) -> GraphStore:
        return self._graph

    @property
    def gateway(self) -> SnapshotGateway:
        return self._gateway

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def plugins(self) -> PluginManager:
        return self._plugins

    @property
    def migration_context(self) -> MigrationContext:
        return self._ctx

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def hydrate(self) -> dict[str, Any]:
        """Load, migrate, and seed the stored snapshot into the graph.

        Returns a summary: ``{"loaded": bool, "seeded": bool, "node_count": int}``.
        """
        loaded = self._gateway.load(self._ctx)
        snapshot = loaded or Snapshot()
        seeded = not has_seed_nodes(snapshot.nodes)
        snapshot = seed_snapshot(snapshot, self._ctx)

        with self.autosave_paused():
            self._graph.replace(snapshot.nodes, snapshot.mode)
        self.preferences = snapshot.preferences

        if seeded:
            # Persist the seed marker so the lineage is never seeded twice.
            self._save_quietly()
        logger.debug(
            "Hydrated %d node(s) from %s (loaded=%s, seeded=%s)",
            len(snapshot.nodes),
            self._gateway.key,
            loaded is not None,
            seeded,
        )
        self._plugins.hook.post_load(
            storage_key=self._gateway.key, node_count=len(snapshot.nodes), seeded=seeded
        )
        return {"loaded": loaded is not None, "seeded": seeded, "node_count": len(snapshot.nodes)}

    def snapshot(self) -> Snapshot:
        """The current durable subset."""
        return Snapshot(
            nodes=dict(self._graph.nodes),
            mode=self._graph.mode,
            has_seen_tutorial=self.preferences.has_seen_tutorial,
            theme=self.preferences.theme,
            view_mode=self.preferences.view_mode,
        )

    def save(self) -> int:
        """Write the durable subset. Returns the serialized size.

        Raises:
            StorageError: If the store cannot be written.
        """
        size = self._gateway.save(self.snapshot())
        self.last_save_error = None
        self._plugins.hook.post_save(storage_key=self._gateway.key, node_count=len(self._graph))
        return size

    def update_preferences(self, **changes: Any) -> Preferences:
        """Merge preference changes and persist them."""
        self.preferences = Preferences.model_validate(
            {**self.preferences.model_dump(), **changes}
        )
        self._save_quietly()
        return self.preferences

    def reset(self) -> bool:
        """Empty the graph and preferences and delete the stored snapshot.

        Returns True if a stored snapshot existed.
        """
        with self.autosave_paused():
            self._graph.clear()
        self.preferences = Preferences()
        existed = self._gateway.delete()
        self.last_save_error = None
        self._plugins.hook.post_reset(storage_key=self._gateway.key)
        return existed

    def close(self) -> None:
        """Detach from the graph and dispose of the database engine."""
        self._unsubscribe()
        self._store.close()

    @contextmanager
    def autosave_paused(self) -> Iterator[None]:
        """Suspend autosave for bulk changes made inside the block."""
        previous = self._autosave.enabled
        self._autosave.enabled = False
        try:
            yield
        finally:
            self._autosave.enabled = previous

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _save_quietly(self) -> None:
        try:
            self.save()
        except StorageError as exc:
            logger.warning("Save failed, will retry on next change: %s", exc)
            self.last_save_error = exc

    def _on_graph_change(self, change: GraphChange) -> None:
        """Relay a graph change to plugins. Plugin failures are warnings."""
        try:
            self._plugins.hook.post_graph_change(
                kind=change.kind, node_ids=list(change.node_ids), durable=change.durable
            )
        except StorageError as exc:
            logger.warning("Autosave failed after %s, will retry: %s", change.kind, exc)
            self.last_save_error = exc
        except Exception:
            logger.warning("Change hook failed for %s", change.kind, exc_info=True)
