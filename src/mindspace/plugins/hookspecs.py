"""Pluggy hook specifications for mindspace lifecycle events.

``post_graph_change`` is the explicit on-change notification the graph
store emits after every mutation; the built-in autosave plugin persists
the durable subset from it. The remaining hooks report persistence events.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("mindspace")


class MindspaceHookSpec:
    """Hook specifications for the mindspace plugin system."""

    @hookspec
    def post_graph_change(self, kind: str, node_ids: list[str], durable: bool) -> None:
        """Called after the graph store changes state."""

    @hookspec
    def post_load(self, storage_key: str, node_count: int, seeded: bool) -> None:
        """Called after a snapshot is loaded and hydrated."""

    @hookspec
    def post_save(self, storage_key: str, node_count: int) -> None:
        """Called after the durable subset is written."""

    @hookspec
    def post_import(self, node_count: int, mode: str) -> None:
        """Called after a backup file replaces the graph."""

    @hookspec
    def post_reset(self, storage_key: str) -> None:
        """Called after all persisted data is deleted."""
