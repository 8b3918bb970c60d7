"""GraphService — node, link, layout, and undo operations for interfaces.

The graph store treats unknown IDs as silent no-ops. Interfaces still want
to tell a user that ``remove abc`` did nothing, so this layer checks
existence first and reports ``NOT_FOUND`` without raising. The store's own
no-op guarantees remain the backstop.

Statistics are computed on a NetworkX view built per call; the store is
small enough that no cache is needed.
"""

from __future__ import annotations

from typing import Any

import networkx as nx

from mindspace.domain.geometry import Point3
from mindspace.domain.nodes import NodePatch
from mindspace.domain.types import SpaceMode
from mindspace.services._helpers import node_summary
from mindspace.services.base import BaseService
from mindspace.services.result import ServiceResult


def _not_found(op: str, node_id: str) -> ServiceResult:
    return ServiceResult.failure(op, "NOT_FOUND", f"No node with id {node_id!r}", id=node_id)


class GraphService(BaseService):
    """User-facing wrappers around :class:`GraphStore` operations."""

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_nodes(self) -> ServiceResult:
        graph = self._graph
        return ServiceResult(
            ok=True,
            op="list_nodes",
            data={
                "mode": graph.mode.value,
                "active_node_id": graph.active_node_id,
                "linking_from_id": graph.linking_from_id,
                "count": len(graph),
                "items": [node_summary(node) for node in graph.nodes.values()],
            },
        )

    def show_node(self, node_id: str) -> ServiceResult:
        op = "show_node"
        node = self._graph.get(node_id)
        if node is None:
            return _not_found(op, node_id)
        data = node.model_dump(mode="json", exclude_none=True)
        data["active"] = node_id == self._graph.active_node_id
        return ServiceResult(ok=True, op=op, data=data)

    def stats(self) -> ServiceResult:
        """Node/edge counts, components, isolated nodes, and the busiest hub."""
        g = self.to_networkx()
        hub: dict[str, Any] | None = None
        if g.number_of_nodes():
            hub_id, degree = max(g.degree, key=lambda item: item[1])
            hub = {"id": hub_id, "title": g.nodes[hub_id]["title"], "degree": degree}
        return ServiceResult(
            ok=True,
            op="stats",
            data={
                "node_count": g.number_of_nodes(),
                "edge_count": g.number_of_edges(),
                "components": nx.number_connected_components(g) if g.number_of_nodes() else 0,
                "isolated": sorted(nx.isolates(g)),
                "hub": hub,
                "mode": self._graph.mode.value,
                "can_undo": self._graph.can_undo(),
            },
        )

    def to_networkx(self) -> nx.Graph:
        """Undirected NetworkX view of the live graph.

        Edges pointing at missing nodes are left out.
        """
        g = nx.Graph()
        for node in self._graph.nodes.values():
            g.add_node(node.id, title=node.title, seed=node.is_seed_node)
        for a, b in self._graph.edges():
            if a in self._graph and b in self._graph:
                g.add_edge(a, b)
        return g

    # ------------------------------------------------------------------
    # Node lifecycle
    # ------------------------------------------------------------------

    def add_node(self, title: str | None = None, texture_ref: str | None = None) -> ServiceResult:
        node_id = self._graph.add_node(title, texture_ref)
        node = self._graph.get(node_id)
        assert node is not None
        warnings = self._save_warnings()
        if texture_ref is not None and texture_ref != node.texture_ref:
            warnings.append(f"Unknown texture {texture_ref!r}; using {node.texture_ref}")
        return ServiceResult(
            ok=True,
            op="add_node",
            data=node_summary(node) | {"texture_ref": node.texture_ref},
            warnings=warnings,
        )

    def remove_node(self, node_id: str) -> ServiceResult:
        op = "remove_node"
        node = self._graph.get(node_id)
        if node is None:
            return _not_found(op, node_id)
        self._graph.remove_node(node_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": node_id, "title": node.title, "severed": len(node.connections)},
            warnings=self._save_warnings(),
        )

    def edit_node(
        self, node_id: str, *, title: str | None = None, body: str | None = None
    ) -> ServiceResult:
        op = "edit_node"
        if node_id not in self._graph:
            return _not_found(op, node_id)
        patch = NodePatch(title=title, body=body)
        if not patch.changes():
            return ServiceResult.failure(op, "NO_CHANGES", "Nothing to update")
        self._graph.update_node(node_id, patch)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": node_id, "fields_changed": sorted(patch.changes())},
            warnings=self._save_warnings(),
        )

    def move_node(self, node_id: str, x: float, y: float, z: float) -> ServiceResult:
        op = "move_node"
        if node_id not in self._graph:
            return _not_found(op, node_id)
        self._graph.update_node_position(node_id, Point3(x=x, y=y, z=z))
        node = self._graph.get(node_id)
        assert node is not None
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": node_id,
                "position": node.position.model_dump(),
                "galaxy_position": node.galaxy_position.model_dump(),
            },
            warnings=self._save_warnings(),
        )

    def select_node(self, node_id: str | None) -> ServiceResult:
        self._graph.set_active_node(node_id)
        return ServiceResult(
            ok=True, op="select_node", data={"active_node_id": self._graph.active_node_id}
        )

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def link(self, from_id: str, to_id: str) -> ServiceResult:
        """Run a complete link gesture from *from_id* to *to_id*."""
        op = "link"
        for node_id in (from_id, to_id):
            if node_id not in self._graph:
                return _not_found(op, node_id)
        already = self._graph.nodes[from_id].is_connected_to(to_id)
        self._graph.start_linking(from_id)
        self._graph.complete_link(to_id)
        linked = self._graph.nodes[from_id].is_connected_to(to_id)
        warnings = self._save_warnings()
        if from_id == to_id:
            warnings.append("A node cannot be linked to itself")
        elif already:
            warnings.append("Nodes were already connected")
        return ServiceResult(
            ok=True,
            op=op,
            data={"from_id": from_id, "to_id": to_id, "created": linked and not already},
            warnings=warnings,
        )

    def unlink(self, from_id: str, to_id: str) -> ServiceResult:
        op = "unlink"
        for node_id in (from_id, to_id):
            if node_id not in self._graph:
                return _not_found(op, node_id)
        existed = self._graph.nodes[from_id].is_connected_to(to_id) or self._graph.nodes[
            to_id
        ].is_connected_to(from_id)
        self._graph.remove_connection(from_id, to_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"from_id": from_id, "to_id": to_id, "removed": existed},
            warnings=self._save_warnings(),
        )

    # ------------------------------------------------------------------
    # Layout and undo
    # ------------------------------------------------------------------

    def set_mode(self, mode: SpaceMode | str) -> ServiceResult:
        op = "set_mode"
        try:
            target = SpaceMode(mode.upper() if isinstance(mode, str) else mode)
        except ValueError:
            return ServiceResult.failure(op, "INVALID_MODE", f"Unknown mode {mode!r}")
        primary = self._graph.primary_node()
        self._graph.set_mode(target)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "mode": target.value,
                "primary_id": primary.id if primary is not None else None,
                "node_count": len(self._graph),
            },
            warnings=self._save_warnings(),
        )

    def undo(self) -> ServiceResult:
        op = "undo"
        entry = self._graph.undo()
        if entry is None:
            return ServiceResult.failure(op, "NOTHING_TO_UNDO", "Undo history is empty")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "kind": entry.kind.value,
                "id": entry.node_id,
                "remaining": len(self._graph.undo_log),
            },
            warnings=self._save_warnings(),
        )
