"""GraphStore — the live node graph and every operation that mutates it.

The store is an explicitly owned object: the workspace creates one per
process and hands it to the persistence layer and the CLI. Tests build
fresh instances with a fixed clock and seeded random source.

All operations are synchronous and total. A missing node ID is a silent
no-op, never an error, and no operation can leave the graph with an
asymmetric or self-referencing ``connections`` set.

INVARIANT: The only exception to connection symmetry is ``undo()`` of a
deletion. The reinstated node gets its own ``connections`` back as they
were at deletion time, but the other endpoints do not get the reverse edge
back. ``CheckService`` reports the resulting asymmetry.

Listeners registered with :meth:`subscribe` are told about every state
change. Changes to the durable subset (nodes, mode) are flagged
``durable=True``; selection and linking changes are not.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TypeAlias

from mindspace.domain.geometry import Point3, orbit_point, random_point_in_sphere
from mindspace.domain.ids import generate_node_id
from mindspace.domain.nodes import (
    DEFAULT_COLOR,
    DEFAULT_TITLE,
    PLANET_TEXTURES,
    Node,
    NodePatch,
    is_valid_texture,
    next_orbit_radius,
    now_ms,
)
from mindspace.domain.types import SpaceMode, UndoKind
from mindspace.domain.undo import UNDO_LIMIT, UndoEntry, UndoLog

logger = logging.getLogger(__name__)

GALAXY_RADIUS = 15.0
SOLAR_RADIUS = 10.0


@dataclass(frozen=True)
class GraphChange:
    """Notification payload sent to subscribers after a state change."""

    kind: str  # "add", "remove", "update", "link", "mode", ...
    node_ids: tuple[str, ...] = ()
    durable: bool = True


Listener: TypeAlias = Callable[[GraphChange], None]


class GraphStore:
    """In-memory node graph with selection, linking state, and undo.

    Parameters:
        mode: Initial layout mode.
        clock: Returns the current time in epoch milliseconds.
        rng: Random source for placement and texture choice.
        id_factory: Produces new node IDs.
        galaxy_radius: Radius of the sphere new nodes are scattered in.
        solar_radius: Ring radius used when switching to solar mode.
    """

    def __init__(
        self,
        *,
        mode: SpaceMode = SpaceMode.GALAXY,
        clock: Callable[[], int] = now_ms,
        rng: random.Random | None = None,
        id_factory: Callable[[], str] = generate_node_id,
        galaxy_radius: float = GALAXY_RADIUS,
        solar_radius: float = SOLAR_RADIUS,
        undo_limit: int = UNDO_LIMIT,
    ) -> None:
        self._nodes: dict[str, Node] = {}
        self._mode = mode
        self._active_node_id: str | None = None
        self._linking_from_id: str | None = None
        self._undo = UndoLog(undo_limit)
        self._clock = clock
        self._rng = rng or random.Random()
        self._id_factory = id_factory
        self._galaxy_radius = galaxy_radius
        self._solar_radius = solar_radius
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> Mapping[str, Node]:
        """Read-only view of the node collection, in insertion order."""
        return MappingProxyType(self._nodes)

    @property
    def mode(self) -> SpaceMode:
        return self._mode

    @property
    def active_node_id(self) -> str | None:
        return self._active_node_id

    @property
    def linking_from_id(self) -> str | None:
        return self._linking_from_id

    @property
    def undo_log(self) -> UndoLog:
        return self._undo

    def get(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def primary_node(self) -> Node | None:
        """The earliest-created node; insertion order breaks ties."""
        if not self._nodes:
            return None
        return min(self._nodes.values(), key=lambda n: n.created_at)

    def edges(self) -> Iterator[tuple[str, str]]:
        """Yield each undirected connection once, as an ordered ID pair."""
        seen: set[tuple[str, str]] = set()
        for node in self._nodes.values():
            for other_id in node.connections:
                pair = (node.id, other_id) if node.id < other_id else (other_id, node.id)
                if pair not in seen:
                    seen.add(pair)
                    yield pair

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for change notifications.

        Returns a callable that removes the subscription.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: str, *node_ids: str, durable: bool = True) -> None:
        change = GraphChange(kind=kind, node_ids=node_ids, durable=durable)
        for listener in list(self._listeners):
            listener(change)

    # ------------------------------------------------------------------
    # Node lifecycle
    # ------------------------------------------------------------------

    def add_node(self, title: str | None = None, texture_ref: str | None = None) -> str:
        """Create a node, select it, and return its ID.

        A texture outside the palette is replaced by a random palette one.
        Only a node created into an empty graph with an empty undo log
        lacks an orbit radius; every other node orbits beyond all existing
        ones, deleted nodes still in the undo log included.
        """
        node_id = self._id_factory()
        if node_id in self._nodes or any(e.node_id == node_id for e in self._undo):
            msg = f"ID generator returned a used ID: {node_id!r}"
            raise RuntimeError(msg)

        position = random_point_in_sphere(self._galaxy_radius, self._rng)
        now = self._clock()
        has_history = bool(self._nodes) or bool(self._undo)
        orbit_radius = next_orbit_radius(self._known_orbit_radii()) if has_history else None
        if not is_valid_texture(texture_ref):
            texture_ref = self._rng.choice(PLANET_TEXTURES)
        self._nodes[node_id] = Node(
            id=node_id,
            title=title if title is not None else DEFAULT_TITLE,
            position=position,
            galaxy_position=position,
            color=DEFAULT_COLOR,
            texture_ref=texture_ref,
            created_at=now,
            updated_at=now,
            orbit_radius=orbit_radius,
        )
        self._active_node_id = node_id
        logger.debug("Added node %s (orbit_radius=%s)", node_id, orbit_radius)
        self._emit("add", node_id)
        return node_id

    def remove_node(self, node_id: str) -> None:
        """Delete a node, sever its connections, and record it for undo."""
        node = self._nodes.pop(node_id, None)
        if node is None:
            return

        self._undo.push(UndoEntry(kind=UndoKind.DELETE_NODE, node_id=node_id, node=node))
        severed: list[str] = []
        for other_id, other in list(self._nodes.items()):
            if other.is_connected_to(node_id):
                self._nodes[other_id] = self._touch(other.without_connection(node_id))
                severed.append(other_id)

        if self._active_node_id == node_id:
            self._active_node_id = None
        if self._linking_from_id == node_id:
            self._linking_from_id = None
        logger.debug("Removed node %s, severed %d connection(s)", node_id, len(severed))
        self._emit("remove", node_id, *severed)

    def update_node_position(self, node_id: str, point: Point3) -> None:
        """Move a node. In galaxy mode the remembered galaxy position follows."""
        node = self._nodes.get(node_id)
        if node is None:
            return
        updates: dict[str, object] = {"position": point}
        if self._mode.is_galaxy:
            updates["galaxy_position"] = point
        self._nodes[node_id] = self._touch(node, **updates)
        self._emit("move", node_id)

    def update_node(self, node_id: str, patch: NodePatch | None = None, **fields: str) -> None:
        """Merge title/body changes into a node.

        Accepts either a :class:`NodePatch` or ``title=``/``body=`` keywords.
        Any other keyword raises :class:`pydantic.ValidationError`.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return
        changes = (patch or NodePatch(**fields)).changes()
        self._nodes[node_id] = self._touch(node, **changes)
        self._emit("update", node_id)

    def set_active_node(self, node_id: str | None) -> None:
        """Select *node_id*; an unknown ID selects nothing."""
        self._active_node_id = node_id if node_id in self._nodes else None
        self._emit("select", durable=False)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def set_mode(self, mode: SpaceMode) -> None:
        """Switch layout mode and rearrange positions once.

        SOLAR places every non-primary node on a ring around the primary.
        GALAXY (and legacy PATH) restores each node's remembered galaxy
        position. ``galaxy_position`` itself is never modified here.
        """
        self._mode = mode
        primary = self.primary_node()
        if primary is not None:
            if mode is SpaceMode.SOLAR:
                others = [n for n in self._nodes.values() if n.id != primary.id]
                for index, node in enumerate(others):
                    point = orbit_point(
                        index, len(others), primary.position, self._solar_radius, rng=self._rng
                    )
                    self._nodes[node.id] = self._touch(node, position=point)
            else:
                for node in list(self._nodes.values()):
                    self._nodes[node.id] = self._touch(node, position=node.galaxy_position)
        logger.debug("Mode set to %s for %d node(s)", mode, len(self._nodes))
        self._emit("mode", *self._nodes)

    # ------------------------------------------------------------------
    # Linking
    # ------------------------------------------------------------------

    def start_linking(self, node_id: str) -> None:
        """Begin a link gesture from *node_id*, replacing any in progress."""
        self._linking_from_id = node_id
        self._emit("linking", durable=False)

    def complete_link(self, target_id: str) -> None:
        """Finish the link gesture on *target_id*.

        Adds the edge on both endpoints unless nothing is in progress, the
        target is the source, either node is gone, or they are already
        connected. Linking state is cleared in every case.
        """
        source_id = self._linking_from_id
        self._linking_from_id = None
        source = self._nodes.get(source_id) if source_id is not None else None
        target = self._nodes.get(target_id)
        if (
            source is None
            or target is None
            or source.id == target.id
            or source.is_connected_to(target.id)
        ):
            self._emit("linking", durable=False)
            return

        self._nodes[source.id] = self._touch(source.with_connection(target.id))
        self._nodes[target.id] = self._touch(target.with_connection(source.id))
        logger.debug("Linked %s <-> %s", source.id, target.id)
        self._emit("link", source.id, target.id)

    def cancel_linking(self) -> None:
        self._linking_from_id = None
        self._emit("linking", durable=False)

    def remove_connection(self, from_id: str, to_id: str) -> None:
        """Remove the edge between two nodes on both endpoints."""
        source = self._nodes.get(from_id)
        target = self._nodes.get(to_id)
        if source is None or target is None:
            return
        if not (source.is_connected_to(to_id) or target.is_connected_to(from_id)):
            return
        self._nodes[from_id] = self._touch(source.without_connection(to_id))
        self._nodes[to_id] = self._touch(self._nodes[to_id].without_connection(from_id))
        self._emit("unlink", from_id, to_id)

    def repair_connections(self) -> int:
        """Restore symmetry after an asymmetric undo or a hand-edited snapshot.

        Self and dangling entries are dropped; a one-sided edge is mirrored
        onto the other endpoint. Returns the number of entries fixed.
        """
        fixed = 0
        touched: set[str] = set()
        for node_id in list(self._nodes):
            node = self._nodes[node_id]
            for other_id in node.connections:
                if other_id == node_id or other_id not in self._nodes:
                    node = node.without_connection(other_id)
                    fixed += 1
                    touched.add(node_id)
                elif not self._nodes[other_id].is_connected_to(node_id):
                    other = self._nodes[other_id].with_connection(node_id)
                    self._nodes[other_id] = self._touch(other)
                    fixed += 1
                    touched.add(other_id)
            if node_id in touched:
                self._nodes[node_id] = self._touch(node)
        if fixed:
            logger.debug("Repaired %d connection entr(ies)", fixed)
            self._emit("repair", *sorted(touched))
        return fixed

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    def can_undo(self) -> bool:
        return bool(self._undo)

    def undo(self) -> UndoEntry | None:
        """Replay the newest undo entry and return it (None if empty)."""
        entry = self._undo.pop()
        if entry is None:
            return None

        if entry.kind is UndoKind.DELETE_NODE and entry.node is not None:
            # Verbatim reinsert; other endpoints keep their severed lists.
            self._nodes[entry.node_id] = entry.node
        elif entry.kind is UndoKind.MOVE_NODE and entry.previous_position is not None:
            node = self._nodes.get(entry.node_id)
            if node is not None:
                updates: dict[str, object] = {"position": entry.previous_position}
                if self._mode.is_galaxy:
                    updates["galaxy_position"] = entry.previous_position
                self._nodes[entry.node_id] = self._touch(node, **updates)
        logger.debug("Undid %s for %s", entry.kind, entry.node_id)
        self._emit("undo", entry.node_id)
        return entry

    # ------------------------------------------------------------------
    # Wholesale state
    # ------------------------------------------------------------------

    def replace(self, nodes: Mapping[str, Node], mode: SpaceMode) -> None:
        """Swap in a whole node collection (hydration and import).

        Selection, linking, and undo history belong to the replaced graph
        and are cleared.
        """
        self._nodes = dict(nodes)
        self._mode = mode
        self._active_node_id = None
        self._linking_from_id = None
        self._undo.clear()
        self._emit("replace", *self._nodes)

    def clear(self) -> None:
        """Return to the empty initial state."""
        self.replace({}, SpaceMode.GALAXY)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _touch(self, node: Node, **updates: object) -> Node:
        """Copy *node* with *updates* and a refreshed, non-decreasing updatedAt."""
        updates["updated_at"] = max(self._clock(), node.updated_at)
        return node.model_copy(update=updates)

    def _known_orbit_radii(self) -> Iterator[float | None]:
        """Orbit radii of live nodes and of deleted nodes undo can bring back."""
        for node in self._nodes.values():
            yield node.orbit_radius
        for entry in self._undo:
            if entry.node is not None:
                yield entry.node.orbit_radius
