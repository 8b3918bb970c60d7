"""Node model, presentation palette, and the orbit-radius assignment rule.

Nodes are frozen pydantic models: every mutation in the graph store
produces a new instance via ``model_copy(update=...)``, so an undo snapshot
can hold a node by reference without it drifting afterwards.

Serialized field names are camelCase (``galaxyPosition``, ``textureRef``,
``createdAt``...) to match the persisted snapshot and export formats.
"""

from __future__ import annotations

import time
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from mindspace.domain.geometry import Point3

DEFAULT_TITLE = "New Idea"
DEFAULT_COLOR = "#ffffff"

PLANET_TEXTURES: tuple[str, ...] = (
    "/earth-day.jpg",
    "/mars.jpg",
    "/moon.jpg",
    "/jupiter.jpg",
    "/mercury.jpg",
    "/venus.jpg",
    "/neptune.jpg",
    "/uranus.jpg",
)

# Radius handed to the second node when no node has an orbit yet
# (the first node is the primary and never orbits), and the spacing
# between consecutive orbits.
ORBIT_BASELINE = 12.0
ORBIT_INCREMENT = 8.0


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return time.time_ns() // 1_000_000


def is_valid_texture(texture_ref: object) -> bool:
    """True if *texture_ref* names a texture in the fixed palette."""
    return isinstance(texture_ref, str) and texture_ref in PLANET_TEXTURES


class Node(BaseModel):
    """One idea, rendered as a planet.

    Attributes:
        id: Opaque, immutable, never reused.
        position: Active coordinate for the current layout mode.
        galaxy_position: Coordinate remembered for galaxy layout. Dragging
            in solar mode leaves it untouched.
        connections: IDs of linked nodes. Semantically a set; the graph
            store keeps it mirrored on both endpoints.
        orbit_radius: Distance from the primary node in solar layout.
            ``None`` for the primary itself.
        is_seed_node: Marks nodes synthesized on first run.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    title: str
    body: str = ""
    position: Point3
    galaxy_position: Point3
    connections: tuple[str, ...] = ()
    color: str = DEFAULT_COLOR
    texture_ref: str
    created_at: int
    updated_at: int
    orbit_radius: float | None = None
    orbit_speed: float | None = None
    orbit_angle: float | None = None
    size: float | None = None
    is_seed_node: bool = False

    def is_connected_to(self, other_id: str) -> bool:
        return other_id in self.connections

    def with_connection(self, other_id: str) -> Node:
        """Return a copy linked to *other_id* (unchanged if already linked)."""
        if other_id in self.connections:
            return self
        return self.model_copy(update={"connections": (*self.connections, other_id)})

    def without_connection(self, other_id: str) -> Node:
        """Return a copy with *other_id* removed from ``connections``."""
        if other_id not in self.connections:
            return self
        kept = tuple(cid for cid in self.connections if cid != other_id)
        return self.model_copy(update={"connections": kept})

    def to_json_dict(self) -> dict[str, object]:
        """Serialize with camelCase keys, omitting unset orbital attributes."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class NodePatch(BaseModel):
    """Editable text fields of a node. ``None`` means "leave unchanged"."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str | None = None
    body: str | None = None

    def changes(self) -> dict[str, str]:
        return {k: v for k, v in (("title", self.title), ("body", self.body)) if v is not None}


def next_orbit_radius(existing: Iterable[float | None]) -> float:
    """Return an orbit radius strictly beyond every radius in *existing*.

    ``None`` entries (nodes without an orbit) are ignored. When no radius
    is present the baseline is used as the starting point.
    """
    radii = [r for r in existing if r is not None]
    return (max(radii) if radii else ORBIT_BASELINE) + ORBIT_INCREMENT
