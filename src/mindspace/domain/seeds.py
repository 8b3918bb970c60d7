"""Seed catalog — the starter planets synthesized on first run.

The set is fixed and deterministic: IDs, titles, textures, colors, sizes,
orbit speeds, and galaxy positions never vary between installs. Only the
orbit radii depend on what the snapshot already holds, because seeds are
created after any existing user node and must orbit beyond it.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

from mindspace.domain.geometry import Point3, orbit_point
from mindspace.domain.ids import seed_node_id
from mindspace.domain.nodes import Node, next_orbit_radius

SEED_RING_RADIUS = 12.0

_ORIGIN = Point3(x=0.0, y=0.0, z=0.0)


@dataclass(frozen=True)
class SeedPlanet:
    """One entry of the starter catalog."""

    name: str
    label: str
    description: str
    color: str
    texture_ref: str
    orbit_speed: float
    size: float


SEED_PLANETS: tuple[SeedPlanet, ...] = (
    SeedPlanet(
        "Mercury", "Quick Notes", "Inbox, fleeting thoughts, quick captures",
        "#8C7853", "/mercury.jpg", 4.8, 1.2,
    ),
    SeedPlanet(
        "Venus", "Ideas", "Brainstorming, creative ideas, experiments",
        "#FFC649", "/venus.jpg", 3.5, 2.0,
    ),
    SeedPlanet(
        "Earth", "Current Work", "Active projects, tasks in progress",
        "#4A90E2", "/earth-day.jpg", 3.0, 2.0,
    ),
    SeedPlanet(
        "Mars", "Future Plans", "Upcoming projects, goals, aspirations",
        "#E27B58", "/mars.jpg", 2.4, 1.5,
    ),
    SeedPlanet(
        "Jupiter", "Major Projects", "Large initiatives, complex work",
        "#C88B3A", "/jupiter.jpg", 1.3, 4.0,
    ),
    SeedPlanet(
        "Saturn", "Resources", "References, documentation, knowledge base",
        "#FAD5A5", "/moon.jpg", 0.97, 3.5,
    ),
    SeedPlanet(
        "Uranus", "Experiments", "Testing, prototypes, learning",
        "#4FD0E0", "/uranus.jpg", 0.68, 2.8,
    ),
    SeedPlanet(
        "Neptune", "Long-term Goals", "Vision, dreams, distant objectives",
        "#4B70DD", "/neptune.jpg", 0.54, 2.6,
    ),
)


def has_seed_nodes(nodes: Mapping[str, Node]) -> bool:
    """True once any node in the lineage carries the seed marker."""
    return any(node.is_seed_node for node in nodes.values())


def build_seed_nodes(existing: Mapping[str, Node], now: int) -> dict[str, Node]:
    """Create the starter planets to merge after *existing*.

    Creation timestamps step by one millisecond in catalog order so the
    orbit radii stay monotonic in creation order. Into an empty graph the
    first seed becomes the primary and gets no orbit radius.
    """
    radii: list[float | None] = [node.orbit_radius for node in existing.values()]
    has_nodes = bool(existing)
    seeds: dict[str, Node] = {}
    total = len(SEED_PLANETS)
    for index, planet in enumerate(SEED_PLANETS):
        position = orbit_point(index, total, _ORIGIN, SEED_RING_RADIUS, jitter=0.0)
        orbit_radius = next_orbit_radius(radii) if has_nodes else None
        node_id = seed_node_id(planet.name)
        seeds[node_id] = Node(
            id=node_id,
            title=planet.label,
            body=planet.description,
            position=position,
            galaxy_position=position,
            color=planet.color,
            texture_ref=planet.texture_ref,
            created_at=now + index,
            updated_at=now + index,
            orbit_radius=orbit_radius,
            orbit_speed=planet.orbit_speed,
            orbit_angle=(index / total) * math.pi * 2,
            size=planet.size,
            is_seed_node=True,
        )
        radii.append(orbit_radius)
        has_nodes = True
    return seeds
