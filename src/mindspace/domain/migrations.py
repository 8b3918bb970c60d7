"""Snapshot migration chain and first-run hydration.

Stored snapshots carry a ``schemaVersion`` marker. A snapshot without one
was written by the original release (version 0). Loading runs every step
from the detected version up to :data:`CURRENT_SCHEMA_VERSION`:

- ``0 -> 1``  rename legacy fields (``textureUrl``, ``content``/``description``...)
- ``1 -> 2``  backfill missing node fields (texture, timestamps, galaxy
  position, connections)
- ``2 -> 3``  assign orbit radii to nodes that predate solar mode (every
  node but the primary)

Steps are pure ``dict -> dict`` functions over a deep copy of the raw
snapshot. Repair steps are idempotent and re-run on every load, because
hand-edited or imported snapshots can carry defective nodes whatever their
marker says.

Hydration then seeds the starter planets once per snapshot lineage.
No I/O happens here.
"""

from __future__ import annotations

import copy
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from pydantic import ValidationError

from mindspace.domain.geometry import random_point_in_sphere
from mindspace.domain.graph import GALAXY_RADIUS
from mindspace.domain.nodes import (
    DEFAULT_COLOR,
    DEFAULT_TITLE,
    PLANET_TEXTURES,
    is_valid_texture,
    next_orbit_radius,
    now_ms,
)
from mindspace.domain.seeds import build_seed_nodes, has_seed_nodes
from mindspace.domain.snapshot import CURRENT_SCHEMA_VERSION, Snapshot
from mindspace.domain.types import SpaceMode

logger = logging.getLogger(__name__)

RawSnapshot: TypeAlias = dict[str, Any]
RawNode: TypeAlias = dict[str, Any]


class SnapshotError(ValueError):
    """Raised when a snapshot cannot be migrated into a valid shape."""


@dataclass
class MigrationContext:
    """Clock and random source handed to every step."""

    clock: Callable[[], int] = now_ms
    rng: random.Random = field(default_factory=random.Random)


@dataclass(frozen=True)
class Migration:
    """One step of the chain, upgrading ``from_version`` by one."""

    from_version: int
    description: str
    apply: Callable[[RawSnapshot, MigrationContext], RawSnapshot]
    repair: bool = False

    @property
    def to_version(self) -> int:
        return self.from_version + 1


MIGRATIONS: list[Migration] = []


def migration(
    from_version: int, description: str, *, repair: bool = False
) -> Callable[
    [Callable[[RawSnapshot, MigrationContext], RawSnapshot]],
    Callable[[RawSnapshot, MigrationContext], RawSnapshot],
]:
    """Register a chain step upgrading snapshots from *from_version*."""

    def decorator(
        fn: Callable[[RawSnapshot, MigrationContext], RawSnapshot],
    ) -> Callable[[RawSnapshot, MigrationContext], RawSnapshot]:
        MIGRATIONS.append(Migration(from_version, description, fn, repair=repair))
        MIGRATIONS.sort(key=lambda m: m.from_version)
        return fn

    return decorator


# ---------------------------------------------------------------------------
# Chain steps
# ---------------------------------------------------------------------------


def _node_items(raw: RawSnapshot) -> list[tuple[str, RawNode]]:
    nodes = raw.get("nodes")
    if nodes is None:
        raw["nodes"] = {}
        return []
    if not isinstance(nodes, dict):
        msg = f"'nodes' must be an object, got {type(nodes).__name__}"
        raise SnapshotError(msg)
    for key, node in nodes.items():
        if not isinstance(node, dict):
            msg = f"Node {key!r} must be an object, got {type(node).__name__}"
            raise SnapshotError(msg)
    return list(nodes.items())


@migration(0, "Rename legacy node fields")
def _rename_legacy_fields(raw: RawSnapshot, ctx: MigrationContext) -> RawSnapshot:
    for _key, node in _node_items(raw):
        for old, new in (
            ("textureUrl", "textureRef"),
            ("planetSize", "size"),
            ("isDefaultPlanet", "isSeedNode"),
        ):
            if old in node:
                value = node.pop(old)
                node.setdefault(new, value)

        if not node.get("title") and node.get("content"):
            # Oldest shape: the idea text lived in content, details in description.
            node["title"] = node.pop("content")
            node["body"] = node.pop("description", None) or ""
        elif "content" in node:
            content = node.pop("content")
            node.setdefault("body", content or "")

    if raw.get("mode") not in {m.value for m in SpaceMode}:
        raw["mode"] = SpaceMode.GALAXY.value
    return raw


@migration(1, "Backfill missing node fields", repair=True)
def _backfill_node_fields(raw: RawSnapshot, ctx: MigrationContext) -> RawSnapshot:
    for key, node in _node_items(raw):
        # The map key is authoritative; the store looks nodes up by it.
        node["id"] = key

        if not is_valid_texture(node.get("textureRef")):
            node["textureRef"] = ctx.rng.choice(PLANET_TEXTURES)
            node["color"] = DEFAULT_COLOR

        if not node.get("title") and not isinstance(node.get("title"), str):
            node["title"] = DEFAULT_TITLE

        if not node.get("updatedAt"):
            node["updatedAt"] = node.get("createdAt") or ctx.clock()
        if not node.get("createdAt"):
            node["createdAt"] = node["updatedAt"]

        if not node.get("position"):
            node["position"] = random_point_in_sphere(GALAXY_RADIUS, ctx.rng).model_dump()
        if not node.get("galaxyPosition"):
            node["galaxyPosition"] = copy.deepcopy(node["position"])

        if node.get("connections") is None:
            node["connections"] = []
    return raw


@migration(2, "Assign orbit radii to nodes that predate solar mode", repair=True)
def _assign_orbit_radii(raw: RawSnapshot, ctx: MigrationContext) -> RawSnapshot:
    nodes = [node for _key, node in _node_items(raw)]
    if not nodes:
        return raw
    # The primary (earliest createdAt, insertion order on ties) is the sun.
    primary = min(nodes, key=lambda n: n.get("createdAt") or 0)
    radii: list[float | None] = [node.get("orbitRadius") for node in nodes]
    for node in sorted(nodes, key=lambda n: (n.get("createdAt") or 0, str(n.get("id", "")))):
        if node.get("orbitRadius") is None and node is not primary:
            node["orbitRadius"] = next_orbit_radius(radii)
            radii.append(node["orbitRadius"])
    return raw


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def detect_version(raw: RawSnapshot) -> int:
    """Read the schema marker; anything unreadable means version 0."""
    marker = raw.get("schemaVersion")
    if isinstance(marker, bool):
        return 0
    if isinstance(marker, int):
        return max(marker, 0)
    if isinstance(marker, str) and marker.isdigit():
        return int(marker)
    return 0


def migrate_snapshot(raw: RawSnapshot, ctx: MigrationContext | None = None) -> Snapshot:
    """Upgrade *raw* to the current schema and validate it.

    *raw* itself is never modified.

    Raises:
        SnapshotError: If the data cannot be coerced into a valid snapshot.
    """
    if not isinstance(raw, dict):
        msg = f"Snapshot must be an object, got {type(raw).__name__}"
        raise SnapshotError(msg)

    ctx = ctx or MigrationContext()
    data = copy.deepcopy(raw)
    version = detect_version(data)
    for step in MIGRATIONS:
        if step.from_version >= version or step.repair:
            logger.debug("Applying migration %d -> %d", step.from_version, step.to_version)
            try:
                data = step.apply(data, ctx)
            except (AttributeError, TypeError) as exc:
                msg = f"Migration {step.from_version} -> {step.to_version} failed: {exc}"
                raise SnapshotError(msg) from exc
    data["schemaVersion"] = CURRENT_SCHEMA_VERSION

    try:
        return Snapshot.model_validate(data)
    except ValidationError as exc:
        msg = f"Snapshot failed validation: {exc.error_count()} error(s)"
        raise SnapshotError(msg) from exc


def seed_snapshot(snapshot: Snapshot, ctx: MigrationContext | None = None) -> Snapshot:
    """Merge the starter planets into *snapshot* unless already seeded."""
    if has_seed_nodes(snapshot.nodes):
        return snapshot
    ctx = ctx or MigrationContext()
    seeds = build_seed_nodes(snapshot.nodes, ctx.clock())
    logger.info("Seeding %d starter node(s)", len(seeds))
    return snapshot.model_copy(update={"nodes": {**snapshot.nodes, **seeds}})


def hydrate(raw: RawSnapshot | None, ctx: MigrationContext | None = None) -> Snapshot:
    """Migrate a loaded snapshot (or nothing, on first run) and seed it."""
    ctx = ctx or MigrationContext()
    snapshot = migrate_snapshot(raw, ctx) if raw is not None else Snapshot()
    return seed_snapshot(snapshot, ctx)
