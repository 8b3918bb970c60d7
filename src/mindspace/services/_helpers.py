"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mindspace.domain.nodes import Node


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (for export provenance)."""
    return datetime.now(UTC).isoformat()


def now_compact() -> str:
    """Current UTC time as compact ISO (YYYYMMDDTHHmmss, for backup filenames)."""
    return datetime.now(UTC).strftime("%Y%m%dT%H%M%S")


def node_summary(node: Node) -> dict[str, Any]:
    """Short, display-oriented view of a node."""
    return {
        "id": node.id,
        "title": node.title,
        "connections": len(node.connections),
        "orbit_radius": node.orbit_radius,
        "seed": node.is_seed_node,
    }
