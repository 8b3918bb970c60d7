"""Node identifier generation.

INVARIANT: IDs are permanent and never reused. Once generated, an ID never
changes, and a deleted node's ID is only ever seen again through undo.

User nodes get random UUID4 strings. Seed nodes get stable
``seed-{name}`` IDs so re-seeding can be detected and exports stay
comparable across installs.
"""

from __future__ import annotations

import re
import uuid

SEED_PREFIX = "seed-"

_SEED_PATTERN = re.compile(r"^seed-[a-z0-9-]+$")


def generate_node_id() -> str:
    """Return a fresh opaque node ID."""
    return str(uuid.uuid4())


def seed_node_id(name: str) -> str:
    """Return the stable ID for the seed planet called *name*."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return f"{SEED_PREFIX}{slug}"


def is_seed_id(node_id: str) -> bool:
    """Check whether *node_id* has the seed ID shape."""
    return _SEED_PATTERN.match(node_id) is not None
