"""Layout, presentation, and undo enums.

``SpaceMode.PATH`` survives only so snapshots written by older releases
still deserialize; it behaves exactly like ``GALAXY``.
"""

from __future__ import annotations

from enum import StrEnum


class SpaceMode(StrEnum):
    """Active layout mode of the graph."""

    GALAXY = "GALAXY"
    SOLAR = "SOLAR"
    PATH = "PATH"

    @property
    def is_galaxy(self) -> bool:
        """True for GALAXY and the legacy PATH mode."""
        return self is not SpaceMode.SOLAR


class Theme(StrEnum):
    """Visual themes ("thinking modes")."""

    DEEP_SPACE = "deep-space"
    NEBULA = "nebula"
    CYBERPUNK = "cyberpunk"


class ViewMode(StrEnum):
    """Camera view preference persisted with the snapshot."""

    GALAXY = "galaxy"
    SOLAR_SYSTEM = "solar-system"


class UndoKind(StrEnum):
    """Kinds of reversible operation recorded in the undo log."""

    DELETE_NODE = "DELETE_NODE"
    MOVE_NODE = "MOVE_NODE"  # reserved, never recorded yet
