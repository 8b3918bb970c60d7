"""Bounded last-in-first-out log of reversible graph operations.

Only node deletion is recorded today. ``MOVE_NODE`` entries are accepted
and replayed by the graph store but nothing records them yet.

INVARIANT: Replaying an entry never pushes a new one. Undo is single-level
replay, not itself undoable.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from pydantic import BaseModel

from mindspace.domain.geometry import Point3
from mindspace.domain.nodes import Node
from mindspace.domain.types import UndoKind

UNDO_LIMIT = 10


class UndoEntry(BaseModel):
    """A recorded operation and the data needed to invert it."""

    model_config = {"frozen": True}

    kind: UndoKind
    node_id: str
    node: Node | None = None  # DELETE_NODE: full snapshot at deletion time
    previous_position: Point3 | None = None  # MOVE_NODE


class UndoLog:
    """Undo history capped at *limit* entries; the oldest is evicted first."""

    def __init__(self, limit: int = UNDO_LIMIT) -> None:
        self._entries: deque[UndoEntry] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        assert self._entries.maxlen is not None
        return self._entries.maxlen

    def push(self, entry: UndoEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> UndoEntry | None:
        """Remove and return the newest entry, or None when empty."""
        if not self._entries:
            return None
        return self._entries.pop()

    def peek(self) -> UndoEntry | None:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[UndoEntry]:
        """Iterate oldest first."""
        return iter(self._entries)
