"""BaseService — abstract foundation for all mindspace services.

Every service receives a :class:`Workspace` at construction time. The
workspace provides the live graph store, the snapshot gateway, and the
durable preferences.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mindspace.domain.graph import GraphStore
    from mindspace.infrastructure.workspace import Workspace


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class GraphService(BaseService):
            def add_node(self, title: str | None = None) -> ServiceResult:
                node_id = self._graph.add_node(title)
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @property
    def _graph(self) -> GraphStore:
        return self._workspace.graph

    def _save_warnings(self) -> list[str]:
        """Surface a pending autosave failure as a warning."""
        error = self._workspace.last_save_error
        if error is None:
            return []
        return [f"Changes not yet saved: {error}"]
