"""Built-in autosave plugin — re-save the durable subset after each change.

Hooks into ``post_graph_change``. Selection and linking changes are not
durable and never trigger a write.

A failed save does not undo the mutation that triggered it. The error is
handed back to the workspace, which records it; the next durable change
saves again and clears it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from mindspace.infrastructure.workspace import Workspace

hookimpl = pluggy.HookimplMarker("mindspace")

logger = logging.getLogger(__name__)


class AutosavePlugin:
    """Persist the workspace whenever the durable subset changes."""

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace
        self.enabled = True

    @hookimpl
    def post_graph_change(self, kind: str, node_ids: list[str], durable: bool) -> None:
        if not durable or not self.enabled:
            return
        logger.debug("Autosave after %s (%d node(s))", kind, len(node_ids))
        self._workspace.save()
