"""CheckService — integrity check of the live graph.

Pipeline: SCAN → (FIX) → REPORT

Issues found:

- ``self_connection``: a node lists itself (error)
- ``dangling_connection``: a node lists an ID that does not exist (error)
- ``asymmetric_connection``: A lists B but B does not list A (warning).
  ``undo()`` of a deletion leaves exactly this behind on purpose.
- ``orbit_order``: orbit radii not strictly increasing in creation order,
  or two nodes sharing a radius (warning)
- ``unknown_texture``: texture outside the palette (warning)

``fix=True`` repairs the connection issues: self and dangling entries are
dropped, asymmetric ones are mirrored onto the other endpoint.
"""

from __future__ import annotations

import logging
from typing import Any

from mindspace.domain.nodes import Node, is_valid_texture
from mindspace.services.base import BaseService
from mindspace.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _issue(severity: str, category: str, node_id: str, message: str, **extra: Any) -> dict[str, Any]:
    return {
        "severity": severity,
        "category": category,
        "node_id": node_id,
        "message": message,
        **extra,
    }


class CheckService(BaseService):
    """Report (and optionally repair) graph invariant violations."""

    def check(self, *, fix: bool = False) -> ServiceResult:
        issues = self._scan()
        fixed = self._fix(issues) if fix else 0
        if fixed:
            logger.info("Repaired %d connection issue(s)", fixed)
        return ServiceResult(
            ok=True,
            op="check",
            data={
                "node_count": len(self._graph),
                "issues": issues,
                "error_count": sum(1 for i in issues if i["severity"] == "error"),
                "warning_count": sum(1 for i in issues if i["severity"] == "warning"),
                "fixed": fixed,
            },
            warnings=self._save_warnings(),
        )

    # ------------------------------------------------------------------
    # Scan
    # ------------------------------------------------------------------

    def _scan(self) -> list[dict[str, Any]]:
        nodes = self._graph.nodes
        issues: list[dict[str, Any]] = []
        for node in nodes.values():
            for other_id in node.connections:
                if other_id == node.id:
                    issues.append(
                        _issue("error", "self_connection", node.id, "Node is linked to itself")
                    )
                elif other_id not in nodes:
                    issues.append(
                        _issue(
                            "error",
                            "dangling_connection",
                            node.id,
                            f"Linked to missing node {other_id}",
                            other_id=other_id,
                        )
                    )
                elif not nodes[other_id].is_connected_to(node.id):
                    issues.append(
                        _issue(
                            "warning",
                            "asymmetric_connection",
                            node.id,
                            f"{other_id} does not link back",
                            other_id=other_id,
                        )
                    )
            if not is_valid_texture(node.texture_ref):
                issues.append(
                    _issue("warning", "unknown_texture", node.id, f"Texture {node.texture_ref}")
                )
        issues.extend(self._scan_orbits(list(nodes.values())))
        return issues

    @staticmethod
    def _scan_orbits(nodes: list[Node]) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        previous: Node | None = None
        ordered = sorted(
            (n for n in nodes if n.orbit_radius is not None),
            key=lambda n: (n.created_at, n.id),
        )
        for node in ordered:
            assert node.orbit_radius is not None
            if previous is not None and previous.orbit_radius is not None:
                if node.orbit_radius <= previous.orbit_radius:
                    issues.append(
                        _issue(
                            "warning",
                            "orbit_order",
                            node.id,
                            f"Orbit {node.orbit_radius} not beyond older node "
                            f"{previous.id} at {previous.orbit_radius}",
                            other_id=previous.id,
                        )
                    )
            previous = node
        return issues

    def _fix(self, issues: list[dict[str, Any]]) -> int:
        connection_issues = {"self_connection", "dangling_connection", "asymmetric_connection"}
        if not any(i["category"] in connection_issues for i in issues):
            return 0
        return self._graph.repair_connections()
