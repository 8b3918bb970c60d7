"""PersistenceService — save, load, backup export/import, and reset.

Pipeline for import: PARSE → MIGRATE → REPLACE → SAVE

Import is all-or-nothing. The document is fully parsed and migrated
before the graph is touched, so a malformed file leaves the graph exactly
as it was and comes back as a failed result (unlike ``load``, which treats
malformed stored data as absent).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mindspace.domain.migrations import SnapshotError, migrate_snapshot
from mindspace.domain.snapshot import CURRENT_SCHEMA_VERSION, ExportDocument
from mindspace.infrastructure.storage import StorageError
from mindspace.services._helpers import now_compact, now_iso
from mindspace.services.base import BaseService
from mindspace.services.result import ServiceResult

logger = logging.getLogger(__name__)


class PersistenceService(BaseService):
    """Move the durable subset between the graph, the store, and files."""

    # ------------------------------------------------------------------
    # Device-local store
    # ------------------------------------------------------------------

    def save(self) -> ServiceResult:
        """Write the durable subset under the configured storage key."""
        op = "save"
        try:
            size = self._workspace.save()
        except StorageError as exc:
            return ServiceResult.failure(op, "SAVE_FAILED", str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "key": self._workspace.gateway.key,
                "node_count": len(self._graph),
                "bytes": size,
            },
        )

    def load(self) -> ServiceResult:
        """Re-read the stored snapshot into the graph (migrating and seeding)."""
        op = "load"
        try:
            summary = self._workspace.hydrate()
        except StorageError as exc:
            return ServiceResult.failure(op, "LOAD_FAILED", str(exc))
        warnings = [] if summary["loaded"] else ["No usable stored snapshot; started fresh"]
        return ServiceResult(
            ok=True,
            op=op,
            data={"key": self._workspace.gateway.key, **summary},
            warnings=warnings,
        )

    def reset(self) -> ServiceResult:
        """Delete the stored snapshot and return to an empty graph."""
        op = "reset"
        try:
            existed = self._workspace.reset()
        except StorageError as exc:
            return ServiceResult.failure(op, "RESET_FAILED", str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={"key": self._workspace.gateway.key, "deleted": existed},
        )

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_snapshot(self) -> bytes:
        """Serialize nodes and mode as a versioned JSON backup document."""
        document = ExportDocument(
            nodes=dict(self._graph.nodes),
            mode=self._graph.mode,
            exported_at=now_iso(),
            schema_version=str(CURRENT_SCHEMA_VERSION),
        )
        indent = self._workspace.settings.export.indent
        return json.dumps(document.to_json_dict(), indent=indent).encode("utf-8")

    def default_export_name(self) -> str:
        prefix = self._workspace.settings.export.filename_prefix
        return f"{prefix}-{now_compact()}.json"

    def export_to_file(self, path: Path | None = None) -> ServiceResult:
        """Write a backup document to *path* (or a timestamped default name)."""
        op = "export"
        target = path or (self._workspace.settings.root / self.default_export_name())
        payload = self.export_snapshot()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except OSError as exc:
            return ServiceResult.failure(
                op, "EXPORT_FAILED", f"Cannot write {target}: {exc}", path=str(target)
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(target),
                "node_count": len(self._graph),
                "mode": self._graph.mode.value,
                "bytes": len(payload),
            },
        )

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def import_snapshot(self, data: bytes | str) -> ServiceResult:
        """Replace nodes and mode from a backup document.

        Only ``nodes`` and ``mode`` are applied; a missing mode means
        GALAXY and any other fields are ignored. Preferences, which are not
        part of a backup, are kept. Imported nodes are never re-seeded.
        """
        op = "import"
        try:
            document = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            return ServiceResult.failure(op, "INVALID_IMPORT", f"Not valid JSON: {exc}")

        if not isinstance(document, dict) or not isinstance(document.get("nodes"), dict):
            return ServiceResult.failure(
                op, "INVALID_IMPORT", "Backup must be an object with a 'nodes' object"
            )

        raw: dict[str, Any] = {"nodes": document["nodes"], "mode": document.get("mode", "GALAXY")}
        if "schemaVersion" in document:
            raw["schemaVersion"] = document["schemaVersion"]
        try:
            snapshot = migrate_snapshot(raw, self._workspace.migration_context)
        except SnapshotError as exc:
            return ServiceResult.failure(op, "INVALID_IMPORT", str(exc))

        self._graph.replace(snapshot.nodes, snapshot.mode)
        logger.info("Imported %d node(s) in %s mode", len(snapshot.nodes), snapshot.mode)
        self._workspace.plugins.hook.post_import(
            node_count=len(snapshot.nodes), mode=snapshot.mode.value
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"node_count": len(snapshot.nodes), "mode": snapshot.mode.value},
            warnings=self._save_warnings(),
        )

    def import_from_file(self, path: Path) -> ServiceResult:
        """Read *path* and import it. Unreadable files fail like bad JSON."""
        try:
            data = path.read_bytes()
        except OSError as exc:
            return ServiceResult.failure("import", "INVALID_IMPORT", f"Cannot read {path}: {exc}")
        return self.import_snapshot(data)
