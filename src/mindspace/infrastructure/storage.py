"""KeyValueStore — device-local persistent storage of JSON documents.

Values are opaque strings to this layer; callers own serialization.
Absence of a key is a normal state (first run), reported as ``None``.

Write failures are wrapped in :class:`StorageError` and propagate to the
caller. Nothing here retries.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError

from mindspace.infrastructure.database.schema import kv_store

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the underlying store cannot be read or written."""


class KeyValueStore:
    """String values keyed by string, backed by the ``kv_store`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def get(self, key: str) -> str | None:
        """Return the value for *key*, or None if the key is absent."""
        try:
            with self._engine.connect() as conn:
                return conn.execute(
                    select(kv_store.c.value).where(kv_store.c.key == key)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            msg = f"Failed to read {key!r}: {exc}"
            raise StorageError(msg) from exc

    def set(self, key: str, value: str) -> None:
        """Insert or overwrite *key* atomically."""
        updated = datetime.now(UTC).isoformat()
        stmt = insert(kv_store).values(key=key, value=value, updated=updated)
        stmt = stmt.on_conflict_do_update(
            index_elements=[kv_store.c.key],
            set_={"value": stmt.excluded.value, "updated": stmt.excluded.updated},
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as exc:
            msg = f"Failed to write {key!r}: {exc}"
            raise StorageError(msg) from exc
        logger.debug("Stored %s (%d chars)", key, len(value))

    def delete(self, key: str) -> bool:
        """Remove *key*. Returns True if a value was deleted."""
        try:
            with self._engine.begin() as conn:
                result = conn.execute(delete(kv_store).where(kv_store.c.key == key))
        except SQLAlchemyError as exc:
            msg = f"Failed to delete {key!r}: {exc}"
            raise StorageError(msg) from exc
        return bool(result.rowcount)

    def keys(self) -> list[str]:
        with self._engine.connect() as conn:
            return list(conn.execute(select(kv_store.c.key).order_by(kv_store.c.key)).scalars())

    def close(self) -> None:
        self._engine.dispose()
