"""Database engine setup for SQLite with WAL mode.

SQLite stands in for the device-local key-value store: WAL mode for
crash-safe writes, one row per key. The DB is stored at
``{root}/.mindspace/mindspace.db`` unless configured otherwise.

SQLAlchemy Core (not ORM) is used because mindspace is a short-lived
CLI process with no use for session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from mindspace.infrastructure.database.schema import metadata


def create_db_engine(db_path: Path | None) -> Engine:
    """Create a SQLite engine with WAL mode.

    ``None`` creates a private in-memory database.
    """
    url = f"sqlite:///{db_path}" if db_path is not None else "sqlite://"
    engine = create_engine(url, echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        if db_path is not None:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(db_path: Path | None) -> Engine:
    """Initialize the store at *db_path*, creating parent directories.

    Idempotent: safe to call on an existing store.

    Returns the engine ready for use.
    """
    if db_path is not None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    return engine
