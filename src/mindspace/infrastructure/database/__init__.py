"""SQLite key-value storage via SQLAlchemy Core."""

from mindspace.infrastructure.database.engine import create_db_engine, init_database
from mindspace.infrastructure.database.schema import kv_store, metadata

__all__ = [
    "create_db_engine",
    "init_database",
    "kv_store",
    "metadata",
]
