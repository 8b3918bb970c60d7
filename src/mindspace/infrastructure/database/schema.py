"""SQLAlchemy Core table definitions for the mindspace store.

A single key-value table: each key holds one JSON document. The snapshot
lives under the configured storage key; nothing else is required for a
working install.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

kv_store = Table(
    "kv_store",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),
    Column("updated", Text, nullable=False),
)
