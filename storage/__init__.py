"""
Storage Package.

Event and baseline persistence for the waste intelligence engine.

Modules:
- database: Engine, sessions, transaction scope
- models/: ORM models
- repositories/: Data access layer
- sql_stores: SQL-backed EventStore / BaselineStore / StoreViewReader
- memory: In-memory EventStore / BaselineStore
"""

from storage.database import Database, initialize_database
from storage.memory import InMemoryBaselineStore, InMemoryEventStore
from storage.sql_stores import SqlBaselineStore, SqlEventStore, SqlStoreViewReader

__all__ = [
    "Database",
    "initialize_database",
    "InMemoryBaselineStore",
    "InMemoryEventStore",
    "SqlBaselineStore",
    "SqlEventStore",
    "SqlStoreViewReader",
]
