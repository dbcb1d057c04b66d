"""
Data storage domain.

Handles connections, backend-specific DDL and schema inspection for the
log table. The sink context only talks to the interfaces exported here.
"""

from schemalog.contexts.storage.config import DatabaseConfig
from schemalog.contexts.storage.database import DatabaseWrapper
from schemalog.contexts.storage.dialects import (
    MySQLDialect,
    PostgresDialect,
    SQLiteDialect,
    SqlDialect,
)
from schemalog.contexts.storage.engine import SQLAlchemyWrapper
from schemalog.contexts.storage.events import (
    log_schema_migration_event,
    read_schema_migration_events,
)
from schemalog.contexts.storage.getter import (
    get_database_wrapper,
    get_dialect,
)
from schemalog.contexts.storage.schema import (
    SchemaInspector,
    draw_db_tree,
)

__all__ = [
    # Factory functions (primary interface)
    "get_database_wrapper",
    "get_dialect",
    # Generic interfaces
    "DatabaseWrapper",
    "DatabaseConfig",
    "SQLAlchemyWrapper",
    "SchemaInspector",
    # Dialects
    "SqlDialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    # Migration audit trail
    "log_schema_migration_event",
    "read_schema_migration_events",
    # Utilities
    "draw_db_tree",
]
