from schemalog.contexts.storage.config import DatabaseConfig
from schemalog.contexts.storage.database import DatabaseWrapper
from schemalog.contexts.storage.dialects import (
    MySQLDialect,
    PostgresDialect,
    SQLiteDialect,
    SqlDialect,
)
from schemalog.contexts.storage.engine import SQLAlchemyWrapper

# Supported database backends
dialect_class_map = {
    "mysql": MySQLDialect,
    "postgres": PostgresDialect,
    "sqlite": SQLiteDialect,
}
ALLOWED_BACKENDS = list(dialect_class_map.keys())


def get_database_wrapper(config: DatabaseConfig) -> DatabaseWrapper:
    """
    Factory function to create the DatabaseWrapper for a configuration.

    Args:
        config: DatabaseConfig with connection details

    Returns:
        DatabaseWrapper implementation for the configured backend
    """
    _check_backend(config.backend)
    return SQLAlchemyWrapper.from_config(config)


def get_dialect(backend: str) -> SqlDialect:
    """
    Return the SQL dialect for a backend name.

    Raises:
        ValueError: If the backend is unsupported
    """
    _check_backend(backend)
    return dialect_class_map[backend.lower()]()


def _check_backend(backend: str) -> None:
    if not backend or backend.lower() not in ALLOWED_BACKENDS:
        raise ValueError(
            f"Unsupported database backend: '{backend}'. "
            f"Supported backends: {', '.join(ALLOWED_BACKENDS)}"
        )
