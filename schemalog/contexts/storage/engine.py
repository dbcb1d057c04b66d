"""
SQLAlchemy implementation of DatabaseWrapper for SCHEMALOG.

One wrapper covers every supported backend; SQLAlchemy handles the driver
and the connection pool.
"""

from pathlib import Path
from typing import Any, List, Mapping, Optional

import pandas as pd
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from schemalog.contexts.storage.config import DatabaseConfig
from schemalog.contexts.storage.database import DatabaseWrapper


class SQLAlchemyWrapper(DatabaseWrapper):
    """
    DatabaseWrapper backed by a SQLAlchemy engine.

    Statements run inside ``engine.begin()`` so every call commits on success and
    rolls back on error.
    """

    def __init__(self, config: DatabaseConfig, engine: Optional[Engine] = None):
        super().__init__(config)
        self._engine = engine

    @property
    def engine(self) -> Engine:
        """Lazily created engine for the configured connection string."""
        if self._engine is None:
            kwargs = {}
            if self.config.backend == "sqlite":
                if self.config.name == ":memory:":
                    # Every pooled connection would otherwise get its own empty database
                    kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
                else:
                    Path(self.config.name).parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_engine(self.config.connection_string, **kwargs)
        return self._engine

    def connect(self):
        """Create a new connection from the engine's pool."""
        return self.engine.connect()

    def execute(self, statement, params: Optional[Mapping[str, Any]] = None) -> None:
        """Execute a statement in its own transaction."""
        if isinstance(statement, str):
            statement = text(statement)
        with self.engine.begin() as conn:
            if params is None:
                conn.execute(statement)
            else:
                conn.execute(statement, dict(params))

    def query_columns(self, query: str) -> List[str]:
        """Return the result column names of a query, in table order."""
        with self.engine.connect() as conn:
            result = conn.execute(text(query))
            columns = list(result.keys())
            result.close()
        return columns

    def export_df(self, query: str) -> pd.DataFrame:
        """Execute a query and return results as a pandas DataFrame."""
        with self.engine.connect() as conn:
            return pd.read_sql_query(text(query), conn)

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
