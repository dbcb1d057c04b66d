"""
Generic database wrapper for SCHEMALOG.

Provides database-agnostic interfaces that can work with any SQL database backend.
The log sink only relies on three primitives: executing a statement without a
result, reading the column names of a zero-row query, and executing a prepared
statement with named bindings.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

import pandas as pd

from schemalog.contexts.storage.config import DatabaseConfig


class DatabaseWrapper(ABC):
    """
    Abstract base class for database operations.

    Provides a common interface for different database backends (PostgreSQL, MySQL, SQLite)
    """

    def __init__(self, config: DatabaseConfig):
        """
        Initialize database wrapper.

        Args:
            config: Database config
        """
        self.config = config

    @abstractmethod
    def connect(self):
        """Create and return a database connection."""
        pass

    @abstractmethod
    def execute(self, statement, params: Optional[Mapping[str, Any]] = None) -> None:
        """
        Execute a DDL or DML statement without reading a result.

        Args:
            statement: SQL string or prepared (TextClause) statement
            params: Named parameter bindings for the statement
        """
        pass

    @abstractmethod
    def query_columns(self, query: str) -> List[str]:
        """
        Run a query and return the names of its result columns, in order.

        Intended for zero-row queries (``SELECT * FROM t LIMIT 0``) used to read a
        table's shape without touching its rows.
        """
        pass

    @abstractmethod
    def export_df(self, query: str) -> pd.DataFrame:
        """
        Execute a query and return results as a pandas DataFrame.

        Args:
            query: SQL query string

        Returns:
            DataFrame with query results
        """
        pass

    def dispose(self) -> None:
        """Release pooled connections. No-op for backends without a pool."""
        pass

    @classmethod
    def from_config(cls, config: DatabaseConfig):
        return cls(config)
