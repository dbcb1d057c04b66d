"""
SQL dialects for the log table.

DDL rarely supports parameter binding for identifiers, so table and column
names are spliced into statements. Each dialect knows how to quote identifiers
for its backend and how to spell the baseline log table.
"""

from abc import ABC, abstractmethod
from typing import List


class SqlDialect(ABC):
    """
    Abstract base class for backend-specific DDL.

    Different database systems spell auto-increment keys, long text and index
    methods differently, but the statements the log sink needs are the same.
    """

    name: str = ""
    quote_char: str = '"'

    def quote(self, identifier: str) -> str:
        """Quote an identifier, doubling any embedded quote character."""
        escaped = identifier.replace(self.quote_char, self.quote_char * 2)
        return f"{self.quote_char}{escaped}{self.quote_char}"

    @abstractmethod
    def create_table_statements(self, table: str) -> List[str]:
        """
        Statements creating the baseline log table and its indexes if missing.

        Args:
            table: Table name (unquoted)

        Returns:
            List of SQL statements, executed in order
        """
        pass

    def add_column(self, table: str, column: str) -> str:
        return f"ALTER TABLE {self.quote(table)} ADD COLUMN {self.quote(column)} TEXT NULL DEFAULT NULL"

    def drop_column(self, table: str, column: str) -> str:
        return f"ALTER TABLE {self.quote(table)} DROP COLUMN {self.quote(column)}"

    def select_no_rows(self, table: str) -> str:
        """Query returning the table's columns without any rows."""
        return f"SELECT * FROM {self.quote(table)} LIMIT 0"

    def _index_name(self, table: str, column: str) -> str:
        return self.quote(f"{table}_{column}_idx")


class MySQLDialect(SqlDialect):
    name = "mysql"
    quote_char = "`"

    def create_table_statements(self, table: str) -> List[str]:
        return [
            f"CREATE TABLE IF NOT EXISTS {self.quote(table)} ("
            "id BIGINT(20) UNSIGNED NOT NULL AUTO_INCREMENT PRIMARY KEY, "
            "channel VARCHAR(255), level INTEGER, message LONGTEXT, time DATETIME, "
            "INDEX(channel) USING HASH, INDEX(level) USING HASH, INDEX(time) USING BTREE)"
        ]


class PostgresDialect(SqlDialect):
    name = "postgres"

    def create_table_statements(self, table: str) -> List[str]:
        quoted = self.quote(table)
        return [
            f"CREATE TABLE IF NOT EXISTS {quoted} ("
            "id BIGSERIAL PRIMARY KEY, channel VARCHAR(255), level INTEGER, "
            '"message" TEXT, "time" TIMESTAMP)',
            f"CREATE INDEX IF NOT EXISTS {self._index_name(table, 'channel')} ON {quoted} USING HASH (channel)",
            f"CREATE INDEX IF NOT EXISTS {self._index_name(table, 'level')} ON {quoted} USING HASH (level)",
            f'CREATE INDEX IF NOT EXISTS {self._index_name(table, "time")} ON {quoted} USING BTREE ("time")',
        ]


class SQLiteDialect(SqlDialect):
    name = "sqlite"

    def create_table_statements(self, table: str) -> List[str]:
        # SQLite has no hash indexes; its B-tree index serves equality lookups too
        quoted = self.quote(table)
        return [
            f"CREATE TABLE IF NOT EXISTS {quoted} ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, channel VARCHAR(255), level INTEGER, "
            "message TEXT, time DATETIME)",
            f"CREATE INDEX IF NOT EXISTS {self._index_name(table, 'channel')} ON {quoted} (channel)",
            f"CREATE INDEX IF NOT EXISTS {self._index_name(table, 'level')} ON {quoted} (level)",
            f"CREATE INDEX IF NOT EXISTS {self._index_name(table, 'time')} ON {quoted} (time)",
        ]

    def add_column(self, table: str, column: str) -> str:
        return f"ALTER TABLE {self.quote(table)} ADD COLUMN {self.quote(column)} TEXT DEFAULT NULL"
