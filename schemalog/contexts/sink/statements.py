"""
INSERT statements for the log table.

The projected column list depends on each record's content, so statements are
built per column tuple and cached under that exact tuple.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple

from loguru import logger
from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from schemalog.contexts.sink.columns import validate_identifier
from schemalog.contexts.storage.dialects import SqlDialect


@dataclass(frozen=True)
class PreparedInsert:
    """An INSERT bound to one ordered list of columns."""

    table: str
    columns: Tuple[str, ...]
    sql: str
    clause: TextClause = field(compare=False, repr=False)

    @property
    def placeholder_count(self) -> int:
        return self.sql.count(":")

    def bind(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Return the parameters for this statement from a projected value map.

        Raises:
            ValueError: If ``values`` does not cover exactly this statement's columns
        """
        if tuple(values.keys()) != self.columns:
            raise ValueError(
                f"Bound columns {list(values.keys())} do not match statement columns {list(self.columns)}"
            )
        return dict(values)


class StatementBuilder:
    """Builds and caches parameterized INSERT statements for one table."""

    def __init__(self, dialect: SqlDialect, max_cached: int = 64):
        self.dialect = dialect
        self.max_cached = max_cached
        self._cache: Dict[Tuple[str, str, Tuple[str, ...]], PreparedInsert] = {}

    def build(self, table: str, columns: Iterable[str]) -> PreparedInsert:
        """
        Return ``INSERT INTO <table> (<c1>, ...) VALUES (:c1, ...)`` for the given columns.

        ``id`` is always skipped and the given order is preserved.

        Args:
            table: Table name
            columns: Column names, typically the keys of a projected record

        Returns:
            PreparedInsert for exactly these columns
        """
        ordered = tuple(column for column in columns if column != "id")
        key = (self.dialect.name, table, ordered)
        prepared = self._cache.get(key)
        if prepared is not None:
            return prepared

        prepared = self._prepare(table, ordered)
        if len(self._cache) >= self.max_cached:
            self._cache.clear()
        self._cache[key] = prepared
        logger.debug(f"Prepared insert for '{table}' with {len(ordered)} columns: {', '.join(ordered)}")
        return prepared

    def _prepare(self, table: str, columns: Tuple[str, ...]) -> PreparedInsert:
        for column in columns:
            validate_identifier(column)
        column_sql = ", ".join(self.dialect.quote(column) for column in columns)
        value_sql = ", ".join(f":{column}" for column in columns)
        sql = f"INSERT INTO {self.dialect.quote(table)} ({column_sql}) VALUES ({value_sql})"
        return PreparedInsert(table=table, columns=columns, sql=sql, clause=text(sql))
