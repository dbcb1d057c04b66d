"""
Schema reconciliation for the log table.

Brings the table in line with the declared additional fields by diffing its
live columns against them, rather than replaying a versioned migration log.
Additional fields are nullable free text without constraints, so dropping and
adding columns is all a migration ever needs.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from schemalog.contexts.sink.columns import BASELINE_FIELDS, ColumnSet, validate_identifier
from schemalog.contexts.sink.exceptions import ColumnMetadataError, SchemaError
from schemalog.contexts.storage.database import DatabaseWrapper
from schemalog.contexts.storage.dialects import SqlDialect
from schemalog.contexts.storage.events import log_schema_migration_event


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one reconciliation run."""

    columns: ColumnSet
    added: Tuple[str, ...] = ()
    removed: Tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class SchemaReconciler:
    """
    Ensures the log table exists and its columns match the declared fields.

    Failures are not retried: repeating DDL against a table whose shape is
    drifting underneath us is not idempotent without outside coordination.
    """

    def __init__(
        self,
        database: DatabaseWrapper,
        dialect: SqlDialect,
        migration_log_dir: Optional[Path] = None,
    ):
        """
        Args:
            database: DatabaseWrapper used for DDL and column read-back
            dialect: SQL dialect of the database
            migration_log_dir: Directory for the schema migration event log (None disables it)
        """
        self.database = database
        self.dialect = dialect
        self.migration_log_dir = migration_log_dir

    def ensure(self, table: str, additional_fields: Iterable[str]) -> ReconcileResult:
        """
        Create the table if needed, then drop stale columns and add missing ones.

        Args:
            table: Table name
            additional_fields: Declared additional field names

        Returns:
            ReconcileResult with the authoritative column set

        Raises:
            SchemaError: If any DDL statement fails
            ColumnMetadataError: If the table's columns cannot be read back
        """
        validate_identifier(table)
        columns = ColumnSet.baseline().with_additional(additional_fields)
        declared = columns.additional

        for statement in self.dialect.create_table_statements(table):
            self._run_ddl(statement)

        actual = self.read_columns(table)

        removed = tuple(c for c in actual if c not in declared and c not in BASELINE_FIELDS)
        added = tuple(c for c in declared if c not in actual)

        for column in removed:
            self._run_ddl(self.dialect.drop_column(table, column))
            self._record(table, column, None, "drop", "column not declared as an additional field")
            logger.info(f"Dropped column '{column}' from '{table}'")

        for column in added:
            self._run_ddl(self.dialect.add_column(table, column))
            self._record(table, column, "TEXT", "add", "declared additional field missing from table")
            logger.info(f"Added column '{column}' to '{table}'")

        if added or removed:
            logger.info(
                f"Reconciled '{table}': {len(added)} column(s) added, {len(removed)} removed"
            )
        else:
            logger.debug(f"Table '{table}' already matches {len(columns)} declared columns")

        return ReconcileResult(columns=columns, added=added, removed=removed)

    def read_columns(self, table: str) -> list:
        """Return the live column names of ``table`` in table order."""
        try:
            return self.database.query_columns(self.dialect.select_no_rows(table))
        except SQLAlchemyError as e:
            logger.error(f"Reading columns of '{table}' failed: {e}")
            raise ColumnMetadataError(table) from e

    def _run_ddl(self, statement: str) -> None:
        try:
            self.database.execute(statement)
        except SQLAlchemyError as e:
            logger.error(f"Schema change failed: {statement} ({e})")
            raise SchemaError(f"Schema change failed: {statement}", statement=statement) from e

    def _record(self, table, column, datatype, action, reason) -> None:
        if self.migration_log_dir is None:
            return
        log_schema_migration_event(
            database=self.database.config.name,
            table=table,
            column=column,
            datatype=datatype,
            action=action,
            reason=reason,
            log_dir=self.migration_log_dir,
        )
