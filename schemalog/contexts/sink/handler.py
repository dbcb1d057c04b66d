"""
Log sink writing records into a self-reconciling SQL table.

The sink can be used directly (``sink.write(record)``) or registered with
loguru, which calls it once per emitted message.
"""

import threading
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from schemalog.contexts.sink.columns import ColumnSet, validate_identifier
from schemalog.contexts.sink.exceptions import SchemaLogError, WriteError
from schemalog.contexts.sink.projector import project_record
from schemalog.contexts.sink.reconciler import ReconcileResult, SchemaReconciler
from schemalog.contexts.sink.records import LogRecord, is_package_record
from schemalog.contexts.sink.statements import StatementBuilder
from schemalog.contexts.storage.database import DatabaseWrapper
from schemalog.contexts.storage.dialects import SqlDialect


class DynamicSqlLogSink:
    """
    Writes log records into ``table``, reconciling its columns on first use.

    For each additional field, a context value under the same key is stored in
    the column of that name. Context keys that are not declared fields are
    dropped; declared fields missing from a record are stored as NULL.

    One instance serves one database. Writes are serialized by an internal lock,
    so records are inserted in the order they were submitted.

    Registered with loguru (``logger.add(sink)``), the sink receives formatted
    messages through ``write``; records emitted by this package are skipped.
    A failed first reconciliation is kept: later writes re-raise it without
    issuing more DDL.
    """

    def __init__(
        self,
        database: DatabaseWrapper,
        dialect: SqlDialect,
        table: str = "logs",
        additional_fields: Iterable[str] = (),
        skip_database_modifications: bool = False,
        migration_log_dir: Optional[Path] = None,
    ):
        """
        Args:
            database: DatabaseWrapper the records are written through
            dialect: SQL dialect of the database
            table: Table to store the logs in
            additional_fields: Context keys stored in their own columns
            skip_database_modifications: Trust that the table already matches and never alter it
            migration_log_dir: Directory for the schema migration event log (None disables it)
        """
        self.database = database
        self.table = validate_identifier(table)
        self.additional_fields = tuple(additional_fields)
        self.skip_database_modifications = skip_database_modifications

        self.reconciler = SchemaReconciler(database, dialect, migration_log_dir=migration_log_dir)
        self.statements = StatementBuilder(dialect)

        self._lock = threading.Lock()
        self._initialized = False
        self._init_error: Optional[SchemaLogError] = None
        self._columns = ColumnSet.baseline().with_additional(self.additional_fields)

        if skip_database_modifications:
            self._initialized = True
            logger.debug(f"Trusting existing schema of '{self.table}' (columns: {', '.join(self._columns)})")

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def columns(self) -> ColumnSet:
        return self._columns

    def initialize(self) -> Optional[ReconcileResult]:
        """
        Reconcile the table now instead of on the first write.

        Returns:
            ReconcileResult, or None if the sink was already initialized
        """
        with self._lock:
            return self._initialize()

    def write(self, record: Union[LogRecord, Mapping[str, Any]]) -> None:
        """
        Insert one record.

        Args:
            record: LogRecord, a mapping accepted by LogRecord.from_mapping,
                or a loguru message

        Raises:
            SchemaError: If the table cannot be created or altered on first write
            ColumnMetadataError: If the table's columns cannot be read on first write
            WriteError: If the insert fails
        """
        if hasattr(record, "record"):
            if is_package_record(record.record):
                return
            record = LogRecord.from_loguru(record.record)
        elif not isinstance(record, LogRecord):
            record = LogRecord.from_mapping(record)

        with self._lock:
            self._initialize()
            values = project_record(record, self._columns)
            prepared = self.statements.build(self.table, values.keys())
            try:
                self.database.execute(prepared.clause, prepared.bind(values))
            except SQLAlchemyError as e:
                raise WriteError(self.table, prepared.columns) from e

    def __call__(self, message) -> None:
        """Loguru sink entry point."""
        self.write(message)

    def _initialize(self) -> Optional[ReconcileResult]:
        if self._initialized:
            return None
        if self._init_error is not None:
            raise self._init_error
        try:
            result = self.reconciler.ensure(self.table, self.additional_fields)
        except SchemaLogError as e:
            self._init_error = e
            raise
        self._columns = result.columns
        self._initialized = True
        return result
