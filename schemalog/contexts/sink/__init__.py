"""
Log sink domain.

Writes structured log records into a SQL table whose columns follow the
declared additional fields.
"""

from loguru import logger

from schemalog.contexts.sink.columns import BASELINE_FIELDS, ColumnSet, validate_identifier
from schemalog.contexts.sink.config import (
    SinkConfig,
    attach_sink,
    create_sink,
    load_settings,
)
from schemalog.contexts.sink.exceptions import (
    ColumnMetadataError,
    InvalidIdentifierError,
    SchemaError,
    SchemaLogError,
    WriteError,
)
from schemalog.contexts.sink.handler import DynamicSqlLogSink
from schemalog.contexts.sink.projector import project_record
from schemalog.contexts.sink.reconciler import ReconcileResult, SchemaReconciler
from schemalog.contexts.sink.records import LogRecord
from schemalog.contexts.sink.statements import PreparedInsert, StatementBuilder

# Silent until the application calls logger.enable("schemalog")
logger.disable("schemalog")

__all__ = [
    # Sink and wiring (primary interface)
    "DynamicSqlLogSink",
    "SinkConfig",
    "load_settings",
    "create_sink",
    "attach_sink",
    # Engine components
    "ColumnSet",
    "BASELINE_FIELDS",
    "validate_identifier",
    "LogRecord",
    "project_record",
    "SchemaReconciler",
    "ReconcileResult",
    "StatementBuilder",
    "PreparedInsert",
    # Errors
    "SchemaLogError",
    "SchemaError",
    "ColumnMetadataError",
    "WriteError",
    "InvalidIdentifierError",
]
