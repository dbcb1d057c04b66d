"""
Custom exceptions for the log sink.

Provides a hierarchy of exceptions for schema reconciliation and record writing.
"""


class SchemaLogError(Exception):
    """Base exception for all log sink errors."""

    pass


class InvalidIdentifierError(SchemaLogError, ValueError):
    """Raised when a table or field name is not a safe SQL identifier."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            f"Invalid SQL identifier {identifier!r}: use letters, digits and underscores "
            "(not starting with a digit, at most 64 characters)"
        )


class SchemaError(SchemaLogError):
    """Raised when creating or altering the log table fails."""

    def __init__(self, message: str, statement: str = None):
        self.statement = statement
        super().__init__(message)


class ColumnMetadataError(SchemaLogError):
    """Raised when the log table's columns cannot be read back."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Could not read column metadata of table '{table}'")


class WriteError(SchemaLogError):
    """Raised when inserting a record fails. Sink state is left unchanged."""

    def __init__(self, table: str, columns: tuple):
        self.table = table
        self.columns = columns
        super().__init__(f"Failed to insert log record into '{table}' ({', '.join(columns)})")
