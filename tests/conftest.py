"""
Shared fixtures for unit and integration tests.

Provides:
- Temporary file-backed SQLite database for isolated testing
- A database wrapper that records every statement it executes
- Sink and record factories
"""

from datetime import datetime

import pytest
from sqlalchemy import text

from schemalog.contexts.sink import DynamicSqlLogSink, LogRecord
from schemalog.contexts.storage import DatabaseConfig, SQLAlchemyWrapper, SQLiteDialect

FIXED_TIME = datetime(2024, 3, 1, 12, 30, 0)


class RecordingWrapper(SQLAlchemyWrapper):
    """SQLAlchemyWrapper that keeps the SQL text of every executed statement."""

    def __init__(self, config):
        super().__init__(config)
        self.statements = []

    def execute(self, statement, params=None):
        self.statements.append(str(statement))
        super().execute(statement, params)

    @property
    def alters(self):
        return [s for s in self.statements if s.startswith("ALTER")]

    @property
    def inserts(self):
        return [s for s in self.statements if s.startswith("INSERT")]


@pytest.fixture
def sqlite_config(tmp_path):
    """Database config pointing at a fresh SQLite file."""
    return DatabaseConfig(backend="sqlite", name=str(tmp_path / "logs.db"))


@pytest.fixture
def database(sqlite_config):
    """Recording wrapper around the temporary database."""
    wrapper = RecordingWrapper(sqlite_config)
    yield wrapper
    wrapper.dispose()


@pytest.fixture
def dialect():
    return SQLiteDialect()


@pytest.fixture
def make_sink(database, dialect):
    """Factory for sinks writing to the temporary database."""

    def _make(**kwargs):
        return DynamicSqlLogSink(database=database, dialect=dialect, **kwargs)

    return _make


@pytest.fixture
def make_record():
    """Factory for records with fixed baseline values."""

    def _make(context=None, extra=None, **overrides):
        values = {
            "channel": "app",
            "level": 400,
            "message": "failed",
            "datetime": FIXED_TIME,
            "context": context or {},
            "extra": extra,
        }
        values.update(overrides)
        return LogRecord(**values)

    return _make


@pytest.fixture
def fetch_rows(database):
    """Return all rows of a table as dicts, in insertion order."""

    def _fetch(table="logs"):
        with database.connect() as conn:
            result = conn.execute(text(f'SELECT * FROM "{table}" ORDER BY id'))
            return [dict(row) for row in result.mappings().all()]

    return _fetch


@pytest.fixture
def table_columns(database):
    """Return the live column names of a table."""

    def _columns(table="logs"):
        with database.connect() as conn:
            return list(conn.execute(text(f'SELECT * FROM "{table}" LIMIT 0')).keys())

    return _columns
