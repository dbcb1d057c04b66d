"""
Integration tests for schema reconciliation against SQLite.

Tests:
- Table creation from scratch
- Idempotent re-runs
- Convergence from stale and partial tables
- Failure reporting and the migration event log
"""

import pytest

from schemalog.contexts.sink import (
    BASELINE_FIELDS,
    ColumnMetadataError,
    InvalidIdentifierError,
    SchemaError,
    SchemaReconciler,
)
from schemalog.contexts.storage import SQLiteDialect, read_schema_migration_events


class BrokenAddColumnDialect(SQLiteDialect):
    def add_column(self, table, column):
        return f"ALTER TABLE {self.quote(table)} ADD COLUMN"


class MissingTableDialect(SQLiteDialect):
    def select_no_rows(self, table):
        return 'SELECT * FROM "no_such_table" LIMIT 0'


@pytest.fixture
def reconciler(database, dialect):
    return SchemaReconciler(database, dialect)


class TestTableCreation:
    """Tests for creating the table from nothing."""

    def test_creates_baseline_table(self, reconciler, table_columns):
        result = reconciler.ensure("logs", [])
        assert table_columns() == list(BASELINE_FIELDS)
        assert result.columns.names == BASELINE_FIELDS
        assert not result.changed

    def test_creates_additional_fields(self, reconciler, table_columns):
        result = reconciler.ensure("logs", ["user_id", "request_id"])
        assert set(table_columns()) == set(BASELINE_FIELDS) | {"user_id", "request_id"}
        assert result.added == ("user_id", "request_id")
        assert result.removed == ()

    def test_custom_table_name(self, reconciler, table_columns):
        reconciler.ensure("audit_logs", ["user_id"])
        assert "user_id" in table_columns("audit_logs")

    def test_invalid_table_name(self, reconciler):
        with pytest.raises(InvalidIdentifierError):
            reconciler.ensure("logs; DROP TABLE users", [])


class TestIdempotence:
    """Tests for repeated reconciliation."""

    def test_second_run_issues_no_alter(self, reconciler, database):
        reconciler.ensure("logs", ["user_id", "request_id"])
        alters_after_first = len(database.alters)

        result = reconciler.ensure("logs", ["user_id", "request_id"])

        assert len(database.alters) == alters_after_first
        assert not result.changed


class TestConvergence:
    """Tests for column convergence from different starting tables."""

    def test_drops_stale_columns(self, reconciler, database, dialect, table_columns):
        reconciler.ensure("logs", ["legacy", "user_id"])

        result = reconciler.ensure("logs", ["user_id"])

        assert result.removed == ("legacy",)
        assert set(table_columns()) == set(BASELINE_FIELDS) | {"user_id"}

    def test_adds_missing_fields(self, reconciler, table_columns):
        reconciler.ensure("logs", ["a"])

        result = reconciler.ensure("logs", ["a", "b"])

        assert result.added == ("b",)
        assert set(table_columns()) == set(BASELINE_FIELDS) | {"a", "b"}

    def test_keeps_rows_when_altering(self, reconciler, database, fetch_rows):
        reconciler.ensure("logs", ["a"])
        database.execute(
            'INSERT INTO "logs" (channel, level, message, a) VALUES (:channel, :level, :message, :a)',
            {"channel": "app", "level": 200, "message": "kept", "a": "x"},
        )

        reconciler.ensure("logs", ["b"])

        rows = fetch_rows()
        assert len(rows) == 1
        assert rows[0]["message"] == "kept"
        assert rows[0]["b"] is None
        assert "a" not in rows[0]

    @pytest.mark.parametrize(
        "initial, declared",
        [
            (None, ["user_id"]),
            (["stale_one", "stale_two"], []),
            (["user_id", "stale"], ["user_id", "request_id"]),
            (["a", "b", "c"], ["c", "d"]),
        ],
    )
    def test_table_matches_declared_fields(self, reconciler, table_columns, initial, declared):
        if initial is not None:
            reconciler.ensure("logs", initial)

        result = reconciler.ensure("logs", declared)

        assert set(table_columns()) == set(BASELINE_FIELDS) | set(declared)
        assert set(result.columns) == set(table_columns())


class TestFailures:
    """Tests for DDL and metadata failures."""

    def test_failed_alter_raises_schema_error(self, database):
        reconciler = SchemaReconciler(database, BrokenAddColumnDialect())
        with pytest.raises(SchemaError) as exc_info:
            reconciler.ensure("logs", ["user_id"])
        assert exc_info.value.statement.startswith("ALTER TABLE")
        assert exc_info.value.__cause__ is not None

    def test_unreadable_columns_raise_metadata_error(self, database):
        reconciler = SchemaReconciler(database, MissingTableDialect())
        with pytest.raises(ColumnMetadataError) as exc_info:
            reconciler.ensure("logs", [])
        assert exc_info.value.table == "logs"


class TestMigrationEvents:
    """Tests for the schema migration audit trail."""

    def test_events_written_for_each_alter(self, database, dialect, tmp_path):
        log_dir = tmp_path / "events"
        reconciler = SchemaReconciler(database, dialect, migration_log_dir=log_dir)
        reconciler.ensure("logs", ["legacy"])
        reconciler.ensure("logs", ["user_id"])

        events = read_schema_migration_events(log_dir)

        assert [(e["action"], e["column"]) for e in events] == [
            ("add", "legacy"),
            ("drop", "legacy"),
            ("add", "user_id"),
        ]
        assert all(e["table"] == "logs" for e in events)
        assert events[0]["database"] == database.config.name

    def test_no_events_without_log_dir(self, reconciler, tmp_path):
        reconciler.ensure("logs", ["user_id"])
        assert read_schema_migration_events(tmp_path) == []
