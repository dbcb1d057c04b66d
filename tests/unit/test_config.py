"""
Unit tests for database and sink configuration loading.
"""

from pathlib import Path

import pytest

from schemalog.contexts.sink import SinkConfig, load_settings
from schemalog.contexts.storage import DatabaseConfig
from schemalog.utils import merge_configs


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "sink.yaml"
    path.write_text(
        "database:\n"
        "  backend: sqlite\n"
        f"  name: {tmp_path / 'logs.db'}\n"
        "sink:\n"
        "  table: app_logs\n"
        "  additional_fields: [user_id]\n"
        "  level: INFO\n"
        "  skip_database_modifications: false\n"
    )
    return path


class TestDatabaseConfig:
    """Tests for DatabaseConfig."""

    def test_sqlite_connection_string(self):
        assert DatabaseConfig(backend="sqlite", name="logs.db").connection_string == "sqlite:///logs.db"

    def test_postgres_connection_string(self):
        config = DatabaseConfig(backend="postgres", name="logs", host="db", port="5433", user="u", password="p")
        assert config.port == 5433
        assert config.connection_string == "postgresql+psycopg2://u:p@db:5433/logs"

    def test_mysql_default_port(self):
        config = DatabaseConfig(backend="MySQL", name="logs", host="db", user="u", password="p")
        assert config.backend == "mysql"
        assert config.connection_string == "mysql+pymysql://u:p@db:3306/logs"

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unsupported database backend"):
            DatabaseConfig(backend="oracle", name="logs")

    def test_name_required(self):
        with pytest.raises(ValueError, match="Database name is required"):
            DatabaseConfig(backend="sqlite", name="")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_BACKEND", "postgres")
        monkeypatch.setenv("DATABASE_NAME", "logs")
        monkeypatch.setenv("POSTGRES_HOST", "localhost")
        monkeypatch.setenv("POSTGRES_PORT", "5432")
        monkeypatch.setenv("POSTGRES_USER", "logwriter")
        monkeypatch.setenv("POSTGRES_PASSWORD", "secret")

        config = DatabaseConfig.from_env()
        assert config.backend == "postgres"
        assert config.host == "localhost"
        assert config.port == 5432
        assert config.user == "logwriter"

    def test_from_env_without_backend(self, monkeypatch):
        monkeypatch.delenv("DATABASE_BACKEND", raising=False)
        with pytest.raises(EnvironmentError, match="DATABASE_BACKEND"):
            DatabaseConfig.from_env(name="logs")


class TestSinkConfig:
    """Tests for SinkConfig defaults and loading."""

    def test_defaults(self):
        config = SinkConfig()
        assert config.table == "logs"
        assert config.additional_fields == []
        assert config.level == "DEBUG"
        assert config.bubble is True
        assert config.skip_database_modifications is False
        assert config.migration_log_dir is None

    def test_migration_log_dir_is_path(self):
        assert SinkConfig(migration_log_dir="outs/logs").migration_log_dir == Path("outs/logs")

    def test_load_settings(self, config_file, tmp_path):
        db_config, sink_config = load_settings([config_file])
        assert db_config.backend == "sqlite"
        assert db_config.name == str(tmp_path / "logs.db")
        assert sink_config.table == "app_logs"
        assert sink_config.additional_fields == ["user_id"]
        assert sink_config.level == "INFO"

    def test_load_settings_with_overrides(self, config_file):
        _, sink_config = load_settings(
            [config_file], ["sink.table=audit_logs", "sink.additional_fields=[user_id,request_id]"]
        )
        assert sink_config.table == "audit_logs"
        assert sink_config.additional_fields == ["user_id", "request_id"]

    def test_load_settings_database_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "sink_only.yaml"
        path.write_text("sink:\n  table: logs\n")
        monkeypatch.setenv("DATABASE_BACKEND", "sqlite")
        monkeypatch.setenv("DATABASE_NAME", str(tmp_path / "env.db"))

        db_config, sink_config = load_settings([path])
        assert db_config.name == str(tmp_path / "env.db")
        assert sink_config.table == "logs"


class TestMergeConfigs:
    """Tests for layered YAML configuration."""

    def test_later_file_wins(self, config_file, tmp_path):
        override = tmp_path / "local.yaml"
        override.write_text("sink:\n  table: local_logs\n")
        merged = merge_configs([config_file, override])
        assert merged.sink.table == "local_logs"
        assert list(merged.sink.additional_fields) == ["user_id"]

    def test_empty_paths(self):
        with pytest.raises(ValueError):
            merge_configs([])

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            merge_configs([tmp_path / "missing.yaml"])
