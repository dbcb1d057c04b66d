"""
Configuration and wiring for the log sink.

Settings come from OmegaConf YAML files (``config/sink.yaml`` by default);
database credentials can come from the environment instead.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from dotenv import load_dotenv
from loguru import logger
from omegaconf import OmegaConf
from omegaconf.dictconfig import DictConfig

from schemalog.contexts.sink.handler import DynamicSqlLogSink
from schemalog.contexts.sink.records import is_package_record
from schemalog.contexts.storage import (
    DatabaseConfig,
    DatabaseWrapper,
    get_database_wrapper,
    get_dialect,
)
from schemalog.utils.config_helpers import merge_configs

load_dotenv()
CONFIG_PATH = Path(os.getenv("CONFIG_PATH", "config"))


@dataclass
class SinkConfig:
    """Options exposed by the log sink."""

    table: str = "logs"
    additional_fields: List[str] = field(default_factory=list)
    # Minimum level, enforced by loguru when the sink is attached
    level: Union[str, int] = "DEBUG"
    bubble: bool = True
    skip_database_modifications: bool = False
    migration_log_dir: Optional[Path] = None

    def __post_init__(self):
        self.additional_fields = list(self.additional_fields or [])
        if self.migration_log_dir is not None:
            self.migration_log_dir = Path(self.migration_log_dir)

    @classmethod
    def from_dictconfig(cls, config: Optional[DictConfig]) -> "SinkConfig":
        if config is None:
            return cls()
        return cls(**OmegaConf.to_container(config, resolve=True))


def load_settings(
    config_paths: Optional[List[Union[str, Path]]] = None,
    overrides: Optional[List[str]] = None,
) -> Tuple[DatabaseConfig, SinkConfig]:
    """
    Load database and sink settings from YAML files.

    Args:
        config_paths: YAML files, later ones taking precedence (default: CONFIG_PATH/sink.yaml)
        overrides: Dotted ``key=value`` overrides applied last

    Returns:
        Tuple of (DatabaseConfig, SinkConfig). Without a ``database`` section the
        database settings are read from the environment.
    """
    config_paths = config_paths or [CONFIG_PATH / "sink.yaml"]
    merged = merge_configs(config_paths, overrides)

    database_section = merged.get("database")
    if database_section is None:
        db_config = DatabaseConfig.from_env()
    else:
        db_config = DatabaseConfig(**OmegaConf.to_container(database_section, resolve=True))

    return db_config, SinkConfig.from_dictconfig(merged.get("sink"))


def create_sink(
    db_config: DatabaseConfig,
    sink_config: Optional[SinkConfig] = None,
    database: Optional[DatabaseWrapper] = None,
) -> DynamicSqlLogSink:
    """
    Build a sink for a database configuration.

    Args:
        db_config: Database connection settings
        sink_config: Sink options (default: SinkConfig())
        database: Existing wrapper to write through (default: a new one for db_config)
    """
    sink_config = sink_config or SinkConfig()
    database = database or get_database_wrapper(db_config)
    return DynamicSqlLogSink(
        database=database,
        dialect=get_dialect(db_config.backend),
        table=sink_config.table,
        additional_fields=sink_config.additional_fields,
        skip_database_modifications=sink_config.skip_database_modifications,
        migration_log_dir=sink_config.migration_log_dir,
    )


def attach_sink(
    sink: DynamicSqlLogSink,
    sink_config: Optional[SinkConfig] = None,
    level: Optional[Union[str, int]] = None,
    bubble: Optional[bool] = None,
    enqueue: bool = False,
) -> int:
    """
    Register the sink with loguru.

    Records emitted by this package are filtered out before loguru takes the
    handler lock, so reconciliation running inside a write never re-enters it.

    Args:
        sink: Sink to register
        sink_config: Source of the default level and bubble flag (default: SinkConfig())
        level: Minimum level the sink accepts, overriding sink_config.level
        bubble: Overrides sink_config.bubble. Loguru passes every record to every
            sink, so records always continue on
        enqueue: Write from loguru's background worker (order is preserved)

    Returns:
        Loguru handler id, for ``logger.remove``
    """
    sink_config = sink_config or SinkConfig()
    level = sink_config.level if level is None else level
    bubble = sink_config.bubble if bubble is None else bubble
    if not bubble:
        logger.warning("bubble=False has no effect: loguru hands every record to every sink")

    # The bound method makes loguru treat the sink as a function sink
    return logger.add(
        sink.__call__,
        level=level,
        format="{message}",
        filter=_not_from_package,
        enqueue=enqueue,
    )


def _not_from_package(record) -> bool:
    return not is_package_record(record)
