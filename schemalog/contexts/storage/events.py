"""Minimal event logger for schema migrations written to JSON Lines."""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
MIGRATIONS_FILE = "schema_migrations.txt"


def log_schema_migration_event(
    database: str,
    table: str,
    column: str,
    datatype: Optional[str],
    action: str,
    reason: str,
    log_dir: Path = LOGS_PATH,
) -> None:
    """Append a schema-change event to ``schema_migrations.txt`` in JSON Lines."""

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    payload = {
        "timestamp": datetime.now().isoformat(),
        "database": database,
        "table": table,
        "column": column,
        "datatype": datatype,
        "action": action,
        "reason": reason,
    }

    # Keep one JSON object per line so downstream tools can stream the file.
    with open(log_dir / MIGRATIONS_FILE, "a", encoding="utf-8") as handle:
        handle.write(json.dumps(payload) + "\n")


def read_schema_migration_events(log_dir: Path = LOGS_PATH) -> list[dict]:
    """Read back every recorded schema-change event, skipping malformed lines."""
    log_file = Path(log_dir) / MIGRATIONS_FILE
    if not log_file.exists():
        return []

    events = []
    with open(log_file, "r", encoding="utf-8") as handle:
        for line in handle:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                continue
    return events
