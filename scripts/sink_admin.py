#!/usr/bin/env python3
"""
Command-line interface for administering the SQL log table.

Uses typer for clean CLI with subcommands.
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from loguru import logger

# Add project root to path so we can import schemalog
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from schemalog.contexts.sink import (
    LogRecord,
    SchemaLogError,
    create_sink,
    load_settings,
)
from schemalog.contexts.storage import SchemaInspector, get_database_wrapper, get_dialect

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    add_completion=False,
    help="SCHEMALOG log table administration",
)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="YAML config file(s); later files override earlier ones (default: config/sink.yaml)",
)
SetOption = typer.Option(
    None,
    "--set",
    "-s",
    help="Dotted override, e.g. sink.table=audit_logs",
)


def _setup_logger(quiet: bool = False) -> Path:
    """Log to a timestamped file and, unless quiet, to the console."""
    LOGS_PATH.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = LOGS_PATH / f"sink_admin_{timestamp}.txt"

    logger.enable("schemalog")
    logger.remove()  # Remove default stderr handler
    logger.add(log_file, format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}")
    if not quiet:
        logger.add(
            lambda msg: print(msg, end=""),  # Also print to console
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}\n",
            level="INFO",
        )
    return log_file


def _fail(message: str) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command("reconcile")
def reconcile_command(
    config: Optional[List[Path]] = ConfigOption,
    overrides: Optional[List[str]] = SetOption,
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress console log output"),
):
    """
    Create the log table if needed and align its columns with the configured fields.

    Examples:

        $ sink_admin.py reconcile

        $ sink_admin.py reconcile -c config/sink.yaml -s "sink.additional_fields=[user_id,request_id]"
    """
    _setup_logger(quiet)
    db_config, sink_config = load_settings(config, overrides)
    sink_config.skip_database_modifications = False
    sink = create_sink(db_config, sink_config)

    try:
        result = sink.initialize()
    except SchemaLogError as e:
        _fail(str(e))
    finally:
        sink.database.dispose()

    typer.secho(f"Table '{sink.table}' in '{db_config.name}':", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Columns: {', '.join(result.columns)}")
    typer.echo(f"  Added:   {', '.join(result.added) or '-'}")
    typer.echo(f"  Removed: {', '.join(result.removed) or '-'}")


@app.command("describe")
def describe_command(
    config: Optional[List[Path]] = ConfigOption,
    overrides: Optional[List[str]] = SetOption,
):
    """Draw the tables and columns of the configured database."""
    db_config, _ = load_settings(config, overrides)
    database = get_database_wrapper(db_config)
    try:
        inspector = SchemaInspector(database)
        if not inspector.list_tables():
            typer.echo(f"No tables in '{db_config.name}'")
            return
        inspector.tree(draw=True)
    finally:
        database.dispose()


@app.command("tail")
def tail_command(
    lines: int = typer.Option(20, "--lines", "-n", help="Number of rows to show", min=1),
    config: Optional[List[Path]] = ConfigOption,
    overrides: Optional[List[str]] = SetOption,
):
    """Print the newest log rows."""
    db_config, sink_config = load_settings(config, overrides)
    database = get_database_wrapper(db_config)
    quoted = get_dialect(db_config.backend).quote(sink_config.table)
    try:
        df = database.export_df(f"SELECT * FROM {quoted} ORDER BY id DESC LIMIT {lines}")
    finally:
        database.dispose()

    if df.empty:
        typer.echo(f"No rows in '{sink_config.table}'")
        return
    typer.echo(df.iloc[::-1].to_string(index=False))


@app.command("emit")
def emit_command(
    message: str = typer.Argument(..., help="Log message"),
    level: int = typer.Option(200, "--level", "-l", help="Numeric severity"),
    channel: str = typer.Option("cli", "--channel", help="Channel name"),
    fields: Optional[List[str]] = typer.Option(
        None,
        "--field",
        "-f",
        help="Context value as key=value (repeatable)",
    ),
    config: Optional[List[Path]] = ConfigOption,
    overrides: Optional[List[str]] = SetOption,
):
    """Write one record through the sink (reconciling the table first if needed)."""
    context = {}
    for item in fields or []:
        key, sep, value = item.partition("=")
        if not sep:
            _fail(f"Expected key=value, got '{item}'")
        context[key] = value

    db_config, sink_config = load_settings(config, overrides)
    sink = create_sink(db_config, sink_config)
    record = LogRecord(
        channel=channel,
        level=level,
        message=message,
        datetime=datetime.now(),
        context=context,
    )
    try:
        sink.write(record)
    except SchemaLogError as e:
        _fail(str(e))
    finally:
        sink.database.dispose()

    typer.secho(f"Wrote 1 record to '{sink.table}'", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
