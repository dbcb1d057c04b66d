"""
Projection of a log record onto the log table's columns.
"""

from typing import Any, Dict

from schemalog.contexts.sink.columns import ColumnSet
from schemalog.contexts.sink.records import LogRecord


def project_record(record: LogRecord, columns: ColumnSet) -> Dict[str, Any]:
    """
    Convert a log record into the column -> value map of a single insert.

    The key order of the returned dict is the column order of the insert.

    Process:
        1. Merge ``extra`` into ``context`` (extra wins on collision)
        2. Start from channel/level/message/time and apply the context on top.
           A context key named like a baseline field overwrites the structured value.
        3. Drop keys that are not columns, ``id``, and keys whose value is None
        4. Add every declared additional field still missing as an explicit None

    Args:
        record: Record to project
        columns: Current column set of the table

    Returns:
        Dict of column name to bound value, never containing ``id``
    """
    context = dict(record.context)
    if record.extra:
        context.update(record.extra)

    candidate = {
        "channel": record.channel,
        "level": record.level,
        "message": record.message,
        "time": record.datetime,
    }
    candidate.update(context)

    projected = {
        key: value
        for key, value in candidate.items()
        if key in columns and key != "id" and value is not None
    }

    for field in columns.additional:
        projected.setdefault(field, None)

    return projected
