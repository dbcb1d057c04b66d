"""
Log records handed to the sink.

A LogRecord is what the sink writes: the structured baseline values plus a
free-form context mapping. Adapters build one from a loguru record or from a
plain mapping.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

DEFAULT_CHANNEL = "root"
PACKAGE_NAME = "schemalog"


def is_package_record(record: Mapping[str, Any]) -> bool:
    """True if a loguru record was emitted from inside this package."""
    name = record["name"] or ""
    return name == PACKAGE_NAME or name.startswith(PACKAGE_NAME + ".")


@dataclass(frozen=True)
class LogRecord:
    """One emitted log record."""

    channel: str
    level: int
    message: str
    datetime: datetime
    context: Mapping[str, Any] = field(default_factory=dict)
    extra: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LogRecord":
        """
        Build a record from a mapping with ``channel``, ``level``, ``message``,
        ``datetime``, ``context`` and optionally ``extra`` keys.

        Raises:
            KeyError: If a required key is missing
        """
        return cls(
            channel=data["channel"],
            level=data["level"],
            message=data["message"],
            datetime=data["datetime"],
            context=dict(data.get("context") or {}),
            extra=data.get("extra"),
        )

    @classmethod
    def from_loguru(cls, record: Mapping[str, Any]) -> "LogRecord":
        """
        Build a record from a loguru record dict (``message.record``).

        A ``channel`` value bound with ``logger.bind(channel=...)`` names the
        channel; otherwise the emitting module's name is used. Everything else
        bound on the logger becomes context.
        """
        bound: Dict[str, Any] = dict(record["extra"])
        channel = bound.pop("channel", None) or record["name"] or DEFAULT_CHANNEL
        return cls(
            channel=channel,
            level=record["level"].no,
            message=record["message"],
            datetime=record["time"],
            context=bound,
        )
