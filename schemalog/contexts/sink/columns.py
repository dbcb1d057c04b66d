"""
Column set of the log table.

The baseline columns always exist; additional fields are declared by the
application and reconciled into the table as nullable text columns.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

from schemalog.contexts.sink.exceptions import InvalidIdentifierError

BASELINE_FIELDS = ("id", "channel", "level", "message", "time")
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,63}$")


def validate_identifier(name: str) -> str:
    """Return ``name`` unchanged if it is a safe SQL identifier, else raise InvalidIdentifierError."""
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
        raise InvalidIdentifierError(name)
    return name


@dataclass(frozen=True)
class ColumnSet:
    """Ordered, duplicate-free column names: baseline fields followed by additional fields."""

    names: Tuple[str, ...] = BASELINE_FIELDS

    @classmethod
    def baseline(cls) -> "ColumnSet":
        return cls()

    def with_additional(self, fields: Iterable[str]) -> "ColumnSet":
        """Return a new ColumnSet with ``fields`` appended, skipping names already present."""
        merged = list(self.names)
        for field in fields:
            if validate_identifier(field) not in merged:
                merged.append(field)
        return ColumnSet(tuple(merged))

    @property
    def additional(self) -> Tuple[str, ...]:
        return tuple(name for name in self.names if name not in BASELINE_FIELDS)

    def __contains__(self, name) -> bool:
        return name in self.names

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)
