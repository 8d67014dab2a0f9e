"""
Output columns and parsing of the --output list.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional

from .errors import ColumnError


class Column(Enum):
    RANGE = ("RANGE", "address range", False)
    SIZE = ("SIZE", "size of memory", True)
    STATE = ("STATE", "state of memory", False)
    REMOVABLE = ("REMOVABLE", "memory is removable", True)
    BLOCK = ("BLOCK", "memory block", True)
    NODE = ("NODE", "node information", True)

    def __init__(self, header: str, help: str, right: bool):
        self.header = header
        self.help = help
        self.right = right

    @classmethod
    def from_name(cls, name: str) -> "Column":
        """Case-insensitive lookup by header name."""
        for column in cls:
            if column.header == name.strip().upper():
                return column
        raise ColumnError(name)


DEFAULT_COLUMNS = [Column.RANGE, Column.SIZE, Column.STATE, Column.REMOVABLE, Column.BLOCK]


def parse_columns(arg: Optional[str], defaults: Iterable[Column] = DEFAULT_COLUMNS) -> List[Column]:
    """
    Parse a comma separated column list.

    A leading ``+`` appends to ``defaults`` instead of replacing them.
    A column named more than once is shown once; empty items are ignored.
    """
    columns = list(defaults)
    if arg is None:
        return columns
    if arg.startswith("+"):
        arg = arg[1:]
    else:
        columns = []
    columns.extend(Column.from_name(name) for name in arg.split(",") if name.strip())
    if not columns:
        raise ColumnError(arg)
    return list(dict.fromkeys(columns))


def columns_help() -> str:
    return "\n".join(f" {column.header:>10s}  {column.help}" for column in Column)
