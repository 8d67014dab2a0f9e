"""
Exceptions raised while reading the memory block hierarchy.

Anything derived from LsmemError is fatal for a run: the CLI reports it once
and exits non-zero without printing a partial table.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class LsmemError(Exception):
    """Base class for fatal lsmem errors."""


class UnsupportedPlatformError(LsmemError):
    """The global block size attribute does not exist."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"This system does not support memory blocks ({self.path} not found)")


class EnumerationError(LsmemError):
    """The memory directory cannot be listed or holds no memory blocks."""

    def __init__(self, path: Union[str, Path], reason: Optional[str] = None):
        self.path = Path(path)
        self.reason = reason
        message = f"Failed to read {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class AttributeReadError(LsmemError):
    """A block attribute exists in principle but could not be read or parsed."""

    def __init__(self, path: Union[str, Path], reason: Optional[str] = None):
        self.path = Path(path)
        self.reason = reason
        message = f"Failed to read {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ColumnError(LsmemError):
    """An output column name was not recognized."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown column: {name}" if name else "empty column list")
