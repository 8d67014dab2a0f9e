"""
Memory block records and the classifier that builds them from raw sysfs data.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


BLOCK_NAME_PATTERN = re.compile(r"^memory(\d+)$")


class MemoryState(Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    GOING_OFFLINE = "going-offline"
    UNKNOWN = "unknown"

    @classmethod
    def from_sysfs(cls, value: Optional[str]) -> "MemoryState":
        """Map the contents of a block's ``state`` file; unrecognized text is UNKNOWN."""
        if value is None:
            return cls.UNKNOWN
        value = value.strip()
        for state in (cls.ONLINE, cls.OFFLINE, cls.GOING_OFFLINE):
            if value == state.value:
                return state
        return cls.UNKNOWN


@dataclass(frozen=True)
class RawBlock:
    """Attributes of one memoryN directory as read from sysfs, uninterpreted."""
    name: str
    removable: bool
    state: Optional[str]
    node: Optional[int] = None


@dataclass(frozen=True)
class MemoryBlock:
    """
    A run of ``count`` consecutive memory blocks starting at ``index``.

    Classified blocks always have ``count == 1``; merged ranges use the same
    type with a larger count. ``node`` is None when the system does not expose
    NUMA information for memory blocks.
    """
    index: int
    count: int
    state: MemoryState
    removable: bool
    node: Optional[int] = None

    @property
    def end(self) -> int:
        """First block index after this range."""
        return self.index + self.count

    @property
    def last(self) -> int:
        return self.index + self.count - 1

    def start_bytes(self, block_size: int) -> int:
        return self.index * block_size

    def size_bytes(self, block_size: int) -> int:
        return self.count * block_size


def parse_block_index(name: str) -> int:
    """Return N from a ``memoryN`` directory name."""
    match = BLOCK_NAME_PATTERN.match(name)
    if match is None:
        raise ValueError(f"not a memory block name: {name!r}")
    return int(match.group(1))


def classify(raw: RawBlock, have_nodes: bool = False) -> MemoryBlock:
    """
    Turn one raw block record into a single-block MemoryBlock.

    Args:
        raw: Attributes read by the block source
        have_nodes: Whether node awareness was detected for this run; when
            False the node is dropped even if the source supplied one

    Returns:
        MemoryBlock with count 1
    """
    return MemoryBlock(
        index=parse_block_index(raw.name),
        count=1,
        state=MemoryState.from_sysfs(raw.state),
        removable=bool(raw.removable),
        node=raw.node if have_nodes else None,
    )
