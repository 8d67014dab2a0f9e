"""
Online/offline byte accounting over merged ranges.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .blocks import MemoryBlock, MemoryState


@dataclass(frozen=True)
class Totals:
    block_size: int
    online: int = 0
    offline: int = 0

    @property
    def total(self) -> int:
        return self.online + self.offline


def aggregate(ranges: Iterable[MemoryBlock], block_size: int) -> Totals:
    """Sum range sizes; anything not online (going-offline, unknown) counts as offline."""
    online = 0
    offline = 0
    for rng in ranges:
        if rng.state is MemoryState.ONLINE:
            online += rng.size_bytes(block_size)
        else:
            offline += rng.size_bytes(block_size)
    return Totals(block_size=block_size, online=online, offline=offline)
