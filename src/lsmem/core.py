"""
Core pipeline: block source -> classifier -> range merger -> aggregator.

The whole snapshot is read and merged before anything is rendered, so a
fatal read error never leaves a partial table behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from .block_source import SysfsBlockSource
from .blocks import MemoryBlock, classify
from .columns import DEFAULT_COLUMNS, Column
from .merge import MergePolicy, merge_blocks
from .totals import Totals, aggregate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemoryInfo:
    """Merged ranges plus totals for one point-in-time snapshot."""
    ranges: List[MemoryBlock]
    totals: Totals
    have_nodes: bool

    @property
    def block_size(self) -> int:
        return self.totals.block_size


def iter_blocks(source: SysfsBlockSource, names: List[str], have_nodes: bool) -> Iterator[MemoryBlock]:
    """Read and classify blocks one at a time, in enumeration order."""
    for name in names:
        yield classify(source.read_block(name, have_nodes), have_nodes)


def read_memory(source: SysfsBlockSource, columns: Optional[Iterable[Column]] = None,
                list_all: bool = False) -> MemoryInfo:
    """
    Take a snapshot of the memory block layout.

    Args:
        source: Where to read blocks from
        columns: Output columns; they decide which attributes must match
            for blocks to merge (default columns if None)
        list_all: Report every block on its own

    Returns:
        MemoryInfo with ranges sorted by block index
    """
    policy = MergePolicy.from_columns(DEFAULT_COLUMNS if columns is None else columns)
    block_size = source.block_size()
    names = source.list_blocks()
    have_nodes = source.probe_nodes(names)
    logger.debug(f"Merge policy: {policy}, list_all={list_all}")

    ranges = merge_blocks(iter_blocks(source, names, have_nodes), policy,
                          list_all=list_all, have_nodes=have_nodes)
    totals = aggregate(ranges, block_size)
    logger.debug(f"Online: {totals.online} bytes, offline: {totals.offline} bytes")
    return MemoryInfo(ranges=ranges, totals=totals, have_nodes=have_nodes)
