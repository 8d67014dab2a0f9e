"""
Range merging: fold classified blocks into maximal contiguous ranges.

Which attributes must match for two adjacent blocks to share a range is
decided by what is shown: a range is only as coarse as the columns that can
display a single value for its whole extent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from .blocks import MemoryBlock
from .columns import Column

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergePolicy:
    """Attributes that must be equal for adjacent blocks to merge."""
    require_state: bool = True
    require_removable: bool = True
    require_node: bool = False

    @classmethod
    def from_columns(cls, columns: Iterable[Column]) -> "MergePolicy":
        columns = set(columns)
        return cls(
            require_state=Column.STATE in columns,
            require_removable=Column.REMOVABLE in columns,
            require_node=Column.NODE in columns,
        )


def is_mergeable(current: Optional[MemoryBlock], block: MemoryBlock, policy: MergePolicy,
                 list_all: bool = False, have_nodes: bool = False) -> bool:
    """Return True if ``block`` extends the open range ``current``."""
    if current is None or list_all:
        return False
    if current.end != block.index:
        return False
    if policy.require_state and current.state != block.state:
        return False
    if policy.require_removable and current.removable != block.removable:
        return False
    if policy.require_node and have_nodes and current.node != block.node:
        return False
    return True


def merge_blocks(blocks: Iterable[MemoryBlock], policy: MergePolicy = MergePolicy(),
                 list_all: bool = False, have_nodes: bool = False) -> List[MemoryBlock]:
    """
    Merge blocks given in increasing index order into ranges.

    Args:
        blocks: Classified blocks (or already merged ranges)
        policy: Equivalence checks to apply between neighbours
        list_all: Never merge; one range per input block
        have_nodes: Node awareness for this run; without it node equality
            is never checked

    Returns:
        Non-overlapping ranges sorted by index
    """
    ranges: List[MemoryBlock] = []
    current: Optional[MemoryBlock] = None
    for block in blocks:
        if is_mergeable(current, block, policy, list_all, have_nodes):
            current = replace(current, count=current.count + block.count)
            continue
        if current is not None:
            ranges.append(current)
        current = block
    if current is not None:
        ranges.append(current)
    logger.debug(f"Merged into {len(ranges)} ranges")
    return ranges
