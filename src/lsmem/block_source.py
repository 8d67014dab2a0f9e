"""
Block source: discover and read memory blocks under /sys/devices/system/memory.

Design goals:
- Sort blocks by their numeric suffix, not by filename (memory10 after memory9)
- Refuse partial snapshots: any unreadable attribute is fatal
- Use pathlib for every path so a sysroot can be swapped in for testing
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from .blocks import BLOCK_NAME_PATTERN, RawBlock, parse_block_index
from .errors import AttributeReadError, EnumerationError, UnsupportedPlatformError


MEMORY_DIR = Path("sys/devices/system/memory")
BLOCK_SIZE_FILE = "block_size_bytes"
NODE_NAME_PATTERN = re.compile(r"^node(\d+)$")

logger = logging.getLogger(__name__)


class SysfsBlockSource:
    """Reads memory block attributes from a (possibly relocated) sysfs tree."""

    def __init__(self, sysroot: Union[str, Path] = "/"):
        self.sysroot = Path(sysroot)
        self.memory_dir = self.sysroot / MEMORY_DIR

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_text().strip()
        except OSError as e:
            raise AttributeReadError(path, e.strerror) from e
        except UnicodeDecodeError as e:
            raise AttributeReadError(path, "invalid encoding") from e

    def block_size(self) -> int:
        """Return the size in bytes of one memory block (hex in sysfs)."""
        path = self.memory_dir / BLOCK_SIZE_FILE
        if not path.exists():
            raise UnsupportedPlatformError(path)
        text = self._read_text(path)
        try:
            size = int(text, 16)
        except ValueError as e:
            raise AttributeReadError(path, f"invalid block size {text!r}") from e
        logger.debug(f"Block size: {size:#x} bytes")
        return size

    def list_blocks(self) -> List[str]:
        """List memoryN directory names in ascending numeric order."""
        try:
            names = [entry.name for entry in self.memory_dir.iterdir()
                     if BLOCK_NAME_PATTERN.match(entry.name)]
        except OSError as e:
            raise EnumerationError(self.memory_dir, e.strerror) from e
        if not names:
            raise EnumerationError(self.memory_dir, "no memory blocks found")
        names.sort(key=parse_block_index)
        logger.debug(f"Found {len(names)} memory blocks in {self.memory_dir}")
        return names

    def block_node(self, name: str) -> Optional[int]:
        """Return the NUMA node linked from a block directory, or None."""
        block_dir = self.memory_dir / name
        try:
            nodes = sorted(int(m.group(1)) for m in
                           (NODE_NAME_PATTERN.match(entry.name) for entry in block_dir.iterdir())
                           if m)
        except OSError as e:
            raise AttributeReadError(block_dir, e.strerror) from e
        return nodes[0] if nodes else None

    def probe_nodes(self, names: List[str]) -> bool:
        """Node awareness is decided once, from the first enumerated block."""
        if not names:
            return False
        have_nodes = self.block_node(names[0]) is not None
        logger.debug(f"Node information {'available' if have_nodes else 'not available'}")
        return have_nodes

    def read_block(self, name: str, have_nodes: bool = False) -> RawBlock:
        """
        Read the removable flag, state and (optionally) node of one block.

        Args:
            name: Directory name such as ``memory32``
            have_nodes: Whether to scan the block directory for a node link

        Returns:
            RawBlock with uninterpreted state text
        """
        block_dir = self.memory_dir / name
        removable_path = block_dir / "removable"
        text = self._read_text(removable_path)
        try:
            removable = int(text) != 0
        except ValueError as e:
            raise AttributeReadError(removable_path, f"invalid value {text!r}") from e
        state = self._read_text(block_dir / "state")
        node = self.block_node(name) if have_nodes else None
        return RawBlock(name=name, removable=removable, state=state, node=node)
