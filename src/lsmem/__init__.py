"""
lsmem: list the ranges of available memory with their online status.

Reads memory block state from /sys/devices/system/memory and merges blocks
into contiguous ranges sharing the displayed attributes.
"""

__version__ = "0.1.0"

from .blocks import MemoryBlock, MemoryState, RawBlock, classify
from .block_source import SysfsBlockSource
from .columns import Column, DEFAULT_COLUMNS, parse_columns
from .core import MemoryInfo, read_memory
from .errors import LsmemError
from .merge import MergePolicy, merge_blocks
from .totals import Totals, aggregate

__all__ = ['MemoryBlock', 'MemoryState', 'RawBlock', 'classify', 'SysfsBlockSource', 'Column',
           'DEFAULT_COLUMNS', 'parse_columns', 'MemoryInfo', 'read_memory', 'LsmemError',
           'MergePolicy', 'merge_blocks', 'Totals', 'aggregate']
