"""
Rendering of merged ranges and totals.

Rows are built once as a Polars DataFrame of display strings (null where a
cell is blank); every output mode renders from that frame.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import List, Optional, Sequence

import polars as pl

from .blocks import MemoryBlock, MemoryState
from .columns import Column
from .core import MemoryInfo
from .totals import Totals
from .utils import size_to_human_string


STATE_LABELS = {
    MemoryState.ONLINE: "online",
    MemoryState.OFFLINE: "offline",
    MemoryState.GOING_OFFLINE: "on->off",
    MemoryState.UNKNOWN: "?",
}


class OutputMode(Enum):
    TABLE = "table"
    RAW = "raw"
    PAIRS = "pairs"
    JSON = "json"


class SummaryMode(Enum):
    ALWAYS = "always"
    NEVER = "never"
    ONLY = "only"


def cell_value(column: Column, rng: MemoryBlock, block_size: int,
               have_nodes: bool = False, in_bytes: bool = False) -> Optional[str]:
    """Display string of one range for one column, or None for a blank cell."""
    if column is Column.RANGE:
        start = rng.start_bytes(block_size)
        end = start + rng.size_bytes(block_size) - 1
        return f"0x{start:016x}-0x{end:016x}"
    if column is Column.SIZE:
        size = rng.size_bytes(block_size)
        return str(size) if in_bytes else size_to_human_string(size)
    if column is Column.STATE:
        return STATE_LABELS[rng.state]
    if column is Column.REMOVABLE:
        if rng.state is not MemoryState.ONLINE:
            return None
        return "yes" if rng.removable else "no"
    if column is Column.BLOCK:
        if rng.count == 1:
            return str(rng.index)
        return f"{rng.index}-{rng.last}"
    if column is Column.NODE:
        if not have_nodes or rng.node is None:
            return None
        return str(rng.node)
    raise ValueError(f"unhandled column {column}")


def build_frame(info: MemoryInfo, columns: Sequence[Column], in_bytes: bool = False) -> pl.DataFrame:
    """Build the table of display values, one row per range."""
    data = {
        column.header: [cell_value(column, rng, info.block_size, info.have_nodes, in_bytes)
                        for rng in info.ranges]
        for column in columns
    }
    return pl.DataFrame(data, schema={column.header: pl.String for column in columns})


def _cells(df: pl.DataFrame) -> List[List[str]]:
    return [["" if value is None else value for value in row] for row in df.iter_rows()]


def render_table(df: pl.DataFrame, columns: Sequence[Column], noheadings: bool = False) -> str:
    widths = [
        max(len(column.header), df[column.header].str.len_chars().max() or 0)
        for column in columns
    ]
    lines = [] if noheadings else [[column.header for column in columns]]
    lines.extend(_cells(df))

    out = []
    for cells in lines:
        padded = [
            cell.rjust(width) if column.right else cell.ljust(width)
            for cell, width, column in zip(cells, widths, columns)
        ]
        out.append(" ".join(padded).rstrip())
    return "\n".join(out)


def render_raw(df: pl.DataFrame, noheadings: bool = False) -> str:
    lines = [] if noheadings else [df.columns]
    lines.extend(_cells(df))
    return "\n".join(" ".join(cells) for cells in lines)


def render_pairs(df: pl.DataFrame) -> str:
    return "\n".join(
        " ".join(f'{header}="{cell}"' for header, cell in zip(df.columns, cells))
        for cells in _cells(df)
    )


def render_json(df: pl.DataFrame) -> str:
    records = df.rename(str.lower).to_dicts()
    return json.dumps({"memory": records}, indent=3)


def render_summary(totals: Totals) -> str:
    return "\n".join([
        f"Memory block size   : {size_to_human_string(totals.block_size):>8s}",
        f"Total online memory : {size_to_human_string(totals.online):>8s}",
        f"Total offline memory: {size_to_human_string(totals.offline):>8s}",
    ])


def render(info: MemoryInfo, columns: Sequence[Column], mode: OutputMode = OutputMode.TABLE,
           in_bytes: bool = False, noheadings: bool = False,
           summary: Optional[SummaryMode] = None) -> str:
    """
    Render a snapshot for printing.

    Args:
        info: Ranges and totals to show
        columns: Columns, in display order
        mode: Table, raw, pairs or JSON
        in_bytes: Show SIZE in bytes instead of a human readable size
        noheadings: Omit the header line (table and raw modes)
        summary: When to print the totals; None picks ALWAYS for the table
            mode and NEVER for the machine readable modes

    Returns:
        Complete output text, without a trailing newline
    """
    if summary is None:
        summary = SummaryMode.ALWAYS if mode is OutputMode.TABLE else SummaryMode.NEVER

    parts = []
    if summary is not SummaryMode.ONLY:
        df = build_frame(info, columns, in_bytes)
        if mode is OutputMode.RAW:
            parts.append(render_raw(df, noheadings))
        elif mode is OutputMode.PAIRS:
            parts.append(render_pairs(df))
        elif mode is OutputMode.JSON:
            parts.append(render_json(df))
        else:
            parts.append(render_table(df, columns, noheadings))
    if summary is not SummaryMode.NEVER:
        parts.append(render_summary(info.totals))
    return "\n\n".join(part for part in parts if part)
