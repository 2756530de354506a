"""Block split point selection: which entropy code each symbol uses."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from itertools import groupby

from brotenc.command import Command

MIN_LENGTH_FOR_BLOCK_SPLITTING = 128
MAX_NUMBER_OF_BLOCK_TYPES = 256


@dataclass
class BlockSplit:
    """A sequence of blocks, each with a type and a length."""

    types: list[int] = field(default_factory=list)
    lengths: list[int] = field(default_factory=list)
    num_types: int = 0


class BlockSplitIterator:
    """Walks a block split one symbol at a time."""

    def __init__(self, split: BlockSplit) -> None:
        self.split = split
        self.index = 0
        self.block_type = 0
        self.length = split.lengths[0] if split.lengths else 0

    def advance(self) -> None:
        """Move past one symbol, switching to the next block when needed."""
        if self.length == 0:
            self.index += 1
            if self.index >= len(self.split.lengths):
                raise IndexError("block split exhausted")
            self.block_type = self.split.types[self.index]
            self.length = self.split.lengths[self.index]
        self.length -= 1


def copy_literals_to_byte_array(
    commands: Sequence[Command],
    data: bytes | bytearray | memoryview,
    offset: int,
    mask: int,
) -> bytes:
    """Collect the inserted literals of the commands from the ring buffer."""
    total_length = sum(cmd.insert_len for cmd in commands)
    if total_length == 0:
        return b""
    view = memoryview(bytes(data))
    literals = bytearray()
    from_pos = offset & mask
    for cmd in commands:
        if len(literals) >= total_length:
            break
        insert_len = cmd.insert_len
        if from_pos + insert_len > mask:
            head_size = mask + 1 - from_pos
            literals += view[from_pos:from_pos + head_size]
            from_pos = 0
            insert_len -= head_size
        if insert_len > 0:
            literals += view[from_pos:from_pos + insert_len]
        from_pos = (from_pos + insert_len + cmd.copy_len) & mask
    return bytes(literals)


def copy_commands_to_byte_array(commands: Sequence[Command]) -> tuple[list[int], list[int]]:
    """Return (insert-and-copy codes, distance prefixes) of the commands."""
    insert_and_copy_codes = [cmd.cmd_prefix for cmd in commands]
    distance_prefixes = [
        cmd.dist_prefix for cmd in commands if cmd.copy_len > 0 and cmd.cmd_prefix >= 128
    ]
    return insert_and_copy_codes, distance_prefixes


def _fast_log2(v: int) -> float:
    return 0.0 if v <= 0 else math.log2(v)


def _bit_cost(count: int) -> float:
    return -2.0 if count == 0 else _fast_log2(count)


def find_blocks(
    data: Sequence[int],
    block_switch_bitcost: float,
    histograms: Sequence[Sequence[int]],
) -> list[int]:
    """Assign each symbol of ``data`` to one of the histograms.

    Each histogram is a sequence of symbol counts. Switching between
    histograms costs ``block_switch_bitcost`` bits (less near the start).
    """
    length = len(data)
    num_histograms = len(histograms)
    if num_histograms <= 1 or length == 0:
        return [0] * length
    size = len(histograms[0])
    if any(len(h) != size for h in histograms):
        raise ValueError("all histograms must have the same alphabet size")

    log_totals = [_fast_log2(sum(h)) for h in histograms]
    insert_cost = [
        [log_totals[j] - _bit_cost(h[symbol]) for j, h in enumerate(histograms)]
        for symbol in range(size)
    ]

    cost = [0.0] * num_histograms
    block_id = [0] * length
    switch_signal = bytearray(length * num_histograms)
    # cost[k] holds the excess over the cheapest way of reaching this
    # position with code k, capped at the block switch cost.
    for byte_ix, symbol in enumerate(data):
        row = insert_cost[symbol]
        min_cost = 1e99
        best = 0
        for k in range(num_histograms):
            cost[k] += row[k]
            if cost[k] < min_cost:
                min_cost = cost[k]
                best = k
        block_id[byte_ix] = best
        block_switch_cost = block_switch_bitcost
        # More blocks for the beginning.
        if byte_ix < 2000:
            block_switch_cost *= 0.77 + 0.07 * byte_ix / 2000
        base = byte_ix * num_histograms
        for k in range(num_histograms):
            cost[k] -= min_cost
            if cost[k] >= block_switch_cost:
                cost[k] = block_switch_cost
                switch_signal[base + k] = 1

    # Trace back from the last position and switch at the marked places.
    byte_ix = length - 1
    cur_id = block_id[byte_ix]
    while byte_ix > 0:
        byte_ix -= 1
        if switch_signal[byte_ix * num_histograms + cur_id]:
            cur_id = block_id[byte_ix]
        block_id[byte_ix] = cur_id
    return block_id


def remap_block_ids(block_ids: Sequence[int]) -> tuple[list[int], int]:
    """Renumber ids in order of first appearance; return (new ids, count)."""
    new_id: dict[int, int] = {}
    for block in block_ids:
        new_id.setdefault(block, len(new_id))
    return [new_id[block] for block in block_ids], len(new_id)


def build_block_split(block_ids: Sequence[int]) -> BlockSplit:
    """Turn per-symbol block ids into runs of types and lengths."""
    if not block_ids:
        raise ValueError("cannot build a block split from no block ids")
    split = BlockSplit()
    for block_type, run in groupby(block_ids):
        split.types.append(block_type)
        split.lengths.append(sum(1 for _ in run))
    split.num_types = max(split.types) + 1
    return split


def split_block_by_total_length(
    commands: Sequence[Command], input_size: int, target_length: int
) -> list[list[Command]]:
    """Cut the commands into blocks of roughly equal covered length."""
    if target_length <= 0:
        raise ValueError(f"target length must be positive, got {target_length}")
    num_blocks = input_size // target_length + 1
    length_limit = input_size // num_blocks + 1
    total_length = 0
    blocks: list[list[Command]] = []
    cur_block: list[Command] = []
    for cmd in commands:
        if total_length > length_limit:
            blocks.append(cur_block)
            cur_block = []
            total_length = 0
        cur_block.append(cmd)
        total_length += cmd.insert_len + cmd.copy_len
    blocks.append(cur_block)
    return blocks