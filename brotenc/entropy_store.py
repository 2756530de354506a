"""Storing Huffman code descriptions, context map symbols and block switches."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from itertools import groupby

from brotenc.bitstream import BitWriter
from brotenc.prefix import log2_floor

CODE_LENGTH_CODES = 18

# Order in which the code length code lengths are stored.
CODE_LENGTH_STORAGE_ORDER: tuple[int, ...] = (
    1, 2, 3, 4, 0, 5, 17, 6, 16, 7, 8, 9, 10, 11, 12, 13, 14, 15,
)

# Static Huffman code over code length code lengths 0..5:
#   0 -> 00, 1 -> 1110, 2 -> 110, 3 -> 01, 4 -> 10, 5 -> 1111
_BIT_LENGTH_CODE_SYMBOLS = (0, 7, 3, 2, 1, 15)
_BIT_LENGTH_CODE_LENGTHS = (2, 4, 3, 2, 2, 4)


@dataclass
class BlockSplitCode:
    """Everything needed to encode each block switch command."""

    type_code: list[int] = field(default_factory=list)
    length_prefix: list[int] = field(default_factory=list)
    length_nextra: list[int] = field(default_factory=list)
    length_extra: list[int] = field(default_factory=list)
    type_depths: list[int] = field(default_factory=list)
    type_bits: list[int] = field(default_factory=list)
    length_depths: list[int] = field(default_factory=list)
    length_bits: list[int] = field(default_factory=list)


def store_huffman_tree_of_huffman_tree(
    writer: BitWriter, num_codes: int, code_length_bitdepth: Sequence[int]
) -> None:
    """Store the depths of the code length code with the static code."""
    if len(code_length_bitdepth) < CODE_LENGTH_CODES:
        raise ValueError(
            f"need {CODE_LENGTH_CODES} code length depths, got {len(code_length_bitdepth)}"
        )
    ordered = [code_length_bitdepth[ix] for ix in CODE_LENGTH_STORAGE_ORDER]
    codes_to_store = CODE_LENGTH_CODES
    if num_codes > 1:
        # Throw away trailing zeros.
        while codes_to_store > 0 and ordered[codes_to_store - 1] == 0:
            codes_to_store -= 1
    skip_some = 0
    if ordered[0] == 0 and ordered[1] == 0:
        skip_some = 3 if ordered[2] == 0 else 2
    writer.write(2, skip_some)
    for depth in ordered[skip_some:codes_to_store]:
        if not 0 <= depth < len(_BIT_LENGTH_CODE_SYMBOLS):
            raise ValueError(f"code length code depth must be in 0..5, got {depth}")
        writer.write(_BIT_LENGTH_CODE_LENGTHS[depth], _BIT_LENGTH_CODE_SYMBOLS[depth])


def store_huffman_tree_to_bitmask(
    writer: BitWriter,
    huffman_tree: Sequence[int],
    huffman_tree_extra_bits: Sequence[int],
    code_length_bitdepth: Sequence[int],
    code_length_bitdepth_symbols: Sequence[int],
) -> None:
    """Store the run-length coded Huffman tree with the code length code."""
    if len(huffman_tree) != len(huffman_tree_extra_bits):
        raise ValueError("huffman tree and extra bits differ in length")
    for ix, extra in zip(huffman_tree, huffman_tree_extra_bits):
        writer.write(code_length_bitdepth[ix], code_length_bitdepth_symbols[ix])
        if ix == 16:
            writer.write(2, extra)
        elif ix == 17:
            writer.write(3, extra)


def store_simple_huffman_tree(
    writer: BitWriter, depths: Sequence[int], symbols: Sequence[int], max_bits: int
) -> list[int]:
    """Store a simple Huffman code of 2 to 4 symbols.

    Returns the symbols in the order they were stored, sorted by depth.
    """
    ordered = list(symbols)
    num_symbols = len(ordered)
    if not 2 <= num_symbols <= 4:
        raise ValueError(f"a simple Huffman code has 2 to 4 symbols, got {num_symbols}")
    writer.write(2, 1)  # simple Huffman code
    writer.write(2, num_symbols - 1)  # NSYM - 1
    for i in range(num_symbols):
        for j in range(i + 1, num_symbols):
            if depths[ordered[j]] < depths[ordered[i]]:
                ordered[i], ordered[j] = ordered[j], ordered[i]
    for symbol in ordered:
        writer.write(max_bits, symbol)
    if num_symbols == 4:
        writer.write(1, 1 if depths[ordered[0]] == 1 else 0)  # tree-select
    return ordered


def move_to_front_transform(values: Sequence[int]) -> list[int]:
    """Replace each value by its index in a move-to-front list."""
    if not values:
        return []
    mtf = list(range(max(values) + 1))
    result = []
    for value in values:
        index = mtf.index(value)
        result.append(index)
        mtf.insert(0, mtf.pop(index))
    return result


def run_length_code_zeros(
    values: Sequence[int], max_run_length_prefix: int
) -> tuple[int, list[int], list[int]]:
    """Replace runs of zeros by run length prefix codes.

    Returns (run length prefix used, symbols, extra bits). Non-zero values
    are shifted up by the prefix used; a run of length L gets the code
    log2(L) with as many extra bits. No code exceeds ``max_run_length_prefix``.
    """
    max_reps = max(
        (sum(1 for _ in group) for is_zero, group in groupby(values, lambda v: v == 0) if is_zero),
        default=0,
    )
    max_prefix = log2_floor(max_reps) if max_reps > 0 else 0
    prefix = min(max_prefix, max_run_length_prefix)
    symbols: list[int] = []
    extra_bits: list[int] = []
    for is_zero, group in groupby(values, lambda v: v == 0):
        if not is_zero:
            for value in group:
                symbols.append(value + prefix)
                extra_bits.append(0)
            continue
        reps = sum(1 for _ in group)
        while reps:
            if reps < (2 << prefix):
                run_length_prefix = log2_floor(reps)
                symbols.append(run_length_prefix)
                extra_bits.append(reps - (1 << run_length_prefix))
                break
            symbols.append(prefix)
            extra_bits.append((1 << prefix) - 1)
            reps -= (2 << prefix) - 1
    return prefix, symbols, extra_bits


def store_block_switch(writer: BitWriter, code: BlockSplitCode, block_ix: int) -> None:
    """Store the block switch command with index ``block_ix``."""
    if block_ix > 0:
        typecode = code.type_code[block_ix]
        writer.write(code.type_depths[typecode], code.type_bits[typecode])
    lencode = code.length_prefix[block_ix]
    writer.write(code.length_depths[lencode], code.length_bits[lencode])
    writer.write(code.length_nextra[block_ix], code.length_extra[block_ix])