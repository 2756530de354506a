import pytest

from brotenc.block_splitter import (
    BlockSplit,
    BlockSplitIterator,
    build_block_split,
    copy_commands_to_byte_array,
    copy_literals_to_byte_array,
    find_blocks,
    remap_block_ids,
    split_block_by_total_length,
)
from brotenc.command import Command


def test_iterator_walks_blocks():
    split = BlockSplit(types=[0, 1, 0], lengths=[2, 1, 2], num_types=2)
    it = BlockSplitIterator(split)
    seen = []
    for _ in range(5):
        it.advance()
        seen.append(it.block_type)
    assert seen == [0, 0, 1, 0, 0]


def test_iterator_exhausted():
    it = BlockSplitIterator(BlockSplit(types=[0], lengths=[1], num_types=1))
    it.advance()
    with pytest.raises(IndexError):
        it.advance()


def test_copy_literals_skips_copies():
    data = b"abcdefgh"
    commands = [Command(2, 3, 3, 20), Command.insert_only(3)]
    assert copy_literals_to_byte_array(commands, data, 0, 7) == b"abfgh"


def test_copy_literals_wraps_ring_buffer():
    data = b"abcdefgh"
    assert copy_literals_to_byte_array([Command.insert_only(4)], data, 6, 7) == b"ghab"


def test_copy_literals_no_inserts():
    assert copy_literals_to_byte_array([Command(0, 4, 4, 30)], b"abcdefgh", 0, 7) == b""


def test_copy_commands_collects_distances():
    with_copy = Command(1, 4, 4, 100)
    insert = Command.insert_only(5)
    codes, dists = copy_commands_to_byte_array([with_copy, insert])
    assert codes == [with_copy.cmd_prefix, insert.cmd_prefix]
    assert dists == [with_copy.dist_prefix]


def test_remap_block_ids():
    assert remap_block_ids([5, 5, 2, 7, 2]) == ([0, 0, 1, 2, 1], 3)


def test_build_block_split():
    split = build_block_split([0, 0, 1, 1, 1, 0])
    assert split.types == [0, 1, 0]
    assert split.lengths == [2, 3, 1]
    assert split.num_types == 2


def test_build_block_split_empty():
    with pytest.raises(ValueError):
        build_block_split([])


def test_split_by_total_length_keeps_all_commands():
    commands = [Command.insert_only(n) for n in (10, 20, 30, 40, 50, 60)]
    input_size = sum(c.insert_len for c in commands)
    blocks = split_block_by_total_length(commands, input_size, 60)
    assert [c for block in blocks for c in block] == commands
    assert len(blocks) > 1


def test_split_by_total_length_single_block():
    commands = [Command.insert_only(3)]
    assert split_block_by_total_length(commands, 3, 1000) == [commands]


def test_find_blocks_single_histogram():
    assert find_blocks([0, 1, 1, 0], 28.1, [[2, 2]]) == [0, 0, 0, 0]


def test_find_blocks_two_regions():
    data = [0] * 300 + [1] * 300
    ids = find_blocks(data, 28.1, [[10, 0], [0, 10]])
    assert ids == [0] * 300 + [1] * 300


def test_find_blocks_ids_in_range():
    data = [0, 1, 2, 3] * 50
    ids = find_blocks(data, 13.5, [[5, 5, 0, 0], [0, 0, 5, 5], [1, 1, 1, 1]])
    assert len(ids) == len(data)
    assert set(ids) <= {0, 1, 2}


def test_find_blocks_mismatched_histograms():
    with pytest.raises(ValueError):
        find_blocks([0, 1], 10.0, [[1, 1], [1, 1, 1]])