# brotenc

Pure-Python building blocks for producing Brotli-format compressed streams.
The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## What is inside

- `brotenc.prefix`: block-length and copy-distance prefix codes
  (`block_length_prefix_code`, `prefix_encode_copy_distance`, `log2_floor`).
- `brotenc.command`: insert and copy length codes (`insert_length_code`,
  `copy_length_code`, `combine_length_codes`, `length_code`) and the `Command`
  type, which pairs a run of literals with a backward reference copy.
  `Command.insert_only` builds a command that only inserts literals;
  `distance_code` and `distance_context` read back the distance information.
- `brotenc.bitstream`: a little-endian `BitWriter` (`write`,
  `jump_to_byte_boundary`, `getvalue`, `bit_position`) and the meta-block
  writers `encode_mlen`, `store_var_len_uint8`,
  `store_compressed_meta_block_header`, `store_uncompressed_meta_block_header`,
  `store_uncompressed_meta_block` and `store_sync_meta_block`. Values the
  format cannot hold raise `EncodeError`.
- `brotenc.entropy_store`: storing Huffman code descriptions
  (`store_huffman_tree_of_huffman_tree`, `store_huffman_tree_to_bitmask`,
  `store_simple_huffman_tree`), `move_to_front_transform`,
  `run_length_code_zeros` for context maps, and block-switch commands
  (`BlockSplitCode`, `store_block_switch`).
- `brotenc.utf8`: `parse_as_utf8` and `is_mostly_utf8`.
- `brotenc.block_splitter`: `BlockSplit`, `BlockSplitIterator`, `find_blocks`,
  `remap_block_ids`, `build_block_split`, `copy_literals_to_byte_array`,
  `copy_commands_to_byte_array` and `split_block_by_total_length`.
- `brotenc.params`: `Mode`, the frozen `BrotliParams` (with `sanitized`,
  `input_block_size` and `max_backward_distance`) and `stream_header`, which
  gives the window-size bits that start a stream.

## Example

Writing an uncompressed stream by hand:

```python
from brotenc.bitstream import BitWriter, store_uncompressed_meta_block
from brotenc.params import stream_header

data = b"hello, world"
value, n_bits = stream_header(22)

writer = BitWriter()
writer.write(n_bits, value)
store_uncompressed_meta_block(writer, True, data, 0, (1 << 24) - 1, len(data))
compressed = writer.getvalue()
```

The result is a complete stream: the window header, one uncompressed
meta-block holding the data, and an empty last meta-block.

Computing the codes for a command with four literals followed by a copy of
length ten at distance code 16:

```python
from brotenc.command import Command

cmd = Command(4, 10, 10, 16)
print(cmd.cmd_prefix, cmd.dist_prefix, cmd.distance_code(), cmd.distance_context())
```

## What it does not do

This package is a set of parts, not a compressor. It has no function that
takes bytes and returns a compressed stream and no command-line tool. It does
not search for backward references, build Huffman trees from histograms,
compute literal contexts, apply static-dictionary word transforms, cluster
histograms or write metadata meta-blocks. Compressed meta-blocks have to be
assembled by the caller from the pieces above; `store_uncompressed_meta_block`
is the only writer that produces a whole meta-block body on its own.