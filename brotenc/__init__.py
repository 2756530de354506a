"""Building blocks of a Brotli-format encoder: prefix codes, commands, bit writing, Huffman tree storage, block splitting and parameters."""

__version__ = "0.1.0"