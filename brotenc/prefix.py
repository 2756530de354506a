"""Prefix codes for block lengths and copy distances."""

from __future__ import annotations

NUM_INSERT_LEN_PREFIXES = 24
NUM_COPY_LEN_PREFIXES = 24
NUM_COMMAND_PREFIXES = 704
NUM_BLOCK_LEN_PREFIXES = 26
NUM_DISTANCE_SHORT_CODES = 16
NUM_DISTANCE_PREFIXES = 520

# Each entry is (offset, nbits): the code covers [offset, offset + 2**nbits).
BLOCK_LENGTH_PREFIX_CODE: tuple[tuple[int, int], ...] = (
    (1, 2), (5, 2), (9, 2), (13, 2),
    (17, 3), (25, 3), (33, 3), (41, 3),
    (49, 4), (65, 4), (81, 4), (97, 4),
    (113, 5), (145, 5), (177, 5), (209, 5),
    (241, 6), (305, 6), (369, 7), (497, 8),
    (753, 9), (1265, 10), (2289, 11), (4337, 12),
    (8433, 13), (16625, 24),
)


def log2_floor(n: int) -> int:
    """Return the index of the highest set bit of a positive integer."""
    if n < 1:
        raise ValueError(f"log2_floor needs a positive integer, got {n}")
    return n.bit_length() - 1


def block_length_prefix_code(length: int) -> tuple[int, int, int]:
    """Return (code, number of extra bits, extra bits value) for a block length."""
    if length < BLOCK_LENGTH_PREFIX_CODE[0][0]:
        raise ValueError(f"block length must be at least 1, got {length}")
    code = 0
    while code < NUM_BLOCK_LEN_PREFIXES - 1 and length >= BLOCK_LENGTH_PREFIX_CODE[code + 1][0]:
        code += 1
    offset, nbits = BLOCK_LENGTH_PREFIX_CODE[code]
    return code, nbits, length - offset


def prefix_encode_copy_distance(
    distance_code: int, num_direct_codes: int, postfix_bits: int
) -> tuple[int, int]:
    """Return (prefix code, packed extra bits) for a distance code.

    The packed extra bits hold the number of extra bits in the top byte
    (``extra >> 24``) and their value in the low 24 bits.
    """
    if distance_code < NUM_DISTANCE_SHORT_CODES + num_direct_codes:
        return distance_code, 0
    distance_code -= NUM_DISTANCE_SHORT_CODES + num_direct_codes
    distance_code += 1 << (postfix_bits + 2)
    bucket = log2_floor(distance_code) - 1
    postfix_mask = (1 << postfix_bits) - 1
    postfix = distance_code & postfix_mask
    prefix = (distance_code >> bucket) & 1
    offset = (2 + prefix) << bucket
    nbits = bucket - postfix_bits
    code = (
        NUM_DISTANCE_SHORT_CODES
        + num_direct_codes
        + ((2 * (nbits - 1) + prefix) << postfix_bits)
        + postfix
    )
    extra = (nbits << 24) | ((distance_code - offset) >> postfix_bits)
    return code, extra