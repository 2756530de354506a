"""Commands: a run of literals followed by a backward reference copy."""

from __future__ import annotations

from dataclasses import dataclass

from brotenc.prefix import prefix_encode_copy_distance

INSBASE = (0, 1, 2, 3, 4, 5, 6, 8, 10, 14, 18, 26, 34, 50, 66,
           98, 130, 194, 322, 578, 1090, 2114, 6210, 22594)
INSEXTRA = (0, 0, 0, 0, 0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 5,
            5, 6, 7, 8, 9, 10, 12, 14, 24)
COPYBASE = (2, 3, 4, 5, 6, 7, 8, 9, 10, 12, 14, 18, 22, 30, 38,
            54, 70, 102, 134, 198, 326, 582, 1094, 2118)
COPYEXTRA = (0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 2, 2, 3, 3, 4,
             4, 5, 5, 6, 7, 8, 9, 10, 24)

_CELLS = (2, 3, 6, 4, 5, 8, 7, 9, 10)


def _log2_floor_nonzero(n: int) -> int:
    return n.bit_length() - 1


def insert_length_code(insert_len: int) -> int:
    """Return the insert length prefix code for an insert length."""
    if insert_len < 0:
        raise ValueError(f"insert length must be non-negative, got {insert_len}")
    if insert_len < 6:
        return insert_len
    if insert_len < 130:
        insert_len -= 2
        nbits = _log2_floor_nonzero(insert_len) - 1
        return (nbits << 1) + (insert_len >> nbits) + 2
    if insert_len < 2114:
        return _log2_floor_nonzero(insert_len - 66) + 10
    if insert_len < 6210:
        return 21
    if insert_len < 22594:
        return 22
    return 23


def copy_length_code(copy_len: int) -> int:
    """Return the copy length prefix code for a copy length."""
    if copy_len < 2:
        raise ValueError(f"copy length must be at least 2, got {copy_len}")
    if copy_len < 10:
        return copy_len - 2
    if copy_len < 134:
        copy_len -= 6
        nbits = _log2_floor_nonzero(copy_len) - 1
        return (nbits << 1) + (copy_len >> nbits) + 4
    if copy_len < 2118:
        return _log2_floor_nonzero(copy_len - 70) + 12
    return 23


def combine_length_codes(inscode: int, copycode: int, distance_code: int) -> int:
    """Combine insert and copy length codes into an insert-and-copy symbol."""
    bits64 = (copycode & 0x7) | ((inscode & 0x7) << 3)
    if distance_code == 0 and inscode < 8 and copycode < 16:
        return bits64 if copycode < 8 else bits64 | 64
    return (_CELLS[(copycode >> 3) + 3 * (inscode >> 3)] << 6) | bits64


def length_code(insert_len: int, copy_len: int, distance_code: int) -> tuple[int, int]:
    """Return (command prefix, packed extra bits) for the given lengths.

    The packed value holds the total number of extra bits above bit 48,
    the copy extra value shifted above the insert extra bits, and the
    insert extra value at the bottom.
    """
    inscode = insert_length_code(insert_len)
    copycode = copy_length_code(copy_len)
    insnumextra = INSEXTRA[inscode]
    numextra = insnumextra + COPYEXTRA[copycode]
    insextraval = insert_len - INSBASE[inscode]
    copyextraval = copy_len - COPYBASE[copycode]
    code = combine_length_codes(inscode, copycode, distance_code)
    extra = (numextra << 48) | (copyextraval << insnumextra) | insextraval
    return code, extra


@dataclass(init=False, eq=True, slots=True)
class Command:
    """Literal insertion followed by a copy, with its prefix codes."""

    insert_len: int
    copy_len: int
    cmd_prefix: int
    dist_prefix: int
    cmd_extra: int
    dist_extra: int

    def __init__(self, insert_len: int, copy_len: int, copy_len_code: int, distance_code: int):
        # Distance prefix is computed as if npostfix and ndirect were 0;
        # it may be recomputed later.
        self.insert_len = insert_len
        self.copy_len = copy_len
        self.dist_prefix, self.dist_extra = prefix_encode_copy_distance(distance_code, 0, 0)
        self.cmd_prefix, self.cmd_extra = length_code(insert_len, copy_len_code, self.dist_prefix)

    @classmethod
    def insert_only(cls, insert_len: int) -> "Command":
        """Build a command that only inserts literals."""
        cmd = cls.__new__(cls)
        cmd.insert_len = insert_len
        cmd.copy_len = 0
        cmd.dist_prefix = 16
        cmd.dist_extra = 0
        cmd.cmd_prefix, cmd.cmd_extra = length_code(insert_len, 4, cmd.dist_prefix)
        return cmd

    def distance_code(self) -> int:
        """Return the distance code this command's distance prefix encodes."""
        if self.dist_prefix < 16:
            return self.dist_prefix
        nbits = self.dist_extra >> 24
        extra = self.dist_extra & 0xFFFFFF
        prefix = self.dist_prefix - 12 - 2 * nbits
        return (prefix << nbits) + extra + 12

    def distance_context(self) -> int:
        """Return the distance context (0-3) derived from the copy length."""
        r = self.cmd_prefix >> 6
        c = self.cmd_prefix & 7
        if r in (0, 2, 4, 7) and c <= 2:
            return c
        return 3