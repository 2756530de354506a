"""Detection of UTF-8 encoded input."""

from __future__ import annotations

MIN_UTF8_RATIO = 0.75
NON_UTF8_SYMBOL_BASE = 0x110000


def parse_as_utf8(data: bytes | bytearray | memoryview, pos: int = 0) -> tuple[int, int]:
    """Decode one character at ``pos``; return (symbol, bytes read).

    Bytes that do not start a valid character give a symbol above the
    Unicode code space, ``0x110000 | byte``, and one byte read.
    """
    size = len(data) - pos
    if pos < 0 or size <= 0:
        raise IndexError(f"position {pos} is outside the data")
    b0 = data[pos]
    # ASCII
    if b0 & 0x80 == 0 and b0 > 0:
        return b0, 1
    # 2-byte UTF-8
    if size > 1 and b0 & 0xE0 == 0xC0 and data[pos + 1] & 0xC0 == 0x80:
        symbol = ((b0 & 0x1F) << 6) | (data[pos + 1] & 0x3F)
        if symbol > 0x7F:
            return symbol, 2
    # 3-byte UTF-8
    if (
        size > 2
        and b0 & 0xF0 == 0xE0
        and data[pos + 1] & 0xC0 == 0x80
        and data[pos + 2] & 0xC0 == 0x80
    ):
        symbol = ((b0 & 0x0F) << 12) | ((data[pos + 1] & 0x3F) << 6) | (data[pos + 2] & 0x3F)
        if symbol > 0x7FF:
            return symbol, 3
    # 4-byte UTF-8
    if (
        size > 3
        and b0 & 0xF8 == 0xF0
        and data[pos + 1] & 0xC0 == 0x80
        and data[pos + 2] & 0xC0 == 0x80
        and data[pos + 3] & 0xC0 == 0x80
    ):
        symbol = (
            ((b0 & 0x07) << 18)
            | ((data[pos + 1] & 0x3F) << 12)
            | ((data[pos + 2] & 0x3F) << 6)
            | (data[pos + 3] & 0x3F)
        )
        if 0xFFFF < symbol <= 0x10FFFF:
            return symbol, 4
    return NON_UTF8_SYMBOL_BASE | b0, 1


def is_mostly_utf8(
    data: bytes | bytearray | memoryview, min_fraction: float = MIN_UTF8_RATIO
) -> bool:
    """Return True if more than ``min_fraction`` of the bytes are valid UTF-8."""
    size_utf8 = 0
    pos = 0
    length = len(data)
    while pos < length:
        symbol, bytes_read = parse_as_utf8(data, pos)
        pos += bytes_read
        if symbol < NON_UTF8_SYMBOL_BASE:
            size_utf8 += bytes_read
    return size_utf8 > min_fraction * length