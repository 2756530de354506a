"""Bit-level writer and the meta-block headers of the stream format."""

from __future__ import annotations

from brotenc.prefix import log2_floor

MAX_MLEN_BITS = 24


class EncodeError(ValueError):
    """Raised when a value cannot be represented in the stream format."""


class BitWriter:
    """Append-only little-endian bit writer.

    Bits are packed starting at the least significant bit of each byte.
    A writer may start in the middle of a byte, carrying ``initial_bits``
    bits of ``initial_byte`` that were written earlier.
    """

    def __init__(self, initial_byte: int = 0, initial_bits: int = 0) -> None:
        if not 0 <= initial_bits < 8:
            raise ValueError(f"initial_bits must be in 0..7, got {initial_bits}")
        if initial_byte < 0 or initial_byte >> initial_bits:
            raise ValueError(
                f"initial_byte {initial_byte:#x} does not fit in {initial_bits} bits"
            )
        self._buf = bytearray([initial_byte]) if initial_bits else bytearray()
        self._pos = initial_bits

    @property
    def bit_position(self) -> int:
        """Number of bits written so far."""
        return self._pos

    def write(self, n_bits: int, value: int) -> None:
        """Append the low ``n_bits`` bits of ``value``."""
        value = int(value)
        if n_bits < 0:
            raise ValueError(f"bit count must be non-negative, got {n_bits}")
        if value < 0 or value >> n_bits:
            raise ValueError(f"value {value} does not fit in {n_bits} bits")
        buf = self._buf
        pos = self._pos
        while n_bits > 0:
            byte_ix, offset = divmod(pos, 8)
            if byte_ix == len(buf):
                buf.append(0)
            take = min(8 - offset, n_bits)
            buf[byte_ix] |= (value & ((1 << take) - 1)) << offset
            value >>= take
            n_bits -= take
            pos += take
        self._pos = pos

    def jump_to_byte_boundary(self) -> None:
        """Pad with zero bits up to the next byte boundary."""
        self._pos = (self._pos + 7) & ~7

    def _write_aligned(self, data: bytes | bytearray | memoryview) -> None:
        if self._pos & 7:
            raise ValueError("raw bytes can only be written at a byte boundary")
        self._buf.extend(data)
        self._pos += 8 * len(data)

    def getvalue(self) -> bytes:
        """Return the bytes written, including a final partial byte."""
        return bytes(self._buf)


def encode_mlen(length: int) -> tuple[int, int, int]:
    """Return (value, number of bits, MNIBBLES - 4) encoding MLEN - 1."""
    if length < 1:
        raise EncodeError(f"meta-block length must be positive, got {length}")
    length -= 1
    lg = 1 if length == 0 else log2_floor(length) + 1
    if lg > MAX_MLEN_BITS:
        raise EncodeError(f"meta-block length {length + 1} is too large")
    mnibbles = (16 if lg < 16 else lg + 3) // 4
    return length, mnibbles * 4, mnibbles - 4


def store_var_len_uint8(writer: BitWriter, n: int) -> None:
    """Store a number between 0 and 255 in the variable length format."""
    if not 0 <= n <= 255:
        raise ValueError(f"value must be in 0..255, got {n}")
    if n == 0:
        writer.write(1, 0)
        return
    writer.write(1, 1)
    nbits = log2_floor(n)
    writer.write(3, nbits)
    writer.write(nbits, n - (1 << nbits))


def store_compressed_meta_block_header(
    writer: BitWriter, final_block: bool, length: int
) -> None:
    """Store the header of a compressed meta-block of ``length`` bytes."""
    writer.write(1, int(bool(final_block)))
    if final_block:
        writer.write(1, int(length == 0))
        if length == 0:
            return
    if length == 0:
        raise EncodeError("only the last meta-block can be empty")
    bits, nbits, nibblesbits = encode_mlen(length)
    writer.write(2, nibblesbits)
    writer.write(nbits, bits)
    if not final_block:
        writer.write(1, 0)  # ISUNCOMPRESSED


def store_uncompressed_meta_block_header(writer: BitWriter, length: int) -> None:
    """Store the header of an uncompressed meta-block of ``length`` bytes."""
    bits, nbits, nibblesbits = encode_mlen(length)
    writer.write(1, 0)  # an uncompressed block is never the last one
    writer.write(2, nibblesbits)
    writer.write(nbits, bits)
    writer.write(1, 1)  # ISUNCOMPRESSED


def store_uncompressed_meta_block(
    writer: BitWriter,
    final_block: bool,
    data: bytes | bytearray | memoryview,
    position: int,
    mask: int,
    length: int,
) -> None:
    """Store ``length`` raw bytes of the ring buffer ``data`` from ``position``.

    When ``final_block`` is set, an empty last meta-block follows.
    """
    store_uncompressed_meta_block_header(writer, length)
    writer.jump_to_byte_boundary()
    view = memoryview(bytes(data))
    masked_pos = position & mask
    if masked_pos + length > mask + 1:
        head = mask + 1 - masked_pos
        writer._write_aligned(view[masked_pos:masked_pos + head])
        length -= head
        masked_pos = 0
    chunk = view[masked_pos:masked_pos + length]
    if len(chunk) != length:
        raise EncodeError("not enough input bytes for the uncompressed block")
    writer._write_aligned(chunk)
    if final_block:
        writer.write(1, 1)  # ISLAST
        writer.write(1, 1)  # ISEMPTY
        writer.jump_to_byte_boundary()


def store_sync_meta_block(writer: BitWriter) -> None:
    """Store an empty metadata meta-block and align to a byte boundary."""
    # ISLAST = 0, MNIBBLES code 3, reserved 0, MSKIPBYTES 0.
    writer.write(6, 6)
    writer.jump_to_byte_boundary()