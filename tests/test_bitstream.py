import random

import pytest

from brotenc.bitstream import (
    BitWriter,
    EncodeError,
    encode_mlen,
    store_compressed_meta_block_header,
    store_sync_meta_block,
    store_uncompressed_meta_block,
    store_uncompressed_meta_block_header,
    store_var_len_uint8,
)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.value = int.from_bytes(data, "little")
        self.size = len(data) * 8
        self.pos = 0

    def read(self, n: int) -> int:
        assert self.pos + n <= self.size
        v = (self.value >> self.pos) & ((1 << n) - 1)
        self.pos += n
        return v

    def align(self) -> None:
        self.pos = (self.pos + 7) & ~7


def _read_var_len_uint8(r: _Reader) -> int:
    if r.read(1) == 0:
        return 0
    nbits = r.read(3)
    return (1 << nbits) + r.read(nbits)


def _read_header(r: _Reader):
    is_last = r.read(1)
    if is_last and r.read(1):
        return True, 0, None
    mnibbles = r.read(2) + 4
    mlen = r.read(4 * mnibbles) + 1
    uncompressed = None if is_last else r.read(1)
    return bool(is_last), mlen, uncompressed


def test_write_packs_lsb_first():
    w = BitWriter()
    w.write(1, 1)
    assert w.getvalue() == b"\x01"
    assert w.bit_position == 1


def test_write_round_trip_random_fields():
    rng = random.Random(5)
    fields = [(n, rng.randrange(1 << n)) for n in (rng.randrange(0, 40) for _ in range(300))]
    w = BitWriter()
    for n, v in fields:
        w.write(n, v)
    assert w.bit_position == sum(n for n, _ in fields)
    r = _Reader(w.getvalue())
    assert [r.read(n) for n, _ in fields] == [v for _, v in fields]


def test_write_rejects_value_too_wide():
    w = BitWriter()
    with pytest.raises(ValueError):
        w.write(3, 8)


def test_initial_byte_is_continued():
    w = BitWriter(initial_byte=0b101, initial_bits=3)
    w.write(5, 0b11111)
    r = _Reader(w.getvalue())
    assert r.read(3) == 0b101
    assert r.read(5) == 0b11111


def test_initial_byte_must_fit():
    with pytest.raises(ValueError):
        BitWriter(initial_byte=0x10, initial_bits=3)


def test_jump_to_byte_boundary():
    w = BitWriter()
    w.write(3, 5)
    w.jump_to_byte_boundary()
    assert w.bit_position == 8
    w.jump_to_byte_boundary()
    assert w.bit_position == 8
    assert len(w.getvalue()) == 1


@pytest.mark.parametrize("length", [1, 2, 1000, 65535, 65536, 65537, 1 << 20, 1 << 24])
def test_encode_mlen_invariants(length):
    bits, numbits, nibblesbits = encode_mlen(length)
    assert bits == length - 1
    assert numbits == 4 * (nibblesbits + 4)
    assert 0 <= nibblesbits <= 2
    assert bits < (1 << numbits)


def test_encode_mlen_smallest():
    assert encode_mlen(1) == (0, 16, 0)


@pytest.mark.parametrize("length", [0, (1 << 24) + 1])
def test_encode_mlen_out_of_range(length):
    with pytest.raises(EncodeError):
        encode_mlen(length)


def test_var_len_uint8_round_trip():
    w = BitWriter()
    for n in range(256):
        store_var_len_uint8(w, n)
    r = _Reader(w.getvalue())
    assert [_read_var_len_uint8(r) for _ in range(256)] == list(range(256))


def test_var_len_uint8_zero_is_one_bit():
    w = BitWriter()
    store_var_len_uint8(w, 0)
    assert w.bit_position == 1


def test_var_len_uint8_rejects_large():
    with pytest.raises(ValueError):
        store_var_len_uint8(BitWriter(), 256)


def test_empty_last_meta_block():
    w = BitWriter()
    store_compressed_meta_block_header(w, True, 0)
    w.jump_to_byte_boundary()
    assert w.getvalue() == b"\x03"


def test_empty_non_final_meta_block_rejected():
    with pytest.raises(EncodeError):
        store_compressed_meta_block_header(BitWriter(), False, 0)


@pytest.mark.parametrize("final", [True, False])
@pytest.mark.parametrize("length", [1, 300, 70000, 1 << 24])
def test_compressed_header_round_trip(final, length):
    w = BitWriter()
    store_compressed_meta_block_header(w, final, length)
    r = _Reader(w.getvalue())
    is_last, mlen, uncompressed = _read_header(r)
    assert is_last is final
    assert mlen == length
    assert uncompressed == (None if final else 0)
    assert r.pos == w.bit_position


def test_uncompressed_header_round_trip():
    w = BitWriter()
    store_uncompressed_meta_block_header(w, 4242)
    r = _Reader(w.getvalue())
    assert _read_header(r) == (False, 4242, 1)


def test_uncompressed_meta_block_round_trip():
    data = bytes(range(50))
    w = BitWriter()
    store_uncompressed_meta_block(w, False, data, 10, 63, 30)
    out = w.getvalue()
    r = _Reader(out)
    assert _read_header(r) == (False, 30, 1)
    r.align()
    start = r.pos // 8
    assert out[start:] == data[10:40]


def test_uncompressed_meta_block_wraps_ring_buffer():
    ring = bytes(range(16))
    w = BitWriter()
    store_uncompressed_meta_block(w, True, ring, 12, 15, 8)
    out = w.getvalue()
    r = _Reader(out)
    assert _read_header(r) == (False, 8, 1)
    r.align()
    start = r.pos // 8
    assert out[start:start + 8] == ring[12:] + ring[:4]
    r.pos = (start + 8) * 8
    assert _read_header(r) == (True, 0, None)
    assert len(out) == start + 9


def test_uncompressed_meta_block_needs_enough_data():
    with pytest.raises(EncodeError):
        store_uncompressed_meta_block(BitWriter(), False, b"abc", 0, 255, 10)


def test_sync_meta_block():
    w = BitWriter()
    store_sync_meta_block(w)
    assert w.getvalue() == b"\x06"
    assert w.bit_position == 8