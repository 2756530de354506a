"""Compression parameters, their sanitizing, and the stream header."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum

MAX_WINDOW_BITS = 24
MIN_WINDOW_BITS = 10
MIN_INPUT_BLOCK_BITS = 16
MAX_INPUT_BLOCK_BITS = 24
MIN_QUALITY_FOR_BLOCK_SPLIT = 4


class Mode(IntEnum):
    """What the compressor may assume about its input."""

    GENERIC = 0
    TEXT = 1
    FONT = 2


@dataclass(frozen=True)
class BrotliParams:
    """Settings of a compressor.

    ``quality`` trades speed for density, ``lgwin`` is the base 2 log of
    the sliding window and ``lgblock`` that of the maximum input block
    (0 chooses it from the quality). The boolean switches are kept for
    compatibility and have no effect.
    """

    mode: Mode = Mode.GENERIC
    quality: int = 11
    lgwin: int = 22
    lgblock: int = 0
    enable_dictionary: bool = True
    enable_transforms: bool = False
    greedy_block_split: bool = False
    enable_context_modeling: bool = True

    def sanitized(self) -> "BrotliParams":
        """Return a copy with every value brought into its valid range."""
        quality = max(1, self.quality)
        lgwin = min(MAX_WINDOW_BITS, max(MIN_WINDOW_BITS, self.lgwin))
        if self.lgblock == 0:
            lgblock = 14 if quality < MIN_QUALITY_FOR_BLOCK_SPLIT else 16
            if quality >= 9 and lgwin > lgblock:
                lgblock = min(21, lgwin)
        else:
            lgblock = min(MAX_INPUT_BLOCK_BITS, max(MIN_INPUT_BLOCK_BITS, self.lgblock))
        return replace(self, quality=quality, lgwin=lgwin, lgblock=lgblock)

    def input_block_size(self) -> int:
        """The maximum number of input bytes processed at once."""
        return 1 << self.sanitized().lgblock

    @property
    def max_backward_distance(self) -> int:
        """The largest backward distance the window allows."""
        return (1 << self.sanitized().lgwin) - 16


def stream_header(lgwin: int) -> tuple[int, int]:
    """Return (bits value, number of bits) of the header for a window size."""
    if not MIN_WINDOW_BITS <= lgwin <= MAX_WINDOW_BITS:
        raise ValueError(
            f"window bits must be in {MIN_WINDOW_BITS}..{MAX_WINDOW_BITS}, got {lgwin}"
        )
    if lgwin == 16:
        return 0, 1
    if lgwin == 17:
        return 1, 7
    if lgwin > 17:
        return ((lgwin - 17) << 1) | 1, 4
    return ((lgwin - 8) << 4) | 1, 7