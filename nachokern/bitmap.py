"""A fixed-size array of bits, used to track free and allocated slots."""

from __future__ import annotations

from typing import BinaryIO

from .utility import div_round_up

BITS_IN_BYTE = 8
BITS_IN_WORD = 32
BYTES_IN_WORD = BITS_IN_WORD // BITS_IN_BYTE


class BitMap:
    """An array of ``nitems`` bits, all clear to start with.

    The bits are stored as 32-bit little-endian words, which is also the
    layout written to and read from files.
    """

    def __init__(self, nitems: int) -> None:
        if nitems < 0:
            raise ValueError(f"bitmap size must not be negative: {nitems}")
        self.num_bits = nitems
        self.num_words = div_round_up(nitems, BITS_IN_WORD)
        self._map = bytearray(self.num_words * BYTES_IN_WORD)

    def _locate(self, which: int) -> tuple[int, int]:
        if not 0 <= which < self.num_bits:
            raise IndexError(f"bit {which} out of range 0..{self.num_bits - 1}")
        return which // BITS_IN_BYTE, 1 << (which % BITS_IN_BYTE)

    def mark(self, which: int) -> None:
        """Set bit ``which``."""
        index, mask = self._locate(which)
        self._map[index] |= mask

    def clear(self, which: int) -> None:
        """Clear bit ``which``."""
        index, mask = self._locate(which)
        self._map[index] &= ~mask & 0xFF

    def test(self, which: int) -> bool:
        """Return True if bit ``which`` is set."""
        index, mask = self._locate(which)
        return bool(self._map[index] & mask)

    def find(self) -> int | None:
        """Set the first clear bit and return its number, or None if all are set."""
        for which in range(self.num_bits):
            if not self.test(which):
                self.mark(which)
                return which
        return None

    def num_clear(self) -> int:
        """Return how many bits are clear."""
        return sum(1 for which in range(self.num_bits) if not self.test(which))

    def format(self) -> str:
        """Return a listing of the numbers of all set bits."""
        listed = "".join(f"{which}, " for which in range(self.num_bits) if self.test(which))
        return f"Bitmap set:\n{listed}\n"

    def fetch_from(self, file: BinaryIO) -> None:
        """Load the bit storage from the start of a binary file.

        If the file is shorter than the storage, only the bytes present
        are replaced.
        """
        file.seek(0)
        data = file.read(len(self._map))
        self._map[: len(data)] = data

    def write_back(self, file: BinaryIO) -> None:
        """Store the bit storage at the start of a binary file."""
        file.seek(0)
        file.write(bytes(self._map))