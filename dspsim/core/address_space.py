"""Memory address space model.

The sub-address space below the control-register boundary is made up of
word-addressed regions (two data memories and the program memory). Every
region is double-buffered: it owns two pages of 32-bit words and a single
page-select bit decides which one an unqualified access hits.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dspsim.core.exceptions import MemoryBoundsError
from dspsim.utils.consts import ConstUtils


@dataclass(frozen=True)
class AddressRange:
    """An immutable word-address range."""

    base: int
    size: int

    @property
    def end(self) -> int:
        return self.base + self.size

    def contains(self, address: int) -> bool:
        return self.base <= address < self.base + self.size

    def overlaps(self, other: AddressRange) -> bool:
        return not (self.end <= other.base or other.end <= self.base)

    def __str__(self) -> str:
        return f"0x{self.base:04X}-0x{self.base + self.size - 1:04X}"


class Page(Enum):
    """One of the two buffers backing a memory region."""

    A = 0
    B = 1

    @classmethod
    def from_flag(cls, flag: bool) -> Page:
        return cls.B if flag else cls.A


class PageOverride(Enum):
    """Page qualification for a memory access.

    CURRENT follows the page-select register; the forced variants are used
    by out-of-band bulk reads and by the safeload copy.
    """

    CURRENT = 0
    FORCE_A = 1
    FORCE_B = 2

    @classmethod
    def for_page(cls, page: Page) -> PageOverride:
        return cls.FORCE_B if page is Page.B else cls.FORCE_A


class MemoryRegion:
    """A double-buffered region of 32-bit words.

    Words are stored big-endian in one bytearray per page. Indexes are
    region-relative (address minus base).
    """

    def __init__(self, address_range: AddressRange, name: str):
        self.range = address_range
        self.name = name
        self._pages = {
            Page.A: bytearray(address_range.size * ConstUtils.WORD_BYTES),
            Page.B: bytearray(address_range.size * ConstUtils.WORD_BYTES),
        }

    @property
    def base(self) -> int:
        return self.range.base

    @property
    def size(self) -> int:
        return self.range.size

    def contains(self, address: int) -> bool:
        return self.range.contains(address)

    def read_word(self, page: Page, index: int) -> int:
        """Read the word at a region-relative index."""
        self._check_index(index, 1)
        offset = index * ConstUtils.WORD_BYTES
        return int.from_bytes(self._pages[page][offset:offset + ConstUtils.WORD_BYTES], "big")

    def write_word(self, page: Page, index: int, value: int) -> None:
        """Write a word at a region-relative index."""
        self._check_index(index, 1)
        offset = index * ConstUtils.WORD_BYTES
        self._pages[page][offset:offset + ConstUtils.WORD_BYTES] = (
            value & ConstUtils.MASK_32_BITS
        ).to_bytes(ConstUtils.WORD_BYTES, "big")

    def _check_index(self, index: int, count: int) -> None:
        if index < 0 or count < 0 or index + count > self.size:
            raise MemoryBoundsError(self.base + index, count, self.name)


@dataclass(frozen=True)
class ResolvedAddress:
    """A memory address resolved to its region, page and word index."""

    region: MemoryRegion
    page: Page
    index: int
