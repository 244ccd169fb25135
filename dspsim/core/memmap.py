"""Address space dispatcher.

Classifies 16-bit sub-addresses as control registers or memory words and
resolves memory addresses to (region, page, index). The page used by an
unqualified access comes from a page selector supplied by the owner, which
normally reads the page-select control register.
"""

from __future__ import annotations

import bisect
import logging
from typing import Callable, Optional

from dspsim.core.address_space import (
    MemoryRegion,
    Page,
    PageOverride,
    ResolvedAddress,
)
from dspsim.utils.consts import ConstUtils

logger = logging.getLogger(__name__)

PageSelector = Callable[[], Page]


class AddressSpace:
    """Maps bus sub-addresses to memory regions.

    Regions are kept sorted by base so resolution is a binary search. Gaps
    between regions, and everything at or above control_base, resolve to
    None.
    """

    def __init__(
        self,
        regions: list[MemoryRegion],
        control_base: int,
        page_selector: Optional[PageSelector] = None,
    ):
        """Create an address space.

        Args:
            regions: Memory regions; must not overlap each other or the
                control window
            control_base: First address of the 16-bit control-register window
            page_selector: Returns the page for unqualified accesses
                (defaults to page A)

        Raises:
            ValueError: If regions overlap or cross control_base
        """
        self.control_base = control_base
        self._page_selector = page_selector or (lambda: Page.A)
        self._regions: list[MemoryRegion] = []
        self._bases: list[int] = []

        for region in regions:
            self._add_region(region)

    def _add_region(self, region: MemoryRegion) -> None:
        if region.range.end > self.control_base:
            raise ValueError(
                f"Region {region.name} ({region.range}) crosses the control "
                f"register window at 0x{self.control_base:04X}"
            )

        idx = bisect.bisect_left(self._bases, region.base)

        # Check overlap with neighbours
        if idx > 0 and self._regions[idx - 1].range.overlaps(region.range):
            prev = self._regions[idx - 1]
            raise ValueError(f"Region {region.name} overlaps {prev.name} at {prev.range}")
        if idx < len(self._regions) and self._regions[idx].range.overlaps(region.range):
            nxt = self._regions[idx]
            raise ValueError(f"Region {region.name} overlaps {nxt.name} at {nxt.range}")

        self._bases.insert(idx, region.base)
        self._regions.insert(idx, region)

    @property
    def regions(self) -> list[MemoryRegion]:
        """Return all regions in ascending address order."""
        return list(self._regions)

    @property
    def current_page(self) -> Page:
        return self._page_selector()

    def is_control(self, address: int) -> bool:
        """True if address belongs to the 16-bit control-register window."""
        return self.control_base <= address < ConstUtils.ADDRESS_SPACE_SIZE

    def find_region(self, address: int) -> Optional[MemoryRegion]:
        """Find the region containing this address."""
        idx = bisect.bisect_right(self._bases, address) - 1
        if idx >= 0:
            region = self._regions[idx]
            if region.contains(address):
                return region
        return None

    def region_by_name(self, name: str) -> Optional[MemoryRegion]:
        for region in self._regions:
            if region.name == name:
                return region
        return None

    def page_for(self, page_override: PageOverride) -> Page:
        """Translate a page override into a concrete page."""
        if page_override is PageOverride.FORCE_A:
            return Page.A
        if page_override is PageOverride.FORCE_B:
            return Page.B
        return self._page_selector()

    def resolve(
        self, address: int, page_override: PageOverride = PageOverride.CURRENT
    ) -> Optional[ResolvedAddress]:
        """Resolve a memory address, or return None if it is unmapped."""
        region = self.find_region(address)
        if region is None:
            return None
        return ResolvedAddress(region, self.page_for(page_override), address - region.base)

    def read(self, address: int, page_override: PageOverride = PageOverride.CURRENT) -> int:
        """Read a memory word. Unmapped addresses read as zero."""
        resolved = self.resolve(address, page_override)
        if resolved is None:
            logger.error(f"Read of unmapped memory address 0x{address:04X}")
            return 0
        return resolved.region.read_word(resolved.page, resolved.index)

    def write(
        self, address: int, value: int, page_override: PageOverride = PageOverride.CURRENT
    ) -> None:
        """Write a memory word. Writes to unmapped addresses are dropped."""
        resolved = self.resolve(address, page_override)
        if resolved is None:
            return
        resolved.region.write_word(resolved.page, resolved.index, value)

    def read_words(self, address: int, count: int, page: Page) -> list[int]:
        """Read count consecutive words from an explicit page.

        Each address is resolved on its own, so a range crossing a gap yields
        zeros for the unmapped words.
        """
        override = PageOverride.for_page(page)
        return [self.read((address + i) & ConstUtils.MASK_16_BITS, override) for i in range(count)]

    def get_memory_map(self) -> dict:
        """Return a human-readable description of the memory layout."""
        return {
            "regions": [
                {
                    "name": region.name,
                    "base": f"0x{region.base:04X}",
                    "size": f"0x{region.size:X}",
                    "end": f"0x{region.range.end - 1:04X}",
                }
                for region in self._regions
            ],
            "control": {
                "base": f"0x{self.control_base:04X}",
                "end": f"0x{ConstUtils.ADDRESS_SPACE_SIZE - 1:04X}",
            },
            "page": self.current_page.name,
        }
