"""Software safeload engine.

Parameters are staged in a small buffer at the bottom of data memory
together with a destination address, then committed in one go by writing a
word count to one of two trigger addresses. The lower trigger commits the
page A staging buffer into page A, the upper trigger commits page B into
page B. A count of zero is a no-op.

The copy runs synchronously inside the triggering memory write, so no
partially applied update is ever visible on the bus.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dspsim.core.address_space import Page, PageOverride
from dspsim.core.memmap import AddressSpace
from dspsim.utils.consts import ConstUtils

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SafeloadLayout:
    """Fixed addresses used by the safeload mechanism."""

    data_base: int
    data_words: int
    address_pointer: int
    trigger_lower: int
    trigger_upper: int

    def trigger_page(self, address: int) -> Page | None:
        """Return the page committed by a write to address, if it is a trigger."""
        if address == self.trigger_lower:
            return Page.A
        if address == self.trigger_upper:
            return Page.B
        return None


class SafeloadEngine:
    """Watches committed memory writes and performs safeload copies."""

    def __init__(self, address_space: AddressSpace, layout: SafeloadLayout):
        self.address_space = address_space
        self.layout = layout
        self.commit_count = 0

    def on_memory_write(self, address: int, value: int) -> int:
        """Check a committed memory write for a safeload trigger.

        Returns:
            Number of words copied (0 when the write was not a trigger).
        """
        page = self.layout.trigger_page(address)
        if page is None or value < 1:
            return 0
        return self.commit(page, value)

    def commit(self, page: Page, count: int) -> int:
        """Copy count words from the start of the staging area of page.

        The destination is the address held in the pointer word of the same
        page. A count larger than the staging buffer keeps reading the words
        that follow it. The copy stops at the end of the destination region.
        """
        override = PageOverride.for_page(page)
        target = self.address_space.read(self.layout.address_pointer, override)
        target &= ConstUtils.MASK_16_BITS

        resolved = self.address_space.resolve(target, override)
        if resolved is None:
            logger.warning(f"Safeload:{page.name}: target 0x{target:04X} is not mapped")
            return 0

        words = count
        room = resolved.region.size - resolved.index
        if words > room:
            logger.warning(
                f"Safeload:{page.name}: copy to 0x{target:04X} truncated to "
                f"{room} words at the end of {resolved.region.name}"
            )
            words = room

        logger.debug(f"Safeload:{page.name}: address 0x{target:04X} words {words}")
        for i in range(words):
            source = (self.layout.data_base + i) & ConstUtils.MASK_16_BITS
            value = self.address_space.read(source, override)
            resolved.region.write_word(page, resolved.index + i, value)
            logger.debug(f"Safeload:{page.name}: 0x{target + i:04X} = 0x{value:08X}")

        self.commit_count += 1
        return words
