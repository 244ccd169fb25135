"""Minimal SPI master model.

Drives a single SPIPeripheral: select, clock bytes through it, deselect.
Mirrors what a host-side driver does with a real bus adapter.
"""

from __future__ import annotations

import logging
from typing import Iterable

from dspsim.interfaces.spi import SPIPeripheral

logger = logging.getLogger(__name__)


class SPIBus:
    """Bus master for one device."""

    def __init__(self, device: SPIPeripheral):
        self.device = device
        self.selected = False

    def select(self) -> None:
        """Assert chip select."""
        self.selected = True

    def deselect(self) -> None:
        """Release chip select; the device drops any partial transaction."""
        if self.selected:
            self.device.finish_transmission()
        self.selected = False

    def exchange(self, data: Iterable[int]) -> bytes:
        """Clock bytes through the selected device and collect the replies.

        Raises:
            RuntimeError: If chip select is not asserted
        """
        if not self.selected:
            raise RuntimeError("SPI exchange without chip select")
        return bytes(self.device.transmit(b & 0xFF) & 0xFF for b in data)

    def transaction(self, data: Iterable[int]) -> bytes:
        """Run one complete chip-selected exchange."""
        self.select()
        try:
            reply = self.exchange(data)
        finally:
            self.deselect()
        logger.debug(f"SPI transaction {len(reply)} bytes")
        return reply
