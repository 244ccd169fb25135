"""Serial bus protocols.

An SPIPeripheral is a device clocked one byte at a time by an external
bus master. The master asserts chip select, exchanges bytes through
transmit(), then releases chip select, which the device sees as
finish_transmission().

A GPIOReceiver reacts to level changes on numbered input lines (chip
select, reset) and is how a bus model or test harness drives those pins.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SPIPeripheral(Protocol):
    """Byte-exchange device (structural subtyping)."""

    def transmit(self, data: int) -> int:
        """Exchange one byte.

        Args:
            data: Byte clocked in from the master (0-255)

        Returns:
            Byte clocked out to the master; a fixed idle value when the
            device has nothing to send
        """
        ...

    def finish_transmission(self) -> None:
        """Chip select released: abandon any partial transaction."""
        ...


@runtime_checkable
class GPIOReceiver(Protocol):
    """Receiver for input line changes."""

    def on_gpio(self, number: int, value: bool) -> None:
        """Called when input line number changes to value."""
        ...
