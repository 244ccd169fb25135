"""Peripheral protocol for memory-mapped devices.

A Peripheral is any component that responds to read/write operations
at offsets inside its address window (MMIO).

PROTOCOL CONTRACT:
- Offsets are peripheral-relative (0x00 - size of the window)
- Must support 1, 2, and 4-byte accesses
- Read: Return the register value or 0 if undefined
- Write: Update internal state or silently ignore writes to undefined regs
- Reset: Restore all registers to reset values
- Exceptions: Only raise for truly exceptional conditions (never for normal I/O)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Peripheral(Protocol):
    """Memory-mapped peripheral interface (structural subtyping)."""

    name: str
    size: int

    def write(self, offset: int, size: int, value: int) -> None:
        """Write to a peripheral register.

        Args:
            offset: Peripheral-relative address (0x00+)
            size: Number of bytes to write (1, 2, or 4)
            value: Data to write
        """
        ...

    def read(self, offset: int, size: int) -> int:
        """Read from a peripheral register.

        Returns:
            Register value, or 0 if offset is undefined
        """
        ...

    def read_register(self, offset: int, size: int) -> int:
        """Alias for read() in register terminology."""
        ...

    def write_register(self, offset: int, size: int, value: int) -> None:
        """Alias for write() in register terminology."""
        ...

    def reset(self) -> None:
        """Reset peripheral to its initial state."""
        ...
