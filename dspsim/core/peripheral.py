"""Base peripheral helpers for shared behavior."""

from __future__ import annotations


class BasePeripheral:
    """Optional base class for memory-mapped peripherals.

    Holds the name and address window. Concrete peripherals still implement
    read/write/reset behavior.
    """

    def __init__(self, name: str, size: int, base_addr: int = 0):
        self.name = name
        self.size = size
        self.base_addr = base_addr

    def contains(self, offset: int, size: int = 4) -> bool:
        """True if an access of size bytes at offset stays inside the window."""
        return 0 <= offset and offset + size <= self.size

    def read(self, offset: int, size: int) -> int:
        """Read from a peripheral register (override in subclasses)."""
        raise NotImplementedError("read() must be implemented by subclasses")

    def write(self, offset: int, size: int, value: int) -> None:
        """Write to a peripheral register (override in subclasses)."""
        raise NotImplementedError("write() must be implemented by subclasses")

    def reset(self) -> None:
        """Reset peripheral state (override in subclasses)."""
        raise NotImplementedError("reset() must be implemented by subclasses")

    def read_register(self, offset: int, size: int) -> int:
        """Alias for read() using register terminology."""
        return self.read(offset, size)

    def write_register(self, offset: int, size: int, value: int) -> None:
        """Alias for write() using register terminology."""
        self.write(offset, size, value)
