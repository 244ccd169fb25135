"""Control register abstraction layer.

Registers are declared once as plain records (RegisterDescriptor) and held
by a RegisterBank that owns their current values. Behaviour that goes beyond
storage is expressed through the descriptor: access mode, writable mask,
bits that always read as set, and an optional side-effect tag. Side-effect
tags are dispatched by the bank to a listener object rather than stored as
callbacks on the registers themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Protocol

from dspsim.utils.consts import width_mask

logger = logging.getLogger(__name__)


class AccessMode(Enum):
    """How a register responds to bus reads and writes."""

    READ_WRITE = "rw"
    READ_ONLY = "ro"
    WRITE_ONLY = "wo"


class SideEffect(Enum):
    """Side effects a register write can trigger once its value changes."""

    PAGE_SELECT = "page_select"
    BACKUP_DOMAIN_ACCESS = "backup_domain_access"


@dataclass(frozen=True)
class RegisterDescriptor:
    """Metadata and reset state for a single control register.

    mask and ready_mask default to "all bits writable" and "no synthesized
    bits" respectively; a mask of None means the full register width.
    """

    address: int
    name: str
    reset_value: int = 0
    access: AccessMode = AccessMode.READ_WRITE
    mask: Optional[int] = None
    ready_mask: int = 0
    side_effect: Optional[SideEffect] = None
    description: str = ""


class SideEffectListener(Protocol):
    """Receiver for register side effects (usually the owning device)."""

    def on_page_select(self, value: int) -> None:
        """Called after the page-select register changes."""
        ...

    def on_backup_domain_access(self, value: int) -> None:
        """Called after the backup-domain protection register changes."""
        ...


class RegisterBank:
    """Storage and dispatch for a fixed set of registers.

    Maps address -> current value. Unknown addresses read as zero (logged as
    an error) and swallow writes, matching the bus behaviour of the device.
    """

    def __init__(
        self,
        descriptors: list[RegisterDescriptor] | tuple[RegisterDescriptor, ...],
        width: int = 16,
        listener: Optional[SideEffectListener] = None,
    ):
        """Create a bank from a register table.

        Args:
            descriptors: Register table; addresses must be unique
            width: Register width in bits (16 or 32)
            listener: Receiver for side-effect notifications

        Raises:
            ValueError: If two descriptors share an address
        """
        self.width = width
        self._full_mask = width_mask(width)
        self._listener = listener
        self._descriptors: dict[int, RegisterDescriptor] = {}
        self._values: dict[int, int] = {}

        for desc in descriptors:
            if desc.address in self._descriptors:
                raise ValueError(f"Register at address 0x{desc.address:X} already exists")
            self._descriptors[desc.address] = desc
            self._values[desc.address] = desc.reset_value & self._full_mask

    def attach_listener(self, listener: SideEffectListener) -> None:
        """Attach the object notified about side-effect register changes."""
        self._listener = listener

    def read(self, address: int) -> int:
        """Read the current value at address.

        Write-only registers return their reset value; ready bits are always
        reported as set. Unknown addresses read as zero.
        """
        desc = self._descriptors.get(address)
        if desc is None:
            logger.error(f"Read of unknown control register 0x{address:04X}")
            return 0

        if desc.access is AccessMode.WRITE_ONLY:
            value = desc.reset_value
        else:
            value = self._values[address]
        return (value | desc.ready_mask) & self._full_mask

    def write(self, address: int, value: int) -> None:
        """Write value to address.

        Writes to unknown or read-only registers are silently ignored. Only
        the bits covered by the descriptor mask are stored.
        """
        desc = self._descriptors.get(address)
        if desc is None or desc.access is AccessMode.READ_ONLY:
            return

        mask = self._mask_for(desc)
        old = self._values[address]
        new = (old & ~mask) | (value & mask)
        self._values[address] = new & self._full_mask

        if desc.side_effect is not None and new != old:
            self._dispatch_side_effect(desc, new)

    def reset(self) -> None:
        """Restore every register to its declared reset value."""
        for address, desc in self._descriptors.items():
            self._values[address] = desc.reset_value & self._full_mask

    def peek(self, address: int) -> Optional[int]:
        """Return the stored value without read semantics, or None if unknown."""
        return self._values.get(address)

    def descriptor(self, address: int) -> Optional[RegisterDescriptor]:
        """Return the descriptor at address, or None."""
        return self._descriptors.get(address)

    def find(self, name: str) -> Optional[RegisterDescriptor]:
        """Look up a descriptor by register name."""
        for desc in self._descriptors.values():
            if desc.name == name:
                return desc
        return None

    def items(self) -> Iterator[tuple[RegisterDescriptor, int]]:
        """Yield (descriptor, read value) pairs in ascending address order."""
        for address in sorted(self._descriptors):
            yield self._descriptors[address], self.read(address)

    def __contains__(self, address: object) -> bool:
        return address in self._descriptors

    def __iter__(self) -> Iterator[RegisterDescriptor]:
        return iter(self._descriptors[a] for a in sorted(self._descriptors))

    def __len__(self) -> int:
        return len(self._descriptors)

    # Private helpers -------------------------------------------------------

    def _mask_for(self, desc: RegisterDescriptor) -> int:
        if desc.mask is None:
            return self._full_mask
        return desc.mask & self._full_mask

    def _dispatch_side_effect(self, desc: RegisterDescriptor, value: int) -> None:
        if self._listener is None:
            return

        if desc.side_effect is SideEffect.PAGE_SELECT:
            self._listener.on_page_select(value)
        elif desc.side_effect is SideEffect.BACKUP_DOMAIN_ACCESS:
            self._listener.on_backup_domain_access(value)
