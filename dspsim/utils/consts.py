"""Constants and utility values for the simulator."""


class ConstUtils:
    """Bitwise masks shared by the register and memory models."""

    # Bitwise masks for different data widths
    MASK_8_BITS = 0xFF
    """8-bit mask: 0xFF"""

    MASK_16_BITS = 0xFFFF
    """16-bit mask: 0xFFFF"""

    MASK_32_BITS = 0xFFFFFFFF
    """32-bit mask: 0xFFFFFFFF"""

    ADDRESS_SPACE_SIZE = 0x10000
    """Size of the 16-bit sub-address space seen over the serial bus."""

    WORD_BYTES = 4
    """Bytes per data/program memory word."""

    CONTROL_BYTES = 2
    """Bytes per control register."""


def width_mask(bits: int) -> int:
    """Return the all-ones mask for a register of the given bit width."""
    if bits not in (8, 16, 32):
        raise ValueError(f"Invalid register width {bits}; must be 8, 16 or 32 bits")
    return (1 << bits) - 1
