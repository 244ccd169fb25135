"""ADAU146x constants.

Values shared by the device model and the host-side frame builders. The
memory layout itself is per variant and lives in the YAML configs.
"""

# Variants (config file stems under dspsim/configs)
VARIANT_ADAU1467 = "adau1467"
VARIANT_ADAU1463 = "adau1463"

# Chip byte
READ_FLAG = 0x01
"""Bit 0 of the chip byte: 1 = read, 0 = write."""

CHIP_ADDRESS_SHIFT = 1
"""The 7-bit chip address sits in bits 7:1 of the chip byte."""

# Control registers
SECONDPAGE_ENABLE = 0xF899
"""Page select register; bit 0 routes unqualified accesses to page B."""

SOFT_RESET = 0xF890
PLL_LOCK = 0xF004

CONTROL_REGISTER_WIDTH = 16
"""Control registers are 16 bits wide."""
