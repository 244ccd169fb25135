"""STM32H7 power controller (PWR) constants.

Offsets, reset values and writable masks from RM0468 (H72x/H73x) and
RM0433 (H74x/H75x).
"""

PWR_SIZE = 0x400
"""The PWR block occupies 0x400 bytes of the peripheral bus."""

# Register offsets
PWR_CR1 = 0x00
PWR_CSR1 = 0x04
PWR_CR2 = 0x08
PWR_CR3 = 0x0C
PWR_CPUCR = 0x10
PWR_D3CR = 0x18
PWR_WKUPCR = 0x20
PWR_WKUPFR = 0x24
PWR_WKUPEPR = 0x28

# Families
FAMILIES_RM0468 = ("H72", "H73")
FAMILIES_RM0433 = ("H74", "H75")

# Reset values
CR1_RESET = 0xF000C000
CSR1_RESET = 0x00004000
D3CR_RESET = 0x00004000
CR3_RESET_RM0468 = 0x00000046
CR3_RESET_RM0433 = 0x00000006

# Writable bits
CR1_MASK = 0x0007C3F1        # LPDS PVDE PLS DBP FLPS SVOS AVDEN ALS
CR2_MASK = 0x00F10011
CR3_MASK = 0x0700033F
CPUCR_MASK = 0x00000BE7
D3CR_MASK = 0x0000C000       # VOS
WKUPCR_MASK = 0x0000003F
WKUPEPR_MASK = 0x0FFF3F3F

# Field positions
CR1_DBP = 1 << 8
"""Disable backup domain write protection."""

CR1_SVOS_SHIFT = 14
CR1_SVOS_MASK = 0x3 << CR1_SVOS_SHIFT
SVOS_RESERVED = 0
SVOS_SCALE_MODE_3 = 3

CSR1_ACTVOSRDY = 1 << 13
D3CR_VOSRDY = 1 << 13
