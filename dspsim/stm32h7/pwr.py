"""STM32H7 power controller (PWR) peripheral.

Register-level model of the PWR block, enough for firmware start-up code
that polls the voltage-scaling ready flags and toggles backup-domain
write protection:

  PWR_CR1     DBP (bit 8) fires the backup-domain access side effect;
              SVOS = 0 is reserved and reads back as scale mode 3
  PWR_CSR1    read-only, ACTVOSRDY always set
  PWR_D3CR    VOSRDY always set
  PWR_WKUPCR  write-only
  PWR_WKUPFR  read-only

All registers are 32 bits. Byte and halfword accesses are applied to the
enclosing register with a read-modify-write.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, override

from dspsim.core.exceptions import ConfigurationError
from dspsim.core.peripheral import BasePeripheral
from dspsim.core.register import AccessMode, RegisterBank, RegisterDescriptor, SideEffect
from dspsim.utils.consts import ConstUtils
from .consts import (
    CPUCR_MASK,
    CR1_DBP,
    CR1_MASK,
    CR1_RESET,
    CR1_SVOS_MASK,
    CR1_SVOS_SHIFT,
    CR2_MASK,
    CR3_MASK,
    CR3_RESET_RM0433,
    CR3_RESET_RM0468,
    CSR1_ACTVOSRDY,
    CSR1_RESET,
    D3CR_MASK,
    D3CR_RESET,
    D3CR_VOSRDY,
    FAMILIES_RM0433,
    FAMILIES_RM0468,
    PWR_CPUCR,
    PWR_CR1,
    PWR_CR2,
    PWR_CR3,
    PWR_CSR1,
    PWR_D3CR,
    PWR_SIZE,
    PWR_WKUPCR,
    PWR_WKUPEPR,
    PWR_WKUPFR,
    SVOS_RESERVED,
    SVOS_SCALE_MODE_3,
    WKUPCR_MASK,
    WKUPEPR_MASK,
)

logger = logging.getLogger(__name__)

BackupDomainHook = Callable[[bool], None]


def _register_table(family: str) -> tuple[RegisterDescriptor, ...]:
    if family in FAMILIES_RM0468:
        cr3_reset = CR3_RESET_RM0468
    elif family in FAMILIES_RM0433:
        cr3_reset = CR3_RESET_RM0433
    else:
        raise ConfigurationError(
            "stm32_family",
            f"unsupported family '{family}'; expected one of "
            f"{list(FAMILIES_RM0468 + FAMILIES_RM0433)}",
        )

    ro = AccessMode.READ_ONLY
    return (
        RegisterDescriptor(PWR_CR1, "PWR_CR1", CR1_RESET, mask=CR1_MASK,
                           side_effect=SideEffect.BACKUP_DOMAIN_ACCESS),
        RegisterDescriptor(PWR_CSR1, "PWR_CSR1", CSR1_RESET, access=ro,
                           ready_mask=CSR1_ACTVOSRDY),
        RegisterDescriptor(PWR_CR2, "PWR_CR2", mask=CR2_MASK),
        RegisterDescriptor(PWR_CR3, "PWR_CR3", cr3_reset, mask=CR3_MASK),
        RegisterDescriptor(PWR_CPUCR, "PWR_CPUCR", mask=CPUCR_MASK),
        RegisterDescriptor(PWR_D3CR, "PWR_D3CR", D3CR_RESET, mask=D3CR_MASK,
                           ready_mask=D3CR_VOSRDY),
        RegisterDescriptor(PWR_WKUPCR, "PWR_WKUPCR", access=AccessMode.WRITE_ONLY,
                           mask=WKUPCR_MASK),
        RegisterDescriptor(PWR_WKUPFR, "PWR_WKUPFR", access=ro),
        RegisterDescriptor(PWR_WKUPEPR, "PWR_WKUPEPR", mask=WKUPEPR_MASK),
    )


class STM32H7PWR(BasePeripheral):
    """STM32H7 PWR block."""

    def __init__(
        self,
        family: str = "H72",
        backup_domain_hook: Optional[BackupDomainHook] = None,
        base_addr: int = 0x58024800,
        name: str = "PWR",
        **_kwargs: Any,
    ):
        super().__init__(name=name, size=PWR_SIZE, base_addr=base_addr)
        self.family = family
        self.registers = RegisterBank(_register_table(family), width=32, listener=self)
        self._backup_domain_hook = backup_domain_hook
        self._dbp = False

    @property
    def backup_domain_writable(self) -> bool:
        """True while DBP disables backup-domain write protection."""
        return self._dbp

    @override
    def read(self, offset: int, size: int) -> int:
        _check_size(size)
        reg = offset & ~0x3
        if reg not in self.registers:
            return 0
        shift = (offset & 0x3) * 8
        return (self.registers.read(reg) >> shift) & ((1 << (8 * size)) - 1)

    @override
    def write(self, offset: int, size: int, value: int) -> None:
        _check_size(size)
        reg = offset & ~0x3
        if reg not in self.registers:
            return

        if size == 4:
            word = value & ConstUtils.MASK_32_BITS
        else:
            shift = (offset & 0x3) * 8
            lane = ((1 << (8 * size)) - 1) << shift
            current = self.registers.peek(reg) or 0
            word = (current & ~lane) | ((value << shift) & lane)

        self.registers.write(reg, word)
        if reg == PWR_CR1:
            self._fix_svos()

    @override
    def reset(self) -> None:
        self.registers.reset()
        self._dbp = False

    # Register side effects -------------------------------------------------

    def on_backup_domain_access(self, value: int) -> None:
        dbp = bool(value & CR1_DBP)
        if dbp == self._dbp:
            return
        self._dbp = dbp
        logger.debug(f"{self.name}: backup domain access dbp={dbp}")
        if self._backup_domain_hook is not None:
            self._backup_domain_hook(dbp)

    def on_page_select(self, value: int) -> None:
        """PWR has no paged memory; no register here carries this side effect."""

    def _fix_svos(self) -> None:
        cr1 = self.registers.peek(PWR_CR1) or 0
        if (cr1 & CR1_SVOS_MASK) >> CR1_SVOS_SHIFT == SVOS_RESERVED:
            self.registers.write(PWR_CR1, cr1 | (SVOS_SCALE_MODE_3 << CR1_SVOS_SHIFT))


def _check_size(size: int) -> None:
    if size not in (1, 2, 4):
        raise ValueError(f"Invalid access size {size}; must be 1, 2 or 4 bytes")
