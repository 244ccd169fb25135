"""ADAU146x SigmaDSP device model.

This is a complete, self-contained device that wires together:
- Control register bank (16-bit, loaded from the register table)
- Double-buffered data and program memory
- Safeload engine
- Byte-stream protocol decoder

GPIO lines:
  chip select (line 0)  releasing it (high) abandons the current transaction
  nRESET (line 31)      a falling edge resets the control registers

Reset restores every control register to its reset value and returns the
decoder to idle. Memory contents are retained, as on the real part.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from dspsim.core.address_space import Page, PageOverride
from dspsim.core.builders import (
    create_address_space_from_config,
    create_register_bank_from_table,
    create_safeload_engine,
)
from dspsim.core.dump import PathLike, save_memory_block, save_register_dump
from dspsim.core.exceptions import ConfigurationError
from dspsim.core.protocol import DecoderState, ProtocolDecoder
from dspsim.utils.config_loader import DeviceConfig, get_config, load_config, load_register_table
from .consts import CONTROL_REGISTER_WIDTH, VARIANT_ADAU1463, VARIANT_ADAU1467

logger = logging.getLogger(__name__)


class ADAU146x:
    """ADAU146x family DSP reachable over SPI."""

    VARIANT = VARIANT_ADAU1467

    def __init__(
        self,
        variant: Optional[str] = None,
        config_path: Optional[str] = None,
        **_kwargs: Any,
    ):
        variant = (variant or self.VARIANT).lower()
        if config_path is not None:
            config = load_config(variant, path=config_path)
        else:
            config = get_config(variant)
        self.variant = variant
        self.config: DeviceConfig = config

        table = load_register_table(config.registers_path, config.protocol.control_base)
        self.registers = create_register_bank_from_table(
            table, width=CONTROL_REGISTER_WIDTH, listener=self
        )
        if config.page_select.register not in self.registers:
            raise ConfigurationError(
                "page_select.register",
                f"0x{config.page_select.register:04X} is not in the register table",
            )

        self.address_space = create_address_space_from_config(
            config.memory, config.protocol, page_selector=self._selected_page
        )
        self.safeload = create_safeload_engine(self.address_space, config.safeload)
        self.decoder = ProtocolDecoder(
            self,
            control_base=config.protocol.control_base,
            chip_address=config.protocol.chip_address,
            idle_byte=config.protocol.idle_byte,
        )
        self.reset()

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def current_page(self) -> Page:
        """Page hit by unqualified memory accesses."""
        return self.address_space.current_page

    @property
    def state(self) -> DecoderState:
        return self.decoder.state

    # Bus and pins ----------------------------------------------------------

    def transmit(self, data: int) -> int:
        """Exchange one byte with the bus master."""
        return self.decoder.transmit(data)

    def finish_transmission(self) -> None:
        """Chip select released; return the decoder to idle."""
        self.decoder.to_idle()

    def on_gpio(self, number: int, value: bool) -> None:
        logger.debug(f"GPIO {number} -> {value}")
        gpio = self.config.gpio
        if number == gpio.chip_select and value:
            logger.debug("Chip select deasserted")
            self.finish_transmission()
        if number == gpio.reset and not value:
            self.reset()

    def reset(self) -> None:
        """Reset control registers and the decoder. Memory is retained."""
        self.registers.reset()
        self.finish_transmission()
        logger.debug(f"{self.name} reset")

    # Transaction target ----------------------------------------------------

    def read_control(self, address: int) -> int:
        value = self.registers.read(address)
        logger.debug(f"READ  ctl addr 0x{address:04X} value 0x{value:04X}")
        return value

    def write_control(self, address: int, value: int) -> None:
        logger.debug(f"WRITE ctl addr 0x{address:04X} value 0x{value:04X}")
        self.registers.write(address, value)

    def read_memory(
        self, address: int, page_override: PageOverride = PageOverride.CURRENT
    ) -> int:
        value = self.address_space.read(address, page_override)
        logger.debug(f"READ  mem addr 0x{address:04X} value 0x{value:08X}")
        return value

    def write_memory(
        self,
        address: int,
        value: int,
        page_override: PageOverride = PageOverride.CURRENT,
    ) -> None:
        """Write a memory word, then run the safeload trigger check."""
        logger.debug(f"WRITE mem addr 0x{address:04X} value 0x{value:08X}")
        self.address_space.write(address, value, page_override)
        self.safeload.on_memory_write(address, value)

    # Register side effects -------------------------------------------------

    def on_page_select(self, value: int) -> None:
        page = Page.from_flag(bool((value >> self.config.page_select.bit) & 1))
        logger.debug(f"Page select: page {page.name}")

    def on_backup_domain_access(self, value: int) -> None:
        logger.debug(f"Backup domain access: 0x{value:04X}")

    def _selected_page(self) -> Page:
        raw = self.registers.peek(self.config.page_select.register) or 0
        return Page.from_flag(bool((raw >> self.config.page_select.bit) & 1))

    # Diagnostics -----------------------------------------------------------

    def read_memory_block(self, start: int, count: int, page: Page) -> list[int]:
        """Read count words from an explicit page without touching state."""
        return self.address_space.read_words(start, count, page)

    def save_memory(self, path: PathLike, start: int, count: int, upper: bool = False) -> int:
        """Write a memory block to path as raw big-endian words.

        Args:
            upper: Read page B instead of page A

        Raises:
            DumpError: If the file cannot be written
        """
        page = Page.from_flag(upper)
        logger.debug(f"Save memory page {page.name} address 0x{start:04X} words {count}")
        return save_memory_block(path, self.read_memory_block(start, count, page))

    def export_registers(self) -> list[dict]:
        """Snapshot every control register in address order."""
        return [
            {"address": desc.address, "name": desc.name, "value": value}
            for desc, value in self.registers.items()
        ]

    def save_registers(self, path: PathLike) -> int:
        """Write the register snapshot to path as JSON."""
        return save_register_dump(path, self.export_registers())

    def get_memory_map(self) -> dict:
        return self.address_space.get_memory_map()


class ADAU1467(ADAU146x):
    """ADAU1467: 80k words data memory, 24k words program memory."""

    VARIANT = VARIANT_ADAU1467


class ADAU1463(ADAU146x):
    """ADAU1463: 48k words data memory, 16k words program memory."""

    VARIANT = VARIANT_ADAU1463
