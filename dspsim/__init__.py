"""SigmaDSP device simulator.

Simulates Analog Devices ADAU146x audio DSPs as seen from an SPI host:
the byte-level control port protocol, the 16-bit control register space,
double-buffered data/program memory and the safeload mechanism. Also
carries a register-level STM32H7 power controller model.

Getting started:
    from dspsim import create_device
    from dspsim.core.spi_bus import SPIBus
    from dspsim.adau146x import host

    dsp = create_device("adau1467")
    bus = SPIBus(dsp)
    host.write_memory(bus, 0x0010, 0x2A)
    host.read_memory(bus, 0x0010)
"""

from dspsim.core.device import create_device, list_available_devices, verify_devices_registered

# Device implementations (auto-register when imported)
from dspsim.adau146x import ADAU1463, ADAU1467, ADAU146x
from dspsim.stm32h7 import STM32H7PWR

__version__ = "0.1.0"

__all__ = [
    "create_device",
    "list_available_devices",
    "verify_devices_registered",
    "ADAU146x",
    "ADAU1467",
    "ADAU1463",
    "STM32H7PWR",
]
