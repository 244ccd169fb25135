"""STM32H7 peripheral implementations.

Importing this package registers the "stm32h7_pwr" device.
"""

from dspsim.core.device import register_device

from .pwr import STM32H7PWR

register_device("stm32h7_pwr", STM32H7PWR)

__all__ = ["STM32H7PWR"]
