"""Interface abstractions for the simulator.

Defines behavioral contracts that implementations satisfy:
- SPIPeripheral: Byte-exchange device on a serial bus
- GPIOReceiver: Receiver for chip-select and reset line changes
- Peripheral: Memory-mapped peripheral protocol
"""

from dspsim.interfaces.peripheral import Peripheral
from dspsim.interfaces.spi import GPIOReceiver, SPIPeripheral

__all__ = [
    "GPIOReceiver",
    "Peripheral",
    "SPIPeripheral",
]
