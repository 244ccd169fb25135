"""Core modules for the simulator.

Core infrastructure for device-agnostic functionality:
- register: Control register bank with side-effect dispatch
- address_space: Double-buffered memory regions and page selection
- memmap: Address space dispatcher
- protocol: Byte-stream transaction decoder
- safeload: Staged parameter commit engine
- device: Device registry and factory
- spi_bus: SPI master model
- dump: Memory and register file exports
"""

from dspsim.core.address_space import (
    AddressRange,
    MemoryRegion,
    Page,
    PageOverride,
    ResolvedAddress,
)
from dspsim.core.device import (
    DeviceRegistry,
    create_device,
    list_available_devices,
    register_device,
)
from dspsim.core.dump import save_memory_block, save_register_dump
from dspsim.core.memmap import AddressSpace
from dspsim.core.peripheral import BasePeripheral
from dspsim.core.protocol import DecoderState, Direction, ProtocolDecoder
from dspsim.core.register import (
    AccessMode,
    RegisterBank,
    RegisterDescriptor,
    SideEffect,
)
from dspsim.core.safeload import SafeloadEngine, SafeloadLayout
from dspsim.core.spi_bus import SPIBus

__all__ = [
    # Register abstractions
    "AccessMode",
    "RegisterBank",
    "RegisterDescriptor",
    "SideEffect",
    # Memory regions
    "AddressRange",
    "MemoryRegion",
    "Page",
    "PageOverride",
    "ResolvedAddress",
    # Address space
    "AddressSpace",
    # Protocol
    "DecoderState",
    "Direction",
    "ProtocolDecoder",
    "SafeloadEngine",
    "SafeloadLayout",
    # Peripheral base
    "BasePeripheral",
    # Bus
    "SPIBus",
    # Dumps
    "save_memory_block",
    "save_register_dump",
    # Device registry
    "DeviceRegistry",
    "create_device",
    "list_available_devices",
    "register_device",
]
