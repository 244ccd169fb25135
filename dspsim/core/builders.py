"""Factories for building address spaces and register banks from config.

These encode the common wiring steps so device classes stay short.
"""

from typing import Optional

from dspsim.core.address_space import AddressRange, MemoryRegion
from dspsim.core.memmap import AddressSpace, PageSelector
from dspsim.core.register import RegisterBank, RegisterDescriptor, SideEffectListener
from dspsim.core.safeload import SafeloadEngine, SafeloadLayout
from dspsim.utils.config_loader import MemoryConfig, ProtocolConfig, SafeloadConfig


def create_address_space_from_config(
    mem_config: MemoryConfig,
    protocol_config: ProtocolConfig,
    page_selector: Optional[PageSelector] = None,
) -> AddressSpace:
    """Create the banked memory address space.

    Args:
        mem_config: Memory layout (one entry per double-buffered region)
        protocol_config: Supplies the control register boundary
        page_selector: Returns the page used by unqualified accesses

    Returns:
        Fully initialized AddressSpace
    """
    regions = [
        MemoryRegion(AddressRange(r.base, r.size), name=r.name) for r in mem_config.regions
    ]
    return AddressSpace(regions, protocol_config.control_base, page_selector)


def create_register_bank_from_table(
    table: tuple[RegisterDescriptor, ...],
    width: int = 16,
    listener: Optional[SideEffectListener] = None,
) -> RegisterBank:
    """Create a register bank from a loaded register table."""
    return RegisterBank(table, width=width, listener=listener)


def create_safeload_engine(
    address_space: AddressSpace, safeload_config: SafeloadConfig
) -> SafeloadEngine:
    """Create a safeload engine bound to an address space."""
    layout = SafeloadLayout(
        data_base=safeload_config.data_base,
        data_words=safeload_config.data_words,
        address_pointer=safeload_config.address_pointer,
        trigger_lower=safeload_config.trigger_lower,
        trigger_upper=safeload_config.trigger_upper,
    )
    return SafeloadEngine(address_space, layout)
