"""Host-side frame builders for ADAU146x over SPI.

Each helper issues one chip-selected burst on an SPIBus: the chip byte,
the 16-bit sub-address, then the data words. Control registers take two
bytes per word and memory four, all big-endian.
"""

from __future__ import annotations

from typing import Iterable, Optional, Union

from dspsim.core.spi_bus import SPIBus
from dspsim.utils.config_loader import SafeloadConfig, get_config
from dspsim.utils.consts import ConstUtils
from .consts import CHIP_ADDRESS_SHIFT, READ_FLAG, VARIANT_ADAU1467

Words = Union[int, Iterable[int]]


def _as_list(values: Words) -> list[int]:
    if isinstance(values, int):
        return [values]
    return list(values)


def header(address: int, read: bool, chip_address: int = 0x00) -> bytes:
    """Chip byte plus big-endian sub-address."""
    chip = (chip_address << CHIP_ADDRESS_SHIFT) & ConstUtils.MASK_8_BITS
    if read:
        chip |= READ_FLAG
    return bytes([chip, (address >> 8) & 0xFF, address & 0xFF])


def _pack(values: list[int], width: int) -> bytes:
    mask = (1 << (8 * width)) - 1
    return b"".join((v & mask).to_bytes(width, "big") for v in values)


def _unpack(data: bytes, width: int) -> list[int]:
    return [int.from_bytes(data[i:i + width], "big") for i in range(0, len(data), width)]


def buswrite(bus: SPIBus, address: int, payload: bytes, chip_address: int = 0x00) -> None:
    """Write raw data bytes starting at address in one burst."""
    bus.transaction(header(address, read=False, chip_address=chip_address) + payload)


def busread(bus: SPIBus, address: int, n: int, chip_address: int = 0x00) -> bytes:
    """Read n raw data bytes starting at address in one burst."""
    hdr = header(address, read=True, chip_address=chip_address)
    reply = bus.transaction(hdr + bytes(n))
    return reply[len(hdr):]


def write_control(bus: SPIBus, address: int, values: Words, chip_address: int = 0x00) -> None:
    """Write one or more consecutive 16-bit control registers."""
    buswrite(bus, address, _pack(_as_list(values), ConstUtils.CONTROL_BYTES), chip_address)


def read_control(bus: SPIBus, address: int, count: int = 1, chip_address: int = 0x00) -> list[int]:
    """Read count consecutive 16-bit control registers."""
    data = busread(bus, address, count * ConstUtils.CONTROL_BYTES, chip_address)
    return _unpack(data, ConstUtils.CONTROL_BYTES)


def write_memory(bus: SPIBus, address: int, words: Words, chip_address: int = 0x00) -> None:
    """Write one or more consecutive 32-bit memory words."""
    buswrite(bus, address, _pack(_as_list(words), ConstUtils.WORD_BYTES), chip_address)


def read_memory(bus: SPIBus, address: int, count: int = 1, chip_address: int = 0x00) -> list[int]:
    """Read count consecutive 32-bit memory words."""
    data = busread(bus, address, count * ConstUtils.WORD_BYTES, chip_address)
    return _unpack(data, ConstUtils.WORD_BYTES)


def safeload(
    bus: SPIBus,
    address: int,
    words: Words,
    upper: bool = False,
    layout: Optional[SafeloadConfig] = None,
    chip_address: int = 0x00,
) -> None:
    """Stage words for address and trigger the copy in a single burst.

    The burst fills the staging buffer (zero padded), the target pointer and
    then the trigger count. The staging writes land on the currently
    selected page, so an upper (page B) safeload expects page B to be
    selected.

    Raises:
        ValueError: If words is empty or larger than the staging buffer
    """
    layout = layout or get_config(VARIANT_ADAU1467).safeload
    values = _as_list(words)
    if not 0 < len(values) <= layout.data_words:
        raise ValueError(
            f"safeload takes 1..{layout.data_words} words, got {len(values)}"
        )

    trigger = layout.trigger_upper if upper else layout.trigger_lower
    if (
        layout.data_base + layout.data_words != layout.address_pointer
        or trigger <= layout.address_pointer
    ):
        raise ValueError("staging buffer, pointer and trigger are not contiguous")

    frame = values + [0] * (layout.data_words - len(values))
    frame.append(address & ConstUtils.MASK_16_BITS)
    # Words between the pointer and the trigger are written as zero counts
    frame.extend([0] * (trigger - layout.address_pointer - 1))
    frame.append(len(values))
    write_memory(bus, layout.data_base, frame, chip_address)
