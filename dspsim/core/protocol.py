"""Byte-stream protocol decoder.

Turns the bytes clocked in while a device is selected into addressed
control-register and memory transactions. A transaction is:

    chip byte     bit 0 is the direction (1 = read), bits 7:1 the chip address
    sub-address   two bytes, most significant first
    data          two bytes per control register, four per memory word,
                  most significant first, repeated for burst access

The address auto-increments after every complete word, so a burst keeps
streaming data without re-sending the sub-address. The word width is fixed
by the starting sub-address for the whole burst, even if the incremented
address crosses the control register boundary. Deselecting the device
drops whatever was accumulated so far.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from dspsim.utils.consts import ConstUtils

logger = logging.getLogger(__name__)


class DecoderState(Enum):
    """Phases of a transaction."""

    IDLE = "idle"
    SUB_ADDRESS_HIGH = "sub_address_high"
    SUB_ADDRESS_LOW = "sub_address_low"
    DATA0 = "data0"
    DATA1 = "data1"
    DATA2 = "data2"
    DATA3 = "data3"


DATA_STATES = (
    DecoderState.DATA0,
    DecoderState.DATA1,
    DecoderState.DATA2,
    DecoderState.DATA3,
)


class Direction(Enum):
    WRITE = 0
    READ = 1


@dataclass
class TransactionState:
    """The in-flight transaction. Replaced wholesale on deselect."""

    state: DecoderState = DecoderState.IDLE
    direction: Direction = Direction.WRITE
    address: int = 0
    width: int = ConstUtils.WORD_BYTES
    word: int = 0


class TransactionTarget(Protocol):
    """What the decoder dispatches completed words to."""

    def read_control(self, address: int) -> int:
        ...

    def write_control(self, address: int, value: int) -> None:
        ...

    def read_memory(self, address: int) -> int:
        ...

    def write_memory(self, address: int, value: int) -> None:
        ...


class ProtocolDecoder:
    """Byte-at-a-time transaction state machine.

    The decoder never raises on malformed input: a foreign chip address is
    logged and the transaction continues; unmapped addresses are handled by
    the target.
    """

    def __init__(
        self,
        target: TransactionTarget,
        control_base: int,
        chip_address: int = 0x00,
        idle_byte: int = 0x00,
    ):
        self.target = target
        self.control_base = control_base
        self.chip_address = chip_address
        self.idle_byte = idle_byte & ConstUtils.MASK_8_BITS
        self.transaction = TransactionState()

    @property
    def state(self) -> DecoderState:
        return self.transaction.state

    def is_control(self, address: int) -> bool:
        return address >= self.control_base

    def transmit(self, data: int) -> int:
        """Consume one byte from the host and return the byte sent back."""
        data &= ConstUtils.MASK_8_BITS
        tr = self.transaction

        if tr.state is DecoderState.IDLE:
            self._start(data)
            return self.idle_byte

        if tr.state is DecoderState.SUB_ADDRESS_HIGH:
            tr.address = data << 8
            tr.state = DecoderState.SUB_ADDRESS_LOW
            return self.idle_byte

        if tr.state is DecoderState.SUB_ADDRESS_LOW:
            tr.address |= data
            if self.is_control(tr.address):
                tr.width = ConstUtils.CONTROL_BYTES
            else:
                tr.width = ConstUtils.WORD_BYTES
            self._begin_word()
            return self.idle_byte

        return self._data_phase(data)

    def to_idle(self) -> None:
        """Abandon any partial transaction."""
        if self.transaction.state is not DecoderState.IDLE:
            logger.debug(
                f"Transaction abandoned in {self.transaction.state.value} "
                f"at 0x{self.transaction.address:04X}"
            )
        self.transaction = TransactionState()

    # Private helpers -------------------------------------------------------

    def _start(self, data: int) -> None:
        tr = self.transaction
        tr.direction = Direction.READ if data & 0x01 else Direction.WRITE
        if (data & 0xFE) != (self.chip_address << 1) & ConstUtils.MASK_8_BITS:
            logger.warning(
                f"Chip address 0x{data >> 1:02X} does not match "
                f"0x{self.chip_address:02X}; continuing"
            )
        tr.state = DecoderState.SUB_ADDRESS_HIGH

    def _begin_word(self) -> None:
        """Enter the first data phase of the next word."""
        tr = self.transaction
        tr.word = 0
        tr.state = DecoderState.DATA0

    def _data_phase(self, data: int) -> int:
        tr = self.transaction
        index = DATA_STATES.index(tr.state)

        if tr.direction is Direction.READ:
            if index == 0:
                tr.word = self._fetch(tr.address, tr.width)
            shift = 8 * (tr.width - 1 - index)
            out = (tr.word >> shift) & ConstUtils.MASK_8_BITS
        else:
            tr.word = (tr.word << 8) | data
            out = self.idle_byte

        if index + 1 < tr.width:
            tr.state = DATA_STATES[index + 1]
            return out

        if tr.direction is Direction.WRITE:
            self._commit(tr.address, tr.width, tr.word)
        tr.address = (tr.address + 1) & ConstUtils.MASK_16_BITS
        self._begin_word()
        return out

    def _fetch(self, address: int, width: int) -> int:
        if width == ConstUtils.CONTROL_BYTES:
            return self.target.read_control(address) & ConstUtils.MASK_16_BITS
        return self.target.read_memory(address) & ConstUtils.MASK_32_BITS

    def _commit(self, address: int, width: int, value: int) -> None:
        if width == ConstUtils.CONTROL_BYTES:
            self.target.write_control(address, value)
        else:
            self.target.write_memory(address, value)
