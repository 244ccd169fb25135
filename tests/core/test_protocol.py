import logging

import pytest

from dspsim.core.protocol import DecoderState, Direction, ProtocolDecoder


class FakeTarget:
    """Records dispatched words; memory and control are plain dicts."""

    def __init__(self):
        self.control = {}
        self.memory = {}
        self.writes = []
        self.reads = []

    def read_control(self, address: int) -> int:
        self.reads.append(("ctl", address))
        return self.control.get(address, 0)

    def write_control(self, address: int, value: int) -> None:
        self.writes.append(("ctl", address, value))
        self.control[address] = value

    def read_memory(self, address: int) -> int:
        self.reads.append(("mem", address))
        return self.memory.get(address, 0)

    def write_memory(self, address: int, value: int) -> None:
        self.writes.append(("mem", address, value))
        self.memory[address] = value


@pytest.fixture
def target():
    return FakeTarget()


@pytest.fixture
def decoder(target):
    return ProtocolDecoder(target, control_base=0xF000, chip_address=0x00, idle_byte=0x00)


def send(decoder, data):
    return bytes(decoder.transmit(b) for b in data)


def test_initial_state_is_idle(decoder):
    assert decoder.state is DecoderState.IDLE


def test_state_sequence_for_memory_write(decoder):
    states = []
    for byte in bytes.fromhex("00 00 10 00 00 00 2A"):
        decoder.transmit(byte)
        states.append(decoder.state)
    assert states == [
        DecoderState.SUB_ADDRESS_HIGH,
        DecoderState.SUB_ADDRESS_LOW,
        DecoderState.DATA0,
        DecoderState.DATA1,
        DecoderState.DATA2,
        DecoderState.DATA3,
        DecoderState.DATA0,
    ]


def test_memory_write_commits_after_fourth_byte(decoder, target):
    send(decoder, bytes.fromhex("00 00 10 00 00 00"))
    assert target.writes == []
    decoder.transmit(0x2A)
    assert target.writes == [("mem", 0x0010, 0x0000002A)]


def test_memory_read_returns_big_endian_bytes(decoder, target):
    target.memory[0x0010] = 0x0000002A
    reply = send(decoder, bytes.fromhex("01 00 10 00 00 00 00"))
    assert reply == bytes.fromhex("00 00 00 00 00 00 2A")


def test_control_write_uses_two_data_bytes(decoder, target):
    states = []
    for byte in bytes.fromhex("00 F8 99 00 01"):
        decoder.transmit(byte)
        states.append(decoder.state)
    assert target.writes == [("ctl", 0xF899, 0x0001)]
    assert states[-2:] == [DecoderState.DATA1, DecoderState.DATA0]


def test_control_read_high_byte_first(decoder, target):
    target.control[0xF000] = 0x1234
    reply = send(decoder, bytes.fromhex("01 F0 00 00 00"))
    assert reply[3:] == bytes.fromhex("12 34")


def test_burst_write_auto_increments(decoder, target):
    send(decoder, bytes.fromhex("00 00 20 00000001 00000002 00000003"))
    assert target.writes == [
        ("mem", 0x0020, 1),
        ("mem", 0x0021, 2),
        ("mem", 0x0022, 3),
    ]


def test_burst_control_read_increments_once_per_word(decoder, target):
    target.control.update({0xF000: 0x0060, 0xF001: 0x0002, 0xF002: 0x0003})
    reply = send(decoder, bytes.fromhex("01 F0 00") + bytes(6))
    assert reply[3:] == bytes.fromhex("0060 0002 0003")
    assert [a for kind, a in target.reads] == [0xF000, 0xF001, 0xF002]


def test_burst_keeps_memory_width_across_control_boundary(decoder, target):
    send(decoder, bytes.fromhex("00 EF FF 11223344 55667788"))
    assert target.writes == [("mem", 0xEFFF, 0x11223344), ("mem", 0xF000, 0x55667788)]
    assert target.control == {}


def test_read_burst_keeps_memory_width_across_control_boundary(decoder, target):
    target.memory[0xEFFF] = 0x01020304
    reply = send(decoder, bytes.fromhex("01 EF FF") + bytes(8))
    assert reply[3:] == bytes.fromhex("01020304 00000000")
    assert target.reads == [("mem", 0xEFFF), ("mem", 0xF000)]


def test_direction_recorded(decoder):
    decoder.transmit(0x01)
    assert decoder.transaction.direction is Direction.READ
    decoder.to_idle()
    decoder.transmit(0x00)
    assert decoder.transaction.direction is Direction.WRITE


def test_write_returns_idle_bytes(target):
    decoder = ProtocolDecoder(target, control_base=0xF000, idle_byte=0xA5)
    reply = send(decoder, bytes.fromhex("00 00 10 01 02 03 04"))
    assert reply == bytes([0xA5] * 7)


def test_foreign_chip_address_warns_and_continues(decoder, target, caplog):
    with caplog.at_level(logging.WARNING, logger="dspsim.core.protocol"):
        send(decoder, bytes.fromhex("70 00 10 00 00 00 07"))
    assert "does not match" in caplog.text
    assert target.writes == [("mem", 0x0010, 7)]


def test_matching_chip_address_is_silent(target, caplog):
    decoder = ProtocolDecoder(target, control_base=0xF000, chip_address=0x38)
    with caplog.at_level(logging.WARNING, logger="dspsim.core.protocol"):
        send(decoder, bytes.fromhex("71 00 10"))
    assert caplog.text == ""
    assert decoder.transaction.direction is Direction.READ


@pytest.mark.parametrize("cut", range(1, 7))
def test_deselect_mid_transaction_leaves_no_residue(decoder, target, cut):
    partial = bytes.fromhex("00 12 34 AA BB CC DD")[:cut]
    send(decoder, partial)
    decoder.to_idle()

    assert decoder.state is DecoderState.IDLE
    send(decoder, bytes.fromhex("00 00 10 00 00 00 2A"))
    assert target.writes == [("mem", 0x0010, 0x2A)]


def test_to_idle_resets_transaction(decoder):
    send(decoder, bytes.fromhex("01 F0 00 12"))
    decoder.to_idle()
    assert decoder.transaction.address == 0
    assert decoder.transaction.word == 0
    assert decoder.transaction.direction is Direction.WRITE


def test_address_wraps_at_top_of_space(decoder, target):
    send(decoder, bytes.fromhex("00 FF FF 0001 0002"))
    assert target.writes == [("ctl", 0xFFFF, 1), ("ctl", 0x0000, 2)]
    assert target.memory == {}
