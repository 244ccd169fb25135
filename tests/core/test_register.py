import logging

import pytest

from dspsim.core.register import (
    AccessMode,
    RegisterBank,
    RegisterDescriptor,
    SideEffect,
)


class RecordingListener:
    def __init__(self):
        self.page_selects = []
        self.backup_accesses = []

    def on_page_select(self, value: int) -> None:
        self.page_selects.append(value)

    def on_backup_domain_access(self, value: int) -> None:
        self.backup_accesses.append(value)


def make_bank(listener=None):
    table = [
        RegisterDescriptor(0xF000, "PLL_CTRL0", reset_value=0x0060),
        RegisterDescriptor(0xF004, "PLL_LOCK", access=AccessMode.READ_ONLY,
                           mask=0x0001, ready_mask=0x0001),
        RegisterDescriptor(0xF010, "CMD", access=AccessMode.WRITE_ONLY, reset_value=0x0005),
        RegisterDescriptor(0xF400, "HIBERNATE", mask=0x0001),
        RegisterDescriptor(0xF899, "SECONDPAGE_ENABLE", mask=0x0001,
                           side_effect=SideEffect.PAGE_SELECT),
        RegisterDescriptor(0xF8A0, "BACKUP", side_effect=SideEffect.BACKUP_DOMAIN_ACCESS),
    ]
    return RegisterBank(table, width=16, listener=listener)


def test_register_descriptor_defaults():
    desc = RegisterDescriptor(address=0xF000, name="PLL_CTRL0")
    assert desc.reset_value == 0
    assert desc.access is AccessMode.READ_WRITE
    assert desc.mask is None
    assert desc.ready_mask == 0
    assert desc.side_effect is None


def test_reset_values_after_construction():
    bank = make_bank()
    assert bank.read(0xF000) == 0x0060
    assert len(bank) == 6


@pytest.mark.parametrize("value", [0x0000, 0x1234, 0xFFFF])
def test_read_write_register_round_trip(value):
    bank = make_bank()
    bank.write(0xF000, value)
    assert bank.read(0xF000) == value


def test_write_is_truncated_to_width():
    bank = make_bank()
    bank.write(0xF000, 0x12345)
    assert bank.read(0xF000) == 0x2345


def test_read_only_register_ignores_writes_and_reports_ready():
    bank = make_bank()
    bank.write(0xF004, 0x0000)
    assert bank.read(0xF004) == 0x0001


def test_write_only_register_reads_reset_value():
    bank = make_bank()
    bank.write(0xF010, 0x00AA)
    assert bank.read(0xF010) == 0x0005
    assert bank.peek(0xF010) == 0x00AA


def test_mask_limits_stored_bits():
    bank = make_bank()
    bank.write(0xF400, 0xFFFF)
    assert bank.read(0xF400) == 0x0001


def test_unknown_address_reads_zero_and_logs_error(caplog):
    bank = make_bank()
    with caplog.at_level(logging.ERROR, logger="dspsim.core.register"):
        assert bank.read(0xF123) == 0
    assert "0xF123" in caplog.text


def test_unknown_address_write_is_ignored():
    bank = make_bank()
    bank.write(0xF123, 0xBEEF)
    assert 0xF123 not in bank
    assert bank.peek(0xF123) is None


def test_side_effect_fires_only_on_change():
    listener = RecordingListener()
    bank = make_bank(listener)

    bank.write(0xF899, 1)
    bank.write(0xF899, 1)
    bank.write(0xF899, 0)

    assert listener.page_selects == [1, 0]
    assert listener.backup_accesses == []


def test_backup_domain_side_effect_dispatch():
    listener = RecordingListener()
    bank = make_bank()
    bank.attach_listener(listener)

    bank.write(0xF8A0, 0x0100)

    assert listener.backup_accesses == [0x0100]


def test_reset_restores_defaults_without_side_effects():
    listener = RecordingListener()
    bank = make_bank(listener)
    bank.write(0xF000, 0xAAAA)
    bank.write(0xF899, 1)

    bank.reset()

    assert bank.read(0xF000) == 0x0060
    assert bank.read(0xF899) == 0
    assert listener.page_selects == [1]


def test_duplicate_address_raises():
    with pytest.raises(ValueError):
        RegisterBank([
            RegisterDescriptor(0xF000, "A"),
            RegisterDescriptor(0xF000, "B"),
        ])


def test_invalid_width_raises():
    with pytest.raises(ValueError):
        RegisterBank([], width=12)


def test_find_and_descriptor_lookup():
    bank = make_bank()
    assert bank.find("HIBERNATE").address == 0xF400
    assert bank.find("MISSING") is None
    assert bank.descriptor(0xF899).side_effect is SideEffect.PAGE_SELECT
    assert bank.descriptor(0xF001) is None


def test_items_are_sorted_and_use_read_semantics():
    bank = make_bank()
    items = list(bank.items())
    addresses = [desc.address for desc, _ in items]
    assert addresses == sorted(addresses)
    values = {desc.name: value for desc, value in items}
    assert values["PLL_LOCK"] == 0x0001
    assert [d.address for d in bank] == addresses


def test_32_bit_bank():
    bank = RegisterBank([RegisterDescriptor(0x00, "CR1", reset_value=0xF000C000)], width=32)
    assert bank.read(0x00) == 0xF000C000
    bank.write(0x00, 0xDEADBEEF)
    assert bank.read(0x00) == 0xDEADBEEF
