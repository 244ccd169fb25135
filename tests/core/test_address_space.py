import pytest

from dspsim.core.address_space import (
    AddressRange,
    MemoryRegion,
    Page,
    PageOverride,
    ResolvedAddress,
)
from dspsim.core.exceptions import MemoryBoundsError


class TestAddressRange:
    def test_contains_and_end(self):
        rng = AddressRange(0x6000, 0x100)
        assert rng.end == 0x6100
        assert rng.contains(0x6000)
        assert rng.contains(0x60FF)
        assert not rng.contains(0x6100)
        assert not rng.contains(0x5FFF)

    def test_overlaps(self):
        a = AddressRange(0x0000, 0x10)
        assert a.overlaps(AddressRange(0x000F, 0x10))
        assert not a.overlaps(AddressRange(0x0010, 0x10))

    def test_str(self):
        assert str(AddressRange(0xC000, 0x3000)) == "0xC000-0xEFFF"


class TestPage:
    def test_from_flag(self):
        assert Page.from_flag(False) is Page.A
        assert Page.from_flag(True) is Page.B

    def test_override_for_page(self):
        assert PageOverride.for_page(Page.A) is PageOverride.FORCE_A
        assert PageOverride.for_page(Page.B) is PageOverride.FORCE_B


class TestMemoryRegion:
    def test_new_region_is_zeroed(self):
        region = MemoryRegion(AddressRange(0x0000, 0x10), "DM0")
        assert region.read_word(Page.A, 0) == 0
        assert region.read_word(Page.B, 0x0F) == 0

    def test_pages_are_independent(self):
        region = MemoryRegion(AddressRange(0x0000, 0x10), "DM0")
        region.write_word(Page.A, 3, 0x11111111)
        region.write_word(Page.B, 3, 0x22222222)
        assert region.read_word(Page.A, 3) == 0x11111111
        assert region.read_word(Page.B, 3) == 0x22222222

    def test_words_are_masked_to_32_bits(self):
        region = MemoryRegion(AddressRange(0x0000, 0x10), "DM0")
        region.write_word(Page.A, 0, 0x1_2345_6789)
        assert region.read_word(Page.A, 0) == 0x23456789

    def test_out_of_range_index_raises(self):
        region = MemoryRegion(AddressRange(0x6000, 0x10), "DM1")
        with pytest.raises(MemoryBoundsError) as info:
            region.read_word(Page.A, 0x10)
        assert info.value.address == 0x6010
        with pytest.raises(MemoryBoundsError):
            region.write_word(Page.A, -1, 0)
        with pytest.raises(MemoryBoundsError):
            region.write_word(Page.B, 0x10, 0)


def test_resolved_address_is_frozen():
    region = MemoryRegion(AddressRange(0x6000, 0x10), "DM1")
    resolved = ResolvedAddress(region, Page.B, 5)
    assert resolved == ResolvedAddress(region, Page.B, 5)
    with pytest.raises(AttributeError):
        resolved.index = 6
