from decimal import Decimal

from pessimism.common.units import slice_to_addresses, wei_to_ether
from pessimism.core.transit import Address

WEI_PER_ETH = 1000000000000000000


def test_wei_to_ether():
    assert wei_to_ether(WEI_PER_ETH) == Decimal(1)
    assert float(wei_to_ether(WEI_PER_ETH)) == 1.0


def test_wei_to_ether_fraction_round_trip():
    assert wei_to_ether(WEI_PER_ETH // 2) * 2 == wei_to_ether(WEI_PER_ETH)


def test_slice_to_addresses():
    converted = slice_to_addresses(["0x00000000", "0x00000001"])
    assert converted == [
        Address.from_hex("0x00000000"),
        Address.from_hex("0x00000001"),
    ]
    assert converted[0].is_zero()
    assert converted[1].raw[-1] == 1


def test_slice_to_addresses_empty():
    assert slice_to_addresses([]) == []