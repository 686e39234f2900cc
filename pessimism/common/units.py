"""Unit and address conversion helpers."""

from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Iterable

from pessimism.core.transit import Address

WEI_PER_ETHER = 10**18


def wei_to_ether(wei: int) -> Decimal:
    """Convert an amount in wei to ether."""
    with localcontext() as ctx:
        ctx.prec = 80
        return Decimal(int(wei)) / Decimal(WEI_PER_ETHER)


def slice_to_addresses(values: Iterable[str]) -> list[Address]:
    """Parse each hex string into an address."""
    return [Address.from_hex(value) for value in values]