"""Ether unit and address helpers."""

from __future__ import annotations

from decimal import Decimal

from eth_utils import from_wei, is_address, to_checksum_address, to_wei

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def parse_ether(amount: str | int | Decimal) -> int:
    """Convert an ether amount (``"0.1"``) into wei.

    Floats are rejected; pass a string to keep the value exact.
    """
    if isinstance(amount, float):
        raise TypeError("Pass ether amounts as str or Decimal, not float")
    return int(to_wei(Decimal(amount), "ether"))


def format_ether(wei: int) -> str:
    """Render *wei* as a plain decimal ether string (``"0.1"``)."""
    value = from_wei(wei, "ether")
    text = format(Decimal(value).normalize(), "f")
    return text


def checksum(address: str) -> str:
    """Return the EIP-55 checksummed form of *address*.

    Raises
    ------
    ValueError
        If *address* is not a 20-byte hex address.
    """
    if not is_address(address):
        raise ValueError(f"Not an address: {address!r}")
    return to_checksum_address(address)
