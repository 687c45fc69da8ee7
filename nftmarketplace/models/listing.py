"""Marketplace listing model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from nftmarketplace.core.units import ZERO_ADDRESS


class Listing(BaseModel):
    """A marketplace listing as stored by the contract.

    A price of zero means "not listed"; unlisted keys read back as the
    zero listing.

    Examples
    --------
    >>> Listing().is_listed
    False
    >>> Listing(price=10, seller="0xabc").is_listed
    True
    """

    model_config = ConfigDict(frozen=True)

    price: int = 0
    seller: str = ZERO_ADDRESS

    @property
    def is_listed(self) -> bool:
        return self.price > 0

    @classmethod
    def from_struct(cls, value: Any) -> Listing:
        """Build from the ABI-decoded ``(price, seller)`` struct."""
        if isinstance(value, dict):
            return cls(price=value["price"], seller=value["seller"])
        price, seller = value
        return cls(price=price, seller=seller)
