"""NftMarketplace — list, buy, cancel and update NFT listings.

Sellers keep custody of their tokens: listing only requires that the
marketplace is the token's approved address.  Sale revenue is not pushed
to sellers; it accrues as proceeds that each seller withdraws explicitly.

Checks run in the order the contract's modifiers apply them:

============== ===========================================================
listItem       notListed -> isOwner -> price > 0 -> approved
buyItem        isListed -> value >= price
cancelListing  isOwner -> isListed
updateListing  isListed -> isOwner -> price > 0
============== ===========================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field

from nftmarketplace.contracts.base import (
    LocalContract,
    Message,
    external,
    non_reentrant,
    view,
)
from nftmarketplace.core.errors import (
    AlreadyListed,
    NoProceeds,
    NotApprovedForMarketplace,
    NotListed,
    NotOwner,
    PriceMustBeAboveZero,
    PriceNotMet,
    RevertedWithReason,
)
from nftmarketplace.models.listing import Listing

ListingKey = tuple[str, int]


@dataclass
class MarketplaceStorage:
    listings: dict[ListingKey, Listing] = field(default_factory=dict)
    proceeds: dict[str, int] = field(default_factory=dict)
    reentrancy_locked: bool = False


class NftMarketplace(LocalContract):
    contract_name = "NftMarketplace"

    def initial_storage(self) -> MarketplaceStorage:
        return MarketplaceStorage()

    # -- Modifiers ----------------------------------------------------------

    def _listing(self, nft_address: str, token_id: int) -> Listing:
        return self.storage.listings.get((nft_address, token_id), Listing())

    def _require_not_listed(self, nft_address: str, token_id: int) -> None:
        if self._listing(nft_address, token_id).price > 0:
            raise AlreadyListed(nft_address, token_id)

    def _require_listed(self, nft_address: str, token_id: int) -> Listing:
        listing = self._listing(nft_address, token_id)
        if listing.price <= 0:
            raise NotListed(nft_address, token_id)
        return listing

    def _require_owner(self, nft_address: str, token_id: int, spender: str) -> None:
        owner = self.call(nft_address, "ownerOf", token_id)
        if spender != owner:
            raise NotOwner()

    # -- Main functions -------------------------------------------------------

    @external("listItem", gas=75_000)
    def list_item(self, msg: Message, nft_address: str, token_id: int, price: int) -> None:
        """List an NFT for sale.

        The caller must own the token and have approved the marketplace
        for it.
        """
        nft_address = self.addr(nft_address)
        self._require_not_listed(nft_address, token_id)
        self._require_owner(nft_address, token_id, msg.sender)
        if price <= 0:
            raise PriceMustBeAboveZero()
        if self.call(nft_address, "getApproved", token_id) != self.address:
            raise NotApprovedForMarketplace()

        self.storage.listings[(nft_address, token_id)] = Listing(price=price, seller=msg.sender)
        self.emit(
            "ItemListed",
            seller=msg.sender,
            nftAddress=nft_address,
            tokenId=token_id,
            price=price,
        )

    @external("buyItem", payable=True, gas=90_000)
    @non_reentrant
    def buy_item(self, msg: Message, nft_address: str, token_id: int) -> None:
        """Buy a listed NFT by paying at least its price.

        The whole payment is credited to the seller's proceeds.
        """
        nft_address = self.addr(nft_address)
        listing = self._require_listed(nft_address, token_id)
        if msg.value < listing.price:
            raise PriceNotMet(nft_address, token_id, listing.price)

        proceeds = self.storage.proceeds
        proceeds[listing.seller] = proceeds.get(listing.seller, 0) + msg.value
        del self.storage.listings[(nft_address, token_id)]
        self.call(nft_address, "safeTransferFrom", listing.seller, msg.sender, token_id)
        self.emit(
            "ItemBought",
            buyer=msg.sender,
            nftAddress=nft_address,
            tokenId=token_id,
            price=listing.price,
        )

    @external("cancelListing", gas=35_000)
    def cancel_listing(self, msg: Message, nft_address: str, token_id: int) -> None:
        nft_address = self.addr(nft_address)
        self._require_owner(nft_address, token_id, msg.sender)
        self._require_listed(nft_address, token_id)

        del self.storage.listings[(nft_address, token_id)]
        self.emit(
            "ListingCancelled",
            seller=msg.sender,
            nftAddress=nft_address,
            tokenId=token_id,
        )

    @external("updateListing", gas=40_000)
    @non_reentrant
    def update_listing(
        self, msg: Message, nft_address: str, token_id: int, new_price: int
    ) -> None:
        nft_address = self.addr(nft_address)
        self._require_listed(nft_address, token_id)
        self._require_owner(nft_address, token_id, msg.sender)
        if new_price <= 0:
            raise PriceMustBeAboveZero()

        self.storage.listings[(nft_address, token_id)] = Listing(
            price=new_price, seller=msg.sender
        )
        self.emit(
            "ItemListed",
            seller=msg.sender,
            nftAddress=nft_address,
            tokenId=token_id,
            price=new_price,
        )

    @external("withdrawProceeds", gas=30_000)
    @non_reentrant
    def withdraw_proceeds(self, msg: Message) -> None:
        proceeds = self.storage.proceeds.get(msg.sender, 0)
        if proceeds <= 0:
            raise NoProceeds()
        self.storage.proceeds[msg.sender] = 0
        if not self.send_value(msg.sender, proceeds):
            raise RevertedWithReason("Transfer failed")

    # -- Getters --------------------------------------------------------------

    @view("getListing")
    def get_listing(self, msg: Message, nft_address: str, token_id: int) -> Listing:
        return self._listing(self.addr(nft_address), token_id)

    @view("getProceeds")
    def get_proceeds(self, msg: Message, seller: str) -> int:
        return self.storage.proceeds.get(self.addr(seller), 0)
