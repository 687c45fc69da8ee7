"""Mint a BasicNft and list it on the NftMarketplace."""

from __future__ import annotations

import logging
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from nftmarketplace.chain.base import Chain
from nftmarketplace.core.units import parse_ether
from nftmarketplace.models.events import TransactionReceipt
from nftmarketplace.scripts.move_blocks import move_blocks

logger = logging.getLogger(__name__)

DEFAULT_PRICE = "0.1"


class MintAndListResult(BaseModel):
    """What ``mint_and_list`` did, for display and assertions."""

    model_config = ConfigDict(frozen=True)

    nft_address: str
    marketplace_address: str
    token_id: int
    price: int
    seller: str
    list_receipt: TransactionReceipt
    block_number: int


def mint_and_list(
    chain: Chain,
    price: str | Decimal = DEFAULT_PRICE,
    confirmations: int = 1,
) -> MintAndListResult:
    """Mint a new token, approve the marketplace for it and list it.

    The token id is read from the first event of the mint receipt (the
    ERC-721 ``Transfer``).
    """
    nft_marketplace = chain.get_contract("NftMarketplace")
    basic_nft = chain.get_contract("BasicNft")

    logger.info("Minting...")
    mint_receipt = basic_nft.mintNft().wait(confirmations)
    token_id = mint_receipt.events[0].args["tokenId"]

    logger.info("Approving NFT...")
    basic_nft.approve(nft_marketplace.address, token_id).wait(confirmations)

    logger.info("Listing NFT...")
    price_wei = parse_ether(price)
    list_receipt = nft_marketplace.listItem(basic_nft.address, token_id, price_wei).wait(
        confirmations
    )
    logger.info("Listed!")

    return MintAndListResult(
        nft_address=basic_nft.address,
        marketplace_address=nft_marketplace.address,
        token_id=token_id,
        price=price_wei,
        seller=list_receipt.from_address,
        list_receipt=list_receipt,
        block_number=chain.block_number,
    )


def mint_and_list_and_mine(
    chain: Chain,
    price: str | Decimal = DEFAULT_PRICE,
    blocks: int = 2,
    sleep_ms: int = 1000,
    confirmations: int = 1,
) -> MintAndListResult:
    """``mint_and_list``, then advance the chain on development networks.

    Moving blocks lets indexers watching the marketplace pick up the
    listing on a chain that otherwise only mines on demand.
    """
    result = mint_and_list(chain, price, confirmations)
    if chain.is_development and blocks > 0:
        block_number = move_blocks(chain, blocks, sleep_ms=sleep_ms)
        result = result.model_copy(update={"block_number": block_number})
    return result
