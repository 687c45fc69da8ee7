"""Contract ABIs and the local reference contracts."""

from nftmarketplace.contracts.abi import BUNDLED_ABIS
from nftmarketplace.contracts.base import LocalContract, Message, external, non_reentrant, view
from nftmarketplace.contracts.basic_nft import BasicNft
from nftmarketplace.contracts.nft_marketplace import NftMarketplace

__all__ = [
    "BUNDLED_ABIS",
    "LocalContract",
    "Message",
    "external",
    "view",
    "non_reentrant",
    "BasicNft",
    "NftMarketplace",
]
