"""nft-marketplace: mint, list and verify NFTs against a marketplace contract.

v0.2.0:
  - One ``Chain`` interface over an in-process development chain and web3.py
  - Reference ``BasicNft`` / ``NftMarketplace`` contracts for the local chain
  - Typed contract reverts decoded from custom-error data
  - hardhat-deploy compatible deployment records
  - Etherscan source verification
"""

__version__ = "0.2.0"
__description__ = "Mint, list and verify NFTs against an NFT marketplace contract"

from nftmarketplace.chain import Chain, connect
from nftmarketplace.cli.app import app as cli

__all__ = ["Chain", "connect", "cli", "__version__"]
