"""Operational scripts: mint-and-list, block mining and source verification.

The script functions live in their submodules (``mint_and_list``,
``move_blocks``, ``verify``); only names that do not collide with a
submodule are re-exported here.
"""

from nftmarketplace.scripts.mint_and_list import (
    DEFAULT_PRICE,
    MintAndListResult,
    mint_and_list_and_mine,
)
from nftmarketplace.scripts.verify import (
    DEFAULT_VERIFY_ADDRESS,
    EtherscanVerifier,
    verify_contract,
)

__all__ = [
    "DEFAULT_PRICE",
    "DEFAULT_VERIFY_ADDRESS",
    "EtherscanVerifier",
    "MintAndListResult",
    "mint_and_list_and_mine",
    "verify_contract",
]
