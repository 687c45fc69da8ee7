"""Advance block height on a development chain."""

from __future__ import annotations

import logging
import time

from nftmarketplace.chain.base import Chain
from nftmarketplace.core.errors import ChainError

logger = logging.getLogger(__name__)


def move_blocks(chain: Chain, amount: int, sleep_ms: int = 0) -> int:
    """Mine *amount* blocks, pausing *sleep_ms* between them.

    Returns the new block height.

    Raises
    ------
    ChainError
        If *chain* is not a development chain.
    """
    if not chain.is_development:
        raise ChainError(f"Refusing to mine blocks on '{chain.network_name}'")
    logger.info("Moving blocks...")
    for _ in range(amount):
        chain.mine()
        if sleep_ms:
            logger.debug("Sleeping for %dms.", sleep_ms)
            time.sleep(sleep_ms / 1000)
    logger.info("Moved %d block(s).", amount)
    return chain.block_number
