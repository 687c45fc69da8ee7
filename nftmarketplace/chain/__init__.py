"""Chain backends behind one ``Chain`` interface.

``connect()`` picks the backend from settings: the in-process
``LocalChain`` (with the deploy fixture already applied) for the ``local``
network, ``Web3Chain`` for everything else.
"""

from __future__ import annotations

import logging

from nftmarketplace.chain.base import Chain, ContractHandle, PendingTransaction
from nftmarketplace.chain.local import LocalChain
from nftmarketplace.chain.web3_chain import Web3Chain
from nftmarketplace.config import ChainSettings
from nftmarketplace.networks import LOCAL_NETWORK

logger = logging.getLogger(__name__)


def connect(settings: ChainSettings | None = None) -> Chain:
    """Return a chain for ``settings.network`` (defaults to the global config)."""
    if settings is None:
        from nftmarketplace.config import config as settings

    if settings.network == LOCAL_NETWORK:
        chain = LocalChain(chain_id=settings.resolved_chain_id)
        chain.fixture(["all"])
        logger.info("Started in-process chain with fresh deployments.")
        return chain

    chain = Web3Chain(settings)
    logger.info("Connected to %s (chain id %d).", settings.network, chain.chain_id)
    return chain


__all__ = [
    "Chain",
    "ContractHandle",
    "PendingTransaction",
    "LocalChain",
    "Web3Chain",
    "connect",
]
