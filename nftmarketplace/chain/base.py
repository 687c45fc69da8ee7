"""The ``Chain`` interface shared by the local and web3 backends.

Scripts and tests only talk to these protocols, so the same code runs
against the in-process development chain and against a real node.

Contract handles expose ABI-named methods (``listItem``, ``getListing``)
the way web3.py's ``contract.functions`` do.  State-changing methods
return a :class:`PendingTransaction`; views return decoded values::

    marketplace = chain.get_contract("NftMarketplace")
    tx = marketplace.connect(buyer).buyItem(nft.address, 0, value=price)
    receipt = tx.wait()
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from nftmarketplace.models.accounts import Signer
from nftmarketplace.models.events import TransactionReceipt


class PendingTransaction(Protocol):
    """A submitted transaction."""

    @property
    def hash(self) -> str: ...

    def wait(self, confirmations: int = 1) -> TransactionReceipt:
        """Block until the transaction has *confirmations* blocks on top."""
        ...


class ContractHandle(Protocol):
    """A deployed contract bound to a signer."""

    name: str
    address: str

    def connect(self, signer: Signer | str) -> ContractHandle:
        """Return a handle for the same contract sending from *signer*."""
        ...

    def __getattr__(self, method: str) -> Any: ...


@runtime_checkable
class Chain(Protocol):
    """An execution environment holding deployed contracts."""

    network_name: str
    chain_id: int

    @property
    def is_development(self) -> bool: ...

    @property
    def accounts(self) -> list[Signer]: ...

    @property
    def block_number(self) -> int: ...

    def get_contract(self, name: str, signer: Signer | str | None = None) -> ContractHandle: ...

    def get_balance(self, address: Signer | str) -> int: ...

    def mine(self, blocks: int = 1) -> None: ...


def signer_address(signer: Signer | str) -> str:
    return signer.address if isinstance(signer, Signer) else signer
