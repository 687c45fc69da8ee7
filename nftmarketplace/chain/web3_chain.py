"""web3.py backend — talks to a real node.

Contracts are resolved from deployment records on disk; signing uses the
configured private key, or the node's unlocked accounts on development
networks.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import TimeExhausted, Web3Exception
from web3.logs import DISCARD
from web3.middleware import ExtraDataToPOAMiddleware

from nftmarketplace.chain.base import signer_address
from nftmarketplace.chain.reverts import translate_reverts
from nftmarketplace.config import ChainSettings
from nftmarketplace.contracts.abi import BUNDLED_ABIS, function_entry
from nftmarketplace.core.errors import ChainError, TransactionFailed
from nftmarketplace.core.units import checksum
from nftmarketplace.deployments import DeploymentStore
from nftmarketplace.models.accounts import Signer
from nftmarketplace.models.events import ContractEvent, TransactionReceipt
from nftmarketplace.models.listing import Listing

logger = logging.getLogger(__name__)

# View results that decode into models rather than raw tuples
VIEW_ADAPTERS = {
    "getListing": Listing.from_struct,
}

CONFIRMATION_POLL_SECONDS = 1.0


class Web3PendingTransaction:
    """A transaction broadcast to the node."""

    def __init__(self, chain: Web3Chain, tx_hash: bytes, handle: Web3ContractHandle) -> None:
        self._chain = chain
        self._tx_hash = tx_hash
        self._handle = handle

    @property
    def hash(self) -> str:
        return Web3.to_hex(self._tx_hash)

    def wait(self, confirmations: int = 1) -> TransactionReceipt:
        """Wait for the receipt and *confirmations* blocks.

        Raises
        ------
        TransactionFailed
            If the transaction was mined with a failed status.
        ChainError
            If the receipt or confirmations do not arrive in time.
        """
        w3 = self._chain.w3
        timeout = self._chain.settings.tx_timeout_seconds
        try:
            raw = w3.eth.wait_for_transaction_receipt(self._tx_hash, timeout=timeout)
        except TimeExhausted as exc:
            raise ChainError(f"Transaction {self.hash} not mined within {timeout}s") from exc

        if raw["status"] != 1:
            raise TransactionFailed(f"Transaction failed: {self.hash}")

        target = raw["blockNumber"] + confirmations - 1
        deadline = time.monotonic() + timeout
        while w3.eth.block_number < target:
            if time.monotonic() > deadline:
                raise ChainError(
                    f"Transaction {self.hash} did not reach {confirmations} confirmations"
                )
            time.sleep(CONFIRMATION_POLL_SECONDS)

        return self._handle.to_receipt(raw)


class Web3ContractHandle:
    """Signer-bound handle to a deployed contract."""

    def __init__(
        self,
        chain: Web3Chain,
        name: str,
        address: str,
        abi: list[dict[str, Any]],
        signer: str,
    ) -> None:
        self._chain = chain
        self._abi = abi
        self._signer = signer
        self._contract: Contract = chain.w3.eth.contract(address=checksum(address), abi=abi)
        self.name = name
        self.address = checksum(address)

    def connect(self, signer: Signer | str) -> Web3ContractHandle:
        return Web3ContractHandle(
            self._chain, self.name, self.address, self._abi, checksum(signer_address(signer))
        )

    def __getattr__(self, method: str) -> Any:
        if method.startswith("_"):
            raise AttributeError(method)
        entry = function_entry(self._abi, method)
        if entry is None:
            raise AttributeError(f"{self.name} has no ABI method '{method}'")

        def invoke(*args: Any, value: int = 0) -> Any:
            fn = getattr(self._contract.functions, method)(*args)
            if entry.get("stateMutability") in ("view", "pure"):
                with translate_reverts(self._abi):
                    result = fn.call({"from": self._signer})
                adapter = VIEW_ADAPTERS.get(method)
                return adapter(result) if adapter else result
            return self._chain.send(self, fn, self._signer, value)

        invoke.__name__ = method
        return invoke

    @property
    def abi(self) -> list[dict[str, Any]]:
        return self._abi

    def to_receipt(self, raw: Any) -> TransactionReceipt:
        """Convert a web3 receipt, decoding this contract's events."""
        events: list[ContractEvent] = []
        for entry in self._abi:
            if entry.get("type") != "event":
                continue
            event_type = getattr(self._contract.events, entry["name"])
            for log in event_type().process_receipt(raw, errors=DISCARD):
                events.append(
                    ContractEvent(
                        event=log["event"],
                        address=log["address"],
                        args={i["name"]: log["args"][i["name"]] for i in entry["inputs"]},
                        block_number=log["blockNumber"],
                        log_index=log["logIndex"],
                        transaction_hash=Web3.to_hex(log["transactionHash"]),
                    )
                )
        events.sort(key=lambda e: e.log_index)
        return TransactionReceipt(
            transaction_hash=Web3.to_hex(raw["transactionHash"]),
            block_number=raw["blockNumber"],
            from_address=raw["from"],
            to_address=raw.get("to"),
            gas_used=raw["gasUsed"],
            cumulative_gas_used=raw["cumulativeGasUsed"],
            effective_gas_price=raw.get("effectiveGasPrice", 0),
            status=raw["status"],
            events=events,
        )


class Web3Chain:
    """``Chain`` implementation over a JSON-RPC node.

    Parameters
    ----------
    settings:
        Network, RPC, key and deployment settings.
    w3:
        Optional pre-built ``Web3`` instance (otherwise an HTTP provider is
        created from ``settings``).

    Raises
    ------
    ChainError
        If no RPC URL is configured or the node is unreachable.
    """

    def __init__(self, settings: ChainSettings, w3: Web3 | None = None) -> None:
        self.settings = settings
        self.network_name = settings.network

        if w3 is None:
            rpc_url = settings.resolved_rpc_url
            if not rpc_url:
                raise ChainError(f"No RPC URL configured for network '{settings.network}'")
            w3 = Web3(
                Web3.HTTPProvider(
                    rpc_url, request_kwargs={"timeout": settings.tx_timeout_seconds}
                )
            )
        self.w3 = w3

        profile = settings.profile
        if profile is not None and profile.proof_of_authority:
            self.w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        if not self.w3.is_connected():
            raise ChainError(f"Failed to connect to network '{settings.network}'")

        self.chain_id = settings.chain_id if settings.chain_id is not None else self.w3.eth.chain_id
        self._store = DeploymentStore(settings.deployments_path, settings.network)

        self._local_accounts: dict[str, LocalAccount] = {}
        if settings.private_key:
            account = Account.from_key(settings.private_key)
            self._local_accounts[account.address] = account
        self._signers: list[Signer] | None = None

    # -- Chain interface ----------------------------------------------------

    @property
    def is_development(self) -> bool:
        return self.settings.is_development

    @property
    def accounts(self) -> list[Signer]:
        if self._signers is None:
            signers = [
                Signer(address=address, label="private-key")
                for address in self._local_accounts
            ]
            if self.is_development:
                signers.extend(
                    Signer(address=checksum(address), label=f"node{i}")
                    for i, address in enumerate(self.w3.eth.accounts)
                )
            if not signers:
                raise ChainError(
                    f"No accounts available on '{self.network_name}'; "
                    "set NFTMARKET_PRIVATE_KEY"
                )
            self._signers = signers
        return list(self._signers)

    @property
    def block_number(self) -> int:
        return self.w3.eth.block_number

    def get_balance(self, address: Signer | str) -> int:
        return self.w3.eth.get_balance(checksum(signer_address(address)))

    def get_contract(self, name: str, signer: Signer | str | None = None) -> Web3ContractHandle:
        """Return a handle for *name* from its deployment record.

        Raises
        ------
        DeploymentNotFoundError
            If there is no record for *name* on this network.
        ChainError
            If the record has no ABI and none is bundled for *name*.
        """
        record = self._store.load(name)
        abi = record.abi or BUNDLED_ABIS.get(name)
        if not abi:
            raise ChainError(f"No ABI available for '{name}'")
        sender = signer if signer is not None else self.accounts[0]
        return Web3ContractHandle(
            self, name, record.address, abi, checksum(signer_address(sender))
        )

    def mine(self, blocks: int = 1) -> None:
        """Mine *blocks* blocks via ``evm_mine``; development networks only."""
        if not self.is_development:
            raise ChainError(f"Cannot mine blocks on '{self.network_name}'")
        for _ in range(blocks):
            self.w3.provider.make_request("evm_mine", [])
        logger.debug("Mined %d block(s) on %s.", blocks, self.network_name)

    # -- Transactions ---------------------------------------------------------

    def send(
        self,
        handle: Web3ContractHandle,
        fn: Any,
        sender: str,
        value: int = 0,
    ) -> Web3PendingTransaction:
        """Build, sign and broadcast a contract call.

        Gas estimation runs first, so reverts surface here as typed
        ``ContractRevert`` errors before anything is broadcast.

        Raises
        ------
        ContractRevert
            If the call reverts.
        ChainError
            If the node rejects the transaction or cannot be reached.
        """
        params: dict[str, Any] = {"from": sender, "value": value}
        account = self._local_accounts.get(sender)
        try:
            tx_hash = self._broadcast(handle, fn, account, params)
        except (Web3Exception, OSError) as exc:
            raise ChainError(f"Sending {handle.name} from {sender} failed: {exc}") from exc
        logger.debug("Sent %s from %s: %s", handle.name, sender, Web3.to_hex(tx_hash))
        return Web3PendingTransaction(self, tx_hash, handle)

    def _broadcast(
        self,
        handle: Web3ContractHandle,
        fn: Any,
        account: LocalAccount | None,
        params: dict[str, Any],
    ) -> bytes:
        with translate_reverts(handle.abi):
            if account is None:
                return fn.transact(params)
            params["nonce"] = self.w3.eth.get_transaction_count(params["from"], "pending")
            params["chainId"] = self.chain_id
            if self.settings.gas_price_gwei:
                params["gasPrice"] = self.w3.to_wei(self.settings.gas_price_gwei, "gwei")
            signed = account.sign_transaction(fn.build_transaction(params))
            return self.w3.eth.send_raw_transaction(signed.raw_transaction)
