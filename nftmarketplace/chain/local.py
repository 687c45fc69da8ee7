"""In-process development chain.

``LocalChain`` hosts :class:`~nftmarketplace.contracts.base.LocalContract`
instances and executes transactions against them synchronously:

- Automine: every successful transaction is mined into its own block.
- Atomicity: a revert restores balances, storage, logs and block height
  exactly as they were; the sender pays no gas for it.
- Gas: ``21000 + method gas`` per transaction at a fixed gas price, debited
  from the sender, so balance arithmetic in tests is exact.
- Value transfers into contracts run the recipient's ``receive`` hook;
  a low-level transfer that reverts reports failure instead of raising.
- Snapshots: ``snapshot()`` / ``revert(id)`` and ``fixture(tags)`` for
  cheap per-test resets.

Accounts are derived deterministically so addresses are stable between
runs.
"""

from __future__ import annotations

import copy
import itertools
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from eth_account import Account
from eth_utils import keccak, to_checksum_address

from nftmarketplace.chain.base import signer_address
from nftmarketplace.contracts.base import AbiMethod, LocalContract, Message
from nftmarketplace.core.errors import (
    ChainError,
    ContractRevert,
    DeploymentNotFoundError,
    InsufficientFunds,
    RevertedWithReason,
)
from nftmarketplace.core.units import checksum, parse_ether
from nftmarketplace.deployments import run_deploy_scripts
from nftmarketplace.models.accounts import Signer
from nftmarketplace.models.events import ContractEvent, TransactionReceipt
from nftmarketplace.networks import LOCAL_NETWORK

logger = logging.getLogger(__name__)

INTRINSIC_GAS = 21_000
DEPLOYMENT_GAS = 1_500_000
DEFAULT_GAS_PRICE = 1_000_000_000  # 1 gwei
DEFAULT_ACCOUNT_COUNT = 20
DEFAULT_ACCOUNT_BALANCE = parse_ether("10000")


@dataclass
class _ChainState:
    balances: dict[str, int]
    nonces: dict[str, int]
    contracts: dict[str, LocalContract]
    storages: dict[str, Any]
    deployments: dict[str, str]
    receipts: dict[str, TransactionReceipt]
    block_number: int
    log_count: int


class LocalPendingTransaction:
    """An already-mined local transaction."""

    def __init__(self, chain: LocalChain, receipt: TransactionReceipt) -> None:
        self._chain = chain
        self._receipt = receipt

    @property
    def hash(self) -> str:
        return self._receipt.transaction_hash

    def wait(self, confirmations: int = 1) -> TransactionReceipt:
        """Return the receipt, mining blocks until *confirmations* is met."""
        if confirmations < 0:
            raise ValueError("confirmations must be >= 0")
        missing = self._receipt.block_number + confirmations - 1 - self._chain.block_number
        if missing > 0:
            self._chain.mine(missing)
        return self._receipt


class LocalContractHandle:
    """Signer-bound handle to a contract on a :class:`LocalChain`."""

    def __init__(self, chain: LocalChain, name: str, address: str, signer: str) -> None:
        self._chain = chain
        self._signer = signer
        self.name = name
        self.address = address

    def connect(self, signer: Signer | str) -> LocalContractHandle:
        return LocalContractHandle(
            self._chain, self.name, self.address, checksum(signer_address(signer))
        )

    @property
    def signer(self) -> str:
        return self._signer

    def __getattr__(self, method: str) -> Any:
        if method.startswith("_"):
            raise AttributeError(method)
        abi = self._chain.contract_at(self.address).abi_methods.get(method)
        if abi is None:
            raise AttributeError(f"{self.name} has no ABI method '{method}'")

        def invoke(*args: Any, value: int = 0) -> Any:
            if abi.mutates:
                return self._chain.transact(
                    self._signer, self.address, method, args, value=value
                )
            if value:
                raise ValueError(f"{self.name}.{method} is a view; it cannot take value")
            return self._chain.call(self.address, method, args, sender=self._signer)

        invoke.__name__ = method
        return invoke

    def __repr__(self) -> str:
        return f"<LocalContractHandle {self.name} at {self.address} as {self._signer}>"


class LocalChain:
    """An in-process EVM-like chain for development and tests.

    Parameters
    ----------
    chain_id:
        Chain id reported to callers.
    account_count:
        Number of pre-funded accounts.
    initial_balance:
        Wei each account starts with.
    gas_price:
        Fixed wei-per-gas price.

    Examples
    --------
    >>> chain = LocalChain()
    >>> chain.fixture(["all"])
    >>> nft = chain.get_contract("BasicNft")
    >>> receipt = nft.mintNft().wait()
    >>> receipt.events[0].args["tokenId"]
    0
    """

    network_name = LOCAL_NETWORK

    def __init__(
        self,
        *,
        chain_id: int = 31337,
        account_count: int = DEFAULT_ACCOUNT_COUNT,
        initial_balance: int = DEFAULT_ACCOUNT_BALANCE,
        gas_price: int = DEFAULT_GAS_PRICE,
    ) -> None:
        self.chain_id = chain_id
        self.gas_price = gas_price

        keys = [
            Account.from_key(keccak(text=f"nftmarketplace-dev-account-{i}"))
            for i in range(account_count)
        ]
        self._signers = [
            Signer(address=key.address, label=f"account{i}") for i, key in enumerate(keys)
        ]
        self._balances: dict[str, int] = {s.address: initial_balance for s in self._signers}
        self._nonces: dict[str, int] = {}
        self._contracts: dict[str, LocalContract] = {}
        self._deployments: dict[str, str] = {}
        self._receipts: dict[str, TransactionReceipt] = {}
        self._block_number = 0

        # Pending logs of the transaction being executed; None between txs
        self._logs: list[tuple[str, str, dict[str, Any]]] | None = None
        self._origin = ""

        self._snapshots: dict[int, _ChainState] = {}
        self._snapshot_ids = itertools.count(1)
        self._fixtures: dict[frozenset[str], int] = {}

    # -- Chain interface ----------------------------------------------------

    @property
    def is_development(self) -> bool:
        return True

    @property
    def accounts(self) -> list[Signer]:
        return list(self._signers)

    @property
    def block_number(self) -> int:
        return self._block_number

    def get_balance(self, address: Signer | str) -> int:
        return self._balances.get(checksum(signer_address(address)), 0)

    def set_balance(self, address: Signer | str, wei: int) -> None:
        self._balances[checksum(signer_address(address))] = wei

    def get_contract(self, name: str, signer: Signer | str | None = None) -> LocalContractHandle:
        """Return a handle to the contract deployed as *name*.

        Raises
        ------
        DeploymentNotFoundError
            If nothing was deployed under *name*.
        """
        address = self._deployments.get(name)
        if address is None:
            raise DeploymentNotFoundError(
                f"No deployment named '{name}' on {self.network_name}"
            )
        signer = signer if signer is not None else self._signers[0]
        return LocalContractHandle(self, name, address, checksum(signer_address(signer)))

    def mine(self, blocks: int = 1) -> None:
        if blocks < 1:
            raise ValueError("blocks must be >= 1")
        self._block_number += blocks
        logger.debug("Mined %d block(s); height is now %d.", blocks, self._block_number)

    def get_receipt(self, tx_hash: str) -> TransactionReceipt:
        try:
            return self._receipts[tx_hash]
        except KeyError:
            raise ChainError(f"Unknown transaction {tx_hash}") from None

    # -- Deployment ---------------------------------------------------------

    def deploy(
        self,
        name: str,
        contract_cls: type[LocalContract],
        sender: Signer | str | None = None,
    ) -> LocalContractHandle:
        """Deploy *contract_cls* and register it under *name*."""
        deployer = checksum(signer_address(sender if sender is not None else self._signers[0]))
        nonce = self._nonces.get(deployer, 0)
        gas_cost = (INTRINSIC_GAS + DEPLOYMENT_GAS) * self.gas_price
        if self._balances.get(deployer, 0) < gas_cost:
            raise InsufficientFunds(f"{deployer} cannot pay for deploying {name}")

        address = to_checksum_address(
            keccak(bytes.fromhex(deployer[2:]) + nonce.to_bytes(32, "big"))[12:]
        )
        self._contracts[address] = contract_cls(self, address, deployer)
        self._balances.setdefault(address, 0)
        self._deployments[name] = address
        self._finalize(deployer, None, INTRINSIC_GAS + DEPLOYMENT_GAS, [])
        logger.info("Deployed %s at %s.", name, address)
        return self.get_contract(name, deployer)

    def fixture(self, tags: Iterable[str] = ("all",)) -> None:
        """Deploy the contracts tagged with *tags*, or reset to them.

        The first call runs the deploy scripts and snapshots the result;
        later calls with the same tags revert to that snapshot.
        """
        key = frozenset(tags)
        snapshot_id = self._fixtures.get(key)
        if snapshot_id is not None and snapshot_id in self._snapshots:
            self.revert(snapshot_id)
        else:
            run_deploy_scripts(self, key)
        self._fixtures[key] = self.snapshot()

    # -- Snapshots ------------------------------------------------------------

    def snapshot(self) -> int:
        snapshot_id = next(self._snapshot_ids)
        self._snapshots[snapshot_id] = self._capture()
        return snapshot_id

    def revert(self, snapshot_id: int) -> None:
        """Restore a snapshot; it and every later snapshot are consumed."""
        state = self._snapshots.get(snapshot_id)
        if state is None:
            raise ChainError(f"Unknown snapshot id {snapshot_id}")
        self._restore(state)
        for sid in [s for s in self._snapshots if s >= snapshot_id]:
            del self._snapshots[sid]

    # -- Execution ------------------------------------------------------------

    def contract_at(self, address: str) -> LocalContract:
        contract = self._contracts.get(checksum(address))
        if contract is None:
            raise ChainError(f"No contract at {address}")
        return contract

    def is_contract(self, address: str) -> bool:
        return checksum(address) in self._contracts

    def accepts_tokens(self, address: str) -> bool:
        contract = self._contracts.get(checksum(address))
        return contract is not None and hasattr(contract, "on_erc721_received")

    def transact(
        self,
        signer: Signer | str,
        address: str,
        method: str,
        args: tuple[Any, ...],
        value: int = 0,
    ) -> LocalPendingTransaction:
        """Execute a state-changing call as a transaction and mine it.

        Raises
        ------
        ContractRevert
            If the contract reverts.  Chain state is left untouched when
            this or any other exception escapes the call.
        InsufficientFunds
            If the sender cannot cover value plus gas.
        """
        sender = checksum(signer_address(signer))
        contract = self.contract_at(address)
        abi = self._abi(contract, method)
        if value < 0:
            raise ValueError("value must be >= 0")
        if value and not abi.payable:
            raise ValueError(f"{contract.contract_name}.{method} is not payable")

        gas_used = INTRINSIC_GAS + abi.gas
        if self._balances.get(sender, 0) < value + gas_used * self.gas_price:
            raise InsufficientFunds(
                f"{sender} cannot cover value {value} plus gas for {method}"
            )

        state = self._capture()
        self._logs = []
        self._origin = sender
        try:
            self._move_value(sender, contract.address, value)
            self._dispatch(contract, abi, Message(sender, value, sender), args)
            logs = self._logs
        except Exception as exc:
            self._restore(state)
            if isinstance(exc, ContractRevert):
                logger.debug("%s.%s reverted: %s", contract.contract_name, method, exc)
            raise
        finally:
            self._logs = None
            self._origin = ""

        receipt = self._finalize(sender, contract.address, gas_used, logs)
        return LocalPendingTransaction(self, receipt)

    def call(
        self,
        address: str,
        method: str,
        args: tuple[Any, ...],
        sender: Signer | str | None = None,
    ) -> Any:
        """Evaluate a method without mining; state changes are discarded."""
        contract = self.contract_at(address)
        abi = self._abi(contract, method)
        caller = checksum(signer_address(sender)) if sender is not None else self._signers[0].address
        msg = Message(caller, 0, caller)
        if not abi.mutates:
            return self._dispatch(contract, abi, msg, args)

        state = self._capture()
        self._logs = []
        try:
            return self._dispatch(contract, abi, msg, args)
        finally:
            self._logs = None
            self._restore(state)

    def internal_call(
        self,
        caller: str,
        target: str,
        method: str,
        args: tuple[Any, ...],
        value: int = 0,
    ) -> Any:
        """Contract-to-contract call; reverts propagate to the caller."""
        contract = self.contract_at(target)
        abi = contract.abi_methods.get(method)
        if abi is None:
            raise RevertedWithReason(f"function selector was not recognized: {method}")
        if value:
            self._move_value(caller, contract.address, value)
        return self._dispatch(contract, abi, Message(caller, value, self._origin), args)

    def send_value(self, sender: str, to: str, amount: int) -> bool:
        """Low-level value transfer from *sender* to *to*.

        Runs the recipient's ``receive`` hook if it is a contract.  Returns
        ``False`` (with the transfer undone) if the hook reverts or the
        recipient contract cannot receive value.
        """
        to = checksum(to)
        if self._balances.get(sender, 0) < amount:
            return False
        state = self._capture()
        try:
            self._move_value(sender, to, amount)
            receiver = self._contracts.get(to)
            if receiver is not None:
                hook = getattr(receiver, "receive", None)
                if hook is None:
                    raise RevertedWithReason("")
                hook(Message(sender, amount, self._origin))
        except ContractRevert as exc:
            self._restore(state)
            logger.debug("Value transfer %s -> %s failed: %s", sender, to, exc)
            return False
        except Exception:
            self._restore(state)
            raise
        return True

    def record_event(self, address: str, event: str, args: dict[str, Any]) -> None:
        if self._logs is None:
            raise ChainError(f"Event {event} emitted outside of a transaction")
        self._logs.append((address, event, dict(args)))

    # -- Internals --------------------------------------------------------------

    @staticmethod
    def _abi(contract: LocalContract, method: str) -> AbiMethod:
        abi = contract.abi_methods.get(method)
        if abi is None:
            raise AttributeError(f"{contract.contract_name} has no ABI method '{method}'")
        return abi

    @staticmethod
    def _dispatch(contract: LocalContract, abi: AbiMethod, msg: Message, args: tuple) -> Any:
        return getattr(contract, abi.attribute)(msg, *args)

    def _move_value(self, sender: str, to: str, amount: int) -> None:
        if amount == 0:
            return
        if self._balances.get(sender, 0) < amount:
            raise RevertedWithReason("insufficient balance for transfer")
        self._balances[sender] -= amount
        self._balances[to] = self._balances.get(to, 0) + amount

    def _finalize(
        self,
        sender: str,
        to: str | None,
        gas_used: int,
        logs: list[tuple[str, str, dict[str, Any]]],
    ) -> TransactionReceipt:
        nonce = self._nonces.get(sender, 0)
        self._balances[sender] -= gas_used * self.gas_price
        self._nonces[sender] = nonce + 1
        self._block_number += 1
        tx_hash = "0x" + keccak(text=f"{self.chain_id}:{sender}:{nonce}").hex()
        receipt = TransactionReceipt(
            transaction_hash=tx_hash,
            block_number=self._block_number,
            from_address=sender,
            to_address=to,
            gas_used=gas_used,
            cumulative_gas_used=gas_used,
            effective_gas_price=self.gas_price,
            status=1,
            events=[
                ContractEvent(
                    event=event,
                    address=address,
                    args=args,
                    block_number=self._block_number,
                    log_index=index,
                    transaction_hash=tx_hash,
                )
                for index, (address, event, args) in enumerate(logs)
            ],
        )
        self._receipts[tx_hash] = receipt
        return receipt

    def _capture(self) -> _ChainState:
        return _ChainState(
            balances=dict(self._balances),
            nonces=dict(self._nonces),
            contracts=dict(self._contracts),
            storages={a: copy.deepcopy(c.storage) for a, c in self._contracts.items()},
            deployments=dict(self._deployments),
            receipts=dict(self._receipts),
            block_number=self._block_number,
            log_count=len(self._logs) if self._logs is not None else 0,
        )

    def _restore(self, state: _ChainState) -> None:
        self._balances = dict(state.balances)
        self._nonces = dict(state.nonces)
        self._contracts = dict(state.contracts)
        for address, contract in self._contracts.items():
            contract.storage = copy.deepcopy(state.storages[address])
        self._deployments = dict(state.deployments)
        self._receipts = dict(state.receipts)
        self._block_number = state.block_number
        if self._logs is not None:
            del self._logs[state.log_count:]
