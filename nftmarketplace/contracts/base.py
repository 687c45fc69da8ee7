"""Base class for contracts hosted by the in-process development chain.

A local contract is a plain Python class whose ABI-facing methods are
marked with :func:`external` (state-changing) or :func:`view`.  Every such
method receives a :class:`Message` describing the call, followed by the
ABI arguments::

    class Counter(LocalContract):
        contract_name = "Counter"

        @external("increment")
        def increment(self, msg: Message) -> None:
            self.storage.count += 1

All mutable contract state lives in ``self.storage`` so the chain can
snapshot and roll it back when a call reverts.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, ClassVar

from nftmarketplace.core.errors import RevertedWithReason
from nftmarketplace.core.units import checksum

if TYPE_CHECKING:
    from nftmarketplace.chain.local import LocalChain


DEFAULT_METHOD_GAS = 30_000


@dataclass(frozen=True)
class Message:
    """Call context: who called, with how much value, on behalf of whom."""

    sender: str
    value: int = 0
    origin: str = ""


@dataclass(frozen=True)
class AbiMethod:
    name: str
    attribute: str
    mutates: bool
    payable: bool = False
    gas: int = DEFAULT_METHOD_GAS


def external(name: str, *, payable: bool = False, gas: int = DEFAULT_METHOD_GAS) -> Callable:
    """Mark a state-changing method reachable by transactions."""

    def decorator(fn: Callable) -> Callable:
        fn._abi = AbiMethod(name, fn.__name__, mutates=True, payable=payable, gas=gas)
        return fn

    return decorator


def view(name: str) -> Callable:
    """Mark a read-only method reachable by calls."""

    def decorator(fn: Callable) -> Callable:
        fn._abi = AbiMethod(name, fn.__name__, mutates=False)
        return fn

    return decorator


def non_reentrant(fn: Callable) -> Callable:
    """Reject re-entry while the wrapped call is executing.

    The lock lives in ``storage.reentrancy_locked`` so it is rolled back
    along with everything else on revert.
    """

    @functools.wraps(fn)
    def wrapper(self: LocalContract, *args: Any, **kwargs: Any) -> Any:
        if self.storage.reentrancy_locked:
            raise RevertedWithReason("ReentrancyGuard: reentrant call")
        self.storage.reentrancy_locked = True
        try:
            return fn(self, *args, **kwargs)
        finally:
            self.storage.reentrancy_locked = False

    return wrapper


class LocalContract:
    """A contract instance living on a :class:`LocalChain`.

    Parameters
    ----------
    chain:
        The hosting chain.
    address:
        Address assigned at deployment.
    deployer:
        Address that deployed the contract.
    """

    contract_name: ClassVar[str] = ""
    abi_methods: ClassVar[dict[str, AbiMethod]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        methods: dict[str, AbiMethod] = {}
        for klass in reversed(cls.__mro__):
            for attr in vars(klass).values():
                abi = getattr(attr, "_abi", None)
                if isinstance(abi, AbiMethod):
                    methods[abi.name] = abi
        cls.abi_methods = methods

    def __init__(self, chain: LocalChain, address: str, deployer: str) -> None:
        self.chain = chain
        self.address = address
        self.deployer = deployer
        self.storage = self.initial_storage()

    def initial_storage(self) -> Any:
        raise NotImplementedError

    # -- Helpers for contract code -------------------------------------------

    def emit(self, event: str, **args: Any) -> None:
        """Append an event log to the running transaction."""
        self.chain.record_event(self.address, event, args)

    def call(self, target: str, method: str, *args: Any, value: int = 0) -> Any:
        """Call another contract with this contract as ``msg.sender``."""
        return self.chain.internal_call(self.address, target, method, args, value=value)

    def send_value(self, to: str, amount: int) -> bool:
        """Low-level value transfer; ``False`` if the recipient reverted."""
        return self.chain.send_value(self.address, to, amount)

    @staticmethod
    def addr(value: str) -> str:
        return checksum(value)
