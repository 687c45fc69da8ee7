"""Revert taxonomy and chain-level errors.

Contract reverts are raised as ``ContractRevert`` subclasses, on both the
local chain and the web3 backend.  Solidity custom errors map one-to-one
onto ``CustomError`` subclasses; their ``str()`` matches the way the error
is rendered by Ethereum tooling, e.g.::

    AlreadyListed("0x5FbDB2315678afecb367f032d93F642f64180aa3", 0)
"""

from __future__ import annotations

from typing import Any, ClassVar


class ContractRevert(RuntimeError):
    """Raised when contract execution reverts."""

    def __init__(self, reason: str = "") -> None:
        super().__init__(reason)
        self.reason = reason


class RevertedWithReason(ContractRevert):
    """A revert carrying a plain string reason (``require(cond, "...")``)."""


class CustomError(ContractRevert):
    """A Solidity custom error.

    Subclasses declare ``abi_types``, the ABI types of the error's
    parameters, in declaration order.  The class name is the error name.
    """

    abi_types: ClassVar[tuple[str, ...]] = ()

    def __init__(self, *values: Any) -> None:
        if len(values) != len(self.abi_types):
            raise TypeError(
                f"{self.name} takes {len(self.abi_types)} argument(s), "
                f"got {len(values)}"
            )
        self.values = values
        super().__init__(self._render())

    @property
    def name(self) -> str:
        return type(self).__name__

    @classmethod
    def signature(cls) -> str:
        """Canonical signature used for the 4-byte selector."""
        return f"{cls.__name__}({','.join(cls.abi_types)})"

    def _render(self) -> str:
        parts = [
            f'"{value}"' if abi_type == "address" else str(value)
            for abi_type, value in zip(self.abi_types, self.values)
        ]
        return f"{self.name}({', '.join(parts)})"


# ---------------------------------------------------------------------------
# NftMarketplace custom errors
# ---------------------------------------------------------------------------

class PriceNotMet(CustomError):
    abi_types = ("address", "uint256", "uint256")


class NotListed(CustomError):
    abi_types = ("address", "uint256")


class AlreadyListed(CustomError):
    abi_types = ("address", "uint256")


class NoProceeds(CustomError):
    pass


class NotOwner(CustomError):
    pass


class NotApprovedForMarketplace(CustomError):
    pass


class PriceMustBeAboveZero(CustomError):
    pass


CUSTOM_ERRORS: dict[str, type[CustomError]] = {
    cls.__name__: cls
    for cls in (
        PriceNotMet,
        NotListed,
        AlreadyListed,
        NoProceeds,
        NotOwner,
        NotApprovedForMarketplace,
        PriceMustBeAboveZero,
    )
}


# ---------------------------------------------------------------------------
# Non-revert errors
# ---------------------------------------------------------------------------

class ChainError(RuntimeError):
    """Raised for connection, signing and configuration problems."""


class InsufficientFunds(ChainError):
    """Raised when a sender cannot cover value plus gas."""


class TransactionFailed(ChainError):
    """Raised when a mined transaction has a failed status."""


class DeploymentNotFoundError(LookupError):
    """Raised when no deployment record exists for a contract."""


class VerificationError(RuntimeError):
    """Raised when source verification is rejected or times out."""
