"""Decoded contract events and transaction receipts."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContractEvent(BaseModel):
    """A single decoded log entry.

    ``args`` keeps the ABI parameter order, so ``arg_values`` can be
    compared against a positional tuple.
    """

    model_config = ConfigDict(frozen=True)

    event: str
    address: str
    args: dict[str, Any] = Field(default_factory=dict)
    block_number: int = 0
    log_index: int = 0
    transaction_hash: str = ""

    @property
    def arg_values(self) -> tuple[Any, ...]:
        return tuple(self.args.values())

    def __getitem__(self, key: str) -> Any:
        return self.args[key]


class TransactionReceipt(BaseModel):
    """Receipt of a mined transaction with its decoded events."""

    model_config = ConfigDict(frozen=True)

    transaction_hash: str
    block_number: int
    from_address: str
    to_address: str | None = None
    gas_used: int
    cumulative_gas_used: int
    effective_gas_price: int
    status: int = 1
    events: list[ContractEvent] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    @property
    def gas_cost(self) -> int:
        """Wei paid for gas by the sender."""
        return self.gas_used * self.effective_gas_price

    def events_named(self, name: str) -> list[ContractEvent]:
        return [e for e in self.events if e.event == name]

    def first_event(self, name: str) -> ContractEvent:
        """Return the first event called *name*.

        Raises
        ------
        LookupError
            If the transaction emitted no such event.
        """
        for event in self.events:
            if event.event == name:
                return event
        emitted = ", ".join(e.event for e in self.events) or "none"
        raise LookupError(f"No '{name}' event in receipt (emitted: {emitted})")
