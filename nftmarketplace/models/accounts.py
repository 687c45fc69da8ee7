"""Signer model — an address that can send transactions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Signer(BaseModel):
    """An account the chain can sign for.

    Private keys stay inside the chain backend; a ``Signer`` only names the
    account.
    """

    model_config = ConfigDict(frozen=True)

    address: str
    label: str = ""

    def __str__(self) -> str:
        return self.address
