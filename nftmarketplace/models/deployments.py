"""Deployment record model (hardhat-deploy compatible)."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeploymentRecord(BaseModel):
    """Where a named contract lives on a network and how it was built.

    ``metadata`` is the solc metadata JSON string, from which the compiler
    version and compilation target are read for source verification.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    address: str
    abi: list[dict[str, Any]] = Field(default_factory=list)
    transaction_hash: str = Field(default="", alias="transactionHash")
    args: list[Any] = Field(default_factory=list)
    solc_input_hash: str = Field(default="", alias="solcInputHash")
    metadata: str = ""

    def parsed_metadata(self) -> dict[str, Any]:
        return json.loads(self.metadata) if self.metadata else {}

    @property
    def compiler_version(self) -> str:
        """Compiler version as Etherscan expects it (``v0.8.7+commit...``)."""
        version = self.parsed_metadata().get("compiler", {}).get("version", "")
        return f"v{version}" if version and not version.startswith("v") else version

    @property
    def fully_qualified_name(self) -> str:
        """``path/To.sol:Name`` from the metadata compilation target."""
        target = self.parsed_metadata().get("settings", {}).get("compilationTarget", {})
        for source_path, contract_name in target.items():
            return f"{source_path}:{contract_name}"
        return self.name

    @property
    def constructor_types(self) -> list[str]:
        for entry in self.abi:
            if entry.get("type") == "constructor":
                return [i["type"] for i in entry.get("inputs", [])]
        return []
