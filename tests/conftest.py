"""Shared test fixtures for the NFT marketplace."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from nftmarketplace.chain.local import LocalChain, LocalContractHandle
from nftmarketplace.config import ChainSettings
from nftmarketplace.contracts.abi import BASIC_NFT_ABI
from nftmarketplace.core.units import parse_ether
from nftmarketplace.deployments import DeploymentStore
from nftmarketplace.models.accounts import Signer
from nftmarketplace.models.deployments import DeploymentRecord

PRICE = parse_ether("0.1")
TOKEN_ID = 0

SEPOLIA_NFT_ADDRESS = "0x69b8716bacC420B1644BBa1aDeeDD5e3a3A7f670"
SOLC_INPUT_HASH = "3f1d2c9e8b7a6f5e4d3c2b1a0f9e8d7c"


@pytest.fixture
def chain() -> LocalChain:
    """Provide a LocalChain with every deploy script applied."""
    local = LocalChain()
    local.fixture(["all"])
    return local


@pytest.fixture
def deployer(chain: LocalChain) -> Signer:
    return chain.accounts[0]


@pytest.fixture
def player(chain: LocalChain) -> Signer:
    return chain.accounts[1]


@pytest.fixture
def nft_marketplace(chain: LocalChain, deployer: Signer) -> LocalContractHandle:
    """Provide the NftMarketplace handle, connected as the deployer."""
    return chain.get_contract("NftMarketplace", deployer)


@pytest.fixture
def basic_nft(
    chain: LocalChain, deployer: Signer, nft_marketplace: LocalContractHandle
) -> LocalContractHandle:
    """Provide BasicNft with token 0 minted by the deployer and approved for the marketplace."""
    nft = chain.get_contract("BasicNft", deployer)
    nft.mintNft().wait()
    nft.approve(nft_marketplace.address, TOKEN_ID).wait()
    return nft


# ---------------------------------------------------------------------------
# Settings and deployment records
# ---------------------------------------------------------------------------


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., ChainSettings]:
    """Factory fixture: ChainSettings isolated from the process .env file."""

    def _factory(**overrides: Any) -> ChainSettings:
        defaults: dict[str, Any] = {
            "deployments_path": tmp_path / "deployments",
            "verify_poll_interval_seconds": 0.0,
        }
        defaults.update(overrides)
        return ChainSettings(_env_file=None, **defaults)

    return _factory


@pytest.fixture
def make_record() -> Callable[..., DeploymentRecord]:
    """Factory fixture: build a DeploymentRecord with sensible defaults."""

    def _factory(
        name: str = "BasicNft",
        address: str = SEPOLIA_NFT_ADDRESS,
        **overrides: Any,
    ) -> DeploymentRecord:
        metadata = {
            "compiler": {"version": "0.8.7+commit.e28d00a7"},
            "settings": {"compilationTarget": {f"contracts/{name}.sol": name}},
        }
        defaults: dict[str, Any] = {
            "name": name,
            "address": address,
            "abi": BASIC_NFT_ABI,
            "transaction_hash": "0x" + "ab" * 32,
            "solc_input_hash": SOLC_INPUT_HASH,
            "metadata": json.dumps(metadata),
        }
        defaults.update(overrides)
        return DeploymentRecord(**defaults)

    return _factory


@pytest.fixture
def sepolia_store(
    tmp_path: Path, make_record: Callable[..., DeploymentRecord]
) -> DeploymentStore:
    """Provide a sepolia DeploymentStore holding BasicNft and its compiler input."""
    store = DeploymentStore(tmp_path / "deployments", "sepolia")
    store.save(make_record())
    solc_dir = store.directory / "solcInputs"
    solc_dir.mkdir(parents=True)
    solc_input = {
        "language": "Solidity",
        "sources": {"contracts/BasicNft.sol": {"content": "// SPDX-License-Identifier: MIT"}},
        "settings": {"optimizer": {"enabled": False, "runs": 200}},
    }
    (solc_dir / f"{SOLC_INPUT_HASH}.json").write_text(json.dumps(solc_input), encoding="utf-8")
    return store
