"""Tests for deployment records and deploy scripts."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from nftmarketplace.chain.local import LocalChain
from nftmarketplace.core.errors import DeploymentNotFoundError
from nftmarketplace.deployments import DEPLOY_SCRIPTS, DeploymentStore, run_deploy_scripts
from nftmarketplace.models.deployments import DeploymentRecord


class TestDeploymentStore:
    def test_save_and_load(
        self, tmp_path: Path, make_record: Callable[..., DeploymentRecord]
    ):
        store = DeploymentStore(tmp_path, "sepolia")
        record = make_record()
        path = store.save(record)
        assert path == tmp_path / "sepolia" / "BasicNft.json"
        assert store.load("BasicNft") == record

    def test_saved_file_uses_hardhat_keys(
        self, tmp_path: Path, make_record: Callable[..., DeploymentRecord]
    ):
        store = DeploymentStore(tmp_path, "sepolia")
        data = json.loads(store.save(make_record()).read_text(encoding="utf-8"))
        assert "transactionHash" in data
        assert "solcInputHash" in data
        assert "name" not in data

    def test_load_missing(self, tmp_path: Path):
        with pytest.raises(DeploymentNotFoundError, match="NftMarketplace"):
            DeploymentStore(tmp_path, "sepolia").load("NftMarketplace")

    def test_list_all_sorted(
        self, tmp_path: Path, make_record: Callable[..., DeploymentRecord]
    ):
        store = DeploymentStore(tmp_path, "sepolia")
        store.save(make_record(name="NftMarketplace", address="0x" + "22" * 20))
        store.save(make_record())
        assert [r.name for r in store.list_all()] == ["BasicNft", "NftMarketplace"]

    def test_list_all_empty(self, tmp_path: Path):
        assert DeploymentStore(tmp_path, "sepolia").list_all() == []

    def test_find_by_address_ignores_case(self, sepolia_store: DeploymentStore):
        record = sepolia_store.find_by_address("0x69b8716bacc420b1644bba1adeedd5e3a3a7f670")
        assert record.name == "BasicNft"

    def test_find_by_address_missing(self, sepolia_store: DeploymentStore):
        with pytest.raises(DeploymentNotFoundError):
            sepolia_store.find_by_address("0x" + "33" * 20)

    def test_solc_input(self, sepolia_store: DeploymentStore):
        source = sepolia_store.solc_input(sepolia_store.load("BasicNft"))
        assert source["language"] == "Solidity"

    def test_solc_input_missing_hash(
        self, tmp_path: Path, make_record: Callable[..., DeploymentRecord]
    ):
        store = DeploymentStore(tmp_path, "sepolia")
        with pytest.raises(DeploymentNotFoundError, match="solcInputHash"):
            store.solc_input(make_record(solc_input_hash=""))


class TestDeployScripts:
    def test_scripts_are_tagged_all(self):
        assert all("all" in script.tags for script in DEPLOY_SCRIPTS)

    def test_run_by_tag(self):
        chain = LocalChain()
        assert run_deploy_scripts(chain, ["nftmarketplace"]) == ["NftMarketplace"]

    def test_no_match_deploys_nothing(self, caplog: pytest.LogCaptureFixture):
        chain = LocalChain()
        assert run_deploy_scripts(chain, ["nothing"]) == []
        assert "No deploy scripts match" in caplog.text
