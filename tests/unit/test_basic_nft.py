"""Tests for the BasicNft ERC-721 collection."""

from __future__ import annotations

import pytest

from nftmarketplace.chain.local import LocalChain, LocalContractHandle
from nftmarketplace.contracts.basic_nft import TOKEN_URI
from nftmarketplace.core.errors import RevertedWithReason
from nftmarketplace.core.units import ZERO_ADDRESS
from nftmarketplace.models.accounts import Signer


@pytest.fixture
def nft(chain: LocalChain) -> LocalContractHandle:
    return chain.get_contract("BasicNft")


class TestMinting:
    def test_mint_emits_transfer_then_dog_minted(self, nft: LocalContractHandle, deployer: Signer):
        receipt = nft.mintNft().wait()
        assert [e.event for e in receipt.events] == ["Transfer", "DogMinted"]
        assert receipt.events[0].arg_values == (ZERO_ADDRESS, deployer.address, 0)
        assert receipt.events[0].args["tokenId"] == 0

    def test_counter_and_ownership(self, nft: LocalContractHandle, deployer: Signer):
        nft.mintNft().wait()
        nft.mintNft().wait()
        assert nft.getTokenCounter() == 2
        assert nft.ownerOf(1) == deployer.address
        assert nft.balanceOf(deployer.address) == 2
        assert nft.tokenURI(0) == TOKEN_URI

    def test_collection_name(self, chain: LocalChain, nft: LocalContractHandle):
        contract = chain.contract_at(nft.address)
        assert (contract.name, contract.symbol) == ("Dogie", "DOG")

    def test_unknown_token(self, nft: LocalContractHandle):
        with pytest.raises(RevertedWithReason, match="invalid token ID"):
            nft.ownerOf(42)


class TestApprovals:
    def test_approve_and_get_approved(self, nft: LocalContractHandle, player: Signer):
        nft.mintNft().wait()
        receipt = nft.approve(player.address, 0).wait()
        assert nft.getApproved(0) == player.address
        assert receipt.first_event("Approval")["approved"] == player.address

    def test_approve_by_stranger_reverts(self, nft: LocalContractHandle, player: Signer):
        nft.mintNft().wait()
        with pytest.raises(RevertedWithReason, match="not token owner"):
            nft.connect(player).approve(player.address, 0)

    def test_approve_to_owner_reverts(self, nft: LocalContractHandle, deployer: Signer):
        nft.mintNft().wait()
        with pytest.raises(RevertedWithReason, match="approval to current owner"):
            nft.approve(deployer.address, 0)

    def test_operator_approval(self, nft: LocalContractHandle, deployer: Signer, player: Signer):
        nft.setApprovalForAll(player.address, True).wait()
        assert nft.isApprovedForAll(deployer.address, player.address) is True


class TestTransfers:
    def test_transfer_clears_approval(
        self, chain: LocalChain, nft: LocalContractHandle, deployer: Signer, player: Signer
    ):
        nft.mintNft().wait()
        nft.approve(player.address, 0).wait()
        nft.connect(player).transferFrom(deployer.address, chain.accounts[2].address, 0).wait()
        assert nft.ownerOf(0) == chain.accounts[2].address
        assert nft.getApproved(0) == ZERO_ADDRESS
        assert nft.balanceOf(deployer.address) == 0

    def test_unapproved_transfer_reverts(
        self, nft: LocalContractHandle, deployer: Signer, player: Signer
    ):
        nft.mintNft().wait()
        with pytest.raises(RevertedWithReason, match="caller is not token owner or approved"):
            nft.connect(player).transferFrom(deployer.address, player.address, 0)

    def test_safe_transfer_to_non_receiver_contract_reverts(
        self, chain: LocalChain, nft: LocalContractHandle, deployer: Signer
    ):
        nft.mintNft().wait()
        marketplace = chain.get_contract("NftMarketplace")
        with pytest.raises(RevertedWithReason, match="non ERC721Receiver"):
            nft.safeTransferFrom(deployer.address, marketplace.address, 0)
        assert nft.ownerOf(0) == deployer.address
