"""End-to-end tests for the mint-and-list scripts on the local chain."""

from __future__ import annotations

import logging

import pytest

from nftmarketplace.chain.local import LocalChain
from nftmarketplace.core.units import parse_ether
from nftmarketplace.scripts.mint_and_list import mint_and_list, mint_and_list_and_mine


class TestMintAndList:
    def test_mints_approves_and_lists(self, chain: LocalChain):
        result = mint_and_list(chain)

        marketplace = chain.get_contract("NftMarketplace")
        nft = chain.get_contract("BasicNft")
        assert result.token_id == 0
        assert result.price == parse_ether("0.1")
        assert result.nft_address == nft.address
        assert result.marketplace_address == marketplace.address
        assert result.seller == chain.accounts[0].address

        listing = marketplace.getListing(nft.address, result.token_id)
        assert listing.price == parse_ether("0.1")
        assert listing.seller == chain.accounts[0].address
        assert nft.getApproved(result.token_id) == marketplace.address

    def test_list_receipt_carries_item_listed(self, chain: LocalChain):
        result = mint_and_list(chain, price="0.25")
        event = result.list_receipt.first_event("ItemListed")
        assert event["tokenId"] == result.token_id
        assert event["price"] == parse_ether("0.25")

    def test_token_ids_increase_per_run(self, chain: LocalChain):
        first = mint_and_list(chain)
        second = mint_and_list(chain)
        assert (first.token_id, second.token_id) == (0, 1)

    def test_does_not_mine_extra_blocks(self, chain: LocalChain):
        result = mint_and_list(chain)
        assert result.block_number == result.list_receipt.block_number

    def test_confirmations_mine_on_local_chain(self, chain: LocalChain):
        result = mint_and_list(chain, confirmations=2)
        assert chain.block_number == result.list_receipt.block_number + 1

    def test_logs_progress(self, chain: LocalChain, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.INFO, logger="nftmarketplace"):
            mint_and_list(chain)
        messages = [r.getMessage() for r in caplog.records]
        for expected in ("Minting...", "Approving NFT...", "Listing NFT...", "Listed!"):
            assert expected in messages


class TestMintAndListAndMine:
    def test_moves_blocks_after_listing(self, chain: LocalChain):
        result = mint_and_list_and_mine(chain, blocks=2, sleep_ms=0)
        assert result.block_number == result.list_receipt.block_number + 2
        assert chain.block_number == result.block_number

    def test_zero_blocks_skips_mining(self, chain: LocalChain):
        result = mint_and_list_and_mine(chain, blocks=0, sleep_ms=0)
        assert result.block_number == result.list_receipt.block_number

    def test_listing_is_visible_after_mining(self, chain: LocalChain):
        result = mint_and_list_and_mine(chain, price="0.3", blocks=3, sleep_ms=0)
        marketplace = chain.get_contract("NftMarketplace")
        assert marketplace.getListing(result.nft_address, result.token_id).price == parse_ether("0.3")
