"""Tests for decoding node revert data into typed errors."""

from __future__ import annotations

import pytest
from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector
from web3.exceptions import ContractLogicError

from nftmarketplace.chain.reverts import ERROR_STRING_SELECTOR, decode_revert, translate_reverts
from nftmarketplace.contracts.abi import NFT_MARKETPLACE_ABI
from nftmarketplace.core.errors import (
    AlreadyListed,
    ContractRevert,
    NoProceeds,
    PriceNotMet,
    RevertedWithReason,
)

NFT = "0x69b8716bacC420B1644BBa1aDeeDD5e3a3A7f670"


def _revert_data(signature: str, types: list[str], values: list) -> str:
    selector = function_signature_to_4byte_selector(signature).hex()
    return "0x" + selector + encode(types, values).hex()


class TestDecodeRevert:
    def test_error_string(self):
        data = ERROR_STRING_SELECTOR + encode(["string"], ["Transfer failed"]).hex()
        error = decode_revert(NFT_MARKETPLACE_ABI, data)
        assert isinstance(error, RevertedWithReason)
        assert error.reason == "Transfer failed"

    def test_custom_error_with_arguments(self):
        data = _revert_data("AlreadyListed(address,uint256)", ["address", "uint256"], [NFT.lower(), 3])
        error = decode_revert(NFT_MARKETPLACE_ABI, data)
        assert isinstance(error, AlreadyListed)
        assert error.values == (NFT, 3)
        assert str(error) == f'AlreadyListed("{NFT}", 3)'

    def test_price_not_met(self):
        data = _revert_data(
            "PriceNotMet(address,uint256,uint256)",
            ["address", "uint256", "uint256"],
            [NFT, 0, 10**17],
        )
        assert decode_revert(NFT_MARKETPLACE_ABI, data).values == (NFT, 0, 10**17)

    def test_custom_error_without_arguments(self):
        data = "0x" + function_signature_to_4byte_selector("NoProceeds()").hex()
        assert isinstance(decode_revert(NFT_MARKETPLACE_ABI, data), NoProceeds)

    def test_accepts_bare_hex(self):
        data = function_signature_to_4byte_selector("NoProceeds()").hex()
        assert isinstance(decode_revert(NFT_MARKETPLACE_ABI, data), NoProceeds)

    def test_abi_error_without_class(self):
        abi = [{"type": "error", "name": "Paused", "inputs": []}]
        data = "0x" + function_signature_to_4byte_selector("Paused()").hex()
        error = decode_revert(abi, data)
        assert type(error) is ContractRevert
        assert error.reason == "Paused()"

    def test_unknown_selector(self):
        error = decode_revert(NFT_MARKETPLACE_ABI, "0xdeadbeef")
        assert type(error) is ContractRevert
        assert "unrecognized" in error.reason


class TestTranslateReverts:
    def test_translates_custom_error_data(self):
        data = "0x" + function_signature_to_4byte_selector("NotOwner()").hex()
        with pytest.raises(ContractRevert, match=r"NotOwner\(\)"):
            with translate_reverts(NFT_MARKETPLACE_ABI):
                raise ContractLogicError("execution reverted", data=data)

    def test_translates_reason_string(self):
        with pytest.raises(RevertedWithReason) as excinfo:
            with translate_reverts(NFT_MARKETPLACE_ABI):
                raise ContractLogicError("execution reverted: Transfer failed")
        assert excinfo.value.reason == "Transfer failed"

    def test_keeps_cause(self):
        with pytest.raises(PriceNotMet) as excinfo:
            with translate_reverts(NFT_MARKETPLACE_ABI):
                raise ContractLogicError(
                    "execution reverted",
                    data=_revert_data(
                        "PriceNotMet(address,uint256,uint256)",
                        ["address", "uint256", "uint256"],
                        [NFT, 0, 1],
                    ),
                )
        assert isinstance(excinfo.value.__cause__, ContractLogicError)

    def test_other_exceptions_pass_through(self):
        with pytest.raises(KeyError):
            with translate_reverts(NFT_MARKETPLACE_ABI):
                raise KeyError("x")
