"""Bundled ABIs for BasicNft and NftMarketplace.

Used by the web3 backend when a deployment record carries no ABI, and for
decoding custom-error revert data.
"""

from __future__ import annotations

from typing import Any

from nftmarketplace.core.errors import CUSTOM_ERRORS


def _inputs(*params: tuple[str, str]) -> list[dict[str, Any]]:
    return [{"internalType": t, "name": n, "type": t} for t, n in params]


def _event(name: str, *params: tuple[str, str, bool]) -> dict[str, Any]:
    return {
        "anonymous": False,
        "name": name,
        "type": "event",
        "inputs": [
            {"indexed": indexed, "internalType": t, "name": n, "type": t}
            for t, n, indexed in params
        ],
    }


def _function(
    name: str,
    inputs: list[dict[str, Any]],
    outputs: list[dict[str, Any]] | None = None,
    mutability: str = "nonpayable",
) -> dict[str, Any]:
    return {
        "name": name,
        "type": "function",
        "stateMutability": mutability,
        "inputs": inputs,
        "outputs": outputs or [],
    }


def _error_entries() -> list[dict[str, Any]]:
    entries = []
    for name, cls in CUSTOM_ERRORS.items():
        names = _ERROR_PARAM_NAMES.get(name, ())
        entries.append({
            "name": name,
            "type": "error",
            "inputs": [
                {"internalType": t, "name": n, "type": t}
                for t, n in zip(cls.abi_types, names)
            ],
        })
    return entries


_ERROR_PARAM_NAMES: dict[str, tuple[str, ...]] = {
    "PriceNotMet": ("nftAddress", "tokenId", "price"),
    "NotListed": ("nftAddress", "tokenId"),
    "AlreadyListed": ("nftAddress", "tokenId"),
}


NFT_MARKETPLACE_ABI: list[dict[str, Any]] = [
    *_error_entries(),
    _event(
        "ItemListed",
        ("address", "seller", True),
        ("address", "nftAddress", True),
        ("uint256", "tokenId", True),
        ("uint256", "price", False),
    ),
    _event(
        "ItemBought",
        ("address", "buyer", True),
        ("address", "nftAddress", True),
        ("uint256", "tokenId", True),
        ("uint256", "price", False),
    ),
    _event(
        "ListingCancelled",
        ("address", "seller", True),
        ("address", "nftAddress", True),
        ("uint256", "tokenId", True),
    ),
    _function(
        "listItem",
        _inputs(("address", "nftAddress"), ("uint256", "tokenId"), ("uint256", "price")),
    ),
    _function(
        "buyItem",
        _inputs(("address", "nftAddress"), ("uint256", "tokenId")),
        mutability="payable",
    ),
    _function(
        "cancelListing",
        _inputs(("address", "nftAddress"), ("uint256", "tokenId")),
    ),
    _function(
        "updateListing",
        _inputs(("address", "nftAddress"), ("uint256", "tokenId"), ("uint256", "newPrice")),
    ),
    _function("withdrawProceeds", []),
    _function(
        "getListing",
        _inputs(("address", "nftAddress"), ("uint256", "tokenId")),
        outputs=[{
            "internalType": "struct NftMarketplace.Listing",
            "name": "",
            "type": "tuple",
            "components": _inputs(("uint256", "price"), ("address", "seller")),
        }],
        mutability="view",
    ),
    _function(
        "getProceeds",
        _inputs(("address", "seller")),
        outputs=_inputs(("uint256", "")),
        mutability="view",
    ),
]


BASIC_NFT_ABI: list[dict[str, Any]] = [
    {
        "inputs": [],
        "stateMutability": "nonpayable",
        "type": "constructor",
    },
    _event(
        "Transfer",
        ("address", "from", True),
        ("address", "to", True),
        ("uint256", "tokenId", True),
    ),
    _event(
        "Approval",
        ("address", "owner", True),
        ("address", "approved", True),
        ("uint256", "tokenId", True),
    ),
    _event(
        "ApprovalForAll",
        ("address", "owner", True),
        ("address", "operator", True),
        ("bool", "approved", False),
    ),
    _event("DogMinted", ("uint256", "tokenId", True)),
    _function("mintNft", [], outputs=_inputs(("uint256", ""))),
    _function("approve", _inputs(("address", "to"), ("uint256", "tokenId"))),
    _function(
        "setApprovalForAll",
        _inputs(("address", "operator"), ("bool", "approved")),
    ),
    _function(
        "transferFrom",
        _inputs(("address", "from"), ("address", "to"), ("uint256", "tokenId")),
    ),
    _function(
        "safeTransferFrom",
        _inputs(("address", "from"), ("address", "to"), ("uint256", "tokenId")),
    ),
    _function(
        "getApproved",
        _inputs(("uint256", "tokenId")),
        outputs=_inputs(("address", "")),
        mutability="view",
    ),
    _function(
        "isApprovedForAll",
        _inputs(("address", "owner"), ("address", "operator")),
        outputs=_inputs(("bool", "")),
        mutability="view",
    ),
    _function(
        "ownerOf",
        _inputs(("uint256", "tokenId")),
        outputs=_inputs(("address", "")),
        mutability="view",
    ),
    _function(
        "balanceOf",
        _inputs(("address", "owner")),
        outputs=_inputs(("uint256", "")),
        mutability="view",
    ),
    _function(
        "tokenURI",
        _inputs(("uint256", "tokenId")),
        outputs=_inputs(("string", "")),
        mutability="view",
    ),
    _function("getTokenCounter", [], outputs=_inputs(("uint256", "")), mutability="view"),
]


BUNDLED_ABIS: dict[str, list[dict[str, Any]]] = {
    "NftMarketplace": NFT_MARKETPLACE_ABI,
    "BasicNft": BASIC_NFT_ABI,
}


def function_entry(abi: list[dict[str, Any]], name: str) -> dict[str, Any] | None:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == name:
            return entry
    return None


def event_names(abi: list[dict[str, Any]]) -> list[str]:
    return [e["name"] for e in abi if e.get("type") == "event"]
