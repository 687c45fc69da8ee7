"""Decode revert data returned by a node into typed errors."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from eth_abi import decode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address
from web3.exceptions import ContractLogicError

from nftmarketplace.core.errors import (
    CUSTOM_ERRORS,
    ContractRevert,
    RevertedWithReason,
)

logger = logging.getLogger(__name__)

# Error(string), used by require(cond, "reason")
ERROR_STRING_SELECTOR = "0x08c379a0"


def _selector(signature: str) -> str:
    return "0x" + function_signature_to_4byte_selector(signature).hex()


def _normalize(abi_type: str, value: Any) -> Any:
    if abi_type == "address":
        return to_checksum_address(value)
    return value


def decode_revert(abi: list[dict[str, Any]], data: str) -> ContractRevert:
    """Turn ABI-encoded revert *data* into a ``ContractRevert``.

    Custom errors declared in *abi* decode into their typed class when one
    exists, otherwise into a plain ``ContractRevert`` carrying the rendered
    error.  Unknown selectors decode into a ``ContractRevert`` that keeps
    the raw data.
    """
    data = data if data.startswith("0x") else "0x" + data
    selector, payload = data[:10].lower(), bytes.fromhex(data[10:])

    if selector == ERROR_STRING_SELECTOR:
        (reason,) = decode(["string"], payload)
        return RevertedWithReason(reason)

    for entry in abi:
        if entry.get("type") != "error":
            continue
        types = [i["type"] for i in entry.get("inputs", [])]
        signature = f"{entry['name']}({','.join(types)})"
        if _selector(signature) != selector:
            continue
        values = [_normalize(t, v) for t, v in zip(types, decode(types, payload))]
        error_cls = CUSTOM_ERRORS.get(entry["name"])
        if error_cls is not None:
            return error_cls(*values)
        return ContractRevert(f"{entry['name']}({', '.join(map(str, values))})")

    logger.debug("Unrecognized revert selector %s.", selector)
    return ContractRevert(f"unrecognized custom error (data: {data})")


def _error_data(exc: ContractLogicError) -> str:
    data = getattr(exc, "data", None)
    if isinstance(data, str) and data.startswith("0x") and len(data) >= 10:
        return data
    message = getattr(exc, "message", "") or ""
    if isinstance(message, str) and message.startswith("0x") and len(message) >= 10:
        return message
    return ""


@contextmanager
def translate_reverts(abi: list[dict[str, Any]]) -> Iterator[None]:
    """Re-raise web3 revert exceptions as typed ``ContractRevert`` errors."""
    try:
        yield
    except ContractLogicError as exc:
        data = _error_data(exc)
        if data:
            raise decode_revert(abi, data) from exc
        message = str(getattr(exc, "message", "") or exc)
        reason = message.removeprefix("execution reverted").lstrip(": ").strip()
        raise RevertedWithReason(reason) from exc

