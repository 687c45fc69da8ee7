"""Verify deployed contract source on Etherscan (API v2).

The compiler input and version come from the contract's deployment
record, so verification needs no local compiler.  A contract that is
already verified counts as success.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

import httpx
from eth_abi import encode

from nftmarketplace.config import ChainSettings
from nftmarketplace.core.errors import VerificationError
from nftmarketplace.core.units import checksum
from nftmarketplace.deployments import DeploymentStore
from nftmarketplace.models.deployments import DeploymentRecord
from nftmarketplace.models.verification import VerificationResult, VerificationStatus

logger = logging.getLogger(__name__)

# BasicNft on sepolia; NftMarketplace lives at
# 0xf953Ddd29ff90D29F4c15d95b9A8f79D2A57203e
DEFAULT_VERIFY_ADDRESS = "0x69b8716bacC420B1644BBa1aDeeDD5e3a3A7f670"

_ALREADY_VERIFIED = "already verified"


def coerce_args(types: Sequence[str], values: Sequence[Any]) -> list[Any]:
    """Convert CLI strings into Python values for ABI encoding."""
    if len(types) != len(values):
        raise VerificationError(
            f"Constructor takes {len(types)} argument(s), got {len(values)}"
        )
    coerced: list[Any] = []
    for abi_type, value in zip(types, values):
        if not isinstance(value, str):
            coerced.append(value)
        elif abi_type.startswith(("uint", "int")):
            coerced.append(int(value, 0))
        elif abi_type == "bool":
            coerced.append(value.lower() in ("1", "true", "yes"))
        elif abi_type == "address":
            coerced.append(checksum(value))
        elif abi_type.startswith("bytes"):
            coerced.append(bytes.fromhex(value.removeprefix("0x")))
        else:
            coerced.append(value)
    return coerced


def encode_constructor_args(record: DeploymentRecord, values: Sequence[Any]) -> str:
    """ABI-encode constructor arguments as bare hex (no ``0x``)."""
    types = record.constructor_types
    if not types:
        if values:
            raise VerificationError(f"{record.name} takes no constructor arguments")
        return ""
    return encode(types, coerce_args(types, values)).hex()


class EtherscanVerifier:
    """Client for Etherscan's contract verification endpoints.

    Parameters
    ----------
    settings:
        Supplies API URL, key, chain id and polling limits.
    store:
        Deployment records for the network (defaults to one built from
        ``settings``).
    client:
        Optional ``httpx.Client``; one is created and owned otherwise.
    sleep:
        Pause between status polls.
    """

    def __init__(
        self,
        settings: ChainSettings,
        store: DeploymentStore | None = None,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._store = store or DeploymentStore(settings.deployments_path, settings.network)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=30.0)
        self._sleep = sleep

    def __enter__(self) -> EtherscanVerifier:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    # -- Public API ---------------------------------------------------------

    def is_verified(self, address: str) -> bool:
        payload = self._request(
            "GET",
            params={"module": "contract", "action": "getsourcecode", "address": address},
        )
        result = payload.get("result")
        if isinstance(result, list) and result:
            return bool(result[0].get("SourceCode"))
        return False

    def verify(self, address: str, constructor_args: Sequence[Any] = ()) -> VerificationResult:
        """Submit the source of the contract at *address* and wait for the verdict.

        Raises
        ------
        VerificationError
            If the API key is missing, Etherscan rejects the source, or
            the status does not settle within the polling budget.
        DeploymentNotFoundError
            If there is no deployment record for *address*.
        """
        if not self._settings.etherscan_api_key:
            raise VerificationError("NFTMARKET_ETHERSCAN_API_KEY is not set")

        address = checksum(address)
        record = self._store.find_by_address(address)
        logger.info("Verifying contract %s at %s...", record.name, address)

        if self.is_verified(address):
            logger.info("Already verified!")
            return self._result(record, VerificationStatus.ALREADY_VERIFIED)

        encoded_args = encode_constructor_args(record, constructor_args)
        source = self._store.solc_input(record)
        payload = self._request(
            "POST",
            data={
                "module": "contract",
                "action": "verifysourcecode",
                "contractaddress": address,
                "sourceCode": json.dumps(source, separators=(",", ":")),
                "codeformat": "solidity-standard-json-input",
                "contractname": record.fully_qualified_name,
                "compilerversion": record.compiler_version,
                # Etherscan's spelling
                "constructorArguements": encoded_args,
            },
        )
        message = str(payload.get("result", ""))
        if payload.get("status") != "1":
            if _ALREADY_VERIFIED in message.lower():
                logger.info("Already verified!")
                return self._result(record, VerificationStatus.ALREADY_VERIFIED, message=message)
            raise VerificationError(f"Etherscan rejected {record.name}: {message}")

        return self._poll(record, guid=message)

    # -- Internals --------------------------------------------------------------

    def _poll(self, record: DeploymentRecord, guid: str) -> VerificationResult:
        for attempt in range(1, self._settings.verify_max_attempts + 1):
            self._sleep(self._settings.verify_poll_interval_seconds)
            payload = self._request(
                "GET",
                params={"module": "contract", "action": "checkverifystatus", "guid": guid},
            )
            message = str(payload.get("result", ""))
            lowered = message.lower()
            logger.debug("Verification status (attempt %d): %s", attempt, message)
            if "pending" in lowered:
                continue
            if _ALREADY_VERIFIED in lowered:
                return self._result(
                    record, VerificationStatus.ALREADY_VERIFIED, guid=guid, message=message
                )
            if payload.get("status") == "1" or lowered.startswith("pass"):
                logger.info("Contract %s verified.", record.name)
                return self._result(
                    record, VerificationStatus.VERIFIED, guid=guid, message=message
                )
            raise VerificationError(f"Verification of {record.name} failed: {message}")

        raise VerificationError(
            f"Verification of {record.name} still pending after "
            f"{self._settings.verify_max_attempts} checks (guid {guid})"
        )

    def _request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        query = {
            "chainid": self._settings.resolved_chain_id,
            "apikey": self._settings.etherscan_api_key,
            **(params or {}),
        }
        try:
            response = self._client.request(
                method, self._settings.etherscan_api_url, params=query, data=data
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise VerificationError(f"Etherscan request failed: {exc}") from exc
        return response.json()

    @staticmethod
    def _result(
        record: DeploymentRecord,
        status: VerificationStatus,
        guid: str = "",
        message: str = "",
    ) -> VerificationResult:
        return VerificationResult(
            address=checksum(record.address),
            contract_name=record.name,
            status=status,
            guid=guid,
            message=message,
        )


def verify_contract(
    settings: ChainSettings,
    address: str = DEFAULT_VERIFY_ADDRESS,
    constructor_args: Sequence[Any] = (),
    client: httpx.Client | None = None,
) -> VerificationResult:
    """Verify the contract at *address* on ``settings.network``.

    Raises
    ------
    VerificationError
        On development networks, where there is nothing to verify against.
    """
    if settings.is_development:
        raise VerificationError(
            f"'{settings.network}' is a development network; verification needs a live network"
        )
    logger.info("Verifying contract at %s...", address)
    with EtherscanVerifier(settings, client=client) as verifier:
        result = verifier.verify(address, constructor_args)
    logger.info("Contract verified.")
    return result
