"""Deployment records and the local deploy scripts.

Records follow the hardhat-deploy directory layout so that deployments made
with JavaScript tooling can be consumed unchanged::

    deployments/
        sepolia/
            BasicNft.json                — address, abi, metadata, ...
            NftMarketplace.json
            solcInputs/
                <solcInputHash>.json     — standard-json compiler input

On the local chain, contracts are deployed by the tagged deploy scripts
below, through ``LocalChain.fixture(["all"])``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from nftmarketplace.contracts.base import LocalContract
from nftmarketplace.contracts.basic_nft import BasicNft
from nftmarketplace.contracts.nft_marketplace import NftMarketplace
from nftmarketplace.core.errors import DeploymentNotFoundError
from nftmarketplace.core.units import checksum
from nftmarketplace.models.deployments import DeploymentRecord

if TYPE_CHECKING:
    from nftmarketplace.chain.local import LocalChain

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Deployment record store
# ---------------------------------------------------------------------------

class DeploymentStore:
    """Reads and writes deployment records for one network.

    Parameters
    ----------
    root:
        The deployments root directory (``deployments/``).
    network:
        Network name; records live under ``root / network``.
    """

    def __init__(self, root: Path, network: str) -> None:
        self._dir = Path(root) / network
        self._network = network

    @property
    def directory(self) -> Path:
        return self._dir

    def load(self, name: str) -> DeploymentRecord:
        """Return the record for contract *name*.

        Raises
        ------
        DeploymentNotFoundError
            If no record file exists.
        """
        path = self._dir / f"{name}.json"
        if not path.exists():
            raise DeploymentNotFoundError(
                f"No deployment of '{name}' on {self._network} (looked in {path})"
            )
        raw = json.loads(path.read_text(encoding="utf-8"))
        return DeploymentRecord(name=name, **raw)

    def save(self, record: DeploymentRecord) -> Path:
        """Write *record* to ``<network>/<name>.json``."""
        self._dir.mkdir(parents=True, exist_ok=True)
        path = self._dir / f"{record.name}.json"
        data = record.model_dump(by_alias=True, exclude={"name"})
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.debug("Saved deployment record %s.", path)
        return path

    def list_all(self) -> list[DeploymentRecord]:
        """Return every record on this network, sorted by name."""
        if not self._dir.is_dir():
            return []
        return [self.load(path.stem) for path in sorted(self._dir.glob("*.json"))]

    def find_by_address(self, address: str) -> DeploymentRecord:
        """Return the record whose address matches *address*.

        Raises
        ------
        DeploymentNotFoundError
            If no record on this network has that address.
        """
        wanted = checksum(address)
        for record in self.list_all():
            if checksum(record.address) == wanted:
                return record
        raise DeploymentNotFoundError(
            f"No deployment at {wanted} on {self._network}"
        )

    def solc_input(self, record: DeploymentRecord) -> dict[str, Any]:
        """Return the standard-json compiler input used for *record*."""
        if not record.solc_input_hash:
            raise DeploymentNotFoundError(
                f"Deployment '{record.name}' has no solcInputHash"
            )
        path = self._dir / "solcInputs" / f"{record.solc_input_hash}.json"
        if not path.exists():
            raise DeploymentNotFoundError(f"Compiler input missing: {path}")
        return json.loads(path.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Local deploy scripts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeployScript:
    name: str
    contract_cls: type[LocalContract]
    tags: frozenset[str]


DEPLOY_SCRIPTS: tuple[DeployScript, ...] = (
    DeployScript("NftMarketplace", NftMarketplace, frozenset({"all", "nftmarketplace"})),
    DeployScript("BasicNft", BasicNft, frozenset({"all", "basicnft"})),
)


def run_deploy_scripts(chain: LocalChain, tags: Iterable[str]) -> list[str]:
    """Deploy every script matching any of *tags*; return deployed names."""
    wanted = set(tags)
    deployed = []
    for script in DEPLOY_SCRIPTS:
        if script.tags & wanted:
            logger.debug("Running deploy script for %s.", script.name)
            chain.deploy(script.name, script.contract_cls)
            deployed.append(script.name)
    if not deployed:
        logger.warning("No deploy scripts match tags %s.", sorted(wanted))
    return deployed
