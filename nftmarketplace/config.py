"""Runtime configuration — env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
NFTMARKET_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from nftmarketplace.networks import (
    LOCAL_NETWORK,
    NETWORKS,
    NetworkProfile,
    get_profile,
    is_development_chain,
)


class ChainSettings(BaseSettings):
    """Chain, deployment and verification settings.

    All settings can be overridden via NFTMARKET_* environment variables
    or a .env file in the project root.

    Examples
    --------
    Point the scripts at a live network::

        export NFTMARKET_NETWORK=sepolia
        export NFTMARKET_RPC_URL=https://sepolia.infura.io/v3/<key>
        export NFTMARKET_PRIVATE_KEY=0x...
        export NFTMARKET_ETHERSCAN_API_KEY=...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NFTMARKET_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Network selection; rpc_url / chain_id fall back to the network profile
    network: str = LOCAL_NETWORK
    rpc_url: str = ""
    chain_id: int | None = None
    private_key: str = ""

    # Transactions
    gas_price_gwei: float | None = None
    block_confirmations: int | None = None
    tx_timeout_seconds: int = 120

    # Deployment records (hardhat-deploy layout)
    deployments_path: Path = Path("deployments")

    # Source verification
    etherscan_api_key: str = ""
    etherscan_api_url: str = "https://api.etherscan.io/v2/api"
    verify_poll_interval_seconds: float = 5.0
    verify_max_attempts: int = 20

    # Scripts
    list_price_eth: str = "0.1"
    mine_blocks: int = 2
    mine_sleep_ms: int = 1000

    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        """Whether the selected network is a development chain."""
        return is_development_chain(self.network)

    @property
    def profile(self) -> NetworkProfile | None:
        """The known profile for the selected network, if any."""
        return NETWORKS.get(self.network)

    @property
    def resolved_chain_id(self) -> int:
        if self.chain_id is not None:
            return self.chain_id
        return get_profile(self.network).chain_id

    @property
    def resolved_rpc_url(self) -> str:
        profile = self.profile
        return self.rpc_url or (profile.rpc_url if profile else "")

    @property
    def resolved_confirmations(self) -> int:
        if self.block_confirmations is not None:
            return self.block_confirmations
        profile = self.profile
        return profile.block_confirmations if profile else 1


# Module-level singleton — import as `from nftmarketplace.config import config`
config = ChainSettings()
