"""CLI subcommands."""

from __future__ import annotations

from nftmarketplace.config import ChainSettings, config


def settings_for(network: str | None) -> ChainSettings:
    """Return the global settings, switched to *network* when given."""
    if network is None or network == config.network:
        return config
    return config.model_copy(update={"network": network})
