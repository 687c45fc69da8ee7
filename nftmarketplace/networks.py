"""Network profiles and the set of development chains.

Development chains are the ones where blocks can be mined on demand and
where source verification makes no sense.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

LOCAL_NETWORK = "local"

DEVELOPMENT_CHAINS: frozenset[str] = frozenset({LOCAL_NETWORK, "localhost"})


class NetworkProfile(BaseModel):
    """Static facts about a named network."""

    model_config = ConfigDict(frozen=True)

    name: str
    chain_id: int
    rpc_url: str = ""
    block_confirmations: int = 1
    proof_of_authority: bool = False


NETWORKS: dict[str, NetworkProfile] = {
    profile.name: profile
    for profile in (
        NetworkProfile(name=LOCAL_NETWORK, chain_id=31337),
        NetworkProfile(name="localhost", chain_id=31337, rpc_url="http://127.0.0.1:8545"),
        NetworkProfile(name="mainnet", chain_id=1, block_confirmations=6),
        NetworkProfile(name="sepolia", chain_id=11155111, block_confirmations=6),
        NetworkProfile(name="holesky", chain_id=17000, block_confirmations=6),
        NetworkProfile(name="polygon", chain_id=137, block_confirmations=6, proof_of_authority=True),
        NetworkProfile(name="polygon_amoy", chain_id=80002, block_confirmations=6, proof_of_authority=True),
        NetworkProfile(name="base", chain_id=8453, block_confirmations=6),
        NetworkProfile(name="base_sepolia", chain_id=84532, block_confirmations=6),
    )
}


def get_profile(name: str) -> NetworkProfile:
    """Return the profile for *name*.

    Raises
    ------
    KeyError
        If the network is not known.
    """
    try:
        return NETWORKS[name]
    except KeyError:
        known = ", ".join(sorted(NETWORKS))
        raise KeyError(f"Unknown network '{name}'. Known networks: {known}") from None


def is_development_chain(name: str) -> bool:
    return name in DEVELOPMENT_CHAINS
