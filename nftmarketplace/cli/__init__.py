"""nftmarket CLI: Typer-based command-line interface.

Provides the ``nftmarket`` command with subcommands for minting and
listing NFTs, moving blocks on development chains, and verifying
contract source on Etherscan.

All output uses Rich for formatted terminal display.
"""
