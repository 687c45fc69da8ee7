"""Main Typer application — imports and registers all CLI commands.

Entry point: ``nftmarket`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from nftmarketplace.cli.commands.mint_and_list import (
    mint_and_list_and_mine_cmd,
    mint_and_list_cmd,
)
from nftmarketplace.cli.commands.verify import verify_cmd
from nftmarketplace.config import config
from nftmarketplace.log import init_logging

app = typer.Typer(
    name="nftmarket",
    help="NFT marketplace scripts: mint and list, move blocks, verify source.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def configure(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to NFTMARKET_LOG_LEVEL).",
    ),
) -> None:
    """Set up console logging before any subcommand runs."""
    init_logging(log_level or config.log_level)


# Register subcommands
app.command(name="mint-and-list", help="Mint a BasicNft and list it.")(mint_and_list_cmd)
app.command(
    name="mint-and-list-and-mine",
    help="Mint and list, then move blocks on a development chain.",
)(mint_and_list_and_mine_cmd)
app.command(name="verify", help="Verify contract source on Etherscan.")(verify_cmd)


def main() -> None:
    """Entry point for the ``nftmarket`` console script."""
    app()
