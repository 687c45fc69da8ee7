"""``nftmarket mint-and-list`` and ``nftmarket mint-and-list-and-mine``.

Mint a BasicNft, approve the marketplace and list the token.  The
``-and-mine`` variant then advances a development chain so that
listeners watching the marketplace see the listing confirmed.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.panel import Panel
from web3.exceptions import Web3Exception

from nftmarketplace.chain import connect
from nftmarketplace.cli.commands import settings_for
from nftmarketplace.core.errors import ChainError, ContractRevert, DeploymentNotFoundError
from nftmarketplace.core.units import format_ether
from nftmarketplace.scripts.mint_and_list import (
    MintAndListResult,
    mint_and_list,
    mint_and_list_and_mine,
)

console = Console()
logger = logging.getLogger(__name__)

_FAILURES = (
    ContractRevert,
    ChainError,
    DeploymentNotFoundError,
    KeyError,
    ValueError,
    ArithmeticError,
    Web3Exception,
)


def _print_result(result: MintAndListResult, network: str) -> None:
    console.print(
        Panel(
            "\n".join([
                "[bold green]Listed![/bold green]",
                "",
                f"[bold]Network:[/bold]     {network}",
                f"[bold]NFT:[/bold]         {result.nft_address}",
                f"[bold]Token ID:[/bold]    {result.token_id}",
                f"[bold]Price:[/bold]       {format_ether(result.price)} ETH",
                f"[bold]Seller:[/bold]      {result.seller}",
                f"[bold]Marketplace:[/bold] {result.marketplace_address}",
                f"[bold]Tx:[/bold]          {result.list_receipt.transaction_hash}",
                f"[bold]Block:[/bold]       {result.block_number}",
            ]),
            title="[bold]Mint & List[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )


def mint_and_list_cmd(
    price: str = typer.Option(
        None,
        "--price",
        "-p",
        help="Listing price in ETH (defaults to NFTMARKET_LIST_PRICE_ETH).",
    ),
    network: str = typer.Option(
        None,
        "--network",
        "-n",
        help="Network to run against (defaults to NFTMARKET_NETWORK).",
    ),
) -> None:
    """Mint a BasicNft and list it on the NftMarketplace."""
    settings = settings_for(network)
    try:
        chain = connect(settings)
        result = mint_and_list(
            chain,
            price or settings.list_price_eth,
            confirmations=settings.resolved_confirmations,
        )
    except _FAILURES as exc:
        logger.error("mint-and-list failed: %s", exc)
        console.print(f"[bold red]Mint and list failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    _print_result(result, settings.network)


def mint_and_list_and_mine_cmd(
    price: str = typer.Option(
        None,
        "--price",
        "-p",
        help="Listing price in ETH (defaults to NFTMARKET_LIST_PRICE_ETH).",
    ),
    blocks: int = typer.Option(
        None,
        "--blocks",
        "-b",
        min=0,
        help="Blocks to mine after listing (defaults to NFTMARKET_MINE_BLOCKS).",
    ),
    sleep_ms: int = typer.Option(
        None,
        "--sleep-ms",
        min=0,
        help="Pause between mined blocks in ms (defaults to NFTMARKET_MINE_SLEEP_MS).",
    ),
    network: str = typer.Option(
        None,
        "--network",
        "-n",
        help="Network to run against (defaults to NFTMARKET_NETWORK).",
    ),
) -> None:
    """Mint, list, then move blocks on a development chain."""
    settings = settings_for(network)
    try:
        chain = connect(settings)
        result = mint_and_list_and_mine(
            chain,
            price or settings.list_price_eth,
            blocks=settings.mine_blocks if blocks is None else blocks,
            sleep_ms=settings.mine_sleep_ms if sleep_ms is None else sleep_ms,
            confirmations=settings.resolved_confirmations,
        )
    except _FAILURES as exc:
        logger.error("mint-and-list-and-mine failed: %s", exc)
        console.print(f"[bold red]Mint and list failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if not chain.is_development:
        console.print(f"[dim]{settings.network} is not a development chain; no blocks mined.[/dim]")
    _print_result(result, settings.network)
