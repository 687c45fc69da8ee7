"""``nftmarket verify [ADDRESS]`` — verify contract source on Etherscan."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.panel import Panel

from nftmarketplace.cli.commands import settings_for
from nftmarketplace.core.errors import DeploymentNotFoundError, VerificationError
from nftmarketplace.models.verification import VerificationStatus
from nftmarketplace.scripts.verify import DEFAULT_VERIFY_ADDRESS, verify_contract

console = Console()
logger = logging.getLogger(__name__)


def verify_cmd(
    address: str = typer.Argument(
        DEFAULT_VERIFY_ADDRESS,
        help="Address of the deployed contract.",
    ),
    args: list[str] = typer.Option(
        [],
        "--arg",
        "-a",
        help="Constructor argument; repeat in declaration order.",
    ),
    network: str = typer.Option(
        None,
        "--network",
        "-n",
        help="Network the contract lives on (defaults to NFTMARKET_NETWORK).",
    ),
) -> None:
    """Verify the source of a deployed contract on Etherscan.

    Compiler input and version are read from the contract's deployment
    record.  Development networks are refused.
    """
    settings = settings_for(network)
    try:
        result = verify_contract(settings, address, args)
    except (VerificationError, DeploymentNotFoundError, KeyError, ValueError) as exc:
        logger.error("Verification failed: %s", exc)
        console.print(f"[bold red]Verification failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if result.status is VerificationStatus.ALREADY_VERIFIED:
        headline = "[bold yellow]Already verified[/bold yellow]"
    else:
        headline = "[bold green]Verified![/bold green]"
    lines = [
        headline,
        "",
        f"[bold]Network:[/bold]  {settings.network}",
        f"[bold]Contract:[/bold] {result.contract_name}",
        f"[bold]Address:[/bold]  {result.address}",
    ]
    if result.guid:
        lines.append(f"[bold]GUID:[/bold]     {result.guid}")
    console.print(
        Panel(
            "\n".join(lines),
            title="[bold]Etherscan Verification[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
