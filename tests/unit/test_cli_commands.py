"""Unit tests for the CLI — Typer command registration and basic behavior.

Exercises command registration, help output and the local-network paths
via typer.testing.CliRunner.
"""

from __future__ import annotations

import importlib

import pytest
from typer.testing import CliRunner
from web3.exceptions import Web3RPCError

from nftmarketplace.cli.app import app
from nftmarketplace.config import config

runner = CliRunner()


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    """The CLI must register all expected commands and show help."""

    def test_no_args_shows_help(self):
        """Running 'nftmarket' with no args should show help (exit code 0 or 2)."""
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_flag(self):
        """--help must list every command."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "mint-and-list" in result.output
        assert "mint-and-list-and-mine" in result.output
        assert "verify" in result.output

    def test_mine_command_options(self):
        result = runner.invoke(app, ["mint-and-list-and-mine", "--help"])
        assert result.exit_code == 0
        assert "--blocks" in result.output
        assert "--sleep-ms" in result.output


# ---------------------------------------------------------------------------
# Test: mint-and-list on the in-process chain
# ---------------------------------------------------------------------------


class TestMintAndListCommand:
    def test_lists_on_local_network(self):
        result = runner.invoke(app, ["mint-and-list", "--network", "local"])
        assert result.exit_code == 0, result.output
        assert "Listed!" in result.output
        assert "0.1 ETH" in result.output

    def test_custom_price(self):
        result = runner.invoke(app, ["mint-and-list", "--network", "local", "--price", "0.5"])
        assert result.exit_code == 0, result.output
        assert "0.5 ETH" in result.output

    def test_zero_price_fails(self):
        result = runner.invoke(app, ["mint-and-list", "--network", "local", "--price", "0"])
        assert result.exit_code == 1
        assert "PriceMustBeAboveZero" in result.output

    def test_and_mine(self):
        result = runner.invoke(
            app,
            ["mint-and-list-and-mine", "--network", "local", "--blocks", "2", "--sleep-ms", "0"],
        )
        assert result.exit_code == 0, result.output
        assert "Listed!" in result.output

    def test_unreachable_network_fails(self):
        result = runner.invoke(app, ["mint-and-list", "--network", "nowhere"])
        assert result.exit_code == 1

    def test_node_error_fails_cleanly(self, monkeypatch: pytest.MonkeyPatch):
        def rejected(*args, **kwargs):
            raise Web3RPCError("nonce too low")

        module = importlib.import_module("nftmarketplace.cli.commands.mint_and_list")
        monkeypatch.setattr(module, "mint_and_list", rejected)
        result = runner.invoke(app, ["mint-and-list", "--network", "local"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "nonce too low" in result.output


# ---------------------------------------------------------------------------
# Test: verify
# ---------------------------------------------------------------------------


class TestVerifyCommand:
    def test_refused_on_development_network(self):
        result = runner.invoke(app, ["verify", "--network", "local"])
        assert result.exit_code == 1
        assert "development" in result.output

    def test_requires_api_key(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(config, "etherscan_api_key", "")
        result = runner.invoke(app, ["verify", "--network", "sepolia"])
        assert result.exit_code == 1
        assert "ETHERSCAN_API_KEY" in result.output
