"""Faucet feature module for the Aptos wallet core."""

from aptos_wallet.features.faucet.service import FaucetService

__all__ = ["FaucetService"]
