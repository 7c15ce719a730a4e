"""Coin Chronicle command-line entry point."""
