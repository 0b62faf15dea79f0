"""Command-line interface for fhevm-hub."""

from fhevm_hub.cli.main import app, main

__all__ = ["app", "main"]
