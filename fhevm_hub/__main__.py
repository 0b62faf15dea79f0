"""Entry point for ``python -m fhevm_hub``."""

from __future__ import annotations


def main() -> None:
    from fhevm_hub.cli import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
