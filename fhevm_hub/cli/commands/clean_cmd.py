"""Removal of generated artifacts."""

from __future__ import annotations

import shutil

import typer

from fhevm_hub.cli.utils import console, get_config, handle_errors


def clean(ctx: typer.Context) -> None:
    """Remove generated repositories, validation output and API reference docs."""
    with handle_errors():
        config = get_config(ctx)
        targets = [config.output_path, config.validate_path, config.docs_path / "reference"]

    removed = 0
    for target in targets:
        if not target.exists():
            continue
        shutil.rmtree(target)
        removed += 1
        label = target.relative_to(config.root) if target.is_relative_to(config.root) else target
        console.print(f"Removed {label}", highlight=False)

    if not removed:
        console.print("[dim]Nothing to clean[/dim]")
