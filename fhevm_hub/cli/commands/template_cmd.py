"""Project template commands."""

from __future__ import annotations

import typer

from fhevm_hub.cli.utils import console, get_config, handle_errors
from fhevm_hub.scaffold import ensure_template_dir

app = typer.Typer(help="Manage the shared Hardhat project template")


@app.command("ensure")
def ensure_template(ctx: typer.Context) -> None:
    """Locate the template, initialising submodules or cloning it if needed."""
    with handle_errors():
        template_dir = ensure_template_dir(get_config(ctx))
    console.print(f"[green]✓[/green] Template ready: {template_dir}", highlight=False)
