"""Documentation generation commands."""

from __future__ import annotations

from typing import Annotated

import typer

from fhevm_hub.cli.utils import console, get_config, get_registry, handle_errors
from fhevm_hub.docs import generate_docs, generate_summary, write_catalog

app = typer.Typer(help="Generate the GitBook documentation")


@app.command("build")
def build_docs(
    ctx: typer.Context,
    example: Annotated[
        str | None,
        typer.Option("--example", "-e", help="Only regenerate this example's page"),
    ] = None,
) -> None:
    """Regenerate example pages and indexes, then SUMMARY.md.

    Examples
    --------
    fhevm-hub docs build
    fhevm-hub docs build --example fhe-counter
    """
    with handle_errors():
        config = get_config(ctx)
        written = generate_docs(get_registry(ctx), config, example)
        generate_summary(config.docs_path)

    target = f"for {example}" if example else "from registry"
    console.print(f"[green]✓[/green] Generated {len(written)} pages {target}")


@app.command("summary")
def build_summary(ctx: typer.Context) -> None:
    """Regenerate SUMMARY.md (and reference indexes) from the docs folder."""
    with handle_errors():
        summary = generate_summary(get_config(ctx).docs_path)
    console.print(f"[green]✓[/green] Generated {summary}")


@app.command("catalog")
def build_catalog(ctx: typer.Context) -> None:
    """Write catalog.json describing every category and example."""
    with handle_errors():
        config = get_config(ctx)
        catalog = write_catalog(get_registry(ctx), config.docs_path)
    console.print(f"[green]✓[/green] Generated {catalog}")
