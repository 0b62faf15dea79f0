"""Example registry inspection commands."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.table import Table

from fhevm_hub.cli.utils import console, get_registry, handle_errors, output_format, print_output
from fhevm_hub.kernel.exceptions import ResourceNotFoundError

app = typer.Typer(help="List and inspect registered examples")


@app.command("list")
def list_examples(
    ctx: typer.Context,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the slugs as a JSON array")
    ] = False,
) -> None:
    """List every example discovered under the contracts folder.

    Examples
    --------
    fhevm-hub examples list
    fhevm-hub examples list --json
    """
    with handle_errors():
        registry = get_registry(ctx)

    slugs = [example.slug for example in registry]
    if as_json:
        typer.echo(json.dumps(slugs, indent=2))
        return
    if output_format(ctx) != "pretty":
        print_output(slugs, ctx)
        return

    if not len(registry):
        console.print("[yellow]No examples found[/yellow]")
        return

    table = Table(title="Examples", show_header=True)
    table.add_column("Slug", style="cyan")
    table.add_column("Title")
    table.add_column("Category", style="green")
    table.add_column("Difficulty", style="yellow")
    for example in registry:
        table.add_row(example.slug, example.title, example.category, str(example.difficulty))
    console.print(table)


@app.command("categories")
def list_categories(ctx: typer.Context) -> None:
    """List example categories with their example counts."""
    with handle_errors():
        registry = get_registry(ctx)

    if output_format(ctx) != "pretty":
        print_output(registry.category_names, ctx)
        return

    for name in registry.category_names:
        console.print(f"[cyan]{name}[/cyan] ({len(registry.categories[name])} examples)")


@app.command("show")
def show_example(
    ctx: typer.Context,
    slug: Annotated[str, typer.Argument(help="Example slug, e.g. fhe-counter")],
) -> None:
    """Show the full registry record of one example."""
    with handle_errors():
        registry = get_registry(ctx)
        example = registry.by_slug.get(slug)
        if example is None:
            raise ResourceNotFoundError("example", slug, list(registry.by_slug))

    record = example.model_dump(mode="json", by_alias=True)
    if output_format(ctx) != "pretty":
        print_output(record, ctx)
        return

    table = Table(title=example.title, show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in record.items():
        if isinstance(value, list):
            value = ", ".join(str(item) for item in value) or "-"
        table.add_row(key, "-" if value is None else str(value))
    console.print(table)
