"""Standalone repository creation commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from fhevm_hub.cli.utils import console, get_config, get_registry, handle_errors, resolve_output
from fhevm_hub.kernel.exceptions import ResourceNotFoundError
from fhevm_hub.scaffold import ProjectScaffolder

app = typer.Typer(help="Create standalone example repositories")


def _print_next_steps(output_dir: Path) -> None:
    table = Table(title="Next Steps", show_header=False, box=None)
    table.add_row("1.", f"cd [cyan]{output_dir}[/cyan]")
    table.add_row("2.", "[yellow]npm install[/yellow]")
    table.add_row("3.", "[yellow]npm run test:mocked[/yellow]")
    console.print(table)


@app.command("example")
def create_example(
    ctx: typer.Context,
    slug: Annotated[str, typer.Argument(help="Example slug, e.g. fhe-counter")],
    output: Annotated[
        Path | None,
        typer.Argument(help="Output directory (default: output/<slug>)"),
    ] = None,
) -> None:
    """Create a standalone, forkable repository for one example.

    Examples
    --------
    fhevm-hub create example fhe-counter
    fhevm-hub create example fhe-counter ./my-counter
    """
    with handle_errors():
        config = get_config(ctx)
        registry = get_registry(ctx)
        example = registry.by_slug.get(slug)
        if example is None:
            raise ResourceNotFoundError("example", slug, list(registry.by_slug))

        output_dir = resolve_output(output, config.output_path / slug)
        result = ProjectScaffolder(config).scaffold_example(example, output_dir)

    console.print(Panel(f"[green]✓ Example '{slug}' created in {output_dir}[/green]"))
    if result.skipped:
        console.print(f"[yellow]{len(result.skipped)} referenced file(s) were missing[/yellow]")
    _print_next_steps(output_dir)


@app.command("category")
def create_category(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Category name, e.g. basic")],
    output: Annotated[
        Path | None,
        typer.Argument(help="Output directory (default: output/category-<name>)"),
    ] = None,
) -> None:
    """Create one repository per example of a category, plus bundle docs.

    Examples
    --------
    fhevm-hub create category basic
    """
    with handle_errors():
        config = get_config(ctx)
        registry = get_registry(ctx)
        examples = registry.categories.get(name)
        if not examples:
            raise ResourceNotFoundError("category", name, registry.category_names)

        output_dir = resolve_output(output, config.output_path / f"category-{name}")
        results = ProjectScaffolder(config).scaffold_category(name, examples, output_dir)

    console.print(
        Panel(
            f"[green]✓ Category '{name}' ({len(results)} examples) "
            f"created in {output_dir}[/green]"
        )
    )
