"""Validation commands: annotation tags and end-to-end example builds."""

from __future__ import annotations

import shutil
from typing import Annotated

import typer

from fhevm_hub.cli.utils import console, get_config, get_registry, handle_errors
from fhevm_hub.kernel.exceptions import ResourceNotFoundError
from fhevm_hub.kernel.process import run_command
from fhevm_hub.registry import validate_contract_tags
from fhevm_hub.scaffold import ProjectScaffolder

app = typer.Typer(help="Validate contracts and generated repositories")

VALIDATE_ALL_DIR = "validate-all"
NO_HOOKS_ENV = {"HUSKY": "0"}


@app.command("tags")
def validate_tags(ctx: typer.Context) -> None:
    """Check that every example contract carries the required NatSpec tags.

    All files are checked before reporting; the exit code is 1 if any file
    is missing a tag.
    """
    with handle_errors():
        config = get_config(ctx)
        report = validate_contract_tags(config)

    if report.is_clean:
        console.print(
            f"[green]✓[/green] NatSpec tag validation passed for "
            f"{len(report.checked_files)} contract files."
        )
        return

    console.print("[red]Missing required NatSpec tags:[/red]")
    for violation in report.violations:
        console.print(f"- {violation.describe(config.root)}", highlight=False, soft_wrap=True)
    raise typer.Exit(1)


@app.command("all")
def validate_all(
    ctx: typer.Context,
    examples: Annotated[
        str | None,
        typer.Option("--examples", help="Comma-separated slugs (default: every example)"),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", min=1, help="Validate at most N examples"),
    ] = None,
) -> None:
    """Scaffold each example, install its dependencies and run its tests.

    Examples
    --------
    fhevm-hub validate all
    fhevm-hub validate all --examples fhe-counter,fhe-add
    """
    with handle_errors():
        config = get_config(ctx)
        registry = get_registry(ctx)

        slugs = (
            [slug.strip() for slug in examples.split(",") if slug.strip()]
            if examples
            else [example.slug for example in registry]
        )
        for slug in slugs:
            if slug not in registry.by_slug:
                raise ResourceNotFoundError("example", slug, list(registry.by_slug))
        if limit is not None:
            slugs = slugs[:limit]

        output_root = config.validate_path / VALIDATE_ALL_DIR
        if output_root.exists():
            shutil.rmtree(output_root)
        output_root.mkdir(parents=True)

        scaffolder = ProjectScaffolder(config)
        for slug in slugs:
            destination = output_root / slug
            scaffolder.scaffold_example(registry.by_slug[slug], destination)
            run_command(["npm", "install"], cwd=destination, env=NO_HOOKS_ENV)
            run_command(["npm", "run", "test:mocked"], cwd=destination, env=NO_HOOKS_ENV)

    console.print(f"[green]✓[/green] Validated {len(slugs)} examples.")
