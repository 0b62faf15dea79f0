"""Dependency sync between the hub and generated repositories."""

from __future__ import annotations

import typer
from rich.table import Table

from fhevm_hub.cli.utils import console, get_config, handle_errors
from fhevm_hub.scaffold import apply_dependency_updates, check_dependencies
from fhevm_hub.scaffold.deps import find_generated_repos, hub_versions

app = typer.Typer(help="Check or sync tracked dependency versions")


@app.command("check")
def check(ctx: typer.Context) -> None:
    """Show tracked dependency versions that differ from the hub's package.json."""
    with handle_errors():
        config = get_config(ctx)
        versions = hub_versions(config)
        repos = find_generated_repos(config.output_path)
        drifts = check_dependencies(config)

    table = Table(title="Hub dependency versions", show_header=True)
    table.add_column("Package", style="cyan")
    table.add_column("Version", style="green")
    for package, version in versions.items():
        table.add_row(package, version)
    console.print(table)

    if not repos:
        console.print(f"No generated repos found in {config.output_dir}/")
        return
    if not drifts:
        console.print(f"[green]✓[/green] All {len(repos)} generated repos are up to date")
        return

    outdated = Table(title="Outdated dependencies", show_header=True)
    outdated.add_column("Repo", style="cyan")
    outdated.add_column("Package")
    outdated.add_column("Current", style="red")
    outdated.add_column("Hub", style="green")
    for drift in drifts:
        outdated.add_row(drift.repo.name, drift.package, drift.current, drift.expected)
    console.print(outdated)
    console.print("Run [bold]fhevm-hub deps apply[/bold] to update, or regenerate the repos.")


@app.command("apply")
def apply(ctx: typer.Context) -> None:
    """Rewrite tracked dependency versions in every generated repository."""
    with handle_errors():
        updated = apply_dependency_updates(get_config(ctx))

    for repo in updated:
        console.print(f"  [green]✓[/green] Updated {repo.name}", highlight=False)
    console.print(f"{len(updated)} repo(s) updated. Run 'npm install' in each to apply.")
