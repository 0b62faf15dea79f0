"""fhevm-hub CLI - Main entrypoint."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from fhevm_hub import __version__
from fhevm_hub.cli.commands import (
    clean_cmd,
    create_cmd,
    deps_cmd,
    docs_cmd,
    examples_cmd,
    quickstart_cmd,
    template_cmd,
    validate_cmd,
)
from fhevm_hub.cli.utils import handle_errors
from fhevm_hub.kernel.config import load_config
from fhevm_hub.kernel.logging import configure_logging

LOG_LEVELS = {
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "warning": "WARNING",
    "error": "ERROR",
}

app = typer.Typer(
    name="fhevm-hub",
    help="fhevm-hub - Registry, docs and scaffolding for fhEVM example contracts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()

app.add_typer(examples_cmd.app, name="examples", help="Inspect the example registry")
app.add_typer(create_cmd.app, name="create", help="Generate standalone example repositories")
app.add_typer(docs_cmd.app, name="docs", help="Generate documentation")
app.add_typer(validate_cmd.app, name="validate", help="Validation commands")
app.add_typer(template_cmd.app, name="template", help="Manage the project template")
app.add_typer(deps_cmd.app, name="deps", help="Sync dependency versions")
app.command("quickstart")(quickstart_cmd.quickstart)
app.command("clean")(clean_cmd.clean)


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    root: Path | None = typer.Option(None, "--root", help="Hub repository root (default: cwd)"),
    config_path: Path | None = typer.Option(
        None, "--config", help="Path to pyproject.toml or fhevm-hub.toml"
    ),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Suppress non-error output"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable verbose logging"),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level: debug|info|warn|error"
    ),
    json_out: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
    yaml_out: bool = typer.Option(False, "--yaml", help="Output machine-readable YAML"),
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit"),
) -> None:
    """fhevm-hub - fhEVM example registry and generators.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if version:
        console.print(f"[bold blue]fhevm-hub[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()

    if ctx.obj is None:
        ctx.obj = {}

    output_format = "pretty"
    if json_out:
        output_format = "json"
    elif yaml_out:
        output_format = "yaml"

    hub_root = (root or Path.cwd()).resolve()
    with handle_errors():
        config = load_config(hub_root, config_path)

    effective_level = LOG_LEVELS.get((log_level or "").lower(), config.logging.level)
    if quiet:
        effective_level = "ERROR"
    elif verbose:
        effective_level = "DEBUG"

    configure_logging(
        level=effective_level,
        format=config.logging.format,
        output_file=config.logging.output_file,
        force_reconfigure=True,
    )

    ctx.obj.update({
        "root": hub_root,
        "config_path": config_path,
        "config": config,
        "quiet": quiet,
        "verbose": verbose,
        "output_format": output_format,
        "log_level": effective_level,
        "version": __version__,
    })


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
