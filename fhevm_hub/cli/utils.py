"""CLI helper utilities for fhevm-hub commands."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Protocol

import typer
import yaml
from rich.console import Console

from fhevm_hub.kernel.config import HubConfig, load_config
from fhevm_hub.kernel.exceptions import HubError
from fhevm_hub.registry import Registry, build_registry


class ContextProtocol(Protocol):
    """Protocol for common interface between Click and Typer contexts."""

    @property
    def obj(self) -> dict[str, Any] | None: ...


console = Console()
err_console = Console(stderr=True)


def output_format(ctx: ContextProtocol | None) -> str:
    settings = getattr(ctx, "obj", None) if ctx is not None else None
    if isinstance(settings, dict):
        return settings.get("output_format", "pretty")
    return "pretty"


def print_output(obj: Any, ctx: ContextProtocol | None = None) -> None:
    """Print `obj` according to `ctx.obj['output_format']`.

    If ctx is None or no format specified, pretty-print using rich.console.
    """
    fmt = output_format(ctx)
    if fmt == "json":
        typer.echo(json.dumps(obj, default=str, indent=2))
    elif fmt == "yaml":
        typer.echo(yaml.safe_dump(obj, sort_keys=False))
    elif isinstance(obj, (str, int, float)):
        typer.echo(str(obj))
    else:
        console.print(obj)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn hub errors into a red diagnostic and exit code 1."""
    try:
        yield
    except HubError as e:
        err_console.print(f"[red]Error:[/red] {e}", highlight=False)
        raise typer.Exit(1) from e


def get_config(ctx: typer.Context) -> HubConfig:
    """The configuration loaded by the root callback (loaded on demand otherwise)."""
    settings = ctx.find_root().obj or {}
    config = settings.get("config")
    if config is None:
        config = load_config(Path(settings.get("root") or Path.cwd()), settings.get("config_path"))
        settings["config"] = config
    return config


def get_registry(ctx: typer.Context) -> Registry:
    return build_registry(get_config(ctx))


def resolve_output(output: Path | None, default: Path) -> Path:
    """Explicit outputs are relative to the working directory; defaults live under the hub."""
    if output is None:
        return default
    return output.resolve()
