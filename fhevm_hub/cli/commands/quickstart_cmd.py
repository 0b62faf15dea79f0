"""One-shot quickstart: scaffold, install and test a single example."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fhevm_hub.cli.utils import console, get_config, get_registry, handle_errors, resolve_output
from fhevm_hub.kernel.exceptions import ResourceNotFoundError
from fhevm_hub.kernel.process import run_command
from fhevm_hub.scaffold import ProjectScaffolder, ensure_template_dir

DEFAULT_SLUG = "fhe-counter"
QUICKSTART_DIR = "quickstart"


def quickstart(
    ctx: typer.Context,
    slug: Annotated[str, typer.Argument(help="Example slug")] = DEFAULT_SLUG,
    output: Annotated[
        Path | None,
        typer.Argument(help="Output directory (default: test-output/quickstart/<slug>)"),
    ] = None,
) -> None:
    """Create an example repository, install it and run its tests.

    Examples
    --------
    fhevm-hub quickstart
    fhevm-hub quickstart fhe-add ./fhe-add
    """
    with handle_errors():
        config = get_config(ctx)
        registry = get_registry(ctx)
        example = registry.by_slug.get(slug)
        if example is None:
            raise ResourceNotFoundError("example", slug, list(registry.by_slug))

        output_dir = resolve_output(output, config.validate_path / QUICKSTART_DIR / slug)
        console.print(f"Quickstart: [cyan]{slug}[/cyan]")
        console.print(f"Output: {output_dir}", highlight=False)

        template_dir = ensure_template_dir(config)
        ProjectScaffolder(config, template_dir).scaffold_example(example, output_dir)
        run_command(["npm", "install"], cwd=output_dir)
        run_command(["npm", "run", "test:mocked"], cwd=output_dir)

    console.print("[green]✓[/green] Quickstart complete.")
