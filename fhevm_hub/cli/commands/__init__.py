"""CLI command modules."""

from . import (
    clean_cmd,
    create_cmd,
    deps_cmd,
    docs_cmd,
    examples_cmd,
    quickstart_cmd,
    template_cmd,
    validate_cmd,
)

__all__ = [
    "clean_cmd",
    "create_cmd",
    "deps_cmd",
    "docs_cmd",
    "examples_cmd",
    "quickstart_cmd",
    "template_cmd",
    "validate_cmd",
]
