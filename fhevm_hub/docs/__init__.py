"""Documentation generators: example pages, navigation and catalog."""

from fhevm_hub.docs.catalog import build_catalog, write_catalog
from fhevm_hub.docs.pages import DocsGenerator, extract_pitfalls, generate_docs
from fhevm_hub.docs.summary import generate_summary, render_summary

__all__ = [
    "DocsGenerator",
    "build_catalog",
    "extract_pitfalls",
    "generate_docs",
    "generate_summary",
    "render_summary",
    "write_catalog",
]
