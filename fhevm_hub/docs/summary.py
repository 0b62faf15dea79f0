"""SUMMARY.md generation from the emitted documentation tree.

Navigation reflects the files on disk, not the registry, so hand-written
pages dropped into the docs folder show up without any registry change.
"""

from __future__ import annotations

from pathlib import Path

from fhevm_hub.kernel.logging import get_logger
from fhevm_hub.kernel.text import extract_h1, read_source, title_case

logger = get_logger(__name__)

SUMMARY_FILE = "SUMMARY.md"
INDEX_FILE = "README.md"
CHAPTERS_DIR = "chapters"
REFERENCE_DIR = "reference"
RESERVED_FILES = frozenset({SUMMARY_FILE, INDEX_FILE})
RESERVED_DIRS = frozenset({CHAPTERS_DIR, REFERENCE_DIR})


def page_title(path: Path) -> str:
    """First H1 of a page, else the title-cased file (or folder) name."""
    if path.is_file():
        heading = extract_h1(read_source(path))
        if heading:
            return heading
    name = path.parent.name if path.name.lower() == INDEX_FILE.lower() else path.stem
    return title_case(name)


def _markdown_pages(directory: Path) -> list[Path]:
    """Markdown files of ``directory`` minus its README, sorted by name."""
    return sorted(
        (
            entry
            for entry in directory.iterdir()
            if entry.is_file() and entry.suffix == ".md" and entry.name.lower() != "readme.md"
        ),
        key=lambda p: p.name,
    )


def _subdirectories(directory: Path) -> list[Path]:
    return sorted(
        (e for e in directory.iterdir() if e.is_dir() and not e.name.startswith(".")),
        key=lambda p: p.name,
    )


def _link(docs_dir: Path, path: Path, depth: int, title: str | None = None) -> str:
    rel = path.relative_to(docs_dir).as_posix()
    return f"{'  ' * depth}* [{title or page_title(path)}]({rel})"


# ============================================================================
# Reference indexes
# ============================================================================


def render_reference_index(reference_dir: Path) -> str:
    sections = "\n".join(
        f"- [{title_case(section.name)}](./{section.name}/README.md)"
        for section in _subdirectories(reference_dir)
    )
    return "\n".join(
        [
            "# API Reference",
            "",
            "This section provides **function-level API documentation** for all contracts, "
            "including:",
            "- Function signatures with parameter types",
            "- NatSpec documentation (@notice, @param, @return)",
            "- Events, errors, and state variables",
            "",
            "> For **tutorials and runnable examples**, see the [Example Pages](../README.md).",
            "",
            "## By Category",
            "",
            sections or "No reference sections generated yet.",
        ]
    )


def render_reference_section(section_dir: Path) -> str:
    title = title_case(section_dir.name)
    files = "\n".join(
        f"- [{page.stem}](./{page.name})" for page in _markdown_pages(section_dir)
    )
    nested = "\n".join(
        f"- [{page.stem}](./{subdir.name}/{page.name})"
        for subdir in _subdirectories(section_dir)
        for page in _markdown_pages(subdir)
    )
    lines = [
        f"# {title} Reference",
        "",
        f"API documentation for {title} contracts.",
        "",
        f"> For tutorials, see [{title} Examples](../../{section_dir.name}/README.md).",
        "",
        "## Contracts",
        "",
        files or "No reference files generated yet.",
    ]
    if nested:
        lines.extend(["", "## Helpers & Mocks", "", nested])
    return "\n".join(lines)


def write_reference_indexes(docs_dir: Path) -> list[Path]:
    """(Re)write ``reference/README.md`` and one README per reference section."""
    reference_dir = docs_dir / REFERENCE_DIR
    if not reference_dir.is_dir():
        return []
    written = [reference_dir / INDEX_FILE]
    written[0].write_text(f"{render_reference_index(reference_dir)}\n", encoding="utf-8")
    for section_dir in _subdirectories(reference_dir):
        target = section_dir / INDEX_FILE
        target.write_text(f"{render_reference_section(section_dir)}\n", encoding="utf-8")
        written.append(target)
    return written


# ============================================================================
# Navigation
# ============================================================================


def _section_lines(docs_dir: Path, directory: Path, depth: int) -> list[str]:
    """A folder entry (its README, or its first page) followed by its nested pages."""
    pages = _markdown_pages(directory)
    index = directory / INDEX_FILE
    if index.is_file():
        lines = [_link(docs_dir, index, depth)]
    elif pages:
        head, *pages = pages
        lines = [_link(docs_dir, head, depth, title_case(directory.name))]
    else:
        return []
    lines.extend(_link(docs_dir, page, depth + 1) for page in pages)
    return lines


def _reference_lines(docs_dir: Path) -> list[str]:
    reference_dir = docs_dir / REFERENCE_DIR
    index = reference_dir / INDEX_FILE
    if not index.is_file():
        return []
    lines = [_link(docs_dir, index, 0, "API Reference")]
    for section_dir in _subdirectories(reference_dir):
        section_index = section_dir / INDEX_FILE
        lines.append(_link(docs_dir, section_index, 1, title_case(section_dir.name)))
        lines.extend(_link(docs_dir, page, 2, page.stem) for page in _markdown_pages(section_dir))
        for subdir in _subdirectories(section_dir):
            lines.extend(_link(docs_dir, page, 2, page.stem) for page in _markdown_pages(subdir))
    return lines


def render_summary(docs_dir: Path) -> str:
    """Build SUMMARY.md content for the docs tree rooted at ``docs_dir``.

    Order: introduction, top-level pages, chapters, categories, API reference.
    """
    lines = ["# Summary", ""]
    if (docs_dir / INDEX_FILE).is_file():
        lines.append(f"* [Introduction]({INDEX_FILE})")

    top_pages = [page for page in _markdown_pages(docs_dir) if page.name not in RESERVED_FILES]
    lines.extend(
        _link(docs_dir, page, 0, title)
        for title, page in sorted((page_title(page), page) for page in top_pages)
    )

    chapters_dir = docs_dir / CHAPTERS_DIR
    if chapters_dir.is_dir() and _markdown_pages(chapters_dir):
        lines.extend(_section_lines(docs_dir, chapters_dir, 0))

    for directory in _subdirectories(docs_dir):
        if directory.name in RESERVED_DIRS:
            continue
        lines.extend(_section_lines(docs_dir, directory, 0))

    lines.extend(_reference_lines(docs_dir))
    return "\n".join(lines)


def generate_summary(docs_dir: Path) -> Path:
    """Refresh reference indexes, then write ``SUMMARY.md`` at the docs root.

    Parameters
    ----------
    docs_dir : Path
        Root of the emitted documentation

    Returns
    -------
    Path
        The written SUMMARY.md
    """
    docs_dir.mkdir(parents=True, exist_ok=True)
    write_reference_indexes(docs_dir)
    target = docs_dir / SUMMARY_FILE
    target.write_text(f"{render_summary(docs_dir)}\n", encoding="utf-8")
    logger.info("Generated {}", target)
    return target
