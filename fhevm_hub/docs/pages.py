"""GitBook page generation from the example registry.

Every page is built from sorted registry data only, so regenerating from an
unchanged registry rewrites byte-identical files.
"""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from pathlib import Path

from fhevm_hub.kernel.config.models import HubConfig
from fhevm_hub.kernel.exceptions import ResourceNotFoundError
from fhevm_hub.kernel.logging import get_logger
from fhevm_hub.kernel.text import extract_h1, read_source, title_case, unique
from fhevm_hub.registry.deploy_plan import render_deploy_arg
from fhevm_hub.registry.models import (
    DIFFICULTY_ORDER,
    DeployStep,
    ExampleRecord,
    Registry,
)

logger = get_logger(__name__)

_PITFALL_TEST = re.compile(r"""\bit\s*\(\s*(["'`])([^"'`]*pitfall[^"'`]*)\1""", re.IGNORECASE)
_PITFALL_MARKER = re.compile(r"\s*\(pitfall\)\s*", re.IGNORECASE)
_API_HEADING = re.compile(r"^#{2,3}\s+.+$", re.MULTILINE)

# Root pages the generator owns; a static page may not replace them
GENERATED_ROOT_PAGES = frozenset({"readme.md", "summary.md", "pitfalls.md", "learning-paths.md"})

NO_TEST_TEXT = "No test file available for this example."
NO_PITFALLS_TEXT = "No pitfalls are highlighted in the tests for this example."


def extract_pitfalls(test_content: str | None) -> list[str]:
    """Titles of ``it(...)`` cases mentioning "pitfall", de-duplicated.

    The literal ``(pitfall)`` marker is dropped from each title unless it is
    the whole title.
    """
    if not test_content:
        return []
    results: list[str] = []
    for match in _PITFALL_TEST.finditer(test_content):
        raw = match.group(2).strip()
        cleaned = _PITFALL_MARKER.sub("", raw).strip()
        results.append(cleaned or raw)
    return unique(results)


def extract_api_content(reference: str) -> str:
    """Reference page body from its first level-2/3 heading onward."""
    match = _API_HEADING.search(reference)
    return reference[match.start() :].strip() if match else ""


def format_chapters(chapters: list[str]) -> str:
    if not chapters:
        return "Uncategorized"
    return ", ".join(title_case(chapter) for chapter in chapters)


def render_deploy_plan(plan: list[DeployStep] | None) -> str | None:
    """Deploy plan as a Markdown table, or None when there is no plan."""
    if not plan:
        return None
    lines = ["| Step | Contract | Args | Saves As |", "| --- | --- | --- | --- |"]
    for index, step in enumerate(plan, start=1):
        args = ", ".join(render_deploy_arg(arg) for arg in step.args) if step.args else "-"
        lines.append(f"| {index} | {step.contract} | {args} | {step.save_as or '-'} |")
    return "\n".join(lines)


def code_block(language: str, content: str) -> str:
    return f"```{language}\n{content.rstrip()}\n```"


def _by_title(examples: list[ExampleRecord]) -> list[ExampleRecord]:
    return sorted(examples, key=lambda example: (example.title, example.slug))


@dataclass(frozen=True, slots=True)
class StaticPage:
    """A hand-written page copied from the static docs folder."""

    slug: str
    title: str
    source: Path


class DocsGenerator:
    """Renders the documentation tree for a registry.

    Parameters
    ----------
    registry : Registry
        Examples to document
    config : HubConfig
        Supplies the docs, static docs and project roots
    """

    def __init__(self, registry: Registry, config: HubConfig) -> None:
        self.registry = registry
        self.config = config
        self.docs_dir = config.docs_path
        self._written: list[Path] = []

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def write_doc(self, rel_path: str, content: str) -> Path:
        """Write ``content`` under the docs root with exactly one trailing newline."""
        target = self.docs_dir / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"{content.rstrip()}\n", encoding="utf-8")
        self._written.append(target)
        return target

    def copy_doc(self, rel_path: str, source: Path) -> Path:
        """Copy ``source`` under the docs root byte for byte."""
        target = self.docs_dir / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
        self._written.append(target)
        return target

    def generate(self, example_slug: str | None = None) -> list[Path]:
        """Write every page, or one example's page plus the shared indexes.

        Parameters
        ----------
        example_slug : str | None
            Restrict example pages (and category indexes) to this example

        Returns
        -------
        list[Path]
            Files written, in write order

        Raises
        ------
        ResourceNotFoundError
            If ``example_slug`` is not a known example
        """
        target: ExampleRecord | None = None
        if example_slug is not None:
            target = self.registry.by_slug.get(example_slug)
            if target is None:
                raise ResourceNotFoundError("example", example_slug, list(self.registry.by_slug))

        self._written = []
        self.docs_dir.mkdir(parents=True, exist_ok=True)

        static_pages = self.static_pages()
        self.write_doc("README.md", self.render_intro_page(static_pages))
        for page in static_pages:
            self.copy_doc(f"{page.slug}.md", page.source)

        self.write_doc("pitfalls.md", self.render_pitfalls_page())
        self.write_doc("learning-paths.md", self.render_learning_paths())

        chapters = self.registry.chapters()
        self.write_doc("chapters/README.md", self.render_chapters_index(chapters))
        for chapter, examples in chapters.items():
            self.write_doc(f"chapters/{chapter}.md", self.render_chapter_page(chapter, examples))

        for category in self.registry.category_names:
            if target is not None and category != target.category:
                continue
            examples = self.registry.categories[category]
            self.write_doc(f"{category}/README.md", self.render_category_readme(category, examples))
            for example in examples:
                if target is not None and example.slug != target.slug:
                    continue
                self.write_doc(example.doc_path, self.render_example_page(example))

        logger.info(
            "Generated {} documentation files in {}",
            len(self._written),
            self.docs_dir,
        )
        return list(self._written)

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def _read(self, path: Path | None) -> str | None:
        if path is None:
            return None
        return read_source(path)

    def _relative(self, path: Path) -> str:
        if path.is_relative_to(self.config.root):
            return path.relative_to(self.config.root).as_posix()
        return path.as_posix()

    def static_pages(self) -> list[StaticPage]:
        """Markdown files in the static docs folder, sorted by title."""
        static_dir = self.config.static_docs_path
        if not static_dir.is_dir():
            return []
        pages = []
        for source in static_dir.iterdir():
            if not source.is_file() or source.suffix != ".md":
                continue
            if source.name.lower() in GENERATED_ROOT_PAGES:
                logger.warning(
                    "Skipping static page {}: the generator writes that page", source.name
                )
                continue
            title = extract_h1(read_source(source)) or title_case(source.stem)
            pages.append(StaticPage(slug=source.stem, title=title, source=source))
        return sorted(pages, key=lambda page: (page.title, page.slug))

    def api_reference(self, example: ExampleRecord) -> str:
        reference = self.docs_dir / "reference" / example.category / f"{example.doc_name}.md"
        if not reference.is_file():
            return ""
        return extract_api_content(read_source(reference))

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def render_dependencies(self, example: ExampleRecord) -> str:
        """Bullet list of ``depends-on`` names, linked when they name a known example."""
        if not example.depends_on:
            return "None"
        lines = []
        for dependency in example.depends_on:
            linked = self.registry.by_contract.get(dependency)
            if linked is None:
                lines.append(f"- {dependency}")
                continue
            href = (
                f"{linked.doc_name}.md"
                if linked.category == example.category
                else f"../{linked.category}/{linked.doc_name}.md"
            )
            lines.append(f"- [{dependency}]({href})")
        return "\n".join(lines)

    def render_example_page(self, example: ExampleRecord) -> str:
        contract_source = read_source(example.contract_file)
        test_source = self._read(example.test_file)
        pitfalls = extract_pitfalls(test_source)

        quick_start = (
            f"npm run test:mocked -- {self._relative(example.test_file)}"
            if example.test_file
            else "npm run test:mocked"
        )
        test_tab_title = example.test_file.name if example.test_file else "Test"

        lines = [
            f"# {example.title}",
            "",
            f"> **Category**: {title_case(example.category)}"
            f" | **Difficulty**: {example.difficulty}"
            f" | **Chapters**: {format_chapters(example.chapters)}"
            f" | **Concept**: {example.concept}",
            "",
        ]
        if example.notice:
            lines.extend([example.notice, ""])
        lines.extend(
            [
                "## Why this example",
                "",
                f"This example focuses on **{example.concept}**. "
                "It is designed to be self-contained and easy to run locally.",
                "",
                "## Quick start",
                "",
                "```bash",
                "npm install",
                quick_start,
                "```",
                "",
                "## Dependencies",
                "",
                self.render_dependencies(example),
                "",
            ]
        )

        deploy_plan = render_deploy_plan(example.deploy_plan)
        if deploy_plan:
            lines.extend(["## Deployment plan", "", deploy_plan, ""])

        lines.extend(
            [
                "## Contract and test",
                "",
                "{% tabs %}",
                "",
                f'{{% tab title="{example.contract_file.name}" %}}',
                "",
                code_block("solidity", contract_source),
                "",
                "{% endtab %}",
                "",
                f'{{% tab title="{test_tab_title}" %}}',
                "",
                code_block("typescript", test_source) if test_source else NO_TEST_TEXT,
                "",
                "{% endtab %}",
                "",
                "{% endtabs %}",
                "",
                "## Pitfalls to avoid",
                "",
            ]
        )
        if pitfalls:
            lines.extend(f"- {item}" for item in pitfalls)
        else:
            lines.append(NO_PITFALLS_TEXT)

        api_content = self.api_reference(example)
        if api_content:
            lines.extend(["", "## API Reference", "", api_content])

        return "\n".join(lines)

    def render_category_readme(self, category: str, examples: list[ExampleRecord]) -> str:
        lines = [
            f"# {title_case(category)} Examples",
            "",
            "Each example in this category is designed to be self-contained and runnable. "
            "Start with Beginner examples if you are new to fhEVM.",
        ]
        for difficulty in DIFFICULTY_ORDER:
            tier = [example for example in examples if example.difficulty == difficulty]
            if not tier:
                continue
            lines.extend(["", f"### {difficulty}", ""])
            lines.extend(
                f"- **[{example.title}]({example.doc_name}.md)** - {example.concept}"
                for example in _by_title(tier)
            )
        return "\n".join(lines)

    def render_intro_page(self, static_pages: list[StaticPage] | None = None) -> str:
        if static_pages is None:
            static_pages = self.static_pages()
        lines = [
            "# fhEVM Examples",
            "",
            "Welcome to the fhEVM Examples library. These examples span multiple categories "
            "and are designed to help you learn privacy-preserving smart contract patterns "
            "step by step.",
            "",
            "## Start here",
            "",
        ]
        lines.extend(f"- **[{page.title}]({page.slug}.md)**" for page in static_pages)
        lines.extend(
            [
                "- **[Common Pitfalls](pitfalls.md)**",
                "- **[Learning Paths](learning-paths.md)**",
                "- Want to browse by topic? See **[Chapters](chapters/README.md)**.",
                "",
                "## Example map",
            ]
        )
        for category in self.registry.category_names:
            lines.extend(
                [
                    "",
                    f"### {title_case(category)}",
                    "",
                    "| Example | Concept | Difficulty |",
                    "| --- | --- | --- |",
                ]
            )
            lines.extend(
                f"| [{example.title}](./{example.doc_path}) | {example.concept} "
                f"| {example.difficulty} |"
                for example in _by_title(self.registry.categories[category])
            )
        return "\n".join(lines)

    def render_learning_paths(self) -> str:
        lines = ["# Learning Paths", "", "Use this page to pick examples by difficulty."]
        for difficulty in DIFFICULTY_ORDER:
            tier = [ex for ex in self.registry.examples if ex.difficulty == difficulty]
            lines.extend(["", f"## {difficulty}", ""])
            if not tier:
                lines.append("No examples yet.")
                continue
            lines.extend(
                f"- [{example.title}](./{example.doc_path}) - {example.concept}"
                for example in _by_title(tier)
            )
        return "\n".join(lines)

    def render_chapters_index(self, chapters: dict[str, list[ExampleRecord]]) -> str:
        lines = ["# Chapters", "", "Use these chapter pages to explore examples by topic.", ""]
        lines.extend(f"- [{title_case(chapter)}](./{chapter}.md)" for chapter in sorted(chapters))
        return "\n".join(lines)

    def render_chapter_page(self, chapter: str, examples: list[ExampleRecord]) -> str:
        lines = [f"# {title_case(chapter)}", ""]
        lines.extend(
            f"- [{example.title}](../{example.doc_path}) - {example.concept}"
            for example in _by_title(examples)
        )
        return "\n".join(lines)

    def render_pitfalls_page(self) -> str:
        entries = []
        for example in self.registry.examples:
            pitfalls = extract_pitfalls(self._read(example.test_file))
            if not pitfalls:
                continue
            items = "\n".join(f"  - {item}" for item in pitfalls)
            entries.append(f"- **[{example.title}](./{example.doc_path})**\n{items}")

        body = "\n\n".join(entries) if entries else "No pitfalls captured yet."
        return (
            "# Common Pitfalls\n\n"
            "This page aggregates known pitfalls called out in the tests.\n\n"
            f"{body}"
        )


def generate_docs(
    registry: Registry, config: HubConfig, example_slug: str | None = None
) -> list[Path]:
    """Regenerate the documentation tree; see :meth:`DocsGenerator.generate`."""
    return DocsGenerator(registry, config).generate(example_slug)
