"""Tests for fhevm_hub.docs.pages."""

import pytest

from fhevm_hub.docs.pages import (
    NO_PITFALLS_TEXT,
    NO_TEST_TEXT,
    DocsGenerator,
    extract_api_content,
    extract_pitfalls,
    format_chapters,
    generate_docs,
    render_deploy_plan,
)
from fhevm_hub.kernel.config import HubConfig
from fhevm_hub.kernel.exceptions import ResourceNotFoundError
from fhevm_hub.registry import build_registry, parse_deploy_plan


def read_tree(root):
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


class TestExtractPitfalls:
    def test_dedupes_and_strips_marker(self):
        """N distinct pitfall titles plus M duplicates yield N entries."""
        content = (
            'it("forgets allowThis (pitfall)", async () => {});\n'
            "it('PITFALL: reading without permission', async () => {});\n"
            'it("forgets allowThis (pitfall)", async () => {});\n'
            'it("forgets allowThis (pitfall)", async () => {});\n'
            "it(`pitfall with template literal`, async () => {});\n"
            'it("not interesting", async () => {});\n'
            'describe("pitfall suite", () => {});\n'
        )
        assert extract_pitfalls(content) == [
            "forgets allowThis",
            "PITFALL: reading without permission",
            "pitfall with template literal",
        ]

    def test_marker_only_title_is_kept(self):
        assert extract_pitfalls('it("(pitfall)", () => {})') == ["(pitfall)"]

    @pytest.mark.parametrize("content", [None, "", 'it("works", () => {})'])
    def test_nothing_to_extract(self, content):
        assert extract_pitfalls(content) == []


def test_extract_api_content():
    reference = "# FHECounter\n\nGenerated.\n\n## Functions\n\n### increment\n"
    assert extract_api_content(reference) == "## Functions\n\n### increment"
    assert extract_api_content("# Only a title") == ""


def test_format_chapters():
    assert format_chapters([]) == "Uncategorized"
    assert format_chapters(["access-control", "compliance"]) == "Access Control, Compliance"


def test_render_deploy_plan_uses_sigils():
    plan = parse_deploy_plan(
        '[{"contract":"Foo","saveAs":"f"},'
        '{"contract":"Bar","args":["@f",1,"$deployer","#Date.now()","name"]}]'
    )
    table = render_deploy_plan(plan)
    assert table is not None
    assert table.splitlines() == [
        "| Step | Contract | Args | Saves As |",
        "| --- | --- | --- | --- |",
        "| 1 | Foo | - | f |",
        '| 2 | Bar | @f, 1, $deployer, #Date.now(), "name" | - |',
    ]
    assert render_deploy_plan(None) is None


class TestGenerate:
    """Full documentation tree."""

    def test_writes_expected_files(self, config, registry):
        written = generate_docs(registry, config)
        docs = config.docs_path
        rel = {path.relative_to(docs).as_posix() for path in written}

        assert rel == {
            "README.md",
            "pitfalls.md",
            "learning-paths.md",
            "chapters/README.md",
            "chapters/access-control.md",
            "chapters/arithmetic.md",
            "chapters/compliance.md",
            "chapters/encryption.md",
            "chapters/identity.md",
            "basic/README.md",
            "basic/EncryptedAddExample.md",
            "basic/FHECounter.md",
            "identity/README.md",
            "identity/ComplianceRules.md",
            "identity/IdentityRegistry.md",
        }
        for path in written:
            assert path.read_text().endswith("\n")
            assert not path.read_text().endswith("\n\n")

    def test_idempotent(self, config, registry):
        """Two runs over an unchanged registry produce byte-identical files."""
        generate_docs(registry, config)
        first = read_tree(config.docs_path)
        generate_docs(build_registry(config), config)
        assert read_tree(config.docs_path) == first

    def test_static_pages_are_copied(self, config, registry, write_file):
        write_file(config.static_docs_path / "getting-started.md", "# Getting Started\n\nHello.\n")
        write_file(config.static_docs_path / "faq.md", "No heading here.\n")
        generate_docs(registry, config)

        assert (config.docs_path / "getting-started.md").read_text() == (
            "# Getting Started\n\nHello.\n"
        )
        intro = (config.docs_path / "README.md").read_text()
        assert "- **[Faq](faq.md)**" in intro
        assert intro.index("[Faq]") < intro.index("[Getting Started]")

    def test_static_page_keeps_exact_bytes(self, config, registry, write_file):
        content = "# Notes\n\nBody\n\n\n"
        write_file(config.static_docs_path / "notes.md", content)
        generate_docs(registry, config)

        assert (config.docs_path / "notes.md").read_text() == content

    @pytest.mark.parametrize("name", ["README.md", "pitfalls.md", "learning-paths.md"])
    def test_static_page_cannot_replace_generated_page(
        self, config, registry, write_file, log_capture, name
    ):
        write_file(config.static_docs_path / name, "# Hand Written\n")
        generate_docs(registry, config)

        page = (config.docs_path / name).read_text()
        assert "Hand Written" not in page
        assert "[Hand Written]" not in (config.docs_path / "README.md").read_text()
        warnings = [r["message"] for r in log_capture if r["level"] == "WARNING"]
        assert any(name in message for message in warnings)

    def test_single_example(self, config, registry):
        written = generate_docs(registry, config, "fhe-counter")
        rel = {path.relative_to(config.docs_path).as_posix() for path in written}

        assert "basic/FHECounter.md" in rel
        assert "basic/README.md" in rel
        assert "basic/EncryptedAddExample.md" not in rel
        assert "identity/README.md" not in rel
        assert "README.md" in rel

    def test_unknown_example(self, config, registry):
        with pytest.raises(ResourceNotFoundError, match="fhe-counter"):
            generate_docs(registry, config, "nope")


class TestExamplePage:
    def test_fhe_counter_page(self, config, registry):
        page = DocsGenerator(registry, config).render_example_page(registry.by_slug["fhe-counter"])

        assert page.startswith("# FHE Counter\n")
        assert (
            "> **Category**: Basic | **Difficulty**: Beginner | "
            "**Chapters**: Encryption, Access Control | "
            "**Concept**: Encrypted increment and decrement"
        ) in page
        assert "A simple encrypted counter." in page
        assert "npm run test:mocked -- test/basic/FHECounter.test.ts" in page
        assert "## Dependencies\n\nNone" in page
        assert "## Deployment plan" not in page
        assert '{% tab title="FHECounter.sol" %}' in page
        assert "```solidity\n// SPDX-License-Identifier" in page
        assert '{% tab title="FHECounter.test.ts" %}' in page
        assert "## Pitfalls to avoid\n\n- forgetting FHE.allowThis breaks later reads\n" in page
        assert "- Pitfall: decrementing below zero wraps around" in page
        assert "## API Reference" not in page

    def test_page_without_test(self, config, registry):
        page = DocsGenerator(registry, config).render_example_page(
            registry.by_slug["encrypted-add"]
        )
        assert "```bash\nnpm install\nnpm run test:mocked\n```" in page
        assert NO_TEST_TEXT in page
        assert NO_PITFALLS_TEXT in page

    def test_dependencies_and_deploy_plan(self, config, registry):
        page = DocsGenerator(registry, config).render_example_page(
            registry.by_slug["compliance-rules"]
        )
        assert "- [IdentityRegistry](IdentityRegistry.md)" in page
        assert "## Deployment plan" in page
        assert "| 2 | ComplianceRules | @registry, $deployer, 3 | - |" in page

    def test_cross_category_dependency_link(self, config, write_file):
        write_file(
            config.contracts_path / "tokens/Wrapper.sol",
            "/// @custom:depends-on FHECounter, Unknown\ncontract Wrapper {}",
        )
        registry = build_registry(config)
        page = DocsGenerator(registry, config).render_example_page(registry.by_slug["wrapper"])
        assert "- [FHECounter](../basic/FHECounter.md)\n- Unknown" in page

    def test_api_reference_is_inlined(self, config, registry, write_file):
        write_file(
            config.docs_path / "reference/basic/FHECounter.md",
            "# FHECounter\n\nIntro.\n\n## Functions\n\n### increment\n",
        )
        page = DocsGenerator(registry, config).render_example_page(registry.by_slug["fhe-counter"])
        assert page.endswith("## API Reference\n\n## Functions\n\n### increment")


class TestIndexPages:
    def test_category_readme_groups_by_difficulty(self, config, registry):
        generator = DocsGenerator(registry, config)
        readme = generator.render_category_readme("basic", registry.categories["basic"])

        assert readme.startswith("# Basic Examples")
        assert "### Intermediate" not in readme
        assert readme.index("### Beginner") < readme.index("### Advanced")
        assert "- **[FHE Counter](FHECounter.md)** - Encrypted increment and decrement" in readme

    def test_learning_paths_order(self, config, registry):
        paths = DocsGenerator(registry, config).render_learning_paths()
        assert paths.index("## Beginner") < paths.index("## Intermediate") < paths.index(
            "## Advanced"
        )
        intermediate = paths.split("## Intermediate")[1].split("## Advanced")[0]
        assert intermediate.index("Compliance Rules") < intermediate.index("Identity Registry")

    def test_intro_page_tables(self, config, registry):
        intro = DocsGenerator(registry, config).render_intro_page()
        assert "### Identity" in intro
        assert (
            "| [Compliance Rules](./identity/ComplianceRules.md) | "
            "Compliance checks on encrypted identities | Intermediate |"
        ) in intro

    def test_pitfalls_page_omits_examples_without_pitfalls(self, config, registry):
        page = DocsGenerator(registry, config).render_pitfalls_page()
        assert "- **[FHE Counter](./basic/FHECounter.md)**" in page
        assert "  - forgetting FHE.allowThis breaks later reads" in page
        assert "Identity Registry" not in page

    def test_pitfalls_page_empty(self, config, tmp_path):
        empty = build_registry(HubConfig(root=tmp_path))
        page = DocsGenerator(empty, config).render_pitfalls_page()
        assert page.endswith("No pitfalls captured yet.")

    def test_chapter_pages(self, config, registry):
        generator = DocsGenerator(registry, config)
        chapters = registry.chapters()
        index = generator.render_chapters_index(chapters)
        assert "- [Access Control](./access-control.md)" in index

        page = generator.render_chapter_page("compliance", chapters["compliance"])
        assert page == (
            "# Compliance\n\n"
            "- [Compliance Rules](../identity/ComplianceRules.md) - "
            "Compliance checks on encrypted identities"
        )
