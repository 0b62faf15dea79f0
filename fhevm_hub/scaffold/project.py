"""Standalone repository scaffolding for one example or a whole category."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from fhevm_hub.kernel.config.models import HubConfig
from fhevm_hub.kernel.exceptions import MissingSourceFileError, OutputDirectoryNotEmptyError
from fhevm_hub.kernel.logging import get_logger
from fhevm_hub.registry.models import ExampleRecord
from fhevm_hub.scaffold.deploy_script import generate_deploy_script
from fhevm_hub.scaffold.generators import (
    HUSKY_HOOKS,
    PackageVersions,
    generate_bundle_summary,
    generate_category_readme,
    generate_example_readme,
    generate_package_json,
    read_package_versions,
    static_project_files,
)
from fhevm_hub.scaffold.template import ensure_template_dir

logger = get_logger(__name__)

PROJECT_DIRS = ("contracts", "test", "scripts", ".vscode", ".husky")
HOOK_MODE = 0o755


def assert_empty_directory(path: Path) -> None:
    """Refuse to scaffold into an existing, non-empty directory.

    Raises
    ------
    OutputDirectoryNotEmptyError
        If ``path`` exists and has any entry
    """
    if path.exists() and (not path.is_dir() or any(path.iterdir())):
        raise OutputDirectoryNotEmptyError(path)


def copy_template(template_dir: Path, destination: Path) -> None:
    """Copy the template's contents (minus ``.git``) into ``destination``."""
    for entry in template_dir.iterdir():
        if entry.name == ".git":
            continue
        target = destination / entry.name
        if entry.is_dir() and not entry.is_symlink():
            shutil.copytree(entry, target, symlinks=True, dirs_exist_ok=True)
        else:
            shutil.copy2(entry, target, follow_symlinks=False)


@dataclass(slots=True)
class ScaffoldResult:
    """What a scaffold run produced."""

    output_dir: Path
    copied: list[Path]
    skipped: list[Path]


class ProjectScaffolder:
    """Builds standalone Hardhat repositories from registry records.

    Parameters
    ----------
    config : HubConfig
        Hub configuration (root, template settings, missing-file policy)
    template_dir : Path | None
        Template to copy; resolved lazily through :func:`ensure_template_dir`
    """

    def __init__(self, config: HubConfig, template_dir: Path | None = None) -> None:
        self.config = config
        self._template_dir = template_dir
        self._versions: PackageVersions | None = None

    @property
    def template_dir(self) -> Path:
        if self._template_dir is None:
            self._template_dir = ensure_template_dir(self.config)
        return self._template_dir

    @property
    def versions(self) -> PackageVersions:
        if self._versions is None:
            self._versions = read_package_versions(self.config.root)
        return self._versions

    # ------------------------------------------------------------------
    # Source files
    # ------------------------------------------------------------------

    @staticmethod
    def source_files(example: ExampleRecord) -> list[Path]:
        files = [example.contract_file, *example.dependency_files]
        if example.test_file:
            files.append(example.test_file)
        return files

    def check_sources(self, examples: list[ExampleRecord]) -> None:
        """Under the strict policy, fail before writing anything if a source is missing."""
        if not self.config.strict_files:
            return
        for example in examples:
            for path in self.source_files(example):
                if not path.is_file():
                    raise MissingSourceFileError(path)

    def _copy_into(self, source: Path, directory: Path, result: ScaffoldResult) -> None:
        if not source.is_file():
            if self.config.strict_files:
                raise MissingSourceFileError(source)
            logger.warning("File not found, skipping: {}", source)
            result.skipped.append(source)
            return
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / source.name
        shutil.copy2(source, target)
        result.copied.append(target)
        logger.debug("Copied {}", source.name)

    # ------------------------------------------------------------------
    # Scaffolding
    # ------------------------------------------------------------------

    def _write(self, output_dir: Path, rel_path: str, content: str) -> Path:
        target = output_dir / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    def _build_project(
        self, example: ExampleRecord, output_dir: Path, template_dir: Path
    ) -> ScaffoldResult:
        output_dir.mkdir(parents=True, exist_ok=True)
        copy_template(template_dir, output_dir)

        for placeholder in ("contracts", "test"):
            shutil.rmtree(output_dir / placeholder, ignore_errors=True)
        for directory in PROJECT_DIRS:
            (output_dir / directory).mkdir(parents=True, exist_ok=True)

        result = ScaffoldResult(output_dir=output_dir, copied=[], skipped=[])
        contracts_dir = output_dir / "contracts"
        self._copy_into(example.contract_file, contracts_dir, result)
        for extra in example.extra_contract_files:
            if extra.name != example.contract_file.name:
                self._copy_into(extra, contracts_dir, result)
        for helper in example.helper_files:
            self._copy_into(helper, contracts_dir / "helpers", result)
        for mock in example.mock_files:
            self._copy_into(mock, contracts_dir / "mocks", result)
        if example.test_file:
            self._copy_into(example.test_file, output_dir / "test", result)
        else:
            logger.warning("No test file resolved for {}", example.slug)

        self._write(output_dir, "package.json", generate_package_json(example, self.versions))
        self._write(output_dir, "README.md", generate_example_readme(example))
        self._write(
            output_dir,
            "scripts/deploy.ts",
            generate_deploy_script(example.contract_file.name, example.deploy_plan),
        )
        for rel_path, content in static_project_files().items():
            self._write(output_dir, rel_path, content)
        for hook, content in HUSKY_HOOKS.items():
            self._write(output_dir, f".husky/{hook}", content).chmod(HOOK_MODE)

        return result

    def scaffold_example(self, example: ExampleRecord, output_dir: Path) -> ScaffoldResult:
        """Create a standalone repository for one example.

        Raises
        ------
        OutputDirectoryNotEmptyError
            If ``output_dir`` exists and is not empty (nothing is written)
        TemplateNotFoundError
            If no project template can be found or fetched
        MissingSourceFileError
            Under the strict policy, if a referenced source file is missing
        """
        assert_empty_directory(output_dir)
        self.check_sources([example])
        template_dir = self.template_dir
        logger.info("Creating example {} in {}", example.slug, output_dir)
        return self._build_project(example, output_dir, template_dir)

    def scaffold_category(
        self, category: str, examples: list[ExampleRecord], output_dir: Path
    ) -> list[ScaffoldResult]:
        """Create ``<output>/<category>/<slug>/`` for every example, plus bundle docs."""
        assert_empty_directory(output_dir)
        self.check_sources(examples)
        template_dir = self.template_dir
        logger.info("Creating category {} ({} examples) in {}", category, len(examples), output_dir)

        category_dir = output_dir / category
        category_dir.mkdir(parents=True, exist_ok=True)
        self._write(category_dir, "README.md", generate_category_readme(category, examples))
        self._write(output_dir, "SUMMARY.md", generate_bundle_summary(category, examples))

        return [
            self._build_project(example, category_dir / example.slug, template_dir)
            for example in examples
        ]


def scaffold_example(
    example: ExampleRecord,
    output_dir: Path,
    config: HubConfig,
    template_dir: Path | None = None,
) -> ScaffoldResult:
    return ProjectScaffolder(config, template_dir).scaffold_example(example, output_dir)


def scaffold_category(
    category: str,
    examples: list[ExampleRecord],
    output_dir: Path,
    config: HubConfig,
    template_dir: Path | None = None,
) -> list[ScaffoldResult]:
    return ProjectScaffolder(config, template_dir).scaffold_category(
        category, examples, output_dir
    )
