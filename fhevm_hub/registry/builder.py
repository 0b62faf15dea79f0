"""Example registry construction.

The registry is rebuilt from a full directory walk on every invocation:

1. Every immediate sub-directory of the contracts root is a category.
2. All ``.sol`` files (helpers and mocks included) feed a contract-name ->
   file index used to resolve ``@custom:depends-on`` names.
3. Every ``.sol`` file outside ``helpers/`` and ``mocks/`` that declares a
   ``contract`` becomes one :class:`ExampleRecord`.

Walks are lexicographic, so "first seen" in the name index is deterministic:
on a name collision the file that sorts first wins and the collision is
logged. Slugs, by contrast, must be unique: two files mapping to one slug
(``Foo.sol`` and ``FooExample.sol``, or one name in two categories) abort
the build.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from fhevm_hub.kernel.config.models import HubConfig
from fhevm_hub.kernel.logging import get_logger
from fhevm_hub.kernel.exceptions import DuplicateSlugError
from fhevm_hub.kernel.text import read_source, to_kebab_case, unique
from fhevm_hub.registry.annotations import (
    extract_custom_tag,
    extract_declared_names,
    extract_primary_contract_name,
    extract_tag,
    normalize_difficulty,
    parse_chapters,
    parse_list,
)
from fhevm_hub.registry.deploy_plan import parse_deploy_plan
from fhevm_hub.registry.imports import extract_package_imports, resolve_local_imports
from fhevm_hub.registry.models import ExampleRecord, Registry

logger = get_logger(__name__)

HELPERS_DIR = "helpers"
MOCKS_DIR = "mocks"
DEPENDENCY_ONLY_DIRS = frozenset({HELPERS_DIR, MOCKS_DIR})
FULL_FLOW_TEST = "FullFlow.test.ts"
DEFAULT_CONCEPT = "fhEVM example"


def walk_files(directory: Path, ignore_dirs: frozenset[str] = frozenset()) -> Iterator[Path]:
    """Yield files below ``directory`` in lexicographic order, skipping ``ignore_dirs``."""
    if not directory.is_dir():
        return
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            if entry.name in ignore_dirs:
                continue
            yield from walk_files(entry, ignore_dirs)
        elif entry.is_file():
            yield entry


def normalize_example_base_name(file_base: str) -> str:
    """Strip a trailing ``ExampleFactory`` or ``Example`` from a file stem."""
    if file_base.endswith("ExampleFactory"):
        return file_base.removesuffix("ExampleFactory")
    if file_base.endswith("Example"):
        return file_base.removesuffix("Example")
    return file_base


def classify_dependency(path: Path, contracts_root: Path) -> str:
    """Return ``"helpers"``, ``"mocks"`` or ``"extra"`` for a resolved dependency file.

    Only directories below the contracts root count, so a checkout living
    under some ``.../helpers/...`` path is not misfiled.
    """
    try:
        parts = path.relative_to(contracts_root).parts[:-1]
    except ValueError:
        parts = path.parts[:-1]
    if HELPERS_DIR in parts:
        return HELPERS_DIR
    if MOCKS_DIR in parts:
        return MOCKS_DIR
    return "extra"


@dataclass(frozen=True, slots=True)
class PartitionedFiles:
    helpers: list[Path]
    mocks: list[Path]
    extra: list[Path]


def partition_dependencies(files: list[Path], contracts_root: Path) -> PartitionedFiles:
    """Split files into helpers/mocks/extra; every file lands in exactly one list."""
    buckets: dict[str, list[Path]] = {HELPERS_DIR: [], MOCKS_DIR: [], "extra": []}
    for path in unique(files):
        buckets[classify_dependency(path, contracts_root)].append(path)
    return PartitionedFiles(
        helpers=buckets[HELPERS_DIR], mocks=buckets[MOCKS_DIR], extra=buckets["extra"]
    )


class RegistryBuilder:
    """Builds a :class:`Registry` from the hub's contracts and test trees."""

    def __init__(self, config: HubConfig) -> None:
        self.config = config
        self.contracts_dir = config.contracts_path
        self.test_dir = config.test_path
        self._name_index: dict[str, Path] = {}

    def build(self) -> Registry:
        """Walk the contracts tree and return a fresh registry.

        Raises
        ------
        DeployPlanError
            If any example carries a malformed deploy plan
        DuplicateSlugError
            If two contract files normalize to the same slug
        """
        if not self.contracts_dir.is_dir():
            logger.warning("Contracts directory not found: {}", self.contracts_dir)
            return Registry([])

        category_dirs = sorted(
            (entry for entry in self.contracts_dir.iterdir() if entry.is_dir()),
            key=lambda p: p.name,
        )

        self._name_index = self._index_declared_names(category_dirs)

        examples: list[ExampleRecord] = []
        for category_dir in category_dirs:
            for file in walk_files(category_dir, DEPENDENCY_ONLY_DIRS):
                if file.suffix != ".sol":
                    continue
                record = self._build_record(file, category_dir.name)
                if record is not None:
                    examples.append(record)

        self._check_unique_slugs(examples)

        registry = Registry(examples)
        logger.debug(
            "Registry built: {} examples in {} categories",
            len(registry.examples),
            len(registry.categories),
        )
        return registry

    @staticmethod
    def _check_unique_slugs(examples: list[ExampleRecord]) -> None:
        """Raise on the first slug claimed by two files, naming both."""
        owners: dict[str, Path] = {}
        for example in examples:
            owner = owners.setdefault(example.slug, example.contract_file)
            if owner != example.contract_file:
                raise DuplicateSlugError(example.slug, owner, example.contract_file)

    def _index_declared_names(self, category_dirs: list[Path]) -> dict[str, Path]:
        index: dict[str, Path] = {}
        for category_dir in category_dirs:
            for file in walk_files(category_dir):
                if file.suffix != ".sol":
                    continue
                for name in extract_declared_names(read_source(file)):
                    if name not in index:
                        index[name] = file
                    elif index[name] != file:
                        logger.warning(
                            "Contract name '{}' declared in {} and {}; using the first",
                            name,
                            index[name],
                            file,
                        )
        return index

    def _build_record(self, file: Path, folder_category: str) -> ExampleRecord | None:
        content = read_source(file)
        contract_name = extract_primary_contract_name(content)
        if not contract_name:
            logger.debug("Skipping {}: no contract declaration", file)
            return None

        file_base = file.stem
        example_base = normalize_example_base_name(file_base)

        category_tag = extract_custom_tag(content, "category")
        category = category_tag or folder_category

        notice = extract_tag(content, "notice")
        depends_on = parse_list(extract_custom_tag(content, "depends-on"))
        test_categories = (
            [category_tag, folder_category]
            if category_tag and category_tag != folder_category
            else [category]
        )
        test_file = self._resolve_test_file(
            file_base, test_categories, extract_custom_tag(content, "test"), bool(depends_on)
        )

        dependency_files = self._collect_dependency_files(
            file, content, self._resolve_depends_on(depends_on, file)
        )
        partitioned = partition_dependencies(dependency_files, self.contracts_dir)

        source_files = unique([file, *partitioned.extra, *partitioned.helpers, *partitioned.mocks])
        package_dependencies = unique(
            name
            for source in source_files
            for name in extract_package_imports(read_source(source))
        )
        package_dev_dependencies = (
            [
                name
                for name in extract_package_imports(read_source(test_file))
                if name not in package_dependencies
            ]
            if test_file
            else []
        )

        return ExampleRecord(
            slug=to_kebab_case(example_base),
            title=extract_tag(content, "title") or example_base,
            category=category,
            concept=extract_custom_tag(content, "concept") or notice or DEFAULT_CONCEPT,
            difficulty=normalize_difficulty(extract_custom_tag(content, "difficulty")),
            chapters=parse_chapters(extract_custom_tag(content, "chapter")),
            notice=notice,
            contract_name=contract_name,
            doc_name=file_base,
            contract_file=file,
            test_file=test_file,
            depends_on=depends_on,
            helper_files=partitioned.helpers,
            mock_files=partitioned.mocks,
            extra_contract_files=partitioned.extra,
            deploy_plan=parse_deploy_plan(extract_custom_tag(content, "deploy-plan"), file),
            package_dependencies=package_dependencies,
            package_dev_dependencies=package_dev_dependencies,
        )

    @staticmethod
    def _collect_dependency_files(file: Path, content: str, declared: list[Path]) -> list[Path]:
        """Files reached from ``file`` through relative imports and declared dependencies.

        Imports of every reached file are followed as well, so a dependency's
        own helpers travel with it.
        """
        found: dict[Path, None] = {}
        pending = [*resolve_local_imports(file, content), *declared]
        while pending:
            path = pending.pop(0)
            if path == file or path in found:
                continue
            found[path] = None
            pending.extend(resolve_local_imports(path, read_source(path)))
        return list(found)

    def _resolve_depends_on(self, names: list[str], file: Path) -> list[Path]:
        resolved: list[Path] = []
        for name in names:
            target = self._name_index.get(name)
            if target is None:
                logger.debug("{}: depends-on '{}' does not match any contract", file.name, name)
                continue
            resolved.append(target)
        return resolved

    def _resolve_test_file(
        self,
        file_base: str,
        categories: list[str],
        custom_test: str | None,
        has_dependencies: bool,
    ) -> Path | None:
        """Explicit override, else ``<category>/<File>.test.ts``, else the FullFlow fallback."""
        if custom_test:
            return self._first_existing(self.test_dir / cat / custom_test for cat in categories)

        found = self._first_existing(
            self.test_dir / cat / f"{file_base}.test.ts" for cat in categories
        )
        if found is None and has_dependencies:
            found = self._first_existing(self.test_dir / cat / FULL_FLOW_TEST for cat in categories)
        return found

    @staticmethod
    def _first_existing(candidates: Iterator[Path]) -> Path | None:
        return next((candidate for candidate in candidates if candidate.is_file()), None)


def build_registry(config: HubConfig) -> Registry:
    """Build the example registry for the hub described by ``config``."""
    return RegistryBuilder(config).build()
