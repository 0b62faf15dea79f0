"""Models for the example registry."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, TypeAdapter

# ============================================================================
# Deploy plan arguments - discriminated union keyed on ``kind``
# ============================================================================


class RefArg(BaseModel):
    """Address of a contract deployed by an earlier step (``@name``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ref"] = "ref"
    name: str


class SignerArg(BaseModel):
    """Address of a named signer (``$deployer``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["signer"] = "signer"
    name: str = "deployer"


class LiteralArg(BaseModel):
    """Plain string literal."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    value: str


class NumberArg(BaseModel):
    """Numeric literal."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["value"] = "value"
    value: int | float


class ExprArg(BaseModel):
    """Raw expression evaluated by the generated deploy script (``#expr``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["expr"] = "expr"
    expression: str


DeployArg = Annotated[
    RefArg | SignerArg | LiteralArg | NumberArg | ExprArg,
    Discriminator("kind"),
]

DeployArgAdapter: TypeAdapter[DeployArg] = TypeAdapter(DeployArg)


class DeployStep(BaseModel):
    """One contract deployment in an example's deploy plan."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    contract: str
    args: list[DeployArg] | None = None
    save_as: str | None = Field(default=None, alias="saveAs")
    after_deploy: list[str] = Field(default_factory=list, alias="afterDeploy")


# ============================================================================
# Example records
# ============================================================================


class Difficulty(StrEnum):
    """Difficulty tiers, in learning order."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


DIFFICULTY_ORDER: tuple[Difficulty, ...] = (
    Difficulty.BEGINNER,
    Difficulty.INTERMEDIATE,
    Difficulty.ADVANCED,
)


class ExampleRecord(BaseModel):
    """Normalized metadata for one example contract.

    Attributes
    ----------
    slug : str
        kebab-case identifier derived from the file name
    doc_name : str
        File stem with original casing, used for doc file names
    contract_file : Path
        Primary source file
    test_file : Path | None
        Resolved test, if any
    depends_on : list[str]
        Contract names declared with ``@custom:depends-on``
    helper_files, mock_files, extra_contract_files : list[Path]
        Resolved dependency files, partitioned by containing folder
    package_dependencies, package_dev_dependencies : list[str]
        External packages imported by the sources (runtime) and by the test only (dev)
    """

    model_config = ConfigDict(frozen=True)

    slug: str
    title: str
    category: str
    concept: str
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    chapters: list[str] = Field(default_factory=list)
    notice: str | None = None
    contract_name: str
    doc_name: str
    contract_file: Path
    test_file: Path | None = None
    depends_on: list[str] = Field(default_factory=list)
    helper_files: list[Path] = Field(default_factory=list)
    mock_files: list[Path] = Field(default_factory=list)
    extra_contract_files: list[Path] = Field(default_factory=list)
    deploy_plan: list[DeployStep] | None = None
    package_dependencies: list[str] = Field(default_factory=list)
    package_dev_dependencies: list[str] = Field(default_factory=list)

    @property
    def doc_path(self) -> str:
        """Path of the example page relative to the docs root."""
        return f"{self.category}/{self.doc_name}.md"

    @property
    def dependency_files(self) -> list[Path]:
        """Every resolved dependency file, regardless of partition."""
        return [*self.extra_contract_files, *self.helper_files, *self.mock_files]


class Registry:
    """All discovered examples plus lookup indexes.

    ``examples`` is sorted by slug; every list in ``categories`` is too.
    """

    __slots__ = ("_by_contract", "by_slug", "categories", "examples")

    def __init__(self, examples: list[ExampleRecord]) -> None:
        self.examples = sorted(examples, key=lambda example: example.slug)
        self.by_slug: dict[str, ExampleRecord] = {ex.slug: ex for ex in self.examples}
        self.categories: dict[str, list[ExampleRecord]] = {}
        for example in self.examples:
            self.categories.setdefault(example.category, []).append(example)
        self._by_contract: dict[str, ExampleRecord] = {
            ex.contract_name: ex for ex in self.examples
        }

    def __len__(self) -> int:
        return len(self.examples)

    def __iter__(self):
        return iter(self.examples)

    @property
    def by_contract(self) -> dict[str, ExampleRecord]:
        """Primary contract name -> record, for cross-linking dependencies."""
        return self._by_contract

    @property
    def category_names(self) -> list[str]:
        return sorted(self.categories)

    def chapters(self) -> dict[str, list[ExampleRecord]]:
        """Chapter tag -> records carrying it, keys sorted."""
        chapters: dict[str, list[ExampleRecord]] = {}
        for example in self.examples:
            for chapter in example.chapters:
                chapters.setdefault(chapter, []).append(example)
        return dict(sorted(chapters.items()))

    def input_files(self) -> list[Path]:
        """Every source and test file that contributed to the registry."""
        files: dict[Path, None] = {}
        for example in self.examples:
            files[example.contract_file] = None
            if example.test_file:
                files[example.test_file] = None
            for path in example.dependency_files:
                files[path] = None
        return list(files)
