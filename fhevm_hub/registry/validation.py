"""Required-tag validation for example contracts.

Every example source (anything under the contracts root outside ``helpers/``
and ``mocks/``) must carry the configured annotation tags. Violations are
collected for the whole corpus and reported together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from fhevm_hub.kernel.config.models import HubConfig
from fhevm_hub.kernel.logging import get_logger
from fhevm_hub.kernel.text import read_source
from fhevm_hub.registry.annotations import has_tag
from fhevm_hub.registry.builder import DEPENDENCY_ONLY_DIRS, walk_files

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TagViolation:
    """A contract file missing one or more required tags."""

    file: Path
    missing: tuple[str, ...]

    def location(self, root: Path | None = None) -> str:
        if root is not None and self.file.is_relative_to(root):
            return self.file.relative_to(root).as_posix()
        return str(self.file)

    def describe(self, root: Path | None = None) -> str:
        return f"{self.location(root)}: {', '.join(self.missing)}"


@dataclass(slots=True)
class TagReport:
    """Aggregated results of a tag validation run."""

    checked_files: list[Path] = field(default_factory=list)
    violations: list[TagViolation] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        """True if every checked file carries every required tag."""
        return not self.violations

    @property
    def failed_files(self) -> list[Path]:
        return [violation.file for violation in self.violations]


def missing_tags(content: str, required_tags: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    """Required tags whose literal text does not occur in ``content``."""
    return tuple(tag for tag in required_tags if not has_tag(content, tag))


def validate_contract_tags(config: HubConfig) -> TagReport:
    """Check every example contract for the configured required tags.

    Parameters
    ----------
    config : HubConfig
        Hub configuration; supplies the contracts root and ``required_tags``

    Returns
    -------
    TagReport
        All checked files and one violation per file missing at least one tag
    """
    report = TagReport()
    for file in walk_files(config.contracts_path, DEPENDENCY_ONLY_DIRS):
        if file.suffix != ".sol":
            continue
        report.checked_files.append(file)
        missing = missing_tags(read_source(file), config.required_tags)
        if missing:
            logger.debug("{} is missing {}", file, ", ".join(missing))
            report.violations.append(TagViolation(file=file, missing=missing))
    return report
