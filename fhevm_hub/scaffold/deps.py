"""Keep tracked dependency versions of generated repositories in line with the hub."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fhevm_hub.kernel.config.models import HubConfig
from fhevm_hub.kernel.exceptions import MissingSourceFileError
from fhevm_hub.kernel.logging import get_logger

logger = get_logger(__name__)

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


@dataclass(frozen=True, slots=True)
class DependencyDrift:
    """A tracked package whose version in a generated repo differs from the hub's."""

    repo: Path
    package: str
    current: str
    expected: str


def read_manifest(directory: Path) -> dict[str, Any] | None:
    manifest = directory / "package.json"
    if not manifest.is_file():
        return None
    return json.loads(manifest.read_text(encoding="utf-8"))


def declared_version(manifest: dict[str, Any], package: str) -> str | None:
    for section in DEPENDENCY_SECTIONS:
        version = (manifest.get(section) or {}).get(package)
        if version:
            return version
    return None


def find_generated_repos(output_dir: Path) -> list[Path]:
    """Immediate sub-directories of ``output_dir`` that hold a ``package.json``."""
    if not output_dir.is_dir():
        return []
    return sorted(
        entry
        for entry in output_dir.iterdir()
        if entry.is_dir() and (entry / "package.json").is_file()
    )


def hub_versions(config: HubConfig) -> dict[str, str]:
    """Tracked package -> version from the hub manifest.

    Raises
    ------
    MissingSourceFileError
        If the hub has no ``package.json``
    """
    manifest = read_manifest(config.root)
    if manifest is None:
        raise MissingSourceFileError(config.root / "package.json")
    versions = {}
    for package in config.tracked_dependencies:
        version = declared_version(manifest, package)
        if version:
            versions[package] = version
    return versions


def check_dependencies(config: HubConfig) -> list[DependencyDrift]:
    """Every tracked-package mismatch across the generated repositories."""
    expected = hub_versions(config)
    drifts: list[DependencyDrift] = []
    for repo in find_generated_repos(config.output_path):
        manifest = read_manifest(repo) or {}
        for package, version in expected.items():
            current = declared_version(manifest, package)
            if current and current != version:
                drifts.append(DependencyDrift(repo, package, current, version))
    return drifts


def apply_dependency_updates(config: HubConfig) -> list[Path]:
    """Rewrite drifted versions in place; returns the repositories that changed."""
    expected = hub_versions(config)
    updated: list[Path] = []
    for repo in find_generated_repos(config.output_path):
        manifest = read_manifest(repo) or {}
        changed = False
        for package, version in expected.items():
            for section in DEPENDENCY_SECTIONS:
                entries = manifest.get(section) or {}
                if package in entries and entries[package] != version:
                    entries[package] = version
                    changed = True
        if changed:
            (repo / "package.json").write_text(
                f"{json.dumps(manifest, indent=2, ensure_ascii=False)}\n", encoding="utf-8"
            )
            logger.info("Updated {}", repo.name)
            updated.append(repo)
    return updated
