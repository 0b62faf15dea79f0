"""Resolution of the shared Hardhat project template.

Candidates are tried in order: the configured ``template_dir`` (which
``FHEVM_TEMPLATE_DIR`` overrides), the conventional folder names, then every
submodule path declared in ``.gitmodules``. When none holds a template the
resolver initialises git submodules and, failing that, shallow-clones the
template repository.
"""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from pathlib import Path

from fhevm_hub.kernel.config.models import HubConfig
from fhevm_hub.kernel.exceptions import TemplateNotFoundError
from fhevm_hub.kernel.logging import get_logger
from fhevm_hub.kernel.process import is_available, run_command
from fhevm_hub.kernel.text import unique

logger = get_logger(__name__)

TEMPLATE_MARKERS = ("package.json", "hardhat.config.ts")
TEMPLATE_REPO_HINT = "fhevm-hardhat-template"

_SUBMODULE_HEADER = re.compile(r"^\[submodule\s")
_SUBMODULE_PATH = re.compile(r"^path\s*=\s*(.+)$")
_SUBMODULE_URL = re.compile(r"^url\s*=\s*(.+)$")

REMEDIATION = (
    "Provide base-template/, run `git submodule update --init --recursive`, "
    "or set FHEVM_TEMPLATE_DIR to a Hardhat template."
)


@dataclass(slots=True)
class Submodule:
    path: str
    url: str | None = None


def parse_gitmodules(content: str) -> list[Submodule]:
    """Submodule ``path``/``url`` pairs declared in a ``.gitmodules`` file."""
    submodules: list[Submodule] = []
    current: Submodule | None = None
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if _SUBMODULE_HEADER.match(line):
            if current and current.path:
                submodules.append(current)
            current = Submodule(path="")
            continue
        if current is None:
            continue
        if match := _SUBMODULE_PATH.match(line):
            current.path = match.group(1).strip()
        elif match := _SUBMODULE_URL.match(line):
            current.url = match.group(1).strip()
    if current and current.path:
        submodules.append(current)
    return submodules


def looks_like_template(directory: Path) -> bool:
    return all((directory / marker).is_file() for marker in TEMPLATE_MARKERS)


def safe_to_replace(directory: Path) -> bool:
    """True for a missing dir, an empty one, or one holding only a ``.git`` file."""
    if not directory.exists():
        return True
    entries = [entry.name for entry in directory.iterdir()]
    return not entries or entries == [".git"]


class TemplateResolver:
    """Finds or materialises the project template for a hub."""

    def __init__(self, config: HubConfig) -> None:
        self.config = config
        self.root = config.root

    def _resolve(self, value: str) -> Path:
        path = Path(value)
        return path if path.is_absolute() else self.root / path

    def submodules(self) -> list[Submodule]:
        gitmodules = self.root / ".gitmodules"
        if not gitmodules.is_file():
            return []
        return parse_gitmodules(gitmodules.read_text(encoding="utf-8"))

    def candidates(self) -> list[Path]:
        paths: list[Path] = []
        if self.config.template_dir:
            paths.append(self._resolve(self.config.template_dir))
        paths.extend(self.root / name for name in self.config.template_dirs)
        paths.extend(self.root / submodule.path for submodule in self.submodules())
        return unique(paths)

    def find(self) -> Path | None:
        return next((c for c in self.candidates() if looks_like_template(c)), None)

    def clone_target(self) -> tuple[Path, str]:
        """Where to clone to, and from which URL."""
        url = self.config.template_git_url
        if self.config.template_dir:
            return self._resolve(self.config.template_dir), url
        for submodule in self.submodules():
            if submodule.url and TEMPLATE_REPO_HINT in submodule.url:
                return self.root / submodule.path, submodule.url
        return self.root / self.config.template_dirs[0], url

    def init_submodules(self) -> None:
        if not (self.root / ".git").exists() or not (self.root / ".gitmodules").is_file():
            return
        if not is_available("git"):
            return
        logger.info("Template missing; initialising git submodules")
        run_command(["git", "submodule", "update", "--init", "--recursive"], cwd=self.root)

    def clone(self, target: Path, url: str) -> None:
        if not is_available("git"):
            raise TemplateNotFoundError(
                "Missing template directory and git is not available. "
                "Install git, set FHEVM_TEMPLATE_DIR, or add base-template/ to the repo."
            )
        if not safe_to_replace(target):
            raise TemplateNotFoundError(
                f"Template directory is missing and {target} exists but does not look like "
                "a template. Move it aside or set FHEVM_TEMPLATE_DIR to a valid template path."
            )
        if target.exists():
            shutil.rmtree(target)
        logger.info("Template missing; cloning {} into {}", url, target)
        run_command(["git", "clone", "--depth", "1", url, str(target)], cwd=self.root)

    def ensure(self) -> Path:
        """Return a usable template directory, fetching one if needed.

        Raises
        ------
        TemplateNotFoundError
            If no template can be found or fetched
        CommandFailedError
            If ``git`` fails while fetching
        """
        found = self.find()
        if found is not None:
            return found

        self.init_submodules()
        found = self.find()
        if found is not None:
            return found

        target, url = self.clone_target()
        self.clone(target, url)
        if looks_like_template(target):
            return target

        raise TemplateNotFoundError(
            f"Could not find or fetch a valid template directory. {REMEDIATION}"
        )


def ensure_template_dir(config: HubConfig) -> Path:
    """Resolve the template directory for ``config``; see :meth:`TemplateResolver.ensure`."""
    return TemplateResolver(config).ensure()
