"""Import statement resolution for Solidity and TypeScript sources.

Relative imports are resolved to files on disk (with ``.sol`` inferred);
bare imports are reduced to the package name that would provide them. The
package names only feed dependency-manifest inference; nothing is loaded.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from fhevm_hub.kernel.text import unique

_IMPORT_FROM = re.compile(r"""import\s+[^;]*?from\s+["']([^"']+)["']\s*;?""")


def extract_imports(content: str) -> list[str]:
    """Every ``import ... from "<path>"`` target, in source order."""
    return [match.group(1) for match in _IMPORT_FROM.finditer(content)]


def resolve_import_path(base_file: Path, import_path: str) -> Path | None:
    """Resolve a relative import against ``base_file``'s directory.

    Returns None for bare (package) imports and for targets missing on disk.
    """
    if not import_path.startswith("."):
        return None
    resolved = Path(os.path.normpath(base_file.parent / import_path))
    if resolved.suffix != ".sol":
        resolved = resolved.with_name(f"{resolved.name}.sol")
    return resolved if resolved.is_file() else None


def package_name(import_path: str) -> str | None:
    """Package providing a bare import.

    >>> package_name("@fhevm/solidity/lib/FHE.sol")
    '@fhevm/solidity'
    >>> package_name("chai")
    'chai'
    >>> package_name("./helpers/Foo.sol") is None
    True
    """
    if import_path.startswith("."):
        return None
    if import_path.startswith("@"):
        parts = import_path.split("/")
        if len(parts) < 2 or not parts[1]:
            return None
        return f"{parts[0]}/{parts[1]}"
    return import_path.split("/")[0] or None


def extract_package_imports(content: str) -> list[str]:
    """Distinct package names imported by ``content``, in first-seen order."""
    names = (package_name(path) for path in extract_imports(content))
    return unique(name for name in names if name)


def resolve_local_imports(source_file: Path, content: str) -> list[Path]:
    """Existing files reached by the relative imports of ``source_file``."""
    resolved = (resolve_import_path(source_file, path) for path in extract_imports(content))
    return unique(path for path in resolved if path is not None)
