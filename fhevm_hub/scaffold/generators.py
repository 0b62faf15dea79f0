"""Project-file generators for standalone example repositories.

Each generator returns file content; :mod:`fhevm_hub.scaffold.project`
decides where it goes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import Environment

from fhevm_hub.kernel.logging import get_logger
from fhevm_hub.registry.models import ExampleRecord

logger = get_logger(__name__)

# autoescape=False: templates render Markdown, not HTML
_ENV = Environment(autoescape=False, keep_trailing_newline=True, trim_blocks=True)  # nosec B701

BASE_DEV_DEPENDENCIES: tuple[str, ...] = (
    "@biomejs/biome",
    "@commitlint/cli",
    "@commitlint/config-conventional",
    "@fhevm/hardhat-plugin",
    "@nomicfoundation/hardhat-chai-matchers",
    "@nomicfoundation/hardhat-ethers",
    "@nomicfoundation/hardhat-network-helpers",
    "@openzeppelin/contracts",
    "@types/node",
    "chai",
    "dotenv",
    "ethers",
    "hardhat",
    "husky",
    "lint-staged",
    "solhint",
    "typescript",
)

PACKAGE_SCRIPTS: dict[str, str] = {
    "compile": "hardhat compile",
    "test": "hardhat test",
    "test:mocked": "HARDHAT_NETWORK=hardhat hardhat test",
    "deploy": "hardhat run scripts/deploy.ts",
    "lint": "biome check .",
    "lint:fix": "biome check . --write",
    "lint:sol": "solhint 'contracts/**/*.sol'",
    "lint:sol:fix": "solhint 'contracts/**/*.sol' --fix",
    "format": "biome format . --write",
    "typecheck": "tsc --noEmit",
    "verify": "npm run lint && npm run lint:sol && npm run typecheck && npm run test:mocked",
    "prepare": "husky",
}

NODE_ENGINES = ">=22.0.0 <25.0.0"
WILDCARD_VERSION = "*"


def to_json(data: Any) -> str:
    return f"{json.dumps(data, indent=2, ensure_ascii=False)}\n"


# ============================================================================
# package.json
# ============================================================================


@dataclass(slots=True)
class PackageVersions:
    """Dependency versions declared by the hub's own ``package.json``."""

    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)

    def resolve(self, name: str) -> str:
        return self.dependencies.get(name) or self.dev_dependencies.get(name) or WILDCARD_VERSION


def read_package_versions(root: Path) -> PackageVersions:
    """Versions from ``<root>/package.json``; empty (all wildcards) if it is missing."""
    manifest = root / "package.json"
    if not manifest.is_file():
        logger.warning("No package.json in {}; dependency versions default to '*'", root)
        return PackageVersions()
    data = json.loads(manifest.read_text(encoding="utf-8"))
    return PackageVersions(
        dependencies=dict(data.get("dependencies") or {}),
        dev_dependencies=dict(data.get("devDependencies") or {}),
    )


def build_dependencies(
    example: ExampleRecord, versions: PackageVersions
) -> tuple[dict[str, str], dict[str, str]]:
    """Runtime and dev dependency maps for ``example``.

    Runtime dependencies are the packages the sources import. Dev
    dependencies are the tooling baseline plus packages only the test
    imports, minus anything already a runtime dependency.
    """
    dependencies = {name: versions.resolve(name) for name in example.package_dependencies}
    dev_dependencies: dict[str, str] = {}
    for name in (*BASE_DEV_DEPENDENCIES, *example.package_dev_dependencies):
        if name not in dependencies:
            dev_dependencies[name] = versions.resolve(name)
    return dependencies, dev_dependencies


def generate_package_json(example: ExampleRecord, versions: PackageVersions) -> str:
    dependencies, dev_dependencies = build_dependencies(example, versions)
    return to_json(
        {
            "name": f"fhevm-example-{example.slug}",
            "version": "1.0.0",
            "description": example.notice or example.concept,
            "scripts": PACKAGE_SCRIPTS,
            "keywords": ["fhevm", "fhe", "zama", "example", example.category],
            "license": "MIT",
            "dependencies": dependencies,
            "devDependencies": dev_dependencies,
            "engines": {"node": NODE_ENGINES},
        }
    )


# ============================================================================
# Build and editor configuration
# ============================================================================

HARDHAT_CONFIG = """import { HardhatUserConfig } from "hardhat/config";
import "@fhevm/hardhat-plugin";
import "@nomicfoundation/hardhat-chai-matchers";
import "@nomicfoundation/hardhat-ethers";
import * as dotenv from "dotenv";

dotenv.config();

const MNEMONIC =
  process.env.MNEMONIC || "test test test test test test test test test test test junk";

const config: HardhatUserConfig = {
  solidity: {
    version: "0.8.27",
    settings: {
      optimizer: {
        enabled: true,
        runs: 200,
      },
      evmVersion: "cancun",
    },
  },
  networks: {
    hardhat: {
      // Local fhEVM mocked mode for testing
      accounts: {
        mnemonic: MNEMONIC,
      },
      chainId: 31337,
    },
    localhost: {
      url: "http://127.0.0.1:8545",
    },
  },
  paths: {
    sources: "./contracts",
    tests: "./test",
    cache: "./cache",
    artifacts: "./artifacts",
  },
};

export default config;
"""

TSCONFIG = {
    "compilerOptions": {
        "target": "ES2020",
        "module": "commonjs",
        "strict": True,
        "esModuleInterop": True,
        "skipLibCheck": True,
        "forceConsistentCasingInFileNames": True,
        "outDir": "./dist",
        "resolveJsonModule": True,
        "types": ["node"],
    },
    "include": ["scripts/**/*", "hardhat.config.ts"],
    "exclude": ["node_modules", "artifacts", "cache", "test/**/*"],
}

BIOME = {
    "$schema": "https://biomejs.dev/schemas/1.8.3/schema.json",
    "files": {"ignore": ["node_modules", "artifacts", "cache", "dist", "coverage"]},
    "formatter": {"indentStyle": "space", "indentWidth": 2},
    "linter": {"enabled": True, "rules": {"recommended": True}},
}

SOLHINT = {"extends": "solhint:recommended", "rules": {"no-empty-blocks": "off"}}

VSCODE_SETTINGS = {"editor.formatOnSave": True, "editor.defaultFormatter": "biomejs.biome"}

VSCODE_EXTENSIONS = {"recommendations": ["biomejs.biome", "NomicFoundation.hardhat-solidity"]}

_HUSKY_PREAMBLE = '#!/bin/sh\n. "$(dirname "$0")/_/husky.sh"\n\n'

HUSKY_HOOKS: dict[str, str] = {
    "pre-commit": f"{_HUSKY_PREAMBLE}npm run lint\nnpm run lint:sol\n",
    "commit-msg": f'{_HUSKY_PREAMBLE}npx --no-install commitlint --edit "$1"\n',
    "pre-push": f"{_HUSKY_PREAMBLE}npm run verify\n",
}


def static_project_files() -> dict[str, str]:
    """Fixed-content files of every generated repository, keyed by relative path."""
    return {
        "hardhat.config.ts": HARDHAT_CONFIG,
        "tsconfig.json": to_json(TSCONFIG),
        ".gitignore": "node_modules\nartifacts\ncache\ndist\ncoverage\n.env\n.env.local\n",
        "biome.json": to_json(BIOME),
        ".solhint.json": to_json(SOLHINT),
        ".solhintignore": "node_modules\nartifacts\ncache\n",
        "commitlint.config.js": (
            'module.exports = { extends: ["@commitlint/config-conventional"] };\n'
        ),
        "lint-staged.config.js": (
            "module.exports = {\n"
            '  "*.{ts,tsx,js,jsx,json,md}": ["biome check --write"],\n'
            '  "*.sol": ["solhint --fix"],\n'
            "};\n"
        ),
        ".vscode/settings.json": to_json(VSCODE_SETTINGS),
        ".vscode/extensions.json": to_json(VSCODE_EXTENSIONS),
    }


# ============================================================================
# READMEs
# ============================================================================

EXAMPLE_README = _ENV.from_string(
    """# {{ example.title }}

> **Difficulty**: {{ example.difficulty }}
> **Concept**: {{ example.concept }}

{{ example.notice or example.concept }}

## Overview

This example demonstrates the **{{ example.concept }}** pattern in fhEVM smart contracts.

## Quick Start

```bash
# Install dependencies
npm install

# Compile the contract
npm run compile

# Run tests (mocked mode)
npm run test:mocked

# Lint and format
npm run lint:fix
npm run lint:sol:fix
```

## Key Concepts

### 1. Encrypted Types
```solidity
euint8  - Encrypted 8-bit unsigned integer
euint16 - Encrypted 16-bit unsigned integer
euint64 - Encrypted 64-bit unsigned integer
ebool   - Encrypted boolean
```

### 2. FHE Operations
```solidity
FHE.add(a, b)        // Encrypted addition
FHE.sub(a, b)        // Encrypted subtraction
FHE.le(a, b)         // Less than or equal (returns ebool)
FHE.select(cond, a, b)  // Branch-free conditional
```

### 3. Access Control
```solidity
FHE.allowThis(value)    // Grant contract permission
FHE.allow(value, addr)  // Grant address permission
FHE.allowTransient(value, addr)  // One-transaction permission
FHE.makePubliclyDecryptable(value)  // Public decryption (opt-in)
```

## Files

- `contracts/{{ contract_file }}` - Main contract implementation
{% for name in supporting_files %}
- `contracts/{{ name }}` - Supporting contract
{% endfor %}
- `test/{{ test_file or "(no test)" }}` - Test suite

## Development

This project uses:
- **npm** - Package manager
- **Biome** - TypeScript linting and formatting
- **Solhint** - Solidity linting
- **Husky** - Git hooks for quality checks
- **Commitlint** - Conventional commit messages

## Learn More

- [Zama fhEVM Documentation](https://docs.zama.ai/fhevm)
- [fhEVM Examples](https://github.com/zama-ai/fhevm)

## License

MIT
"""
)

CATEGORY_README = _ENV.from_string(
    """# {{ category }}

Privacy-preserving examples for the **{{ category }}** category.

## Examples in this Category

| Example | Concept | Difficulty |
|---------|---------|------------|
{% for example in examples %}
| [{{ example.title }}](./{{ example.slug }}/README.md) | {{ example.concept }} | {{ example.difficulty }} |
{% endfor %}

## Getting Started

Each example is self-contained and can be run independently:

```bash
cd <example-name>
npm install
npm run compile
npm run test:mocked
```

## Learn More

- [Zama fhEVM Documentation](https://docs.zama.ai/fhevm)
"""
)

BUNDLE_SUMMARY = _ENV.from_string(
    """# Summary

* [Introduction](README.md)
* [{{ category }}]({{ category }}/README.md)
{% for example in examples %}
  * [{{ example.title }}]({{ category }}/{{ example.slug }}/README.md)
{% endfor %}
"""
)


def generate_example_readme(example: ExampleRecord) -> str:
    contract_name = example.contract_file.name
    supporting = [
        path.name for path in example.extra_contract_files if path.name != contract_name
    ]
    return EXAMPLE_README.render(
        example=example,
        contract_file=contract_name,
        supporting_files=supporting,
        test_file=example.test_file.name if example.test_file else None,
    )


def generate_category_readme(category: str, examples: list[ExampleRecord]) -> str:
    return CATEGORY_README.render(category=category, examples=examples)


def generate_bundle_summary(category: str, examples: list[ExampleRecord]) -> str:
    return BUNDLE_SUMMARY.render(category=category, examples=examples)
