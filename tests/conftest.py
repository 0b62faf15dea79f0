"""Shared pytest fixtures.

- hub: a miniature hub repository (contracts, tests, template, package.json)
- config / registry: configuration and registry built for that hub
- log_capture: loguru records emitted during a test
"""

import json
from pathlib import Path

import pytest
from loguru import logger

from fhevm_hub.kernel.config import HubConfig
from fhevm_hub.registry import Registry, build_registry

FHE_COUNTER = """// SPDX-License-Identifier: BSD-3-Clause-Clear
pragma solidity ^0.8.24;

import {FHE, euint32, externalEuint32} from "@fhevm/solidity/lib/FHE.sol";

/// @title FHE Counter
/// @notice A simple encrypted counter.
/// @custom:category basic
/// @custom:chapter encryption, access-control
/// @custom:concept Encrypted increment and decrement
/// @custom:difficulty beginner
contract FHECounter {
    euint32 private _count;
}
"""

ENCRYPTED_ADD = """// SPDX-License-Identifier: BSD-3-Clause-Clear
pragma solidity ^0.8.24;

import {FHE, euint8} from "@fhevm/solidity/lib/FHE.sol";

/// @title Encrypted Add
/// @custom:category basic
/// @custom:chapter arithmetic
/// @custom:concept Adding two encrypted values
/// @custom:difficulty Advanced
contract EncryptedAddExample {
    euint8 private _sum;
}
"""

IDENTITY_REGISTRY = """// SPDX-License-Identifier: BSD-3-Clause-Clear
pragma solidity ^0.8.24;

import {FHE} from "@fhevm/solidity/lib/FHE.sol";
import {IdentityLib} from "./helpers/IdentityLib.sol";

/// @title Identity Registry
/// @notice Stores encrypted identity attributes.
/// @custom:category identity
/// @custom:chapter identity
/// @custom:concept Encrypted attributes
/// @custom:difficulty intermediate
contract IdentityRegistry {
}
"""

COMPLIANCE_RULES = """// SPDX-License-Identifier: BSD-3-Clause-Clear
pragma solidity ^0.8.24;

import {FHE} from "@fhevm/solidity/lib/FHE.sol";
import {ERC7984} from "@openzeppelin/confidential-contracts/token/ERC7984.sol";
import {MockOracle} from "./mocks/MockOracle.sol";

/// @title Compliance Rules
/// @custom:category identity
/// @custom:chapter access-control,compliance
/// @custom:concept Compliance checks on encrypted identities
/// @custom:difficulty intermediate
/// @custom:depends-on IdentityRegistry
/// @custom:deploy-plan [{"contract":"IdentityRegistry","saveAs":"registry"},{"contract":"ComplianceRules","args":["@registry","$deployer",3],"afterDeploy":["await registry.setCompliance(await complianceRules.getAddress());"]}]
contract ComplianceRules {
}
"""

IDENTITY_LIB = """pragma solidity ^0.8.24;

library IdentityLib {
}
"""

MOCK_ORACLE = """pragma solidity ^0.8.24;

contract MockOracle {
}
"""

FHE_COUNTER_TEST = """import { expect } from "chai";
import { ethers, fhevm } from "hardhat";
import { FhevmType } from "@fhevm/hardhat-plugin";

describe("FHECounter", function () {
  it("should increment the counter", async function () {});
  it("forgetting FHE.allowThis breaks later reads (pitfall)", async function () {});
  it('Pitfall: decrementing below zero wraps around', async function () {});
  it("forgetting FHE.allowThis breaks later reads (pitfall)", async function () {});
});
"""

IDENTITY_TEST = """import { expect } from "chai";
import { ethers } from "hardhat";

describe("IdentityRegistry", function () {
  it("stores attributes", async function () {});
});
"""

FULL_FLOW_TEST = """import { expect } from "chai";
import { ethers } from "hardhat";

describe("Identity full flow", function () {
  it("registers then checks compliance", async function () {});
});
"""

HUB_PACKAGE = {
    "name": "fhevm-examples",
    "dependencies": {
        "@fhevm/solidity": "^0.8.0",
        "@openzeppelin/confidential-contracts": "^0.2.0",
    },
    "devDependencies": {
        "@fhevm/hardhat-plugin": "^0.1.0",
        "chai": "^4.5.0",
        "hardhat": "^2.26.0",
    },
}


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_hub_env(monkeypatch):
    """Keep developer environment variables out of configuration loading."""
    for name in (
        "FHEVM_HUB_CONFIG_PATH",
        "FHEVM_TEMPLATE_DIR",
        "FHEVM_HUB_LOG_LEVEL",
        "FHEVM_HUB_LOG_FORMAT",
        "FHEVM_HUB_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def hub(tmp_path: Path) -> Path:
    """A hub repository with two categories, helpers, mocks, tests and a template."""
    root = tmp_path / "hub"
    write(root / "contracts/basic/FHECounter.sol", FHE_COUNTER)
    write(root / "contracts/basic/EncryptedAddExample.sol", ENCRYPTED_ADD)
    write(root / "contracts/identity/IdentityRegistry.sol", IDENTITY_REGISTRY)
    write(root / "contracts/identity/ComplianceRules.sol", COMPLIANCE_RULES)
    write(root / "contracts/identity/helpers/IdentityLib.sol", IDENTITY_LIB)
    write(root / "contracts/identity/mocks/MockOracle.sol", MOCK_ORACLE)

    write(root / "test/basic/FHECounter.test.ts", FHE_COUNTER_TEST)
    write(root / "test/identity/IdentityRegistry.test.ts", IDENTITY_TEST)
    write(root / "test/identity/FullFlow.test.ts", FULL_FLOW_TEST)

    write(root / "package.json", json.dumps(HUB_PACKAGE, indent=2))

    template = root / "base-template"
    write(template / "package.json", '{"name": "fhevm-hardhat-template"}\n')
    write(template / "hardhat.config.ts", "export default {};\n")
    write(template / "contracts/FHECounter.sol", "// template placeholder\n")
    write(template / "test/FHECounter.ts", "// template placeholder\n")
    write(template / ".git", "gitdir: ../.git/modules/base-template\n")
    write(template / "LICENSE", "BSD-3-Clause-Clear\n")
    return root


@pytest.fixture
def config(hub: Path) -> HubConfig:
    return HubConfig(root=hub)


@pytest.fixture
def registry(config: HubConfig) -> Registry:
    return build_registry(config)


@pytest.fixture
def log_capture():
    """Collect loguru records as dicts with level and message."""
    captured: list[dict] = []

    def sink(message):
        record = message.record
        captured.append({"level": record["level"].name, "message": record["message"]})

    handler_id = logger.add(sink, level="DEBUG", format="{message}")
    yield captured
    logger.remove(handler_id)


@pytest.fixture
def write_file():
    """The ``write(path, content)`` helper, for tests that extend the hub."""
    return write
