"""Tests for fhevm_hub.scaffold.deps."""

import json

import pytest

from fhevm_hub.kernel.config import HubConfig
from fhevm_hub.kernel.exceptions import MissingSourceFileError
from fhevm_hub.scaffold import apply_dependency_updates, check_dependencies
from fhevm_hub.scaffold.deps import DependencyDrift, find_generated_repos, hub_versions


@pytest.fixture
def generated(hub, write_file):
    """Two generated repos under output/, one stale and one current."""
    write_file(
        hub / "output/fhe-counter/package.json",
        json.dumps(
            {
                "name": "fhevm-example-fhe-counter",
                "dependencies": {"@fhevm/solidity": "^0.7.0"},
                "devDependencies": {"@fhevm/hardhat-plugin": "^0.0.9", "chai": "^4.0.0"},
            }
        ),
    )
    write_file(
        hub / "output/encrypted-add/package.json",
        json.dumps({"dependencies": {"@fhevm/solidity": "^0.8.0"}}),
    )
    (hub / "output/not-a-repo").mkdir()
    return hub / "output"


def test_find_generated_repos(generated):
    assert [repo.name for repo in find_generated_repos(generated)] == [
        "encrypted-add",
        "fhe-counter",
    ]
    assert find_generated_repos(generated / "missing") == []


def test_hub_versions_only_tracked_packages(config):
    versions = hub_versions(config)
    assert versions["@fhevm/solidity"] == "^0.8.0"
    assert "chai" not in versions


def test_hub_versions_without_manifest(tmp_path):
    with pytest.raises(MissingSourceFileError, match="package.json"):
        hub_versions(HubConfig(root=tmp_path))


def test_check_reports_drift(config, generated):
    drifts = check_dependencies(config)
    assert DependencyDrift(
        generated / "fhe-counter", "@fhevm/solidity", "^0.7.0", "^0.8.0"
    ) in drifts
    assert DependencyDrift(
        generated / "fhe-counter", "@fhevm/hardhat-plugin", "^0.0.9", "^0.1.0"
    ) in drifts
    assert all(drift.repo.name == "fhe-counter" for drift in drifts)


def test_apply_rewrites_and_is_idempotent(config, generated):
    assert apply_dependency_updates(config) == [generated / "fhe-counter"]

    manifest = json.loads((generated / "fhe-counter/package.json").read_text())
    assert manifest["dependencies"]["@fhevm/solidity"] == "^0.8.0"
    assert manifest["devDependencies"]["@fhevm/hardhat-plugin"] == "^0.1.0"
    # untracked packages keep their versions
    assert manifest["devDependencies"]["chai"] == "^4.0.0"

    assert check_dependencies(config) == []
    assert apply_dependency_updates(config) == []
