"""Tests for fhevm_hub.docs.catalog."""

import json
import os

from fhevm_hub.docs import build_catalog, write_catalog
from fhevm_hub.docs.catalog import format_timestamp, latest_mtime
from fhevm_hub.kernel.config import HubConfig
from fhevm_hub.registry import build_registry


def test_format_timestamp():
    assert format_timestamp(0) == "1970-01-01T00:00:00.000Z"
    assert format_timestamp(1_700_000_100.5) == "2023-11-14T22:15:00.500Z"


def test_latest_mtime_ignores_missing_files(tmp_path):
    present = tmp_path / "a.sol"
    present.write_text("")
    os.utime(present, (1_000, 1_000))
    assert latest_mtime([present, tmp_path / "missing.sol"]) == 1_000
    assert latest_mtime([]) is None


class TestBuildCatalog:
    def test_timestamp_is_newest_contributing_file(self, hub, config):
        for path in hub.rglob("*"):
            if path.is_file():
                os.utime(path, (1_700_000_000, 1_700_000_000))
        os.utime(hub / "test/basic/FHECounter.test.ts", (1_700_000_100.5, 1_700_000_100.5))
        # not an input of any example
        os.utime(hub / "package.json", (1_800_000_000, 1_800_000_000))

        catalog = build_catalog(build_registry(config))
        assert catalog.generated_at == "2023-11-14T22:15:00.500Z"

    def test_categories_and_examples(self, registry):
        catalog = build_catalog(registry)
        assert [category.name for category in catalog.categories] == ["basic", "identity"]
        basic = catalog.categories[0].examples
        assert [example.slug for example in basic] == ["encrypted-add", "fhe-counter"]
        assert basic[1].doc_path == "basic/FHECounter.md"
        assert basic[1].difficulty == "Beginner"

    def test_empty_registry_uses_current_time(self, tmp_path):
        catalog = build_catalog(build_registry(HubConfig(root=tmp_path)))
        assert catalog.generated_at.endswith("Z")
        assert catalog.categories == []


def test_write_catalog(config, registry):
    target = write_catalog(registry, config.docs_path)
    data = json.loads(target.read_text())

    assert target == config.docs_path / "catalog.json"
    assert set(data) == {"generatedAt", "categories"}
    assert data["categories"][1]["examples"][0] == {
        "slug": "compliance-rules",
        "title": "Compliance Rules",
        "concept": "Compliance checks on encrypted identities",
        "difficulty": "Intermediate",
        "docPath": "identity/ComplianceRules.md",
    }
