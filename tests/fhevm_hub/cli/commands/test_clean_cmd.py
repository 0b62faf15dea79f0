"""Tests for fhevm_hub.cli.commands.clean_cmd module."""


def test_removes_generated_artifacts(invoke, hub, write_file):
    write_file(hub / "output/fhe-counter/package.json", "{}")
    write_file(hub / "test-output/quickstart/fhe-counter/package.json", "{}")
    write_file(hub / "docs/reference/basic/FHECounter.md", "# FHECounter\n")
    write_file(hub / "docs/README.md", "# Docs\n")

    result = invoke("clean")
    assert result.exit_code == 0
    assert "Removed output" in result.output
    assert "Removed test-output" in result.output
    assert "Removed docs/reference" in result.output

    assert not (hub / "output").exists()
    assert not (hub / "test-output").exists()
    assert not (hub / "docs/reference").exists()
    assert (hub / "docs/README.md").is_file()
    assert (hub / "contracts/basic/FHECounter.sol").is_file()


def test_nothing_to_clean(invoke):
    result = invoke("clean")
    assert result.exit_code == 0
    assert "Nothing to clean" in result.output
