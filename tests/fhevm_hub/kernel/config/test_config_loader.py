"""Tests for fhevm_hub.kernel.config."""

from pathlib import Path

import pytest

from fhevm_hub.kernel.config import ConfigLoader, HubConfig, LoggingConfig, load_config
from fhevm_hub.kernel.exceptions import ConfigurationError


class TestHubConfig:
    """Defaults and derived paths."""

    def test_defaults(self, tmp_path):
        config = HubConfig(root=tmp_path)
        assert config.contracts_path == tmp_path / "contracts"
        assert config.test_path == tmp_path / "test"
        assert config.docs_path == tmp_path / "docs"
        assert config.output_path == tmp_path / "output"
        assert config.validate_path == tmp_path / "test-output"
        assert config.missing_file_policy == "warn"
        assert not config.strict_files
        assert "@custom:category" in config.required_tags

    def test_absolute_paths_are_kept(self, tmp_path):
        elsewhere = tmp_path / "elsewhere"
        config = HubConfig(root=tmp_path / "hub", docs_dir=str(elsewhere))
        assert config.docs_path == elsewhere

    def test_invalid_missing_file_policy(self, tmp_path):
        with pytest.raises(ConfigurationError, match="missing_file_policy"):
            HubConfig(root=tmp_path, missing_file_policy="ignore")


class TestConfigLoader:
    """Discovery order and parsing."""

    def test_no_config_uses_defaults(self, tmp_path):
        config = load_config(tmp_path)
        assert config.root == tmp_path.resolve()
        assert config.contracts_dir == "contracts"
        assert config.logging == LoggingConfig()

    def test_pyproject_tool_section(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text(
            '[tool.fhevm-hub]\ndocs_dir = "site"\nmissing_file_policy = "strict"\n'
            'required_tags = ["@title"]\n\n[tool.fhevm-hub.logging]\nlevel = "debug"\n'
        )
        config = load_config(tmp_path)
        assert config.docs_dir == "site"
        assert config.strict_files
        assert config.required_tags == ("@title",)
        assert config.logging.level == "DEBUG"

    def test_pyproject_without_section_is_ignored(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "other"\n')
        assert load_config(tmp_path).docs_dir == "docs"

    def test_hub_toml_wins_over_pyproject(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[tool.fhevm-hub]\ndocs_dir = "from-pyproject"\n')
        (tmp_path / "fhevm-hub.toml").write_text('docs_dir = "from-hub-toml"\n')
        assert load_config(tmp_path).docs_dir == "from-hub-toml"

    def test_env_config_path(self, tmp_path, monkeypatch):
        custom = tmp_path / "custom.toml"
        custom.write_text('output_dir = "dist"\n')
        monkeypatch.setenv("FHEVM_HUB_CONFIG_PATH", str(custom))
        assert load_config(tmp_path).output_dir == "dist"

    def test_explicit_missing_path(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path, tmp_path / "missing.toml")

    def test_yaml_manifest(self, tmp_path):
        manifest = tmp_path / "hub.yaml"
        manifest.write_text("kind: Config\nspec:\n  validate_dir: checks\n")
        assert load_config(tmp_path, manifest).validate_dir == "checks"

    def test_yaml_requires_config_kind(self, tmp_path):
        manifest = tmp_path / "hub.yaml"
        manifest.write_text("kind: Pipeline\n")
        with pytest.raises(ConfigurationError, match="kind: Config"):
            load_config(tmp_path, manifest)

    def test_env_var_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEMPLATES", "/opt/templates")
        (tmp_path / "fhevm-hub.toml").write_text(
            'template_dir = "${TEMPLATES}/hardhat"\noutput_dir = "${UNSET_HUB_VAR}"\n'
        )
        config = load_config(tmp_path)
        assert config.template_dir == "/opt/templates/hardhat"
        assert config.output_dir == "${UNSET_HUB_VAR}"

    def test_template_dir_env_override(self, tmp_path, monkeypatch):
        (tmp_path / "fhevm-hub.toml").write_text('template_dir = "configured"\n')
        monkeypatch.setenv("FHEVM_TEMPLATE_DIR", "/from/env")
        assert load_config(tmp_path).template_dir == "/from/env"

    def test_logging_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FHEVM_HUB_LOG_LEVEL", "warning")
        monkeypatch.setenv("FHEVM_HUB_LOG_FORMAT", "JSON")
        monkeypatch.setenv("FHEVM_HUB_LOG_FILE", str(tmp_path / "hub.log"))
        logging_config = ConfigLoader(Path(tmp_path)).load().logging
        assert logging_config.level == "WARNING"
        assert logging_config.format == "json"
        assert logging_config.output_file == str(tmp_path / "hub.log")
