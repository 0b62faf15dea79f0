"""Configuration loader for fhevm-hub.

Supported sources, in discovery order:

1. An explicit path (``--config``), TOML or ``kind: Config`` YAML.
2. ``FHEVM_HUB_CONFIG_PATH`` env var.
3. ``fhevm-hub.toml`` in the hub root.
4. ``[tool.fhevm-hub]`` in the hub root's ``pyproject.toml``.

When nothing is found the built-in defaults apply.
"""

from __future__ import annotations

import os
import re
import tomllib
from pathlib import Path
from typing import Any, Literal, cast

import yaml

from fhevm_hub.kernel.config.models import HubConfig, LoggingConfig
from fhevm_hub.kernel.exceptions import ConfigurationError
from fhevm_hub.kernel.logging import get_logger

TOOL_SECTION = "fhevm-hub"
CONFIG_FILE_NAME = "fhevm-hub.toml"
CONFIG_PATH_ENV = "FHEVM_HUB_CONFIG_PATH"
TEMPLATE_DIR_ENV = "FHEVM_TEMPLATE_DIR"

_PATH_KEYS = (
    "contracts_dir",
    "test_dir",
    "docs_dir",
    "static_docs_dir",
    "output_dir",
    "validate_dir",
    "template_dir",
    "template_git_url",
    "missing_file_policy",
)
_TUPLE_KEYS = ("template_dirs", "required_tags", "tracked_dependencies")

logger = get_logger(__name__)


class ConfigLoader:
    """Loads and processes hub configuration files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def __init__(self, root: Path) -> None:
        self.root = root

    def load(self, path: str | Path | None = None) -> HubConfig:
        """Load configuration, falling back to defaults.

        Parameters
        ----------
        path : str | Path | None
            Explicit config file, or None to run discovery

        Returns
        -------
        HubConfig
            Parsed configuration with environment variables substituted

        Raises
        ------
        ConfigurationError
            If an explicit path was given and does not exist
        """
        config_path = self._find_config_file(path)
        if config_path is None:
            logger.debug("No configuration file found, using defaults")
            return self._parse_config({})

        logger.debug("Loading configuration from {path}", path=config_path)
        if config_path.suffix in (".yaml", ".yml"):
            data = self._load_yaml(config_path)
        else:
            data = self._load_toml(config_path)
        return self._parse_config(self._substitute_env_vars(data))

    def _find_config_file(self, path: str | Path | None) -> Path | None:
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise ConfigurationError(str(config_path), "configuration file not found")
            return config_path

        if env_path := os.getenv(CONFIG_PATH_ENV):
            config_path = Path(env_path)
            if config_path.exists():
                return config_path
            logger.warning("{} set but file not found: {}", CONFIG_PATH_ENV, config_path)

        candidate = self.root / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate

        pyproject = self.root / "pyproject.toml"
        if pyproject.exists():
            with pyproject.open("rb") as f:
                data = tomllib.load(f)
            if TOOL_SECTION in data.get("tool", {}):
                return pyproject

        return None

    def _load_toml(self, config_path: Path) -> dict[str, Any]:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
        if TOOL_SECTION in data.get("tool", {}):
            return data["tool"][TOOL_SECTION]
        if config_path.name == "pyproject.toml":
            return {}
        return data

    def _load_yaml(self, config_path: Path) -> dict[str, Any]:
        """Load a ``kind: Config`` YAML manifest and return its ``spec``.

        Raises
        ------
        ConfigurationError
            If the document is not a ``kind: Config`` mapping
        """
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or data.get("kind") != "Config":
            raise ConfigurationError(
                config_path.name, "YAML config files must be a 'kind: Config' manifest"
            )
        spec = data.get("spec", {})
        if not isinstance(spec, dict):
            raise ConfigurationError(config_path.name, "'spec' must be a mapping")
        return spec

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively replace ``${VAR}`` placeholders; unknown variables are kept."""
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                value = os.environ.get(match.group(1))
                return match.group(0) if value is None else value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> HubConfig:
        kwargs: dict[str, Any] = {"root": self.root}
        for key in _PATH_KEYS:
            if key in data:
                kwargs[key] = data[key]
        for key in _TUPLE_KEYS:
            if key in data:
                kwargs[key] = tuple(data[key])

        if env_template := os.getenv(TEMPLATE_DIR_ENV):
            kwargs["template_dir"] = env_template

        kwargs["logging"] = self._parse_logging_config(data.get("logging", {}))
        return HubConfig(**kwargs)

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse the logging table; ``FHEVM_HUB_LOG_*`` env vars take precedence."""
        level = os.getenv("FHEVM_HUB_LOG_LEVEL") or logging_data.get("level", "INFO")
        format_type = os.getenv("FHEVM_HUB_LOG_FORMAT") or logging_data.get(
            "format", "structured"
        )
        output_file = os.getenv("FHEVM_HUB_LOG_FILE") or logging_data.get("output_file")

        return LoggingConfig(
            level=cast("Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']", level.upper()),
            format=cast("Literal['console', 'json', 'structured', 'rich']", format_type.lower()),
            output_file=output_file,
        )


def load_config(root: Path, path: str | Path | None = None) -> HubConfig:
    """Load configuration for the hub rooted at ``root``."""
    return ConfigLoader(root.resolve()).load(path)
