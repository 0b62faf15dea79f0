"""Configuration data models for fhevm-hub."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from fhevm_hub.kernel.exceptions import ConfigurationError

DEFAULT_TEMPLATE_GIT_URL = "https://github.com/zama-ai/fhevm-hardhat-template.git"

DEFAULT_REQUIRED_TAGS: tuple[str, ...] = (
    "@title",
    "@custom:category",
    "@custom:chapter",
    "@custom:concept",
    "@custom:difficulty",
)

DEFAULT_TRACKED_DEPENDENCIES: tuple[str, ...] = (
    "@fhevm/solidity",
    "@openzeppelin/confidential-contracts",
    "@openzeppelin/contracts",
    "@fhevm/hardhat-plugin",
)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration.

    Attributes
    ----------
    level : str, default="INFO"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write JSON logs to

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.fhevm-hub.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export FHEVM_HUB_LOG_LEVEL=DEBUG
    export FHEVM_HUB_LOG_FORMAT=json
    export FHEVM_HUB_LOG_FILE=/tmp/fhevm-hub.log
    ```
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None


@dataclass(frozen=True, slots=True)
class HubConfig:
    """Top-level configuration for the example hub.

    Directory settings are relative to ``root`` unless absolute.

    Attributes
    ----------
    root : Path
        Hub repository root (holds ``contracts/``, ``test/``, ``package.json``)
    contracts_dir, test_dir, docs_dir, static_docs_dir, output_dir, validate_dir : str
        Layout of the hub repository
    template_dir : str | None
        Explicit project template location (``FHEVM_TEMPLATE_DIR`` wins)
    template_dirs : tuple[str, ...]
        Conventional template folder names searched under ``root``
    template_git_url : str
        Repository cloned when no template can be found locally
    required_tags : tuple[str, ...]
        Annotation tags every example contract must carry
    missing_file_policy : "warn" | "strict"
        What scaffolding does when a referenced source file is missing
    tracked_dependencies : tuple[str, ...]
        Packages kept in sync by ``deps check``/``deps apply``
    logging : LoggingConfig
        Logging configuration

    Examples
    --------
    ```toml
    [tool.fhevm-hub]
    docs_dir = "docs"
    missing_file_policy = "strict"
    template_dir = "${HOME}/templates/fhevm-hardhat-template"
    ```
    """

    root: Path = field(default_factory=Path.cwd)
    contracts_dir: str = "contracts"
    test_dir: str = "test"
    docs_dir: str = "docs"
    static_docs_dir: str = "static-docs"
    output_dir: str = "output"
    validate_dir: str = "test-output"
    template_dir: str | None = None
    template_dirs: tuple[str, ...] = ("base-template", "fhevm-hardhat-template")
    template_git_url: str = DEFAULT_TEMPLATE_GIT_URL
    required_tags: tuple[str, ...] = DEFAULT_REQUIRED_TAGS
    missing_file_policy: Literal["warn", "strict"] = "warn"
    tracked_dependencies: tuple[str, ...] = DEFAULT_TRACKED_DEPENDENCIES
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Validate enumerated settings.

        Raises
        ------
        ConfigurationError
            If ``missing_file_policy`` is not a known policy
        """
        if self.missing_file_policy not in ("warn", "strict"):
            raise ConfigurationError(
                "missing_file_policy",
                f"must be 'warn' or 'strict' (got {self.missing_file_policy!r})",
            )

    def _resolve(self, value: str) -> Path:
        path = Path(value)
        return path if path.is_absolute() else self.root / path

    @property
    def contracts_path(self) -> Path:
        return self._resolve(self.contracts_dir)

    @property
    def test_path(self) -> Path:
        return self._resolve(self.test_dir)

    @property
    def docs_path(self) -> Path:
        return self._resolve(self.docs_dir)

    @property
    def static_docs_path(self) -> Path:
        return self._resolve(self.static_docs_dir)

    @property
    def output_path(self) -> Path:
        return self._resolve(self.output_dir)

    @property
    def validate_path(self) -> Path:
        return self._resolve(self.validate_dir)

    @property
    def strict_files(self) -> bool:
        """True when a missing referenced source file must abort scaffolding."""
        return self.missing_file_policy == "strict"
