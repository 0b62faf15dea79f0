"""Tests for fhevm_hub.kernel.logging."""

import json

from loguru import logger

from fhevm_hub.kernel import logging as hub_logging
from fhevm_hub.kernel.logging import configure_logging, get_logger


class TestGetLogger:
    def test_cached_per_name(self):
        """get_logger returns the same bound logger for the same name."""
        assert get_logger("fhevm_hub.test") is get_logger("fhevm_hub.test")

    def test_binds_module_name(self):
        captured = []
        handler_id = logger.add(
            lambda message: captured.append(message.record["extra"]["module"]), level="INFO"
        )
        try:
            get_logger("fhevm_hub.registry.builder").info("hello")
        finally:
            logger.remove(handler_id)
        assert captured == ["fhevm_hub.registry.builder"]


class TestConfigureLogging:
    def setup_method(self):
        hub_logging._CURRENT_CONFIG = None

    def teardown_method(self):
        configure_logging(force_reconfigure=True)

    def test_idempotent(self):
        """Calling twice with identical settings keeps a single sink."""
        configure_logging(level="INFO", format="console", force_reconfigure=True)
        handlers = list(hub_logging._HANDLER_IDS)
        configure_logging(level="INFO", format="console")
        assert hub_logging._HANDLER_IDS == handlers

    def test_reconfigure_replaces_sinks(self):
        configure_logging(level="INFO", format="console", force_reconfigure=True)
        first = list(hub_logging._HANDLER_IDS)
        configure_logging(level="DEBUG", format="structured")
        assert hub_logging._HANDLER_IDS != first
        assert len(hub_logging._HANDLER_IDS) == 1

    def test_output_file_receives_json(self, tmp_path):
        log_file = tmp_path / "logs" / "hub.log"
        configure_logging(level="INFO", format="console", output_file=log_file)
        get_logger("fhevm_hub.test").info("written to file")
        logger.complete()
        configure_logging(force_reconfigure=True)

        lines = log_file.read_text().strip().splitlines()
        assert json.loads(lines[-1])["record"]["message"] == "written to file"
