"""Fixtures for CLI tests."""

import pytest
from typer.testing import CliRunner

from fhevm_hub.cli.main import app
from fhevm_hub.kernel.logging import configure_logging


@pytest.fixture
def runner():
    """Fixture providing a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(runner, hub):
    """Run the root app against the ``hub`` fixture."""

    def _invoke(*args):
        return runner.invoke(app, ["--root", str(hub), *args])

    return _invoke


@pytest.fixture(autouse=True)
def reset_logging():
    """The root callback points logging at the runner's streams; undo that."""
    yield
    configure_logging(force_reconfigure=True)
