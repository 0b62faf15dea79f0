"""Blocking child-process execution with inherited stdio."""

from __future__ import annotations

import os
import shutil
import subprocess  # nosec B404 - commands are fixed argv lists, never shell strings
from pathlib import Path

from fhevm_hub.kernel.exceptions import CommandFailedError
from fhevm_hub.kernel.logging import get_logger

logger = get_logger(__name__)


def run_command(command: list[str], cwd: Path, env: dict[str, str] | None = None) -> None:
    """Run ``command`` in ``cwd`` and wait for it.

    Parameters
    ----------
    command : list[str]
        Program and arguments
    cwd : Path
        Working directory
    env : dict[str, str] | None
        Variables added on top of the current environment

    Raises
    ------
    CommandFailedError
        If the program cannot be started or exits non-zero
    """
    logger.info("$ {}", " ".join(command))
    merged_env = {**os.environ, **env} if env else None
    try:
        result = subprocess.run(command, cwd=cwd, env=merged_env, check=False)  # nosec B603
    except OSError as e:
        raise CommandFailedError(command, None, str(e)) from e
    if result.returncode != 0:
        raise CommandFailedError(command, result.returncode)


def is_available(program: str) -> bool:
    """True if ``program`` is on PATH."""
    return shutil.which(program) is not None
