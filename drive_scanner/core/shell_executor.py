#!/usr/bin/env python3
"""
Runs the external listing commands (lsblk).

Output is forced to the C locale so column names and numbers parse the same
on every host.
"""

import os
import shutil
import subprocess
from typing import List, NamedTuple

from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30  # seconds; lsblk can hang on a dying USB disk


class CommandResult(NamedTuple):
    """Outcome of one command; unpacks as (success, stdout, stderr)"""
    success: bool
    stdout: str
    stderr: str


def run_command(command: List[str], timeout: int = DEFAULT_TIMEOUT) -> CommandResult:
    """
    Run a command without a shell and capture its output.

    Never raises: a missing binary, a timeout or a non-zero exit all come
    back as success=False with the reason in stderr.
    """
    logger.debug(f"Running: {' '.join(command)}")
    env = dict(os.environ, LC_ALL="C")

    try:
        completed = subprocess.run(command, capture_output=True, text=True, timeout=timeout, env=env)
    except subprocess.TimeoutExpired:
        logger.error(f"{command[0]} timed out after {timeout}s")
        return CommandResult(False, "", f"{command[0]} timed out after {timeout}s")
    except OSError as e:
        logger.error(f"Cannot run {command[0]}: {e}")
        return CommandResult(False, "", str(e))

    stdout = (completed.stdout or "").strip()
    stderr = (completed.stderr or "").strip()

    if completed.returncode != 0:
        logger.error(f"{command[0]} exited with {completed.returncode}: {stderr}")
        return CommandResult(False, stdout, stderr or f"{command[0]} exited with {completed.returncode}")

    return CommandResult(True, stdout, stderr)


def check_command_available(command: str) -> bool:
    return shutil.which(command) is not None
