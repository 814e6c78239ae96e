"""
Core utilities: logging setup and external command execution.
"""

from .logger import setup_logging, get_logger, parse_level
from .shell_executor import run_command, check_command_available, CommandResult

__all__ = [
    "setup_logging",
    "get_logger",
    "parse_level",
    "run_command",
    "check_command_available",
    "CommandResult",
]
