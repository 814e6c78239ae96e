#!/usr/bin/env python3
"""
Configuration loader for the drive scanner.
Loads settings from a JSON options file and provides defaults.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.logger import LOG_LEVELS
from ..discovery.drive import parse_flag
from ..discovery.errors import ConfigurationError

logger = logging.getLogger(__name__)

@dataclass
class ScannerConfig:
    """Scanner settings"""
    interval: float                   # Seconds between scan cycles
    include_system_drives: bool       # Report boot/system drives too
    watch_hotplug: bool               # Rescan when /dev changes
    log_level: str                    # OFF, DEBUG, INFO, WARNING, ERROR
    log_file: Optional[str]           # Extra log file, None for stdout only
    notify_service: str               # HA notify service, "" disables notifications

class ConfigLoader:
    """Loads and validates configuration from an options file"""

    DEFAULT_CONFIG_PATH = "/data/options.json"

    DEFAULT_CONFIG = {
        "interval": 1.0,
        "include_system_drives": False,
        "watch_hotplug": False,
        "log_level": "INFO",
        "log_file": None,
        "notify_service": "",
    }

    @staticmethod
    def load(config_path: Optional[str] = None) -> ScannerConfig:
        """
        Load configuration.

        Args:
            config_path: Path to a JSON options file. A missing file means defaults.

        Returns:
            ScannerConfig with all settings

        Raises:
            ConfigurationError: If the file is not valid JSON or a value is invalid
        """
        config_file = Path(config_path or ConfigLoader.DEFAULT_CONFIG_PATH)

        if not config_file.exists():
            logger.warning(f"Config file not found at {config_file}, using defaults")
            user_config = {}
        else:
            try:
                with open(config_file, 'r') as f:
                    user_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in config file {config_file}: {e}") from e
            if not isinstance(user_config, dict):
                raise ConfigurationError(f"Config file {config_file} must contain a JSON object")
            logger.info(f"Loaded config from {config_file}")

        config_dict = dict(ConfigLoader.DEFAULT_CONFIG)
        config_dict.update(user_config)

        return ConfigLoader._create_config(config_dict)

    @staticmethod
    def _create_config(config_dict: Dict[str, Any]) -> ScannerConfig:
        """Create ScannerConfig from dictionary with validation"""
        try:
            config = ScannerConfig(
                interval=float(config_dict["interval"]),
                include_system_drives=parse_flag(config_dict["include_system_drives"]),
                watch_hotplug=parse_flag(config_dict["watch_hotplug"]),
                log_level=str(config_dict["log_level"]),
                log_file=str(config_dict["log_file"]) if config_dict["log_file"] else None,
                notify_service=str(config_dict["notify_service"] or ""),
            )
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

        ConfigLoader._validate_config(config)
        return config

    @staticmethod
    def _validate_config(config: ScannerConfig) -> None:
        errors = []

        if config.interval <= 0:
            errors.append(f"interval must be > 0, got {config.interval}")

        if config.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {sorted(LOG_LEVELS)}, got {config.log_level}")

        if errors:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(errors)}")

