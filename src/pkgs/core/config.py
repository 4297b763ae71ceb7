"""
Configuration management for pkgs.
Reads an optional YAML configuration file and provides configuration data.
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

from src.i18n import _

SYSTEM_CONFIG = "/etc/pkgs.yaml"
LOCAL_CONFIG = "./pkgs.yaml"

TRUTHY_VALUES = ("1", "true", "yes", "y")


class ConfigManager:
    """Manages configuration for pkgs."""

    def __init__(self, config_file: Optional[str] = None):
        self.logger = logging.getLogger(__name__)
        self.config_file = self._determine_config_path(config_file)
        self.config_data: Dict[str, Any] = {}
        self.load_config()

    def _determine_config_path(self, config_file: Optional[str]) -> Optional[str]:
        """
        Determine configuration file path.

        Priority order:
        1. Explicitly provided path (must exist)
        2. /etc/pkgs.yaml (system config)
        3. ./pkgs.yaml (local config)

        Returns None when no configuration file is present; pkgs then runs
        with built-in defaults.
        """
        if config_file:
            return config_file

        for candidate in (SYSTEM_CONFIG, LOCAL_CONFIG):
            if os.path.exists(candidate):
                return candidate
        return None

    def load_config(self) -> None:
        """Load configuration from YAML file."""
        if self.config_file is None:
            self.config_data = {}
            return

        if not os.path.exists(self.config_file):
            raise FileNotFoundError(
                _("Configuration file '%s' not found") % self.config_file
            )

        try:
            with open(self.config_file, "r", encoding="utf-8") as file:
                self.config_data = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ValueError(_("Invalid YAML in configuration file: %s") % e) from e

        if not isinstance(self.config_data, dict):
            raise ValueError(
                _("Configuration file '%s' must contain a mapping") % self.config_file
            )
        self.logger.debug("Loaded configuration from %s", self.config_file)

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration key (e.g., 'logging.level')
            default: Default value if key is not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value = self.config_data

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def get_repository_overrides(self, family: str) -> Dict[str, Any]:
        """Get the ``repositories.<family>`` path overrides."""
        overrides = self.get(f"repositories.{family}", {})
        return overrides if isinstance(overrides, dict) else {}

    def get_forced_family(self) -> Optional[str]:
        """Get package manager family forced by configuration, if any."""
        return self.get("package_manager.family")

    def should_assume_yes(self) -> bool:
        """
        Check whether prompts should be answered with yes.

        The PKGS_YES environment variable takes precedence over the
        ``repositories.assume_yes`` setting.
        """
        env_value = os.environ.get("PKGS_YES", "")
        if env_value:
            return env_value.strip().lower() in TRUTHY_VALUES
        return bool(self.get("repositories.assume_yes", False))

    def get_log_levels(self) -> str:
        """Get pipe-separated logging levels configuration."""
        return os.environ.get("PKGS_LOG_LEVEL") or self.get(
            "logging.level", "WARNING|ERROR|CRITICAL"
        )

    def get_log_file(self) -> Optional[str]:
        """Get log file path if specified."""
        return os.environ.get("PKGS_LOG_FILE") or self.get("logging.file")

    def get_log_format(self) -> str:
        """Get log format string."""
        return self.get("logging.format", "%(levelname)s: %(message)s")

    def get_language(self) -> str:
        """Get configured language/locale."""
        return self.get("i18n.language", "en")
