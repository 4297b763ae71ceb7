"""
Flexible logging utility for pkgs.

Level selection is a pipe-separated set rather than a threshold, e.g.
"DEBUG|ERROR" shows debug and error messages but no info or warnings.
"""

import logging
from typing import Set

DEFAULT_LEVELS = "WARNING|ERROR|CRITICAL"


def parse_levels(level_config: str) -> Set[int]:
    """Parse pipe-separated level names into logging constants."""
    enabled_levels = set()
    for level_name in (level_config or "").split("|"):
        level = logging.getLevelName(level_name.strip().upper())
        if isinstance(level, int):
            enabled_levels.add(level)
    return enabled_levels


class FlexibleLogger:
    """
    Logger that only emits the levels named in the configuration.

    Examples:
    - "DEBUG" - Only debug messages
    - "INFO|ERROR" - Only info and error messages
    - "WARNING|ERROR|CRITICAL" - The quiet default for interactive use
    """

    def __init__(self, name: str, config_manager=None):
        """Initialize flexible logger."""
        self.logger = logging.getLogger(name)
        self.name = name
        self.config_manager = config_manager
        self.enabled_levels = self._parse_enabled_levels()

        # Handlers are attached to the root logger by main.setup_logging
        self.logger.setLevel(logging.DEBUG)

    def _parse_enabled_levels(self) -> Set[int]:
        """Parse pipe-separated levels from config into a set of logging constants."""
        level_config = (
            self.config_manager.get_log_levels()
            if self.config_manager
            else DEFAULT_LEVELS
        )
        return parse_levels(level_config) or parse_levels(DEFAULT_LEVELS)

    def _should_log(self, level: int) -> bool:
        """Check if message should be logged based on configured levels."""
        return level in self.enabled_levels

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message if enabled."""
        if self._should_log(logging.DEBUG):
            self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        """Log info message if enabled."""
        if self._should_log(logging.INFO):
            self.logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message if enabled."""
        if self._should_log(logging.WARNING):
            self.logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message if enabled."""
        if self._should_log(logging.ERROR):
            self.logger.error(msg, *args, **kwargs)


def get_logger(name: str, config_manager=None) -> FlexibleLogger:
    """Get a flexible logger instance with granular level control."""
    return FlexibleLogger(name, config_manager)
