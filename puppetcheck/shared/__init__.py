"""Shared utilities for puppetcheck."""

from puppetcheck.shared.logger import configure_check_loggers, get_check_logger
from puppetcheck.shared.config import ConfigError, load_check_config

__all__ = ["ConfigError", "configure_check_loggers", "get_check_logger", "load_check_config"]
